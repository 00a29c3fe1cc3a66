from flask import jsonify, request

from coachdesk.auth import coach_required
from coachdesk.errors import NotFoundError, ValidationError
from coachdesk.extensions import db
from coachdesk.models import Athlete, BodyweightLog
from coachdesk.schemas import BodyweightLogSchema, BodyweightLogUpdateSchema, apply_patch
from coachdesk.utils.helpers import commit_or_raise, get_json_body, parse_datetime, parse_int_arg
from coachdesk.utils.lookups import get_owned_athlete

from . import api_bp

log_schema = BodyweightLogSchema()
log_update_schema = BodyweightLogUpdateSchema()


def _get_log(coach_id, log_id):
    log = (
        BodyweightLog.query
        .join(Athlete, BodyweightLog.athlete_id == Athlete.id)
        .filter(BodyweightLog.id == log_id, Athlete.coach_id == coach_id)
        .first()
    )
    if log is None:
        raise NotFoundError('Bodyweight log not found')
    return log


def _range_arg(name):
    raw = request.args.get(name)
    if not raw:
        return None
    value = parse_datetime(raw)
    if value is None:
        raise ValidationError(f'Invalid {name} date')
    return value


@api_bp.route('/bodyweight', methods=['GET'])
@coach_required
def list_bodyweight(coach_id):
    athlete_id = request.args.get('athleteId')
    if not athlete_id:
        raise ValidationError('Missing required query param: athleteId')
    athlete = get_owned_athlete(coach_id, athlete_id)

    query = BodyweightLog.query.filter(BodyweightLog.athlete_id == athlete.id)
    start, end = _range_arg('from'), _range_arg('to')
    if start is not None:
        query = query.filter(BodyweightLog.logged_at >= start)
    if end is not None:
        query = query.filter(BodyweightLog.logged_at <= end)

    query = query.order_by(BodyweightLog.logged_at.desc())
    offset = parse_int_arg(request.args, 'offset')
    limit = parse_int_arg(request.args, 'limit')
    if offset:
        query = query.offset(offset)
    if limit:
        query = query.limit(limit)

    return jsonify([log.to_dict() for log in query.all()])


@api_bp.route('/bodyweight', methods=['POST'])
@coach_required
def create_bodyweight(coach_id):
    data = log_schema.load(get_json_body())
    get_owned_athlete(coach_id, data['athlete_id'])

    log = BodyweightLog(**data)
    db.session.add(log)
    commit_or_raise('Failed to create bodyweight log')
    return jsonify(log.to_dict()), 201


@api_bp.route('/bodyweight/<log_id>', methods=['GET'])
@coach_required
def get_bodyweight(log_id, coach_id):
    return jsonify(_get_log(coach_id, log_id).to_dict())


@api_bp.route('/bodyweight/<log_id>', methods=['PUT'])
@coach_required
def update_bodyweight(log_id, coach_id):
    log = _get_log(coach_id, log_id)
    data = log_update_schema.load(get_json_body(), partial=True)
    apply_patch(log, data)
    commit_or_raise('Failed to update bodyweight log')
    return jsonify(log.to_dict())


@api_bp.route('/bodyweight/<log_id>', methods=['DELETE'])
@coach_required
def delete_bodyweight(log_id, coach_id):
    log = _get_log(coach_id, log_id)
    db.session.delete(log)
    commit_or_raise('Failed to delete bodyweight log')
    return jsonify({'success': True})
