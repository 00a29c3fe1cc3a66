from flask import current_app, jsonify, request
from sqlalchemy import or_

from coachdesk.auth import coach_required
from coachdesk.errors import ConflictError, NotFoundError
from coachdesk.extensions import db
from coachdesk.models import Athlete, Conversation, Message, WorkoutSession
from coachdesk.schemas import AthleteSchema, AthleteUpdateSchema, apply_patch
from coachdesk.services.history import parse_paging, session_detail, session_history
from coachdesk.utils.helpers import LIKE_ESCAPE, commit_or_raise, contains_pattern, get_json_body, parse_bool
from coachdesk.utils.lookups import get_owned_athlete

from . import api_bp

athlete_schema = AthleteSchema()
athlete_update_schema = AthleteUpdateSchema()

RECENT_SESSION_LIMIT = 10


@api_bp.route('/athletes', methods=['GET'])
@coach_required
def list_athletes(coach_id):
    query = Athlete.query.filter(Athlete.coach_id == coach_id)

    search = request.args.get('search', '').strip()
    if search:
        pattern = contains_pattern(search)
        query = query.filter(or_(
            Athlete.name.ilike(pattern, escape=LIKE_ESCAPE),
            Athlete.email.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    is_competitor = parse_bool(request.args.get('isCompetitor'))
    if is_competitor is not None:
        query = query.filter(Athlete.is_competitor == is_competitor)

    is_remote = parse_bool(request.args.get('isRemote'))
    if is_remote is not None:
        query = query.filter(Athlete.is_remote == is_remote)

    # Archived athletes are hidden unless asked for
    active_filter = request.args.get('isActive')
    if active_filter is None:
        query = query.filter(Athlete.is_active.is_(True))
    elif active_filter != 'all':
        query = query.filter(Athlete.is_active == parse_bool(active_filter))

    athletes = query.order_by(Athlete.name.asc()).all()
    return jsonify([a.to_dict(with_counts=True) for a in athletes])


@api_bp.route('/athletes', methods=['POST'])
@coach_required
def create_athlete(coach_id):
    data = athlete_schema.load(get_json_body())
    athlete = Athlete(coach_id=coach_id, **data)
    db.session.add(athlete)
    commit_or_raise('Failed to create athlete')

    current_app.logger.info(f"Coach {coach_id} created athlete {athlete.id}")
    return jsonify(athlete.to_dict()), 201


@api_bp.route('/athletes/<athlete_id>', methods=['GET'])
@coach_required
def get_athlete(athlete_id, coach_id):
    athlete = get_owned_athlete(coach_id, athlete_id)
    data = athlete.to_dict(with_counts=True)
    sessions = (
        athlete.workout_sessions
        .order_by(WorkoutSession.date.desc())
        .limit(RECENT_SESSION_LIMIT)
        .all()
    )
    data['recentSessions'] = [s.to_dict() for s in sessions]
    data['programAssignments'] = [a.to_dict() for a in athlete.program_assignments]
    return jsonify(data)


@api_bp.route('/athletes/<athlete_id>/history', methods=['GET'])
@coach_required
def athlete_history(athlete_id, coach_id):
    """Paged session history, or one session in full with ``?sessionId=``."""
    athlete = get_owned_athlete(coach_id, athlete_id)

    session_id = request.args.get('sessionId')
    if session_id:
        session = athlete.workout_sessions.filter(WorkoutSession.id == session_id).first()
        if session is None:
            raise NotFoundError('Session not found')
        return jsonify(session_detail(session, with_prescription=True))

    page, limit = parse_paging(request.args)
    return jsonify(session_history(athlete.id, page, limit))


@api_bp.route('/athletes/<athlete_id>', methods=['PUT'])
@coach_required
def update_athlete(athlete_id, coach_id):
    athlete = get_owned_athlete(coach_id, athlete_id)
    data = athlete_update_schema.load(get_json_body(), partial=True)
    apply_patch(athlete, data)
    commit_or_raise('Failed to update athlete')
    return jsonify(athlete.to_dict())


@api_bp.route('/athletes/<athlete_id>', methods=['DELETE'])
@coach_required
def delete_athlete(athlete_id, coach_id):
    """Archive by default; ``?permanent=true`` deletes an athlete with no training data."""
    athlete = get_owned_athlete(coach_id, athlete_id)

    if not parse_bool(request.args.get('permanent')):
        athlete.is_active = False
        commit_or_raise('Failed to archive athlete')
        return jsonify({'success': True, 'action': 'archived'})

    counts = athlete.data_counts()
    if any(counts.values()):
        raise ConflictError(
            'Cannot permanently delete an athlete with training data. Archive instead.',
            counts=counts,
        )

    for conversation in Conversation.query.filter_by(athlete_id=athlete.id).all():
        Message.query.filter_by(conversation_id=conversation.id).delete(synchronize_session=False)
        db.session.delete(conversation)
    db.session.delete(athlete)
    commit_or_raise('Failed to delete athlete')
    current_app.logger.info(f"Coach {coach_id} permanently deleted athlete {athlete_id}")
    return jsonify({'success': True, 'action': 'deleted'})
