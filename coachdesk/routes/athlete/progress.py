from flask import jsonify, request

from coachdesk.auth import athlete_required
from coachdesk.errors import NotFoundError
from coachdesk.extensions import db
from coachdesk.models import Athlete, WorkoutSession
from coachdesk.services.analytics import DEFAULT_PROGRESS_RANGE, athlete_progress
from coachdesk.services.history import (
    TRAINED_STATUSES,
    athlete_dashboard,
    parse_paging,
    session_detail,
    session_history,
)
from coachdesk.utils.helpers import local_today

from . import athlete_bp


def _today(athlete_id):
    athlete = db.session.get(Athlete, athlete_id)
    return local_today(athlete.coach.timezone)


@athlete_bp.route('/history', methods=['GET'])
@athlete_required
def history(athlete_id):
    session_id = request.args.get('sessionId')
    if session_id:
        session = WorkoutSession.query.filter(
            WorkoutSession.id == session_id,
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.status.in_(TRAINED_STATUSES),
        ).first()
        if session is None:
            raise NotFoundError('Session not found')
        return jsonify(session_detail(session, with_prescription=False))

    page, limit = parse_paging(request.args)
    return jsonify(session_history(athlete_id, page, limit, trained_only=True))


@athlete_bp.route('/progress', methods=['GET'])
@athlete_required
def progress(athlete_id):
    range_key = request.args.get('range', DEFAULT_PROGRESS_RANGE)
    return jsonify(athlete_progress(athlete_id, _today(athlete_id), range_key))


@athlete_bp.route('/dashboard', methods=['GET'])
@athlete_required
def dashboard(athlete_id):
    return jsonify(athlete_dashboard(athlete_id, _today(athlete_id)))
