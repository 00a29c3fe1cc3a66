from flask import jsonify, request

from coachdesk.auth import coach_required
from coachdesk.errors import ValidationError
from coachdesk.models import Athlete, WorkoutSession
from coachdesk.models.workout_session import NOT_STARTED
from coachdesk.services.scheduling import completion_rate, move_session, parse_date_range
from coachdesk.utils.helpers import commit_or_raise, get_json_body, parse_date
from coachdesk.utils.lookups import get_owned_session

from . import api_bp


@api_bp.route('/schedule', methods=['GET'])
@coach_required
def schedule(coach_id):
    start, end = parse_date_range(request.args)

    query = Athlete.query.filter(Athlete.coach_id == coach_id, Athlete.is_active.is_(True))
    athlete_id = request.args.get('athleteId')
    if athlete_id and athlete_id != 'all':
        query = query.filter(Athlete.id == athlete_id)

    result = []
    all_sessions = []
    for athlete in query.order_by(Athlete.name.asc()).all():
        sessions = (
            athlete.workout_sessions
            .filter(WorkoutSession.date >= start, WorkoutSession.date <= end)
            .order_by(WorkoutSession.date.asc())
            .all()
        )
        all_sessions.extend(sessions)
        result.append({
            'id': athlete.id,
            'name': athlete.name,
            'sessions': [s.to_dict() for s in sessions],
            'completionRate': completion_rate(sessions),
        })

    return jsonify({'athletes': result, 'completionRate': completion_rate(all_sessions)})


@api_bp.route('/schedule/<session_id>/skip', methods=['PATCH'])
@coach_required
def skip_session(session_id, coach_id):
    skip = get_json_body().get('skip')
    if not isinstance(skip, bool):
        raise ValidationError('skip is required (boolean)')

    session = get_owned_session(coach_id, session_id)
    if session.status != NOT_STARTED:
        raise ValidationError('Only NOT_STARTED sessions can be skipped')

    session.is_skipped = skip
    commit_or_raise('Failed to update session')
    return jsonify({'id': session.id, 'isSkipped': session.is_skipped})


@api_bp.route('/schedule/<session_id>/move', methods=['PATCH'])
@coach_required
def move(session_id, coach_id):
    raw = get_json_body().get('newDate')
    if not raw or not isinstance(raw, str):
        raise ValidationError('newDate is required (YYYY-MM-DD format)')
    new_date = parse_date(raw)
    if new_date is None:
        raise ValidationError('Invalid date format. Use YYYY-MM-DD.')

    session = get_owned_session(coach_id, session_id)
    result = move_session(session, new_date)
    commit_or_raise('Failed to move session')
    return jsonify(result)


@api_bp.route('/sessions/<session_id>/notes', methods=['PATCH'])
@coach_required
def update_coach_notes(session_id, coach_id):
    notes = get_json_body().get('coachNotes')
    if notes is not None and not isinstance(notes, str):
        raise ValidationError('coachNotes must be a string or null')

    session = get_owned_session(coach_id, session_id)
    if isinstance(notes, str):
        notes = notes.strip() or None
    session.coach_notes = notes
    commit_or_raise('Failed to update notes')
    return jsonify({'id': session.id, 'coachNotes': session.coach_notes})
