from flask import jsonify, request

from coachdesk.auth import athlete_required
from coachdesk.models import WorkoutSession
from coachdesk.services.scheduling import completion_rate, parse_date_range

from . import athlete_bp


@athlete_bp.route('/calendar', methods=['GET'])
@athlete_required
def calendar(athlete_id):
    start, end = parse_date_range(request.args)
    sessions = (
        WorkoutSession.query
        .filter(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.date >= start,
            WorkoutSession.date <= end,
        )
        .order_by(WorkoutSession.date.asc())
        .all()
    )
    return jsonify({
        'sessions': [s.to_dict() for s in sessions],
        'completionRate': completion_rate(sessions),
    })
