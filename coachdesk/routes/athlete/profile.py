from flask import jsonify

from coachdesk.auth import athlete_required
from coachdesk.errors import NotFoundError
from coachdesk.extensions import db
from coachdesk.models import Athlete

from . import athlete_bp


@athlete_bp.route('/coach', methods=['GET'])
@athlete_required
def my_coach(athlete_id):
    athlete = db.session.get(Athlete, athlete_id)
    if athlete.coach is None:
        raise NotFoundError('Coach not found')
    return jsonify({'name': athlete.coach.name})
