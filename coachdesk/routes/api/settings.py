from flask import jsonify

from coachdesk.auth import coach_required
from coachdesk.errors import ConflictError, NotFoundError
from coachdesk.extensions import db
from coachdesk.models import Coach
from coachdesk.schemas import SettingsSchema, apply_patch
from coachdesk.utils.helpers import commit_or_raise, get_json_body

from . import api_bp

settings_schema = SettingsSchema()


def _get_coach(coach_id):
    coach = db.session.get(Coach, coach_id)
    if coach is None:
        raise NotFoundError('Coach not found')
    return coach


@api_bp.route('/settings', methods=['GET'])
@coach_required
def get_settings(coach_id):
    return jsonify(_get_coach(coach_id).settings_dict())


@api_bp.route('/settings', methods=['PUT'])
@coach_required
def update_settings(coach_id):
    coach = _get_coach(coach_id)
    data = settings_schema.load(get_json_body(), partial=True)

    if 'email' in data:
        taken = Coach.query.filter(
            db.func.lower(Coach.email) == data['email'].lower(),
            Coach.id != coach.id,
        ).first()
        if taken:
            raise ConflictError('A coach with this email already exists')

    apply_patch(coach, data)
    commit_or_raise('Failed to update settings')
    return jsonify(coach.settings_dict())
