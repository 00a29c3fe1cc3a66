from flask import jsonify

from coachdesk.auth import coach_required
from coachdesk.errors import AuthError, ConflictError, NotFoundError
from coachdesk.extensions import db
from coachdesk.models import Coach
from coachdesk.schemas import CoachSchema, apply_patch
from coachdesk.utils.helpers import commit_or_raise, get_json_body

from . import api_bp

coach_schema = CoachSchema()

DUPLICATE_EMAIL = 'A coach with this email already exists'


def _email_taken(email, exclude_id=None):
    query = Coach.query.filter(db.func.lower(Coach.email) == email.lower())
    if exclude_id:
        query = query.filter(Coach.id != exclude_id)
    return db.session.query(query.exists()).scalar()


@api_bp.route('/coaches', methods=['POST'])
def create_coach():
    """Open so a fresh install can register its first coach."""
    data = coach_schema.load(get_json_body())
    if _email_taken(data['email']):
        raise ConflictError(DUPLICATE_EMAIL)

    coach = Coach(**data)
    db.session.add(coach)
    commit_or_raise('Failed to create coach', conflict_message=DUPLICATE_EMAIL)
    return jsonify(coach.to_dict()), 201


@api_bp.route('/coaches', methods=['GET'])
@coach_required
def list_coaches(coach_id):
    coaches = Coach.query.order_by(Coach.created_at.desc()).all()
    return jsonify([c.to_dict(with_counts=True) for c in coaches])


@api_bp.route('/coaches/<coach_ref>', methods=['GET'])
@coach_required
def get_coach(coach_ref, coach_id):
    coach = db.session.get(Coach, coach_ref)
    if coach is None:
        raise NotFoundError('Coach not found')
    return jsonify(coach.to_dict(with_counts=True))


@api_bp.route('/coaches/<coach_ref>', methods=['PUT'])
@coach_required
def update_coach(coach_ref, coach_id):
    coach = db.session.get(Coach, coach_ref)
    if coach is None:
        raise NotFoundError('Coach not found')
    if coach.id != coach_id:
        raise AuthError('Cannot modify another coach')

    data = coach_schema.load(get_json_body(), partial=True)
    if 'email' in data and _email_taken(data['email'], exclude_id=coach.id):
        raise ConflictError(DUPLICATE_EMAIL)

    apply_patch(coach, data)
    commit_or_raise('Failed to update coach', conflict_message=DUPLICATE_EMAIL)
    return jsonify(coach.to_dict())
