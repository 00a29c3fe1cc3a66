from flask import jsonify, request
from sqlalchemy import String, cast, or_

from coachdesk.auth import coach_required
from coachdesk.errors import ConflictError
from coachdesk.extensions import db
from coachdesk.models import Exercise
from coachdesk.schemas import ExerciseSchema, apply_patch
from coachdesk.utils.helpers import (
    LIKE_ESCAPE,
    commit_or_raise,
    contains_pattern,
    escape_like,
    get_json_body,
    parse_int_arg,
)
from coachdesk.utils.lookups import get_owned_exercise, get_visible_exercise

from . import api_bp

exercise_schema = ExerciseSchema()


@api_bp.route('/exercises', methods=['GET'])
@coach_required
def list_exercises(coach_id):
    query = Exercise.query.filter(or_(Exercise.coach_id.is_(None), Exercise.coach_id == coach_id))

    search = request.args.get('search', '').strip()
    if search:
        pattern = contains_pattern(search)
        query = query.filter(Exercise.name.ilike(pattern, escape=LIKE_ESCAPE))

    category = request.args.get('category', '').strip()
    if category:
        query = query.filter(Exercise.category.ilike(escape_like(category), escape=LIKE_ESCAPE))

    tag = request.args.get('tag', '').strip()
    if tag:
        # tags is a JSON array; match the quoted element in its text form
        query = query.filter(cast(Exercise.tags, String).like(f'%"{escape_like(tag)}"%', escape=LIKE_ESCAPE))

    query = query.order_by(Exercise.name.asc())

    limit = parse_int_arg(request.args, 'limit')
    offset = parse_int_arg(request.args, 'offset')
    if offset:
        query = query.offset(offset)
    if limit:
        query = query.limit(limit)

    return jsonify([e.to_dict() for e in query.all()])


@api_bp.route('/exercises', methods=['POST'])
@coach_required
def create_exercise(coach_id):
    data = exercise_schema.load(get_json_body())
    exercise = Exercise(coach_id=coach_id, **data)
    db.session.add(exercise)
    commit_or_raise('Failed to create exercise')
    return jsonify(exercise.to_dict()), 201


@api_bp.route('/exercises/<exercise_id>', methods=['GET'])
@coach_required
def get_exercise(exercise_id, coach_id):
    return jsonify(get_visible_exercise(coach_id, exercise_id).to_dict())


@api_bp.route('/exercises/<exercise_id>', methods=['PUT'])
@coach_required
def update_exercise(exercise_id, coach_id):
    exercise = get_owned_exercise(coach_id, exercise_id)
    data = exercise_schema.load(get_json_body(), partial=True)
    apply_patch(exercise, data)
    commit_or_raise('Failed to update exercise')
    return jsonify(exercise.to_dict())


@api_bp.route('/exercises/<exercise_id>', methods=['DELETE'])
@coach_required
def delete_exercise(exercise_id, coach_id):
    exercise = get_owned_exercise(coach_id, exercise_id)

    usage_count = exercise.workout_exercises.count()
    if usage_count:
        raise ConflictError('Cannot delete exercise that is used in workouts', usageCount=usage_count)

    db.session.delete(exercise)
    commit_or_raise('Failed to delete exercise')
    return jsonify({'success': True})
