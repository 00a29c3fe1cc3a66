from flask import jsonify, request

from coachdesk.auth import coach_required
from coachdesk.errors import NotFoundError, ValidationError
from coachdesk.extensions import db
from coachdesk.models import Athlete, Program, SetLog, Workout, WorkoutExercise
from coachdesk.schemas import SetLogSchema, SetLogUpdateSchema, apply_patch
from coachdesk.services.training import update_session_status
from coachdesk.utils.helpers import commit_or_raise, get_json_body, parse_int_arg
from coachdesk.utils.lookups import get_owned_athlete

from . import api_bp

set_log_schema = SetLogSchema()
set_log_update_schema = SetLogUpdateSchema()


def _get_set_log(coach_id, log_id):
    log = (
        SetLog.query
        .join(Athlete, SetLog.athlete_id == Athlete.id)
        .filter(SetLog.id == log_id, Athlete.coach_id == coach_id)
        .first()
    )
    if log is None:
        raise NotFoundError('Set log not found')
    return log


def _get_workout_exercise(coach_id, workout_exercise_id):
    workout_exercise = (
        WorkoutExercise.query
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .join(Program, Workout.program_id == Program.id)
        .filter(WorkoutExercise.id == workout_exercise_id, Program.coach_id == coach_id)
        .first()
    )
    if workout_exercise is None:
        raise NotFoundError('WorkoutExercise not found')
    return workout_exercise


@api_bp.route('/sets', methods=['GET'])
@coach_required
def list_sets(coach_id):
    athlete_id = request.args.get('athleteId')
    if not athlete_id:
        raise ValidationError('Missing required query param: athleteId')
    athlete = get_owned_athlete(coach_id, athlete_id)

    query = SetLog.query.filter(SetLog.athlete_id == athlete.id)

    workout_exercise_id = request.args.get('workoutExerciseId')
    if workout_exercise_id:
        query = query.filter(SetLog.workout_exercise_id == workout_exercise_id)

    exercise_id = request.args.get('exerciseId')
    if exercise_id:
        query = query.join(WorkoutExercise, SetLog.workout_exercise_id == WorkoutExercise.id).filter(
            WorkoutExercise.exercise_id == exercise_id
        )

    query = query.order_by(SetLog.completed_at.desc(), SetLog.set_number.asc())
    offset = parse_int_arg(request.args, 'offset')
    limit = parse_int_arg(request.args, 'limit')
    if offset:
        query = query.offset(offset)
    if limit:
        query = query.limit(limit)

    return jsonify([log.to_dict() for log in query.all()])


@api_bp.route('/sets', methods=['POST'])
@coach_required
def create_set(coach_id):
    data = set_log_schema.load(get_json_body())
    _get_workout_exercise(coach_id, data['workout_exercise_id'])
    get_owned_athlete(coach_id, data['athlete_id'])

    log = SetLog(**data)
    db.session.add(log)
    update_session_status(log.workout_exercise_id, log.athlete_id)
    commit_or_raise('Failed to create set log')
    return jsonify(log.to_dict()), 201


@api_bp.route('/sets/<log_id>', methods=['GET'])
@coach_required
def get_set(log_id, coach_id):
    return jsonify(_get_set_log(coach_id, log_id).to_dict())


@api_bp.route('/sets/<log_id>', methods=['PUT'])
@coach_required
def update_set(log_id, coach_id):
    log = _get_set_log(coach_id, log_id)
    data = set_log_update_schema.load(get_json_body(), partial=True)
    apply_patch(log, data)
    update_session_status(log.workout_exercise_id, log.athlete_id)
    commit_or_raise('Failed to update set log')
    return jsonify(log.to_dict())


@api_bp.route('/sets/<log_id>', methods=['DELETE'])
@coach_required
def delete_set(log_id, coach_id):
    log = _get_set_log(coach_id, log_id)
    workout_exercise_id, athlete_id = log.workout_exercise_id, log.athlete_id
    db.session.delete(log)
    update_session_status(workout_exercise_id, athlete_id)
    commit_or_raise('Failed to delete set log')
    return jsonify({'success': True})
