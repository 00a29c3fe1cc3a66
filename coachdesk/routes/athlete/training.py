from flask import jsonify, request

from coachdesk.auth import athlete_required
from coachdesk.errors import ValidationError
from coachdesk.extensions import db
from coachdesk.models import Athlete, SetLog
from coachdesk.schemas import SetLogSchema, SetLogUpdateSchema, apply_patch
from coachdesk.services.training import training_day, update_session_status
from coachdesk.utils.helpers import commit_or_raise, get_json_body, local_today, parse_date
from coachdesk.utils.lookups import get_assigned_workout_exercise, get_own_set_log

from . import athlete_bp

own_set_log_schema = SetLogSchema(exclude=('athlete_id',))
set_log_update_schema = SetLogUpdateSchema()


@athlete_bp.route('/train', methods=['GET'])
@athlete_required
def train(athlete_id):
    """The athlete's workout for ?date=YYYY-MM-DD, today in the coach's timezone by default."""
    athlete = db.session.get(Athlete, athlete_id)
    today = local_today(athlete.coach.timezone)
    day = parse_date(request.args.get('date')) or today
    return jsonify(training_day(athlete, day, today))


@athlete_bp.route('/sets', methods=['POST'])
@athlete_required
def log_set(athlete_id):
    data = own_set_log_schema.load(get_json_body())
    get_assigned_workout_exercise(athlete_id, data['workout_exercise_id'])

    log = SetLog(athlete_id=athlete_id, **data)
    db.session.add(log)
    update_session_status(log.workout_exercise_id, athlete_id)
    commit_or_raise('Failed to create set log')
    return jsonify(log.to_dict(nested=False)), 201


@athlete_bp.route('/sets/<log_id>', methods=['PUT'])
@athlete_required
def update_logged_set(log_id, athlete_id):
    log = get_own_set_log(athlete_id, log_id)
    data = set_log_update_schema.load(get_json_body(), partial=True)
    apply_patch(log, data)
    update_session_status(log.workout_exercise_id, athlete_id)
    commit_or_raise('Failed to update set log')
    return jsonify(log.to_dict(nested=False))


@athlete_bp.route('/sets/<log_id>', methods=['DELETE'])
@athlete_required
def delete_logged_set(log_id, athlete_id):
    log = get_own_set_log(athlete_id, log_id)
    workout_exercise_id = log.workout_exercise_id
    db.session.delete(log)
    update_session_status(workout_exercise_id, athlete_id)
    commit_or_raise('Failed to delete set log')
    return jsonify({'success': True})


@athlete_bp.route('/workout-exercises/<workout_exercise_id>/notes', methods=['PATCH'])
@athlete_required
def update_exercise_notes(workout_exercise_id, athlete_id):
    workout_exercise = get_assigned_workout_exercise(athlete_id, workout_exercise_id)
    notes = get_json_body().get('athleteNotes')
    if notes is not None and not isinstance(notes, str):
        raise ValidationError('athleteNotes must be a string or null')

    workout_exercise.athlete_notes = notes
    commit_or_raise('Failed to update notes')
    return jsonify({'id': workout_exercise.id, 'athleteNotes': workout_exercise.athlete_notes})
