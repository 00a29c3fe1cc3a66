import logging

from coachdesk.extensions import db
from coachdesk.models import SetLog, Workout, WorkoutExercise, WorkoutSession
from coachdesk.models.workout_session import FULLY_COMPLETED, NOT_STARTED, PARTIALLY_COMPLETED
from coachdesk.services.notifications import schedule_completion_notification
from coachdesk.utils.helpers import iso, js_round

logger = logging.getLogger(__name__)


def find_session_for_workout(workout, athlete_id):
    session = (
        WorkoutSession.query
        .filter_by(athlete_id=athlete_id, workout_id=workout.id)
        .order_by(WorkoutSession.date.desc())
        .first()
    )
    if session is None and workout.program_id:
        # Sessions created before workout links existed match on program + title
        session = WorkoutSession.query.filter_by(
            athlete_id=athlete_id, program_id=workout.program_id, title=workout.name
        ).first()
    return session


def update_session_status(workout_exercise_id, athlete_id):
    """
    Recompute the completion of the session owning a workout exercise.

    An exercise counts as complete once the athlete has logged at least its
    prescribed number of sets. Caller commits.
    """
    workout_exercise = db.session.get(WorkoutExercise, workout_exercise_id)
    if workout_exercise is None or workout_exercise.workout is None:
        return None
    workout = workout_exercise.workout

    total_items = len(workout.exercises)
    completed_items = 0
    any_logs = False
    for exercise in workout.exercises:
        logged = SetLog.query.filter_by(workout_exercise_id=exercise.id, athlete_id=athlete_id).count()
        if logged:
            any_logs = True
        prescribed = exercise.prescribed_set_count
        if prescribed > 0 and logged >= prescribed:
            completed_items += 1

    percentage = js_round(completed_items / total_items * 100) if total_items else 0
    if completed_items == 0:
        status = PARTIALLY_COMPLETED if any_logs else NOT_STARTED
    elif completed_items >= total_items:
        status = FULLY_COMPLETED
    else:
        status = PARTIALLY_COMPLETED

    session = find_session_for_workout(workout, athlete_id)
    if session is None:
        return None

    newly_completed = status == FULLY_COMPLETED and session.status != FULLY_COMPLETED
    session.status = status
    session.completion_percentage = percentage
    session.completed_items = completed_items
    session.total_items = total_items
    db.session.flush()

    if newly_completed:
        schedule_completion_notification(session.id)
    return session


def workout_for_session(session):
    if session.workout is not None:
        return session.workout
    if session.program_id and session.title:
        return Workout.query.filter_by(program_id=session.program_id, name=session.title).first()
    return None


def previous_performance(athlete_id, workout_exercise):
    """Sets the athlete logged the last time this exercise came up in another workout."""
    latest = (
        SetLog.query
        .join(WorkoutExercise, SetLog.workout_exercise_id == WorkoutExercise.id)
        .filter(
            SetLog.athlete_id == athlete_id,
            WorkoutExercise.exercise_id == workout_exercise.exercise_id,
            WorkoutExercise.workout_id != workout_exercise.workout_id,
        )
        .order_by(SetLog.completed_at.desc())
        .first()
    )
    if latest is None:
        return []

    logs = (
        SetLog.query
        .filter_by(workout_exercise_id=latest.workout_exercise_id, athlete_id=athlete_id)
        .order_by(SetLog.set_number.asc())
        .all()
    )
    performed_on = iso(logs[0].completed_at.date())
    return [
        {'reps': log.reps, 'weight': log.weight, 'unit': log.unit, 'rpe': log.rpe, 'date': performed_on}
        for log in logs
    ]


def next_session(athlete_id, today):
    """The first untouched, unskipped session after today."""
    return (
        WorkoutSession.query
        .filter(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.date > today,
            WorkoutSession.status == NOT_STARTED,
            WorkoutSession.is_skipped.is_(False),
        )
        .order_by(WorkoutSession.date.asc())
        .first()
    )


def _session_header(session):
    return {
        'id': session.id,
        'date': iso(session.date),
        'title': session.title,
        'status': session.status,
        'completionPercentage': session.completion_percentage,
        'completedItems': session.completed_items,
        'totalItems': session.total_items,
        'program': {'id': session.program.id, 'name': session.program.name} if session.program else None,
    }


def training_day(athlete, day, today):
    """Everything the athlete needs to train on ``day``: prescriptions, logged sets, last performance."""
    coach = athlete.coach
    payload = {
        'defaultWeightUnit': coach.default_weight_unit or 'lbs',
        'defaultRestTimerSeconds': coach.default_rest_timer_seconds or 120,
    }

    session = WorkoutSession.query.filter_by(athlete_id=athlete.id, date=day).first()
    if session is None:
        upcoming = next_session(athlete.id, today)
        payload.update({
            'session': None,
            'exercises': [],
            'message': 'No workout scheduled for this date',
            'nextSession': {
                'date': iso(upcoming.date),
                'title': upcoming.title,
                'programName': upcoming.program.name if upcoming.program else None,
            } if upcoming else None,
        })
        return payload

    payload['session'] = _session_header(session)
    workout = workout_for_session(session)
    if workout is None:
        payload.update({'exercises': [], 'message': 'Session found but no workout exercises linked'})
        return payload

    exercises = []
    for workout_exercise in workout.exercises:
        data = workout_exercise.to_dict()
        data['setLogs'] = [
            log.to_dict(nested=False)
            for log in workout_exercise.set_logs.filter_by(athlete_id=athlete.id).order_by(SetLog.set_number.asc())
        ]
        data['previousPerformance'] = previous_performance(athlete.id, workout_exercise)
        exercises.append(data)
    payload['exercises'] = exercises
    return payload
