"""Coach-scoped row lookups. A row owned by another coach reads as missing."""
from sqlalchemy import or_

from coachdesk.errors import NotFoundError
from coachdesk.models import (
    Athlete,
    CompetitionMeet,
    Exercise,
    Program,
    ProgramAssignment,
    SetLog,
    Workout,
    WorkoutExercise,
    WorkoutSession,
)


def get_owned_athlete(coach_id, athlete_id):
    athlete = Athlete.query.filter_by(id=athlete_id, coach_id=coach_id).first()
    if athlete is None:
        raise NotFoundError('Athlete not found')
    return athlete


def get_owned_program(coach_id, program_id):
    program = Program.query.filter_by(id=program_id, coach_id=coach_id).first()
    if program is None:
        raise NotFoundError('Program not found')
    return program


def get_owned_meet(coach_id, meet_id):
    meet = CompetitionMeet.query.filter_by(id=meet_id, coach_id=coach_id).first()
    if meet is None:
        raise NotFoundError('Meet not found')
    return meet


def get_visible_exercise(coach_id, exercise_id):
    """Global library exercises plus the coach's own."""
    exercise = Exercise.query.filter(
        Exercise.id == exercise_id,
        or_(Exercise.coach_id.is_(None), Exercise.coach_id == coach_id),
    ).first()
    if exercise is None:
        raise NotFoundError('Exercise not found')
    return exercise


def get_owned_exercise(coach_id, exercise_id):
    exercise = Exercise.query.filter_by(id=exercise_id, coach_id=coach_id).first()
    if exercise is None:
        raise NotFoundError('Exercise not found')
    return exercise


def get_assigned_workout_exercise(athlete_id, workout_exercise_id):
    """A workout exercise from one of the athlete's assigned programs."""
    workout_exercise = (
        WorkoutExercise.query
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .join(ProgramAssignment, ProgramAssignment.program_id == Workout.program_id)
        .filter(WorkoutExercise.id == workout_exercise_id, ProgramAssignment.athlete_id == athlete_id)
        .first()
    )
    if workout_exercise is None:
        raise NotFoundError('WorkoutExercise not found')
    return workout_exercise


def get_own_set_log(athlete_id, log_id):
    log = SetLog.query.filter_by(id=log_id, athlete_id=athlete_id).first()
    if log is None:
        raise NotFoundError('Set log not found')
    return log


def get_owned_session(coach_id, session_id):
    session = (
        WorkoutSession.query
        .join(Athlete, WorkoutSession.athlete_id == Athlete.id)
        .filter(WorkoutSession.id == session_id, Athlete.coach_id == coach_id)
        .first()
    )
    if session is None:
        raise NotFoundError('Session not found')
    return session
