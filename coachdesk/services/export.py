import csv
import io
import re

from coachdesk.models import SetLog, WorkoutExercise

CSV_HEADER = ['Date', 'Exercise', 'Set', 'Reps', 'Weight', 'Unit', 'RPE', 'RIR', 'Velocity', 'Notes']


def _number(value):
    # 225.0 -> "225"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def export_filename(athlete_name):
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', athlete_name)}_training_data.csv"


def training_rows(athlete_id, start=None, end=None):
    query = (
        SetLog.query
        .join(WorkoutExercise, SetLog.workout_exercise_id == WorkoutExercise.id)
        .filter(SetLog.athlete_id == athlete_id)
    )
    if start is not None:
        query = query.filter(SetLog.completed_at >= start)
    if end is not None:
        query = query.filter(SetLog.completed_at <= end)
    return query.order_by(SetLog.completed_at.asc(), SetLog.set_number.asc()).all()


def build_training_csv(set_logs):
    """One row per logged set. Text with commas, quotes or newlines is quoted."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(CSV_HEADER)

    for log in set_logs:
        exercise = log.workout_exercise.exercise if log.workout_exercise else None
        writer.writerow([
            log.completed_at.strftime('%Y-%m-%d') if log.completed_at else '',
            exercise.name if exercise else '',
            log.set_number,
            log.reps,
            _number(log.weight),
            log.unit,
            _number(log.rpe),
            log.rir,
            _number(log.velocity),
            log.notes,
        ])

    return output.getvalue().rstrip('\n')
