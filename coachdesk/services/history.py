"""
Training history: paged session summaries and per-session detail.

Coaches see every session with the prescription next to what was lifted;
athletes see only sessions they trained.
"""
from datetime import timedelta

from coachdesk.models import ProgramAssignment, SetLog, WorkoutSession
from coachdesk.models.workout_session import FULLY_COMPLETED, NOT_STARTED, PARTIALLY_COMPLETED
from coachdesk.services.analytics import training_streak
from coachdesk.services.training import next_session, workout_for_session
from coachdesk.utils.helpers import iso, js_round, parse_int_arg

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50
EXERCISE_NAME_PREVIEW = 5
TRAINED_STATUSES = (FULLY_COMPLETED, PARTIALLY_COMPLETED)
RECENT_SESSION_COUNT = 3
DASHBOARD_STREAK_WINDOW_DAYS = 30


def parse_paging(args):
    page = max(1, parse_int_arg(args, 'page', 1))
    limit = min(MAX_PAGE_SIZE, max(1, parse_int_arg(args, 'limit', DEFAULT_PAGE_SIZE)))
    return page, limit


def _number(text):
    try:
        return float(str(text).strip())
    except (TypeError, ValueError):
        return None


def _prescribed_volume(workout_exercise):
    sets, reps, load = (
        _number(workout_exercise.prescribed_sets),
        _number(workout_exercise.prescribed_reps),
        _number(workout_exercise.prescribed_load),
    )
    if sets is None or reps is None or load is None:
        return 0
    return sets * reps * load


def _logs_by_exercise(session, workout):
    """The athlete's sets for each exercise of the session's workout."""
    if workout is None:
        return {}
    ids = [we.id for we in workout.exercises]
    if not ids:
        return {}
    logs = (
        SetLog.query
        .filter(SetLog.athlete_id == session.athlete_id, SetLog.workout_exercise_id.in_(ids))
        .order_by(SetLog.set_number.asc())
        .all()
    )
    grouped = {we_id: [] for we_id in ids}
    for log in logs:
        grouped[log.workout_exercise_id].append(log)
    return grouped


def _volume(logs):
    return sum(log.reps * log.weight for log in logs)


def _summary(session, with_names):
    workout = workout_for_session(session)
    logs = _logs_by_exercise(session, workout)
    exercises = workout.exercises if workout else []
    all_logs = [log for group in logs.values() for log in group]

    data = {
        'id': session.id,
        'date': iso(session.date),
        'title': session.title,
        'status': session.status,
        'completionPercentage': session.completion_percentage,
        'completedItems': session.completed_items,
        'totalItems': session.total_items,
        'programName': session.program.name if session.program else None,
        'weekNumber': session.week_number,
        'dayNumber': session.day_number,
        'exerciseCount': len(exercises),
        'totalVolume': js_round(_volume(all_logs)),
        'totalSets': len(all_logs),
    }
    if with_names:
        data['exerciseNames'] = [we.exercise.name for we in exercises[:EXERCISE_NAME_PREVIEW]]
    return data


def session_history(athlete_id, page, limit, trained_only=False):
    query = WorkoutSession.query.filter(WorkoutSession.athlete_id == athlete_id)
    if trained_only:
        query = query.filter(WorkoutSession.status.in_(TRAINED_STATUSES))

    total = query.count()
    sessions = (
        query
        .order_by(WorkoutSession.date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        'data': [_summary(s, with_names=trained_only) for s in sessions],
        'total': total,
        'hasMore': page * limit < total,
        'page': page,
        'limit': limit,
    }


def session_detail(session, with_prescription):
    workout = workout_for_session(session)
    logs = _logs_by_exercise(session, workout)

    exercises = []
    prescribed_total = 0
    actual_total = 0
    for workout_exercise in (workout.exercises if workout else []):
        exercise_logs = logs.get(workout_exercise.id, [])
        volume = _volume(exercise_logs)
        actual_total += volume
        item = {
            'id': workout_exercise.id,
            'name': workout_exercise.exercise.name,
            'category': workout_exercise.exercise.category,
            'supersetGroup': workout_exercise.superset_group,
            'supersetColor': workout_exercise.superset_color,
            'notes': workout_exercise.notes,
            'athleteNotes': workout_exercise.athlete_notes,
            'sets': [log.to_dict(nested=False) for log in exercise_logs],
            'totalVolume': js_round(volume),
        }
        if with_prescription:
            prescribed_total += _prescribed_volume(workout_exercise)
            item['prescribed'] = {
                'sets': workout_exercise.prescribed_sets,
                'reps': workout_exercise.prescribed_reps,
                'load': workout_exercise.prescribed_load,
                'rpe': workout_exercise.prescribed_rpe,
                'rir': workout_exercise.prescribed_rir,
                'velocityTarget': workout_exercise.velocity_target,
                'percentageOf1RM': workout_exercise.percentage_of_1rm,
                'prescriptionType': workout_exercise.prescription_type,
            }
        exercises.append(item)

    detail = {
        'id': session.id,
        'date': iso(session.date),
        'title': session.title,
        'status': session.status,
        'completionPercentage': session.completion_percentage,
        'completedItems': session.completed_items,
        'totalItems': session.total_items,
        'programName': session.program.name if session.program else None,
        'weekNumber': session.week_number,
        'dayNumber': session.day_number,
        'notes': session.notes,
        'exercises': exercises,
        'totalActualVolume': js_round(actual_total),
    }
    if with_prescription:
        detail['coachNotes'] = session.coach_notes
        detail['totalPrescribedVolume'] = js_round(prescribed_total)
    return {'session': detail}


def _session_card(session):
    return {
        'id': session.id,
        'date': iso(session.date),
        'title': session.title,
        'status': session.status,
        'completionPercentage': session.completion_percentage,
        'completedItems': session.completed_items,
        'totalItems': session.total_items,
        'programName': session.program.name if session.program else None,
    }


def athlete_dashboard(athlete_id, today):
    today_session = WorkoutSession.query.filter_by(athlete_id=athlete_id, date=today).first()
    upcoming = None if today_session else next_session(athlete_id, today)

    week_sessions = (
        WorkoutSession.query
        .filter(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.date >= today - timedelta(days=today.weekday()),
            WorkoutSession.date <= today,
            WorkoutSession.is_skipped.is_(False),
            WorkoutSession.status != NOT_STARTED,
        )
        .all()
    )
    recent = (
        WorkoutSession.query
        .filter(WorkoutSession.athlete_id == athlete_id, WorkoutSession.status.in_(TRAINED_STATUSES))
        .order_by(WorkoutSession.date.desc())
        .limit(RECENT_SESSION_COUNT)
        .all()
    )
    assignment = (
        ProgramAssignment.query
        .filter_by(athlete_id=athlete_id, is_active=True)
        .order_by(ProgramAssignment.assigned_at.desc())
        .first()
    )

    completion = (
        js_round(sum(s.completion_percentage for s in week_sessions) / len(week_sessions))
        if week_sessions else 0
    )
    today_card = _session_card(today_session) if today_session else None
    if today_card:
        del today_card['date']

    return {
        'todayWorkout': today_card,
        'nextWorkout': {
            'date': iso(upcoming.date),
            'title': upcoming.title,
            'programName': upcoming.program.name if upcoming.program else None,
        } if upcoming else None,
        'stats': {
            'streak': training_streak(athlete_id, today, DASHBOARD_STREAK_WINDOW_DAYS),
            'workoutsThisWeek': len(week_sessions),
            'completionRate': completion,
        },
        'recentSessions': [_session_card(s) for s in recent],
        'currentProgram': {'name': assignment.program.name} if assignment else None,
    }
