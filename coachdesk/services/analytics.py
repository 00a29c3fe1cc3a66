"""
Training analytics over logged sets, sessions and bodyweight.

Estimated 1RMs come from the RPE percentage table (RPE 6-10 in half steps,
1-12 reps). Sets without an RPE, without weight, or outside the table are
left out of every estimate. Weeks start on Monday.
"""
import math
from collections import OrderedDict, defaultdict
from datetime import datetime, time, timedelta

from coachdesk.models import BodyweightLog, Exercise, SetLog, WorkoutExercise, WorkoutSession
from coachdesk.models.workout_session import FULLY_COMPLETED, NOT_STARTED, PARTIALLY_COMPLETED
from coachdesk.utils.helpers import js_round

# Fraction of 1RM for reps 1..12 at each RPE
RPE_TABLE = {
    10.0: (1.000, 0.955, 0.922, 0.892, 0.863, 0.837, 0.811, 0.786, 0.762, 0.739, 0.707, 0.680),
    9.5: (0.978, 0.939, 0.907, 0.878, 0.850, 0.824, 0.799, 0.774, 0.751, 0.723, 0.694, 0.667),
    9.0: (0.955, 0.922, 0.892, 0.863, 0.837, 0.811, 0.786, 0.762, 0.739, 0.707, 0.680, 0.653),
    8.5: (0.939, 0.907, 0.878, 0.850, 0.824, 0.799, 0.774, 0.751, 0.723, 0.694, 0.667, 0.640),
    8.0: (0.922, 0.892, 0.863, 0.837, 0.811, 0.786, 0.762, 0.739, 0.707, 0.680, 0.653, 0.626),
    7.5: (0.907, 0.878, 0.850, 0.824, 0.799, 0.774, 0.751, 0.723, 0.694, 0.667, 0.640, 0.613),
    7.0: (0.892, 0.863, 0.837, 0.811, 0.786, 0.762, 0.739, 0.707, 0.680, 0.653, 0.626, 0.599),
    6.5: (0.878, 0.850, 0.824, 0.799, 0.774, 0.751, 0.723, 0.694, 0.667, 0.640, 0.613, 0.586),
    6.0: (0.863, 0.837, 0.811, 0.786, 0.762, 0.739, 0.707, 0.680, 0.653, 0.626, 0.599, 0.572),
}
MAX_TABLE_REPS = 12

E1RM_SET_LIMIT = 1000
COMPARE_E1RM_SET_LIMIT = 500
COMPLETED_STATUSES = (FULLY_COMPLETED, PARTIALLY_COMPLETED)

PROGRESS_RANGES = {'4w': 28, '8w': 56, '12w': 84, 'all': None}
DEFAULT_PROGRESS_RANGE = '8w'
PROGRESS_STREAK_WINDOW_DAYS = 60


def round1(value):
    return js_round(value * 10) / 10


def percent_of_one_rm(rpe, reps):
    """Table fraction for an RPE/reps pair; None outside the table."""
    if rpe is None or reps is None:
        return None
    row = RPE_TABLE.get(math.floor(rpe * 2 + 0.5) / 2)
    rounded_reps = js_round(reps)
    if row is None or rounded_reps < 1 or rounded_reps > MAX_TABLE_REPS:
        return None
    return row[rounded_reps - 1]


def estimate_one_rm(weight, rpe, reps):
    percent = percent_of_one_rm(rpe, reps)
    if percent is None or not weight or weight <= 0:
        return None
    return round1(weight / percent)


def week_start(value):
    """ISO date of the Monday starting the week of a date or datetime."""
    day = value.date() if isinstance(value, datetime) else value
    return (day - timedelta(days=day.weekday())).isoformat()


def _day(value):
    return value.date().isoformat() if isinstance(value, datetime) else value.isoformat()


def _day_bounds(start, end):
    return (
        start.date() if start is not None else None,
        end.date() if end is not None else None,
    )


def _set_query(athlete_id, start=None, end=None):
    query = SetLog.query.filter(SetLog.athlete_id == athlete_id)
    if start is not None:
        query = query.filter(SetLog.completed_at >= start)
    if end is not None:
        query = query.filter(SetLog.completed_at <= end)
    return query


def _session_query(athlete_id, start=None, end=None):
    query = WorkoutSession.query.filter(WorkoutSession.athlete_id == athlete_id)
    first_day, last_day = _day_bounds(start, end)
    if first_day is not None:
        query = query.filter(WorkoutSession.date >= first_day)
    if last_day is not None:
        query = query.filter(WorkoutSession.date <= last_day)
    return query


def _estimable_sets(athlete_id, start=None, end=None, exercise_id=None, limit=E1RM_SET_LIMIT):
    query = (
        _set_query(athlete_id, start, end)
        .join(WorkoutExercise, SetLog.workout_exercise_id == WorkoutExercise.id)
        .filter(SetLog.rpe.isnot(None), SetLog.reps >= 1, SetLog.weight > 0)
    )
    if exercise_id:
        query = query.filter(WorkoutExercise.exercise_id == exercise_id)
    return query.order_by(SetLog.completed_at.asc()).limit(limit).all()


# --- Coach analytics ---

def e1rm_trends(athlete_id, start=None, end=None, exercise_id=None, limit=E1RM_SET_LIMIT):
    by_exercise = OrderedDict()
    for log in _estimable_sets(athlete_id, start, end, exercise_id, limit):
        estimated = estimate_one_rm(log.weight, log.rpe, log.reps)
        if estimated is None:
            continue
        exercise = log.workout_exercise.exercise
        trend = by_exercise.setdefault(exercise.id, {
            'exerciseId': exercise.id,
            'exerciseName': exercise.name,
            'dataPoints': [],
        })
        trend['dataPoints'].append({'date': _day(log.completed_at), 'e1rm': estimated})
    return list(by_exercise.values())


def volume_by_week(athlete_id, start=None, end=None):
    weeks = {}
    for log in _set_query(athlete_id, start, end).order_by(SetLog.completed_at.asc()):
        key = week_start(log.completed_at)
        week = weeks.setdefault(key, {'weekStart': key, 'totalSets': 0, 'totalReps': 0, 'totalTonnage': 0})
        week['totalSets'] += 1
        week['totalReps'] += log.reps
        week['totalTonnage'] += log.reps * log.weight
    return [weeks[key] for key in sorted(weeks)]


def compliance(athlete_id, start=None, end=None):
    sessions = _session_query(athlete_id, start, end).order_by(WorkoutSession.date.asc()).all()
    total = len(sessions)
    completed = sum(1 for s in sessions if s.status == FULLY_COMPLETED)
    partial = sum(1 for s in sessions if s.status == PARTIALLY_COMPLETED)
    not_started = sum(1 for s in sessions if s.status == NOT_STARTED)

    weeks = {}
    for session in sessions:
        key = week_start(session.date)
        week = weeks.setdefault(key, {'weekStart': key, 'total': 0, 'completed': 0, 'rate': 0})
        week['total'] += 1
        if session.status in COMPLETED_STATUSES:
            week['completed'] += 1
    for week in weeks.values():
        week['rate'] = js_round(week['completed'] / week['total'] * 1000) / 10

    return {
        'totalSessions': total,
        'completed': completed,
        'partiallyCompleted': partial,
        'notStarted': not_started,
        'complianceRate': js_round(completed / total * 1000) / 10 if total else 0,
        'avgCompletionPercentage': (
            round1(sum(s.completion_percentage for s in sessions) / total) if total else 0
        ),
        'weeklyTrend': [weeks[key] for key in sorted(weeks)],
    }


def rpe_distribution(athlete_id, start=None, end=None):
    sets = (
        _set_query(athlete_id, start, end)
        .filter(SetLog.rpe.isnot(None))
        .order_by(SetLog.completed_at.asc())
        .all()
    )
    counts = defaultdict(int)
    weeks = {}
    for log in sets:
        counts[log.rpe] += 1
        key = week_start(log.completed_at)
        week = weeks.setdefault(key, {'weekStart': key, 'total': 0.0, 'count': 0})
        week['total'] += log.rpe
        week['count'] += 1

    return {
        'totalSetsWithRPE': len(sets),
        'averageRPE': round1(sum(log.rpe for log in sets) / len(sets)) if sets else None,
        'distribution': [{'rpe': rpe, 'count': counts[rpe]} for rpe in sorted(counts)],
        'weeklyTrend': [
            {
                'weekStart': key,
                'avgRPE': round1(weeks[key]['total'] / weeks[key]['count']),
                'setCount': weeks[key]['count'],
            }
            for key in sorted(weeks)
        ],
    }


def bodyweight_trend(athlete_id, start=None, end=None):
    query = BodyweightLog.query.filter(BodyweightLog.athlete_id == athlete_id)
    if start is not None:
        query = query.filter(BodyweightLog.logged_at >= start)
    if end is not None:
        query = query.filter(BodyweightLog.logged_at <= end)
    return [
        {'date': _day(log.logged_at), 'weight': log.weight, 'unit': log.unit}
        for log in query.order_by(BodyweightLog.logged_at.asc())
    ]


def athlete_summary(athlete, start=None, end=None, exercise_id=None):
    return {
        'e1rmTrends': e1rm_trends(athlete.id, start, end, exercise_id),
        'volumeByWeek': volume_by_week(athlete.id, start, end),
        'compliance': compliance(athlete.id, start, end),
        'rpeDistribution': rpe_distribution(athlete.id, start, end),
        'bodyweightTrend': bodyweight_trend(athlete.id, start, end),
    }


def compare_athletes(athletes, metric, start=None, end=None, exercise_id=None):
    """Side by side series for two or three athletes.

    ``exercises`` lists every exercise seen in any e1RM series, by name.
    """
    athlete_data = []
    exercises = {}
    for athlete in athletes:
        if metric == 'volume':
            data = [
                {'weekStart': week['weekStart'], 'totalTonnage': week['totalTonnage']}
                for week in volume_by_week(athlete.id, start, end)
            ]
        elif metric == 'compliance':
            data = compliance(athlete.id, start, end)['weeklyTrend']
        else:
            data = e1rm_trends(athlete.id, start, end, exercise_id, limit=COMPARE_E1RM_SET_LIMIT)
            for trend in data:
                exercises[trend['exerciseId']] = trend['exerciseName']
        athlete_data.append({'athleteId': athlete.id, 'athleteName': athlete.name, 'data': data})

    result = {'athleteData': athlete_data}
    if metric == 'e1rm':
        result['exercises'] = [
            {'id': key, 'name': name}
            for key, name in sorted(exercises.items(), key=lambda item: item[1])
        ]
    return result


# --- Athlete portal ---

def training_streak(athlete_id, today, window_days):
    """Consecutive days back from ``today`` with a completed, non-skipped session."""
    sessions = (
        WorkoutSession.query
        .filter(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.is_skipped.is_(False),
            WorkoutSession.status.in_(COMPLETED_STATUSES),
            WorkoutSession.date >= today - timedelta(days=window_days),
            WorkoutSession.date <= today,
        )
        .all()
    )
    trained = {s.date for s in sessions}
    streak = 0
    day = today
    while day in trained:
        streak += 1
        day -= timedelta(days=1)
    return streak


def personal_records(athlete_id, start=None):
    """Heaviest logged set per exercise, with its estimated 1RM when one exists."""
    query = (
        _set_query(athlete_id, start)
        .join(WorkoutExercise, SetLog.workout_exercise_id == WorkoutExercise.id)
        .filter(SetLog.weight > 0, SetLog.reps >= 1)
    )
    best = {}
    for log in query.order_by(SetLog.completed_at.asc()):
        exercise_id = log.workout_exercise.exercise_id
        current = best.get(exercise_id)
        if current is None or (log.weight, log.reps) > (current.weight, current.reps):
            best[exercise_id] = log

    records = []
    for exercise_id, log in best.items():
        records.append({
            'exerciseId': exercise_id,
            'exerciseName': log.workout_exercise.exercise.name,
            'weight': log.weight,
            'reps': log.reps,
            'unit': log.unit,
            'e1rm': estimate_one_rm(log.weight, log.rpe, log.reps),
            'date': _day(log.completed_at),
        })
    return sorted(records, key=lambda r: r['exerciseName'])


def athlete_progress(athlete_id, today, range_key=DEFAULT_PROGRESS_RANGE):
    """Trends, volume, compliance and records over the last 4, 8 or 12 weeks, or all time."""
    days = PROGRESS_RANGES.get(range_key, PROGRESS_RANGES[DEFAULT_PROGRESS_RANGE])
    start = datetime.combine(today - timedelta(days=days), time.min) if days is not None else None

    trends = {}
    for trend in e1rm_trends(athlete_id, start):
        trends[trend['exerciseId']] = [
            {'date': point['date'], 'value': point['e1rm']} for point in trend['dataPoints']
        ]

    weekly_volume = [
        {'weekStart': week['weekStart'], 'tonnage': js_round(week['totalTonnage'])}
        for week in volume_by_week(athlete_id, start)
    ]

    sessions = _session_query(athlete_id, start).filter(WorkoutSession.date <= today).all()
    completed = sum(1 for s in sessions if s.status in COMPLETED_STATUSES)

    weights = bodyweight_trend(athlete_id, start)
    bodyweight = [{'date': w['date'], 'weight': w['weight']} for w in weights] if len(weights) >= 2 else None

    logged_exercise_ids = {
        row.exercise_id
        for row in (
            WorkoutExercise.query
            .join(SetLog, SetLog.workout_exercise_id == WorkoutExercise.id)
            .filter(SetLog.athlete_id == athlete_id)
            .with_entities(WorkoutExercise.exercise_id)
            .distinct()
        )
    }
    available = (
        Exercise.query.filter(Exercise.id.in_(logged_exercise_ids)).order_by(Exercise.name.asc()).all()
        if logged_exercise_ids else []
    )

    return {
        'e1rmTrends': trends,
        'weeklyVolume': weekly_volume,
        'compliance': {
            'assigned': len(sessions),
            'completed': completed,
            'streak': training_streak(athlete_id, today, PROGRESS_STREAK_WINDOW_DAYS),
        },
        'personalRecords': personal_records(athlete_id, start),
        'bodyweight': bodyweight,
        'availableExercises': [{'id': e.id, 'name': e.name} for e in available],
    }
