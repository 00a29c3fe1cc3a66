"""
Training calendar: schedule generation, persistence, moves and completion rate.

Training days use the 0=Sunday .. 6=Saturday numbering the clients send.
"""
import logging
from collections import namedtuple
from datetime import date, timedelta
from itertools import groupby

from coachdesk.errors import ValidationError
from coachdesk.extensions import db
from coachdesk.models import WorkoutSession
from coachdesk.models.workout_session import FULLY_COMPLETED, NOT_STARTED, PARTIALLY_COMPLETED
from coachdesk.utils.helpers import js_round, parse_date

logger = logging.getLogger(__name__)

DEFAULT_TRAINING_DAYS = (1, 2, 4, 5)  # Mon, Tue, Thu, Fri
SWAP_PARKING_DATE = date(2099, 12, 31)

ScheduledSession = namedtuple(
    'ScheduledSession', ['date', 'workout_id', 'week_number', 'day_number', 'title']
)


def completion_rate(sessions):
    """Percent of non-skipped sessions that are fully completed, 0 when none count."""
    counted = [s for s in sessions if not s.is_skipped]
    if not counted:
        return 0
    completed = sum(1 for s in counted if s.status == FULLY_COMPLETED)
    return js_round(completed / len(counted) * 100)


def parse_date_range(args):
    start_raw = args.get('startDate')
    end_raw = args.get('endDate')
    if not start_raw or not end_raw:
        raise ValidationError('Missing required query params: startDate, endDate')

    start, end = parse_date(start_raw), parse_date(end_raw)
    if start is None or end is None:
        raise ValidationError('Invalid date format. Use YYYY-MM-DD.')
    if start > end:
        raise ValidationError('startDate must be before or equal to endDate')
    return start, end


def _monday_offset(day_of_week):
    return 6 if day_of_week == 0 else day_of_week - 1


def generate_schedule(workouts, start_date, training_days=DEFAULT_TRAINING_DAYS):
    """
    Map program workouts (week, day) onto concrete calendar dates.

    Workouts fill the training days of each calendar week in order. The first
    calendar week only offers days on or after ``start_date``; a program week
    with more workouts than training days spills into the following calendar
    week, and every new program week starts on a fresh calendar week.
    """
    if not workouts or not training_days:
        return []

    offsets = sorted({_monday_offset(d) for d in training_days})
    ordered = sorted(workouts, key=lambda w: (w.week_number, w.day_number))

    week_start = start_date - timedelta(days=start_date.weekday())
    first_week = True
    schedule = []

    for _, group in groupby(ordered, key=lambda w: w.week_number):
        pending = list(group)
        index = 0
        while index < len(pending):
            days = [week_start + timedelta(days=offset) for offset in offsets]
            if first_week:
                days = [d for d in days if d >= start_date]
                first_week = False

            for day in days:
                if index >= len(pending):
                    break
                workout = pending[index]
                schedule.append(ScheduledSession(
                    date=day,
                    workout_id=workout.id,
                    week_number=workout.week_number,
                    day_number=workout.day_number,
                    title=workout.name,
                ))
                index += 1

            if index < len(pending):
                week_start += timedelta(days=7)
        week_start += timedelta(days=7)

    return schedule


def persist_schedule(athlete_id, program_id, assignment_id, schedule):
    """Add NOT_STARTED sessions for dates the athlete has free. Caller commits."""
    if not schedule:
        return {'created': 0, 'skipped': 0, 'total': 0}

    dates = [item.date for item in schedule]
    taken = {
        row.date for row in
        WorkoutSession.query.filter(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.date.in_(dates),
        ).all()
    }

    created = 0
    for item in schedule:
        if item.date in taken:
            continue
        db.session.add(WorkoutSession(
            athlete_id=athlete_id,
            program_id=program_id,
            program_assignment_id=assignment_id,
            workout_id=item.workout_id,
            date=item.date,
            title=item.title,
            week_number=item.week_number,
            day_number=item.day_number,
            status=NOT_STARTED,
        ))
        taken.add(item.date)
        created += 1

    return {'created': created, 'skipped': len(schedule) - created, 'total': len(schedule)}


def cleanup_assignment_sessions(assignment_id, as_of=None):
    """Drop future NOT_STARTED sessions of an assignment; logged work is kept. Caller commits."""
    cutoff = as_of or date.today()
    future = WorkoutSession.query.filter(
        WorkoutSession.program_assignment_id == assignment_id,
        WorkoutSession.date >= cutoff,
    )
    preserved = future.filter(
        WorkoutSession.status.in_([PARTIALLY_COMPLETED, FULLY_COMPLETED])
    ).count()
    deleted = future.filter(WorkoutSession.status == NOT_STARTED).delete(synchronize_session=False)
    return {'deleted': deleted, 'preserved': preserved}


def move_session(session, new_date):
    """
    Move a NOT_STARTED session to ``new_date``, swapping with the athlete's
    session already on that date when it is NOT_STARTED too. Caller commits.
    """
    if session.status != NOT_STARTED:
        raise ValidationError('Only NOT_STARTED sessions can be moved')
    if session.date == new_date:
        raise ValidationError('New date is the same as current date')

    old_date = session.date
    target = WorkoutSession.query.filter_by(athlete_id=session.athlete_id, date=new_date).first()

    if target is None:
        session.date = new_date
        session.is_manually_scheduled = True
        return {
            'action': 'moved',
            'movedSession': {'id': session.id, 'newDate': new_date.isoformat()},
        }

    if target.status != NOT_STARTED:
        raise ValidationError('Cannot swap, the session on the target date is not NOT_STARTED')

    # (athlete_id, date) is unique, so park the target while the dates change hands
    target.date = SWAP_PARKING_DATE
    db.session.flush()
    session.date = new_date
    session.is_manually_scheduled = True
    db.session.flush()
    target.date = old_date
    target.is_manually_scheduled = True

    logger.info(f"Swapped sessions {session.id} and {target.id}")
    return {
        'action': 'swapped',
        'movedSession': {'id': session.id, 'newDate': new_date.isoformat()},
        'swappedSession': {'id': target.id, 'newDate': old_date.isoformat()},
    }
