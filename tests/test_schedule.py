"""Tests for the training calendar: schedule view, skip and move."""

from collections import namedtuple
from datetime import date

import pytest

from coachdesk.extensions import db
from coachdesk.models import WorkoutSession
from coachdesk.models.workout_session import FULLY_COMPLETED, NOT_STARTED, PARTIALLY_COMPLETED
from coachdesk.services.scheduling import completion_rate, generate_schedule

FakeWorkout = namedtuple('FakeWorkout', ['id', 'week_number', 'day_number', 'name'])


def _session(athlete, day, status=NOT_STARTED, skipped=False, title=None):
    row = WorkoutSession(
        athlete_id=athlete.id,
        date=day,
        status=status,
        is_skipped=skipped,
        title=title or f'Session {day.isoformat()}',
    )
    db.session.add(row)
    db.session.commit()
    return row


class TestGenerateSchedule:
    def test_fills_training_days_from_monday_start(self):
        workouts = [FakeWorkout(f'w{n}', 1, n, f'Day {n}') for n in (1, 2, 3)]

        schedule = generate_schedule(workouts, date(2024, 3, 4))

        assert [s.date for s in schedule] == [date(2024, 3, 4), date(2024, 3, 5), date(2024, 3, 7)]
        assert [s.title for s in schedule] == ['Day 1', 'Day 2', 'Day 3']

    def test_midweek_start_spills_into_next_week(self):
        workouts = [FakeWorkout(f'w{n}', 1, n, f'Day {n}') for n in (1, 2, 3)]
        workouts.append(FakeWorkout('w4', 2, 1, 'Week 2'))

        schedule = generate_schedule(workouts, date(2024, 3, 6))

        assert [s.date for s in schedule] == [
            date(2024, 3, 7), date(2024, 3, 8), date(2024, 3, 11), date(2024, 3, 18),
        ]

    def test_custom_training_days_with_sunday(self):
        workouts = [FakeWorkout('a', 1, 1, 'A'), FakeWorkout('b', 1, 2, 'B')]

        schedule = generate_schedule(workouts, date(2024, 3, 4), training_days=[0, 3])

        assert [s.date for s in schedule] == [date(2024, 3, 6), date(2024, 3, 10)]

    def test_workouts_sorted_by_week_and_day(self):
        workouts = [FakeWorkout('b', 1, 2, 'B'), FakeWorkout('a', 1, 1, 'A')]
        schedule = generate_schedule(workouts, date(2024, 3, 4))
        assert [s.workout_id for s in schedule] == ['a', 'b']

    def test_nothing_to_schedule(self):
        assert generate_schedule([], date(2024, 3, 4)) == []


class TestCompletionRate:
    def test_skipped_sessions_do_not_count(self):
        rows = [
            WorkoutSession(status=FULLY_COMPLETED, is_skipped=False),
            WorkoutSession(status=FULLY_COMPLETED, is_skipped=False),
            WorkoutSession(status=PARTIALLY_COMPLETED, is_skipped=False),
            WorkoutSession(status=NOT_STARTED, is_skipped=True),
        ]
        assert completion_rate(rows) == 67

    def test_empty(self):
        assert completion_rate([]) == 0
        assert completion_rate([WorkoutSession(status=NOT_STARTED, is_skipped=True)]) == 0


class TestCoachSchedule:
    def test_groups_sessions_by_athlete(self, client, make_athlete):
        jane = make_athlete('Jane Lifter')
        abe = make_athlete('Abe Bencher')
        _session(jane, date(2024, 3, 4), status=FULLY_COMPLETED)
        _session(jane, date(2024, 3, 5))
        _session(abe, date(2024, 3, 6), status=FULLY_COMPLETED)
        _session(abe, date(2024, 4, 1))

        body = client.get('/api/schedule?startDate=2024-03-01&endDate=2024-03-31').get_json()

        assert [a['name'] for a in body['athletes']] == ['Abe Bencher', 'Jane Lifter']
        assert body['athletes'][0]['completionRate'] == 100
        assert body['athletes'][1]['completionRate'] == 50
        assert body['completionRate'] == 67
        assert [s['date'] for s in body['athletes'][1]['sessions']] == ['2024-03-04', '2024-03-05']

    def test_athlete_filter(self, client, make_athlete):
        jane = make_athlete('Jane Lifter')
        make_athlete('Abe Bencher')

        only = client.get(f'/api/schedule?startDate=2024-03-01&endDate=2024-03-31&athleteId={jane.id}').get_json()
        everyone = client.get('/api/schedule?startDate=2024-03-01&endDate=2024-03-31&athleteId=all').get_json()

        assert [a['id'] for a in only['athletes']] == [jane.id]
        assert len(everyone['athletes']) == 2

    @pytest.mark.parametrize('query, message', [
        ('', 'Missing required query params: startDate, endDate'),
        ('?startDate=2024-03-01', 'Missing required query params: startDate, endDate'),
        ('?startDate=03/01/2024&endDate=2024-03-31', 'Invalid date format. Use YYYY-MM-DD.'),
        ('?startDate=2024-04-01&endDate=2024-03-31', 'startDate must be before or equal to endDate'),
    ])
    def test_date_validation(self, client, coach, query, message):
        response = client.get(f'/api/schedule{query}')
        assert response.status_code == 400
        assert response.get_json() == {'error': message}


class TestSkip:
    def test_toggle_skip(self, client, athlete):
        session = _session(athlete, date(2024, 3, 4))

        skipped = client.patch(f'/api/schedule/{session.id}/skip', json={'skip': True})
        restored = client.patch(f'/api/schedule/{session.id}/skip', json={'skip': False})

        assert skipped.get_json() == {'id': session.id, 'isSkipped': True}
        assert restored.get_json() == {'id': session.id, 'isSkipped': False}

    def test_skip_requires_boolean(self, client, athlete):
        session = _session(athlete, date(2024, 3, 4))
        response = client.patch(f'/api/schedule/{session.id}/skip', json={'skip': 'yes'})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'skip is required (boolean)'}

    def test_cannot_skip_started_session(self, client, athlete):
        session = _session(athlete, date(2024, 3, 4), status=PARTIALLY_COMPLETED)
        response = client.patch(f'/api/schedule/{session.id}/skip', json={'skip': True})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Only NOT_STARTED sessions can be skipped'}

    def test_unknown_session(self, client, coach):
        response = client.patch('/api/schedule/nope/skip', json={'skip': True})
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Session not found'}


class TestMove:
    def test_move_to_free_date(self, client, athlete):
        session = _session(athlete, date(2024, 3, 4))

        response = client.patch(f'/api/schedule/{session.id}/move', json={'newDate': '2024-03-06'})

        assert response.get_json() == {
            'action': 'moved',
            'movedSession': {'id': session.id, 'newDate': '2024-03-06'},
        }
        db.session.refresh(session)
        assert session.date == date(2024, 3, 6)
        assert session.is_manually_scheduled is True

    def test_swap_with_untouched_session(self, client, athlete):
        monday = _session(athlete, date(2024, 3, 4), title='Squat')
        tuesday = _session(athlete, date(2024, 3, 5), title='Bench')

        response = client.patch(f'/api/schedule/{monday.id}/move', json={'newDate': '2024-03-05'})

        assert response.get_json() == {
            'action': 'swapped',
            'movedSession': {'id': monday.id, 'newDate': '2024-03-05'},
            'swappedSession': {'id': tuesday.id, 'newDate': '2024-03-04'},
        }
        db.session.refresh(monday)
        db.session.refresh(tuesday)
        assert (monday.date, tuesday.date) == (date(2024, 3, 5), date(2024, 3, 4))

    def test_cannot_swap_with_started_session(self, client, athlete):
        monday = _session(athlete, date(2024, 3, 4))
        _session(athlete, date(2024, 3, 5), status=FULLY_COMPLETED)

        response = client.patch(f'/api/schedule/{monday.id}/move', json={'newDate': '2024-03-05'})

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Cannot swap, the session on the target date is not NOT_STARTED'}

    def test_same_date(self, client, athlete):
        session = _session(athlete, date(2024, 3, 4))
        response = client.patch(f'/api/schedule/{session.id}/move', json={'newDate': '2024-03-04'})
        assert response.get_json() == {'error': 'New date is the same as current date'}

    def test_only_untouched_sessions_move(self, client, athlete):
        session = _session(athlete, date(2024, 3, 4), status=PARTIALLY_COMPLETED)
        response = client.patch(f'/api/schedule/{session.id}/move', json={'newDate': '2024-03-06'})
        assert response.get_json() == {'error': 'Only NOT_STARTED sessions can be moved'}

    def test_invalid_new_date(self, client, athlete):
        session = _session(athlete, date(2024, 3, 4))
        missing = client.patch(f'/api/schedule/{session.id}/move', json={})
        malformed = client.patch(f'/api/schedule/{session.id}/move', json={'newDate': 'next week'})
        assert missing.get_json() == {'error': 'newDate is required (YYYY-MM-DD format)'}
        assert malformed.get_json() == {'error': 'Invalid date format. Use YYYY-MM-DD.'}


class TestAthleteCalendar:
    def test_own_sessions_only(self, client, athlete, make_athlete, athlete_headers):
        other = make_athlete('Abe Bencher')
        _session(athlete, date(2024, 3, 4), status=FULLY_COMPLETED)
        _session(athlete, date(2024, 3, 6), skipped=True)
        _session(other, date(2024, 3, 5))

        body = client.get(
            '/api/athlete/calendar?startDate=2024-03-01&endDate=2024-03-31', headers=athlete_headers
        ).get_json()

        assert [s['date'] for s in body['sessions']] == ['2024-03-04', '2024-03-06']
        assert body['sessions'][1]['isSkipped'] is True
        assert body['completionRate'] == 100

    def test_requires_range(self, client, athlete_headers):
        response = client.get('/api/athlete/calendar', headers=athlete_headers)
        assert response.status_code == 400
