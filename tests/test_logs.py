"""Tests for bodyweight logs and set logs."""

from coachdesk.extensions import db
from coachdesk.models import SetLog, WorkoutSession
from coachdesk.models.workout_session import FULLY_COMPLETED, NOT_STARTED, PARTIALLY_COMPLETED


class TestBodyweight:
    def test_requires_athlete_param(self, client, coach):
        response = client.get('/api/bodyweight')
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing required query param: athleteId'}

    def test_create_and_list_newest_first(self, client, athlete):
        for weight, logged_at in ((182.0, '2024-03-01T07:00:00Z'), (180.5, '2024-03-08T07:00:00Z')):
            response = client.post('/api/bodyweight', json={
                'athleteId': athlete.id, 'weight': weight, 'loggedAt': logged_at,
            })
            assert response.status_code == 201

        logs = client.get(f'/api/bodyweight?athleteId={athlete.id}').get_json()

        assert [log['weight'] for log in logs] == [180.5, 182.0]
        assert logs[0]['loggedAt'] == '2024-03-08T07:00:00Z'
        assert logs[0]['unit'] == 'lbs'

    def test_date_range(self, client, athlete):
        for logged_at in ('2024-02-20T07:00:00Z', '2024-03-05T07:00:00Z'):
            client.post('/api/bodyweight', json={'athleteId': athlete.id, 'weight': 181, 'loggedAt': logged_at})

        logs = client.get(f'/api/bodyweight?athleteId={athlete.id}&from=2024-03-01').get_json()
        bad = client.get(f'/api/bodyweight?athleteId={athlete.id}&to=yesterday')

        assert [log['loggedAt'] for log in logs] == ['2024-03-05T07:00:00Z']
        assert bad.status_code == 400

    def test_rejects_non_positive_weight(self, client, athlete):
        response = client.post('/api/bodyweight', json={'athleteId': athlete.id, 'weight': 0})
        assert response.status_code == 400

    def test_update_and_delete(self, client, athlete):
        log_id = client.post('/api/bodyweight', json={'athleteId': athlete.id, 'weight': 181}).get_json()['id']

        updated = client.put(f'/api/bodyweight/{log_id}', json={'unit': 'kg', 'weight': 82.1}).get_json()
        deleted = client.delete(f'/api/bodyweight/{log_id}')

        assert updated['unit'] == 'kg'
        assert updated['weight'] == 82.1
        assert deleted.get_json() == {'success': True}
        assert client.get(f'/api/bodyweight/{log_id}').status_code == 404

    def test_other_coach_cannot_log(self, client, coach, make_coach, make_athlete):
        other = make_coach(name='Other', email='other@example.com')
        theirs = make_athlete('Theirs', owner=other)
        response = client.post('/api/bodyweight', json={'athleteId': theirs.id, 'weight': 150})
        assert response.status_code == 404


class TestSetLogs:
    def _scheduled(self, client, athlete, program):
        client.post(f'/api/programs/{program.id}/assign', json={
            'athleteIds': [athlete.id], 'startDate': '2024-03-04',
        })
        return WorkoutSession.query.filter_by(athlete_id=athlete.id).one()

    def _log(self, client, athlete, workout_exercise, set_number):
        return client.post('/api/sets', json={
            'workoutExerciseId': workout_exercise.id,
            'athleteId': athlete.id,
            'setNumber': set_number,
            'reps': 5,
            'weight': 225,
        })

    def test_logging_sets_drives_session_status(self, client, athlete, make_program, scheduled_jobs):
        program = make_program([(1, 1, 'Squat Day', [2, 1])])
        session = self._scheduled(client, athlete, program)
        first, second = program.workouts[0].exercises

        assert self._log(client, athlete, first, 1).status_code == 201
        db.session.refresh(session)
        assert (session.status, session.completion_percentage) == (PARTIALLY_COMPLETED, 0)

        self._log(client, athlete, first, 2)
        db.session.refresh(session)
        assert (session.status, session.completed_items, session.total_items) == (PARTIALLY_COMPLETED, 1, 2)
        assert session.completion_percentage == 50

        self._log(client, athlete, second, 1)
        db.session.refresh(session)
        assert (session.status, session.completion_percentage) == (FULLY_COMPLETED, 100)
        assert f'completion-notify-{session.id}' in [job['id'] for job in scheduled_jobs]

    def test_deleting_sets_rolls_status_back(self, client, athlete, make_program):
        program = make_program([(1, 1, 'Squat Day', [1])])
        session = self._scheduled(client, athlete, program)
        [workout_exercise] = program.workouts[0].exercises
        log_id = self._log(client, athlete, workout_exercise, 1).get_json()['id']

        response = client.delete(f'/api/sets/{log_id}')

        assert response.get_json() == {'success': True}
        db.session.refresh(session)
        assert (session.status, session.completion_percentage) == (NOT_STARTED, 0)

    def test_list_filters_and_update(self, client, athlete, make_program):
        program = make_program([(1, 1, 'Squat Day', [3])])
        [workout_exercise] = program.workouts[0].exercises
        log_id = self._log(client, athlete, workout_exercise, 1).get_json()['id']

        updated = client.put(f'/api/sets/{log_id}', json={'rpe': 8.5, 'notes': 'Moved well'}).get_json()
        listed = client.get(
            f'/api/sets?athleteId={athlete.id}&exerciseId={workout_exercise.exercise_id}'
        ).get_json()
        unmatched = client.get(f'/api/sets?athleteId={athlete.id}&workoutExerciseId=other').get_json()

        assert updated['rpe'] == 8.5
        assert updated['workoutExercise']['exercise']['name'] == 'Back Squat'
        assert [log['id'] for log in listed] == [log_id]
        assert unmatched == []

    def test_unknown_workout_exercise(self, client, athlete):
        response = client.post('/api/sets', json={
            'workoutExerciseId': 'nope', 'athleteId': athlete.id, 'setNumber': 1, 'reps': 5, 'weight': 100,
        })
        assert response.status_code == 404
        assert response.get_json() == {'error': 'WorkoutExercise not found'}
        assert SetLog.query.count() == 0

    def test_missing_fields(self, client, athlete):
        response = client.post('/api/sets', json={'athleteId': athlete.id, 'reps': 5})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing required fields: workoutExerciseId, setNumber, weight'}
