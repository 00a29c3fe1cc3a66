"""Tests for the exercise library."""

from coachdesk.extensions import db
from coachdesk.models import Exercise


class TestExerciseLibrary:
    def test_list_merges_global_and_own(self, client, coach, make_coach, exercise):
        db.session.add(Exercise(coach_id=coach.id, name='Tempo Squat', category='squat'))
        other = make_coach(name='Other', email='other@example.com')
        db.session.add(Exercise(coach_id=other.id, name='Secret Press', category='press'))
        db.session.commit()

        names = [e['name'] for e in client.get('/api/exercises').get_json()]

        assert names == ['Back Squat', 'Tempo Squat']

    def test_filters(self, client, coach, exercise):
        db.session.add(Exercise(coach_id=coach.id, name='Bench Press', category='press', tags=['upper']))
        db.session.commit()

        by_category = client.get('/api/exercises?category=PRESS').get_json()
        by_tag = client.get('/api/exercises?tag=competition').get_json()
        by_search = client.get('/api/exercises?search=bench').get_json()
        paged = client.get('/api/exercises?limit=1&offset=1').get_json()

        assert [e['name'] for e in by_category] == ['Bench Press']
        assert [e['name'] for e in by_tag] == ['Back Squat']
        assert [e['name'] for e in by_search] == ['Bench Press']
        assert [e['name'] for e in paged] == ['Bench Press']

    def test_bad_limit(self, client, coach):
        response = client.get('/api/exercises?limit=ten')
        assert response.status_code == 400
        assert response.get_json() == {'error': 'limit must be an integer'}

    def test_create_and_fetch(self, client, coach):
        response = client.post('/api/exercises', json={
            'name': 'Pause Bench',
            'category': 'press',
            'primaryMuscles': ['chest'],
            'cues': 'Stay tight',
        })

        assert response.status_code == 201
        created = response.get_json()
        assert created['coachId'] == coach.id
        assert created['primaryMuscles'] == ['chest']
        assert created['tags'] == []

        fetched = client.get(f"/api/exercises/{created['id']}").get_json()
        assert fetched['cues'] == 'Stay tight'

    def test_create_requires_category(self, client, coach):
        response = client.post('/api/exercises', json={'name': 'Mystery'})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing required fields: category'}

    def test_global_exercise_is_read_only(self, client, coach, exercise):
        assert client.get(f'/api/exercises/{exercise.id}').status_code == 200
        assert client.put(f'/api/exercises/{exercise.id}', json={'name': 'Mine now'}).status_code == 404
        assert client.delete(f'/api/exercises/{exercise.id}').status_code == 404

    def test_update_own(self, client, coach):
        own = Exercise(coach_id=coach.id, name='Row', category='pull')
        db.session.add(own)
        db.session.commit()

        response = client.put(f'/api/exercises/{own.id}', json={'videoUrl': 'https://example.com/row'})

        assert response.get_json()['videoUrl'] == 'https://example.com/row'
        assert response.get_json()['name'] == 'Row'

    def test_delete_blocked_while_in_use(self, client, coach, make_program):
        own = Exercise(coach_id=coach.id, name='Row', category='pull')
        db.session.add(own)
        db.session.commit()
        program = make_program([(1, 1, 'Day 1', [3])])
        program.workouts[0].exercises[0].exercise_id = own.id
        db.session.commit()

        response = client.delete(f'/api/exercises/{own.id}')

        assert response.status_code == 409
        assert response.get_json() == {
            'error': 'Cannot delete exercise that is used in workouts',
            'usageCount': 1,
        }

    def test_delete_unused(self, client, coach):
        own = Exercise(coach_id=coach.id, name='Row', category='pull')
        db.session.add(own)
        db.session.commit()

        response = client.delete(f'/api/exercises/{own.id}')

        assert response.get_json() == {'success': True}
        assert db.session.get(Exercise, own.id) is None
