"""Tests for coach accounts and settings."""

from coachdesk.extensions import db
from coachdesk.models import Coach


class TestCoaches:
    def test_create_first_coach_without_identity(self, client):
        response = client.post('/api/coaches', json={'name': 'Coach Carter', 'email': 'carter@example.com'})

        assert response.status_code == 201
        body = response.get_json()
        assert body['name'] == 'Coach Carter'
        assert len(body['id']) == 32

    def test_create_requires_fields(self, client):
        response = client.post('/api/coaches', json={'brandName': 'Iron'})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing required fields: name, email'}

    def test_duplicate_email(self, client, coach):
        response = client.post('/api/coaches', json={'name': 'Other', 'email': 'CARTER@example.com'})
        assert response.status_code == 409
        assert response.get_json() == {'error': 'A coach with this email already exists'}

    def test_list_includes_counts(self, client, coach, athlete):
        response = client.get('/api/coaches')

        assert response.status_code == 200
        [row] = response.get_json()
        assert row['_count'] == {'athletes': 1, 'programs': 0}

    def test_get_unknown(self, client, coach):
        response = client.get('/api/coaches/nope')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Coach not found'}

    def test_update_own_profile(self, client, coach):
        response = client.put(f'/api/coaches/{coach.id}', json={'brandName': 'Carter Strength'})

        assert response.status_code == 200
        assert response.get_json()['brandName'] == 'Carter Strength'
        assert response.get_json()['name'] == 'Coach Carter'

    def test_cannot_update_another_coach(self, client, coach, make_coach):
        other = make_coach(name='Other', email='other@example.com')
        response = client.put(f'/api/coaches/{other.id}', json={'name': 'Hijacked'})

        assert response.status_code == 401
        assert db.session.get(Coach, other.id).name == 'Other'


class TestSettings:
    def test_defaults(self, client, coach):
        body = client.get('/api/settings').get_json()

        assert body['defaultWeightUnit'] == 'lbs'
        assert body['timezone'] == 'America/New_York'
        assert body['defaultRestTimerSeconds'] == 120
        assert body['brandName'] is None

    def test_partial_update(self, client, coach):
        response = client.put('/api/settings', json={'defaultWeightUnit': 'kg', 'defaultRestTimerSeconds': 90})

        assert response.status_code == 200
        body = response.get_json()
        assert body['defaultWeightUnit'] == 'kg'
        assert body['defaultRestTimerSeconds'] == 90
        assert body['name'] == 'Coach Carter'

    def test_blank_brand_name_clears_it(self, client, make_coach):
        make_coach(brand_name='Iron House')
        response = client.put('/api/settings', json={'brandName': '   '})
        assert response.get_json()['brandName'] is None

    def test_invalid_weight_unit(self, client, coach):
        response = client.put('/api/settings', json={'defaultWeightUnit': 'stone'})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Invalid weight unit. Must be "kg" or "lbs".'}

    def test_rest_timer_out_of_range(self, client, coach):
        response = client.put('/api/settings', json={'defaultRestTimerSeconds': 601})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Rest timer must be between 0 and 600 seconds.'}

    def test_empty_name(self, client, coach):
        response = client.put('/api/settings', json={'name': '  '})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Name cannot be empty.'}

    def test_email_taken_by_another_coach(self, client, coach, make_coach):
        make_coach(name='Other', email='other@example.com')
        response = client.put('/api/settings', json={'email': 'other@example.com'})
        assert response.status_code == 409

    def test_body_must_be_object(self, client, coach):
        response = client.put('/api/settings', json=['kg'])
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Request body must be a JSON object'}
