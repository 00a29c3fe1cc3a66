"""Tests for coach and athlete identity resolution."""

from datetime import timedelta

from coachdesk.auth import ROLE_ATHLETE, ROLE_COACH, issue_token


class TestCoachIdentity:
    def test_token_selects_coach(self, client, make_coach):
        make_coach()
        second = make_coach(name='Second Coach', email='second@example.com')
        token = issue_token(ROLE_COACH, second.id)

        response = client.get('/api/settings', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 200
        assert response.get_json()['id'] == second.id

    def test_fallback_acts_as_first_coach(self, client, make_coach):
        first = make_coach()
        make_coach(name='Second Coach', email='second@example.com')

        response = client.get('/api/settings')

        assert response.status_code == 200
        assert response.get_json()['id'] == first.id

    def test_no_coach_at_all(self, client):
        response = client.get('/api/athletes')
        assert response.status_code == 401
        assert response.get_json() == {'error': 'No coach account found'}

    def test_fallback_disabled(self, app, client, coach):
        app.config['COACH_FALLBACK_ENABLED'] = False
        response = client.get('/api/athletes')
        assert response.status_code == 401
        assert response.get_json() == {'error': 'Unauthorized'}

    def test_unknown_coach_token(self, client, coach):
        token = issue_token(ROLE_COACH, 'f' * 32)
        response = client.get('/api/athletes', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_athlete_token_rejected_on_coach_routes(self, client, athlete_headers):
        response = client.get('/api/athletes', headers=athlete_headers)
        assert response.status_code == 401

    def test_expired_token(self, app, client, coach):
        app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(seconds=-10)
        token = issue_token(ROLE_COACH, coach.id)

        response = client.get('/api/athletes', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.get_json() == {'error': 'Token has expired'}

    def test_tampered_token(self, client, coach):
        token = issue_token(ROLE_COACH, coach.id) + 'x'
        response = client.get('/api/athletes', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401
        assert response.get_json()['error'].startswith('Invalid token')

    def test_non_bearer_header_counts_as_no_token(self, app, client, coach):
        app.config['COACH_FALLBACK_ENABLED'] = False
        response = client.get('/api/athletes', headers={'Authorization': 'Token abc'})
        assert response.status_code == 401
        assert response.get_json() == {'error': 'Unauthorized'}

    def test_token_from_cookie(self, app, client, make_coach):
        make_coach()
        second = make_coach(name='Second Coach', email='second@example.com')
        client.set_cookie(app.config['JWT_ACCESS_COOKIE_NAME'], issue_token(ROLE_COACH, second.id))

        response = client.get('/api/settings')

        assert response.status_code == 200
        assert response.get_json()['id'] == second.id


class TestAthleteIdentity:
    def test_requires_token(self, client, athlete):
        response = client.get('/api/athlete/coach')
        assert response.status_code == 401

    def test_coach_token_rejected(self, client, athlete, coach_headers):
        response = client.get('/api/athlete/coach', headers=coach_headers)
        assert response.status_code == 401

    def test_token_for_missing_athlete(self, client, coach):
        token = issue_token(ROLE_ATHLETE, 'a' * 32)
        response = client.get('/api/athlete/coach', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_resolves_athlete(self, client, coach, athlete_headers):
        response = client.get('/api/athlete/coach', headers=athlete_headers)
        assert response.status_code == 200
        assert response.get_json() == {'name': coach.name}
