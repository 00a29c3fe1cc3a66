"""Tests for competition meets and entries."""

from coachdesk.extensions import db
from coachdesk.models import CompetitionMeet, MeetEntry


class TestMeets:
    def test_create_with_entries_sorted_by_athlete(self, client, make_athlete):
        zed = make_athlete('Zed Puller')
        amy = make_athlete('Amy Presser')

        response = client.post('/api/meets', json={
            'name': 'Spring Open',
            'date': '2024-05-18',
            'federation': 'USAPL',
            'entries': [
                {'athleteId': zed.id, 'squat1': 500},
                {'athleteId': amy.id, 'weightClass': '63'},
            ],
        })

        assert response.status_code == 201
        body = response.get_json()
        assert body['date'] == '2024-05-18'
        assert [e['athlete']['name'] for e in body['entries']] == ['Amy Presser', 'Zed Puller']
        assert body['entries'][1]['squat1'] == 500

    def test_create_with_duplicate_entries(self, client, athlete):
        response = client.post('/api/meets', json={
            'name': 'Spring Open',
            'date': '2024-05-18',
            'entries': [{'athleteId': athlete.id}, {'athleteId': athlete.id}],
        })
        assert response.status_code == 409
        assert CompetitionMeet.query.count() == 0

    def test_create_requires_date(self, client, coach):
        response = client.post('/api/meets', json={'name': 'Spring Open'})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing required fields: date'}

    def test_invalid_date(self, client, coach):
        response = client.post('/api/meets', json={'name': 'Spring Open', 'date': 'soon'})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Invalid date: Not a valid date.'}

    def test_list_search_and_order(self, client, coach):
        for name, day in (('Local Meet', '2024-01-10'), ('Nationals', '2024-07-01')):
            client.post('/api/meets', json={'name': name, 'date': day, 'location': 'Columbus'})

        listed = client.get('/api/meets').get_json()
        searched = client.get('/api/meets?search=nation').get_json()

        assert [m['name'] for m in listed] == ['Nationals', 'Local Meet']
        assert listed[0]['_count'] == {'entries': 0}
        assert [m['name'] for m in searched] == ['Nationals']

    def test_update_and_delete(self, client, coach):
        meet_id = client.post('/api/meets', json={'name': 'Open', 'date': '2024-05-18'}).get_json()['id']

        updated = client.put(f'/api/meets/{meet_id}', json={'location': 'Austin'}).get_json()
        deleted = client.delete(f'/api/meets/{meet_id}').get_json()

        assert updated['location'] == 'Austin'
        assert updated['name'] == 'Open'
        assert deleted == {'success': True}
        assert db.session.get(CompetitionMeet, meet_id) is None


class TestMeetEntries:
    def _meet(self, client):
        return client.post('/api/meets', json={'name': 'Open', 'date': '2024-05-18'}).get_json()['id']

    def test_add_entry(self, client, athlete):
        meet_id = self._meet(client)

        response = client.post(f'/api/meets/{meet_id}/entries', json={
            'athleteId': athlete.id,
            'bench1': 275.5,
            'attemptResults': {'bench1': 'good'},
        })

        assert response.status_code == 201
        body = response.get_json()
        assert body['bench1'] == 275.5
        assert body['attemptResults'] == {'bench1': 'good'}

    def test_duplicate_entry(self, client, athlete):
        meet_id = self._meet(client)
        client.post(f'/api/meets/{meet_id}/entries', json={'athleteId': athlete.id})

        response = client.post(f'/api/meets/{meet_id}/entries', json={'athleteId': athlete.id})

        assert response.status_code == 409
        assert response.get_json() == {'error': 'Athlete already added to this meet'}

    def test_entry_requires_athlete(self, client, coach):
        meet_id = self._meet(client)
        response = client.post(f'/api/meets/{meet_id}/entries', json={'squat1': 400})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'athleteId is required'}

    def test_entry_for_unknown_meet_or_athlete(self, client, athlete):
        meet_id = self._meet(client)

        missing_meet = client.post('/api/meets/nope/entries', json={'athleteId': athlete.id})
        missing_athlete = client.post(f'/api/meets/{meet_id}/entries', json={'athleteId': 'nope'})

        assert missing_meet.get_json() == {'error': 'Meet not found'}
        assert missing_athlete.get_json() == {'error': 'Athlete not found'}

    def test_update_and_remove_entry(self, client, athlete):
        meet_id = self._meet(client)
        entry_id = client.post(f'/api/meets/{meet_id}/entries', json={'athleteId': athlete.id}).get_json()['id']

        updated = client.put(f'/api/meets/{meet_id}/entries/{entry_id}', json={'deadlift3': 600, 'notes': 'PR'})
        removed = client.delete(f'/api/meets/{meet_id}/entries/{entry_id}')

        assert updated.get_json()['deadlift3'] == 600
        assert updated.get_json()['notes'] == 'PR'
        assert removed.get_json() == {'success': True}
        assert MeetEntry.query.count() == 0

    def test_entry_of_another_meet_not_found(self, client, athlete):
        first = self._meet(client)
        second = self._meet(client)
        entry_id = client.post(f'/api/meets/{first}/entries', json={'athleteId': athlete.id}).get_json()['id']

        response = client.put(f'/api/meets/{second}/entries/{entry_id}', json={'notes': 'x'})

        assert response.status_code == 404
        assert response.get_json() == {'error': 'Entry not found'}
