"""Tests for outbound email and the notification jobs."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from coachdesk.extensions import db
from coachdesk.models import ProgramAssignment, WorkoutSession
from coachdesk.models.message import SENDER_COACH
from coachdesk.models.workout_session import FULLY_COMPLETED
from coachdesk.services import notifications
from coachdesk.services.email import send_email
from coachdesk.services.messaging import send_message


@pytest.fixture
def sendgrid(app):
    app.config['SENDGRID_API_KEY'] = 'SG.test-key'
    with patch('coachdesk.services.email.requests.post') as post:
        post.return_value = MagicMock(status_code=202)
        yield post


class TestSendEmail:
    def test_posts_to_sendgrid(self, sendgrid):
        assert send_email('jane@example.com', 'Hello', '<p>Hi</p>') is True

        args, kwargs = sendgrid.call_args
        assert args[0] == 'https://api.sendgrid.com/v3/mail/send'
        assert kwargs['headers'] == {'Authorization': 'Bearer SG.test-key'}
        assert kwargs['timeout'] == 10
        payload = kwargs['json']
        assert payload['personalizations'] == [{'to': [{'email': 'jane@example.com'}]}]
        assert payload['from'] == {'email': 'noreply@cannoli.mattalldian.com', 'name': 'Cannoli Trainer'}
        assert payload['subject'] == 'Hello'

    def test_skipped_without_api_key(self, app):
        with patch('coachdesk.services.email.requests.post') as post:
            assert send_email('jane@example.com', 'Hello', '<p>Hi</p>') is False
        post.assert_not_called()

    def test_failure_is_reported_not_raised(self, sendgrid):
        sendgrid.side_effect = requests.ConnectionError('down')
        assert send_email('jane@example.com', 'Hello', '<p>Hi</p>') is False


class TestMessageNotification:
    def test_emails_unread_message(self, coach, athlete, sendgrid):
        message = send_message(coach.id, athlete.id, SENDER_COACH, coach.id, 'y' * 250)

        assert notifications.send_message_notification(message.id, athlete.id) is True

        payload = sendgrid.call_args.kwargs['json']
        assert payload['subject'] == 'New message from your coach'
        html = payload['content'][0]['value']
        assert 'Hey Jane,' in html
        assert 'y' * 200 + '...' in html
        assert 'http://localhost:3000/athlete/messages' in html

    def test_skips_read_message(self, coach, athlete, sendgrid):
        message = send_message(coach.id, athlete.id, SENDER_COACH, coach.id, 'Seen it')
        message.read_at = message.created_at
        db.session.commit()

        assert notifications.send_message_notification(message.id, athlete.id) is False
        sendgrid.assert_not_called()

    def test_respects_mute_preference(self, coach, make_athlete, sendgrid):
        muted = make_athlete('Muted Athlete', notification_preferences={'emailOnMessage': False})
        message = send_message(coach.id, muted.id, SENDER_COACH, coach.id, 'Hello')

        assert notifications.send_message_notification(message.id, muted.id) is False
        sendgrid.assert_not_called()

    def test_skips_athlete_without_email(self, coach, make_athlete, sendgrid):
        no_email = make_athlete('No Email', email=None)
        message = send_message(coach.id, no_email.id, SENDER_COACH, coach.id, 'Hello')
        assert notifications.send_message_notification(message.id, no_email.id) is False

    def test_job_runs_in_app_context(self, coach, athlete):
        message = send_message(coach.id, athlete.id, SENDER_COACH, coach.id, 'Hello')

        with patch.object(notifications, 'send_message_notification') as send:
            notifications.run_message_notification(message.id, athlete.id)

        send.assert_called_once_with(message.id, athlete.id)

    def test_job_failure_is_contained(self, coach, athlete):
        with patch.object(notifications, 'send_message_notification', side_effect=RuntimeError('boom')):
            notifications.run_message_notification('missing', athlete.id)

    def test_scheduling_failure_returns_false(self, monkeypatch):
        def broken(**kwargs):
            raise RuntimeError('job store unavailable')

        monkeypatch.setattr(notifications.scheduler, 'add_job', broken)
        assert notifications.schedule_assignment_notification('abc') is False


class TestAssignmentNotification:
    def test_mentions_program_and_start(self, athlete, make_program, sendgrid):
        program = make_program([], name='Peaking Block')
        assignment = ProgramAssignment(program_id=program.id, athlete_id=athlete.id, start_date=date(2024, 3, 4))
        db.session.add(assignment)
        db.session.commit()

        assert notifications.send_assignment_notification(assignment.id) is True

        payload = sendgrid.call_args.kwargs['json']
        assert payload['subject'] == 'New program assigned: Peaking Block'
        assert 'starting Monday, March 4, 2024' in payload['content'][0]['value']


class TestCompletionNotification:
    def _completed(self, athlete):
        session = WorkoutSession(
            athlete_id=athlete.id, date=date(2024, 3, 4), title='Heavy Squat',
            status=FULLY_COMPLETED, completion_percentage=100,
        )
        db.session.add(session)
        db.session.commit()
        return session

    def test_emails_coach(self, coach, athlete, sendgrid):
        session = self._completed(athlete)

        assert notifications.send_completion_notification(session.id) is True

        payload = sendgrid.call_args.kwargs['json']
        assert payload['personalizations'] == [{'to': [{'email': coach.email}]}]
        assert payload['subject'] == 'Jane Lifter completed Heavy Squat'

    def test_coach_opted_out(self, coach, athlete, sendgrid):
        coach.notification_preferences = {'workoutCompleted': False}
        db.session.commit()
        session = self._completed(athlete)

        assert notifications.send_completion_notification(session.id) is False
        sendgrid.assert_not_called()
