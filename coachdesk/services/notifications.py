"""
Email notifications delivered by background jobs.

Jobs live in the APScheduler job store, so a pending message notification
survives a restart. Each job reloads its rows when it fires and re-checks
whether the email is still wanted. Scheduling and delivery never raise.
"""
import logging
from datetime import datetime, timedelta
from html import escape

from flask import current_app

from coachdesk.extensions import db, scheduler
from coachdesk.models import Athlete, Message, ProgramAssignment, WorkoutSession
from coachdesk.services.email import branded_email_html, email_cta_button, paragraph, send_email

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_LENGTH = 200

def _enqueue(job_id, func, args, delay_seconds=0):
    run_date = datetime.utcnow() + timedelta(seconds=delay_seconds)
    try:
        scheduler.add_job(
            id=job_id,
            func=func,
            trigger='date',
            run_date=run_date,
            args=args,
            replace_existing=True,
        )
    except Exception as e:
        logger.error(f"Failed to schedule job {job_id}: {e}")
        return False
    return True


def _run_job(name, func, *args):
    with scheduler.app.app_context():
        try:
            func(*args)
        except Exception:
            db.session.rollback()
            logger.exception(f"{name} job failed for {args}")
        finally:
            db.session.remove()


# --- Coach messages ---

def schedule_message_notification(message_id, athlete_id):
    delay = current_app.config.get('MESSAGE_NOTIFICATION_DELAY_SECONDS', 300)
    return _enqueue(f'message-notify-{message_id}', run_message_notification, [message_id, athlete_id], delay)


def run_message_notification(message_id, athlete_id):
    _run_job('Message notification', send_message_notification, message_id, athlete_id)


def send_message_notification(message_id, athlete_id):
    """Email the athlete about a coach message that is still unread."""
    message = db.session.get(Message, message_id)
    if message is None or message.read_at is not None:
        return False

    athlete = db.session.get(Athlete, athlete_id)
    if athlete is None or not athlete.email:
        return False
    if not athlete.wants_message_emails():
        logger.info(f"Athlete {athlete_id} muted message emails")
        return False

    preview = message.content
    if len(preview) > MESSAGE_PREVIEW_LENGTH:
        preview = preview[:MESSAGE_PREVIEW_LENGTH] + '...'
    first_name = athlete.name.split(' ')[0]
    url = f"{current_app.config['APP_URL']}/athlete/messages"

    body = (
        paragraph(f"Hey {escape(first_name)},")
        + paragraph("Your coach sent you a message:")
        + '<div style="background-color: #f3f4f6; border-radius: 8px; padding: 16px; margin: 16px 0;">'
        + f'<p style="font-size: 14px; color: #374151; margin: 0; white-space: pre-wrap;">{escape(preview)}</p>'
        + '</div>'
        + email_cta_button('View Message', url)
    )
    return send_email(athlete.email, 'New message from your coach', branded_email_html(body))


# --- Program assignment ---

def schedule_assignment_notification(assignment_id):
    return _enqueue(f'assignment-notify-{assignment_id}', run_assignment_notification, [assignment_id])


def run_assignment_notification(assignment_id):
    _run_job('Assignment notification', send_assignment_notification, assignment_id)


def send_assignment_notification(assignment_id):
    assignment = db.session.get(ProgramAssignment, assignment_id)
    if assignment is None:
        return False
    athlete = assignment.athlete
    if not athlete.email:
        logger.warning(f"No email for athlete {athlete.id}, skipping program assignment email")
        return False

    program_name = escape(assignment.program.name)
    start_text = ''
    if assignment.start_date:
        start = assignment.start_date
        start_text = f" starting {start:%A, %B} {start.day}, {start.year}"
    url = f"{current_app.config['APP_URL']}/athlete/train"

    body = (
        paragraph(f"Hey {escape(athlete.name)},")
        + paragraph(f"Your coach has assigned you a new program: <strong>{program_name}</strong>{start_text}.")
        + email_cta_button('View Your Program', url)
        + paragraph("Open Cannoli Trainer to see your workouts and start training.", muted=True)
    )
    return send_email(athlete.email, f"New program assigned: {assignment.program.name}", branded_email_html(body))


# --- Workout completion ---

def schedule_completion_notification(session_id):
    return _enqueue(f'completion-notify-{session_id}', run_completion_notification, [session_id])


def run_completion_notification(session_id):
    _run_job('Completion notification', send_completion_notification, session_id)


def send_completion_notification(session_id):
    session = db.session.get(WorkoutSession, session_id)
    if session is None:
        return False
    athlete = session.athlete
    coach = athlete.coach
    if not coach.email:
        return False

    prefs = coach.notification_preferences if isinstance(coach.notification_preferences, dict) else {}
    if prefs.get('workoutCompleted') is False:
        return False

    url = f"{current_app.config['APP_URL']}/athletes/{athlete.id}"
    date_text = f"{session.date:%A, %B} {session.date.day}"
    body = (
        paragraph(
            f"<strong>{escape(athlete.name)}</strong> completed "
            f"<strong>{escape(session.title or 'a workout')}</strong> on {date_text}."
        )
        + paragraph(f"Completion: <strong>{session.completion_percentage}%</strong>")
        + email_cta_button('View Athlete', url)
    )
    subject = f"{athlete.name} completed {session.title or 'a workout'}"
    return send_email(coach.email, subject, branded_email_html(body))
