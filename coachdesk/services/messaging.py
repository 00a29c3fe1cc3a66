"""
Coach/athlete messaging: sending, read receipts and thread pagination.

A conversation keeps one unread counter per side. Sending bumps the
recipient's counter; reading zeroes the reader's counter and stamps
``read_at`` on the other side's messages in the same transaction.
"""
import logging

from sqlalchemy.exc import IntegrityError

from coachdesk.errors import ValidationError
from coachdesk.extensions import db
from coachdesk.models import Conversation, Message
from coachdesk.models.message import SENDER_ATHLETE, SENDER_COACH
from coachdesk.services.notifications import schedule_message_notification
from coachdesk.utils.helpers import commit_or_raise, utcnow

logger = logging.getLogger(__name__)

CONVERSATION_PREVIEW_LENGTH = 100
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def preview_text(content, length=CONVERSATION_PREVIEW_LENGTH):
    if len(content) > length:
        return content[:length] + '...'
    return content


def find_conversation(coach_id, athlete_id):
    return Conversation.query.filter_by(coach_id=coach_id, athlete_id=athlete_id).first()


def get_or_create_conversation(coach_id, athlete_id):
    conversation = find_conversation(coach_id, athlete_id)
    if conversation is not None:
        return conversation

    conversation = Conversation(coach_id=coach_id, athlete_id=athlete_id)
    db.session.add(conversation)
    try:
        db.session.flush()
    except IntegrityError:
        # Created concurrently by the other side of the thread
        db.session.rollback()
        conversation = find_conversation(coach_id, athlete_id)
    return conversation


def send_message(coach_id, athlete_id, sender_type, sender_id, content):
    """Store a message and update the conversation summary in one commit."""
    content = (content or '').strip()
    if not content:
        raise ValidationError('content is required')

    now = utcnow()
    conversation = get_or_create_conversation(coach_id, athlete_id)
    conversation.last_message_at = now
    conversation.last_message_preview = preview_text(content)
    if sender_type == SENDER_COACH:
        conversation.unread_count_athlete = Conversation.unread_count_athlete + 1
    else:
        conversation.unread_count_coach = Conversation.unread_count_coach + 1

    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        sender_type=sender_type,
        content=content,
        created_at=now,
    )
    db.session.add(message)
    db.session.commit()

    if sender_type == SENDER_COACH:
        schedule_message_notification(message.id, athlete_id)
    return message


def mark_read(conversation, reader_type):
    """Stamp the other party's unread messages and reset the reader's counter."""
    other_side = SENDER_ATHLETE if reader_type == SENDER_COACH else SENDER_COACH
    now = utcnow()

    updated = (
        Message.query
        .filter(
            Message.conversation_id == conversation.id,
            Message.sender_type == other_side,
            Message.read_at.is_(None),
        )
        .update({Message.read_at: now}, synchronize_session=False)
    )
    if reader_type == SENDER_COACH:
        conversation.unread_count_coach = 0
    else:
        conversation.unread_count_athlete = 0
    commit_or_raise('Failed to mark messages read')

    logger.debug(f"Marked {updated} messages read in conversation {conversation.id}")
    return updated


def parse_page_size(raw):
    if raw is None or raw == '':
        return DEFAULT_PAGE_SIZE
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError('limit must be an integer')
    return max(1, min(value, MAX_PAGE_SIZE))


def fetch_messages(conversation, cursor=None, after=None, limit=DEFAULT_PAGE_SIZE):
    """
    Return ``(messages, has_more)`` in chronological order.

    ``after`` polls for messages strictly newer than the given message id.
    ``cursor`` pages back through messages strictly older than the given id.
    Without either, the newest page is returned.
    """
    if conversation is None:
        return [], False

    query = Message.query.filter(Message.conversation_id == conversation.id)

    if after:
        anchor = _anchor(conversation, after)
        if anchor is not None:
            query = query.filter(Message.created_at > anchor.created_at)
        query = query.order_by(Message.created_at.asc(), Message.id.asc())
    else:
        if cursor:
            anchor = _anchor(conversation, cursor)
            if anchor is not None:
                query = query.filter(Message.created_at < anchor.created_at)
        query = query.order_by(Message.created_at.desc(), Message.id.desc())

    messages = query.limit(limit + 1).all()
    has_more = len(messages) > limit
    messages = messages[:limit]
    if not after:
        messages.reverse()
    return messages, has_more


def _anchor(conversation, message_id):
    return Message.query.filter_by(id=message_id, conversation_id=conversation.id).first()
