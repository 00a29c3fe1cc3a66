import math
import uuid
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from coachdesk.errors import ConflictError, InternalError, ValidationError
from coachdesk.extensions import db

LIKE_ESCAPE = '\\'


def generate_id():
    return uuid.uuid4().hex


def utcnow():
    """Naive UTC timestamp, the storage convention for every DateTime column."""
    return datetime.utcnow()


def iso(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat() + 'Z'
    return value.isoformat()


def local_today(tz_name=None):
    """Calendar date right now in an IANA timezone, UTC when the name is unknown."""
    try:
        zone = ZoneInfo(tz_name) if tz_name else timezone.utc
    except (ZoneInfoNotFoundError, ValueError):
        zone = timezone.utc
    return datetime.now(zone).date()


def js_round(value):
    """Round half up, matching the clients that consume these percentages."""
    return int(math.floor(value + 0.5))


def to_naive_utc(value):
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_date(value):
    """Parse ``YYYY-MM-DD``; returns None when the string is malformed."""
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        return None


def parse_datetime(value):
    """Parse an ISO date or datetime string into naive UTC; None when malformed."""
    if not value:
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return to_naive_utc(parsed)


def escape_like(term):
    """Escape LIKE wildcards; pair with ``escape=LIKE_ESCAPE`` on the comparison."""
    return term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace('%', LIKE_ESCAPE + '%').replace('_', LIKE_ESCAPE + '_')


def contains_pattern(term):
    return f'%{escape_like(term)}%'


def parse_bool(value):
    if value is None:
        return None
    return str(value).strip().lower() in ('true', '1', 'yes')


def parse_int_arg(args, name, default=None):
    raw = args.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f'{name} must be an integer')


def get_json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def commit_or_raise(failure_message, conflict_message=None):
    """Commit the session; database failures become API errors after a rollback."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if conflict_message:
            current_app.logger.warning(f"{conflict_message}: {e.orig}")
            raise ConflictError(conflict_message)
        current_app.logger.error(f"{failure_message}: {e}")
        raise InternalError(failure_message)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"{failure_message}: {e}")
        raise InternalError(failure_message)
