"""
API error types and the handlers that turn them into JSON responses.

Every failure leaves the API as ``{"error": "<message>"}`` with the matching
status code. Extra fields (e.g. usage counts on a 409) ride alongside.
"""
from flask import current_app, jsonify
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from coachdesk.extensions import db, jwt

MISSING_FIELD_MESSAGE = 'Missing data for required field.'


class APIError(Exception):
    """Base API error with a status code and a client-facing message."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, **extra):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.extra = extra

    def to_dict(self):
        payload = {'error': self.message}
        payload.update(self.extra)
        return payload


class ValidationError(APIError):
    status_code = 400
    default_message = 'Invalid request'


class AuthError(APIError):
    status_code = 401
    default_message = 'Unauthorized'


class NotFoundError(APIError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(APIError):
    status_code = 409
    default_message = 'Conflict'


class InternalError(APIError):
    status_code = 500


def _flatten_messages(messages, prefix=''):
    """Yield (field, message) pairs from a nested marshmallow error dict."""
    if isinstance(messages, dict):
        for key, value in messages.items():
            name = f'{prefix}.{key}' if prefix else str(key)
            yield from _flatten_messages(value, name)
    elif isinstance(messages, (list, tuple)):
        for value in messages:
            if isinstance(value, (dict, list, tuple)):
                yield from _flatten_messages(value, prefix)
            else:
                yield prefix, str(value)
    else:
        yield prefix, str(messages)


def describe_schema_errors(messages):
    """Collapse marshmallow errors into a single client message."""
    pairs = list(_flatten_messages(messages))
    missing = [field for field, message in pairs if message == MISSING_FIELD_MESSAGE]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    if not pairs:
        return 'Invalid request'
    field, message = pairs[0]
    if field in ('', '_schema'):
        return message
    if message.startswith('Not a valid') or message == 'Field may not be null.':
        return f'Invalid {field}: {message}'
    return message


def register_error_handlers(app):
    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return jsonify({'error': 'Token has expired'}), 401

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return jsonify({'error': f'Invalid token: {reason}'}), 401

    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return jsonify({'error': 'Unauthorized'}), 401

    @app.errorhandler(APIError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error):
        return jsonify({'error': describe_schema_errors(error.messages)}), 400

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        current_app.logger.warning(f"Integrity error: {error.orig}")
        return jsonify({'error': 'Resource conflicts with an existing record'}), 409

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        current_app.logger.exception(f"Unhandled error: {error}")
        return jsonify({'error': 'Internal server error'}), 500
