"""
Identity resolution for coach and athlete requests.

Coach requests carry a JWT with ``role=coach`` in the Authorization header or
the access token cookie; when none is present and ``COACH_FALLBACK_ENABLED``
is set, the request acts as the first coach on record. Athlete requests
always need a JWT with ``role=athlete``.
"""
from functools import wraps

from flask import current_app
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request

from coachdesk.errors import AuthError
from coachdesk.extensions import db
from coachdesk.models import Athlete, Coach

ROLE_COACH = 'coach'
ROLE_ATHLETE = 'athlete'


def issue_token(role, subject_id):
    """Sign an access token for a coach or athlete id."""
    return create_access_token(identity=subject_id, additional_claims={'role': role})


def get_request_claims():
    """Decoded claims of the request token, or an empty dict when there is none.

    Expired and tampered tokens raise; the JWT error loaders answer them with 401.
    """
    verify_jwt_in_request(optional=True)
    return get_jwt()


def get_current_coach_id():
    claims = get_request_claims()
    role = claims.get('role')

    if role == ROLE_COACH:
        coach = db.session.get(Coach, get_jwt_identity())
        if coach is None:
            raise AuthError()
        return coach.id

    if role is not None or not current_app.config.get('COACH_FALLBACK_ENABLED'):
        raise AuthError()

    coach = Coach.query.order_by(Coach.created_at.asc()).first()
    if coach is None:
        raise AuthError('No coach account found')
    current_app.logger.warning(f"No coach identity on request; acting as first coach {coach.id}")
    return coach.id


def get_current_athlete_id():
    claims = get_request_claims()
    if claims.get('role') != ROLE_ATHLETE:
        raise AuthError()

    athlete = db.session.get(Athlete, get_jwt_identity())
    if athlete is None:
        raise AuthError()
    return athlete.id


def coach_required(view_func):
    """Resolve the acting coach and pass it to the view as ``coach_id``."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        kwargs['coach_id'] = get_current_coach_id()
        return view_func(*args, **kwargs)
    return wrapper


def athlete_required(view_func):
    """Resolve the acting athlete and pass it to the view as ``athlete_id``."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        kwargs['athlete_id'] = get_current_athlete_id()
        return view_func(*args, **kwargs)
    return wrapper
