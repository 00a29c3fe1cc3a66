from datetime import timedelta

from flask import jsonify, make_response, request

from coachdesk.auth import coach_required
from coachdesk.errors import NotFoundError, ValidationError
from coachdesk.models import Athlete
from coachdesk.services.analytics import athlete_summary, compare_athletes
from coachdesk.services.export import build_training_csv, export_filename, training_rows
from coachdesk.utils.helpers import parse_date, parse_datetime
from coachdesk.utils.lookups import get_owned_athlete

from . import api_bp

COMPARE_METRICS = ('e1rm', 'volume', 'compliance')


def _bound(name, end_of_day=False):
    raw = request.args.get(name)
    if not raw:
        return None
    day = parse_date(raw)
    if day is not None:
        value = parse_datetime(raw)
        # a bare date as the upper bound covers that whole day
        return value + timedelta(days=1) - timedelta(microseconds=1) if end_of_day else value
    value = parse_datetime(raw)
    if value is None:
        raise ValidationError(f'Invalid {name} date')
    return value


@api_bp.route('/analytics/<athlete_id>/export', methods=['GET'])
@coach_required
def export_training_data(athlete_id, coach_id):
    """Download every logged set for an athlete as CSV."""
    athlete = get_owned_athlete(coach_id, athlete_id)
    start = _bound('from')
    end = _bound('to', end_of_day=True)

    csv_text = build_training_csv(training_rows(athlete.id, start, end))

    response = make_response(csv_text)
    response.headers["Content-Type"] = "text/csv; charset=utf-8"
    response.headers["Content-Disposition"] = f'attachment; filename="{export_filename(athlete.name)}"'
    return response


def _date_range():
    return {'from': request.args.get('from'), 'to': request.args.get('to')}


@api_bp.route('/analytics/compare', methods=['GET'])
@coach_required
def compare(coach_id):
    raw_ids = request.args.get('athleteIds')
    if not raw_ids:
        raise ValidationError('athleteIds query param is required (comma-separated)')
    athlete_ids = [value for value in raw_ids.split(',') if value]
    if not 2 <= len(athlete_ids) <= 3:
        raise ValidationError('Must provide 2 or 3 athlete IDs')

    metric = request.args.get('metric', 'e1rm')
    if metric not in COMPARE_METRICS:
        raise ValidationError(f"metric must be one of: {', '.join(COMPARE_METRICS)}")

    found = {
        athlete.id: athlete
        for athlete in Athlete.query.filter(Athlete.id.in_(athlete_ids), Athlete.coach_id == coach_id)
    }
    if len(found) != len(athlete_ids):
        raise NotFoundError('One or more athlete IDs not found')
    athletes = [found[athlete_id] for athlete_id in athlete_ids]

    result = compare_athletes(
        athletes,
        metric,
        _bound('from'),
        _bound('to', end_of_day=True),
        request.args.get('exerciseId'),
    )
    result.update({
        'athletes': [{'id': a.id, 'name': a.name} for a in athletes],
        'metric': metric,
        'dateRange': _date_range(),
    })
    return jsonify(result)


@api_bp.route('/analytics/<athlete_id>', methods=['GET'])
@coach_required
def athlete_analytics(athlete_id, coach_id):
    """e1RM trends, weekly volume, compliance, RPE spread and bodyweight for one athlete."""
    athlete = get_owned_athlete(coach_id, athlete_id)
    summary = athlete_summary(
        athlete,
        _bound('from'),
        _bound('to', end_of_day=True),
        request.args.get('exerciseId'),
    )
    summary.update({
        'athleteId': athlete.id,
        'athleteName': athlete.name,
        'dateRange': _date_range(),
    })
    return jsonify(summary)
