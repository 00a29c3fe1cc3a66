from datetime import date

from flask import jsonify, request
from sqlalchemy import or_

from coachdesk.auth import coach_required
from coachdesk.errors import ConflictError, NotFoundError
from coachdesk.extensions import db
from coachdesk.models import CompetitionMeet, MeetEntry
from coachdesk.schemas import MeetCreateSchema, MeetEntryFieldsSchema, MeetEntrySchema, MeetSchema, apply_patch
from coachdesk.utils.helpers import LIKE_ESCAPE, commit_or_raise, contains_pattern, get_json_body, parse_bool
from coachdesk.utils.lookups import get_owned_athlete, get_owned_meet

from . import api_bp

meet_create_schema = MeetCreateSchema()
meet_schema = MeetSchema()
entry_schema = MeetEntrySchema()
entry_update_schema = MeetEntryFieldsSchema()

DUPLICATE_ENTRY = 'Athlete already added to this meet'


@api_bp.route('/meets', methods=['GET'])
@coach_required
def list_meets(coach_id):
    query = CompetitionMeet.query.filter(CompetitionMeet.coach_id == coach_id)

    search = request.args.get('search', '').strip()
    if search:
        pattern = contains_pattern(search)
        query = query.filter(or_(
            CompetitionMeet.name.ilike(pattern, escape=LIKE_ESCAPE),
            CompetitionMeet.federation.ilike(pattern, escape=LIKE_ESCAPE),
            CompetitionMeet.location.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    if parse_bool(request.args.get('upcoming')):
        query = query.filter(CompetitionMeet.date >= date.today())

    meets = query.order_by(CompetitionMeet.date.desc()).all()
    return jsonify([m.to_dict() for m in meets])


@api_bp.route('/meets', methods=['POST'])
@coach_required
def create_meet(coach_id):
    data = meet_create_schema.load(get_json_body())
    entries = data.pop('entries', [])

    athlete_ids = [e['athlete_id'] for e in entries]
    if len(set(athlete_ids)) != len(athlete_ids):
        raise ConflictError(DUPLICATE_ENTRY)
    for athlete_id in athlete_ids:
        get_owned_athlete(coach_id, athlete_id)

    meet = CompetitionMeet(coach_id=coach_id, **data)
    for entry_data in entries:
        meet.entries.append(MeetEntry(**entry_data))
    db.session.add(meet)
    commit_or_raise('Failed to create meet')
    return jsonify(meet.to_dict(with_entries=True)), 201


@api_bp.route('/meets/<meet_id>', methods=['GET'])
@coach_required
def get_meet(meet_id, coach_id):
    return jsonify(get_owned_meet(coach_id, meet_id).to_dict(with_entries=True))


@api_bp.route('/meets/<meet_id>', methods=['PUT'])
@coach_required
def update_meet(meet_id, coach_id):
    meet = get_owned_meet(coach_id, meet_id)
    data = meet_schema.load(get_json_body(), partial=True)
    apply_patch(meet, data)
    commit_or_raise('Failed to update meet')
    return jsonify(meet.to_dict(with_entries=True))


@api_bp.route('/meets/<meet_id>', methods=['DELETE'])
@coach_required
def delete_meet(meet_id, coach_id):
    meet = get_owned_meet(coach_id, meet_id)
    db.session.delete(meet)
    commit_or_raise('Failed to delete meet')
    return jsonify({'success': True})


@api_bp.route('/meets/<meet_id>/entries', methods=['POST'])
@coach_required
def add_meet_entry(meet_id, coach_id):
    data = entry_schema.load(get_json_body())
    meet = get_owned_meet(coach_id, meet_id)
    athlete = get_owned_athlete(coach_id, data['athlete_id'])

    if MeetEntry.query.filter_by(meet_id=meet.id, athlete_id=athlete.id).first():
        raise ConflictError(DUPLICATE_ENTRY)

    entry = MeetEntry(meet_id=meet.id, **data)
    db.session.add(entry)
    commit_or_raise('Failed to add meet entry', conflict_message=DUPLICATE_ENTRY)
    return jsonify(entry.to_dict()), 201


def _get_entry(coach_id, meet_id, entry_id):
    meet = get_owned_meet(coach_id, meet_id)
    entry = MeetEntry.query.filter_by(id=entry_id, meet_id=meet.id).first()
    if entry is None:
        raise NotFoundError('Entry not found')
    return entry


@api_bp.route('/meets/<meet_id>/entries/<entry_id>', methods=['PUT'])
@coach_required
def update_meet_entry(meet_id, entry_id, coach_id):
    entry = _get_entry(coach_id, meet_id, entry_id)
    data = entry_update_schema.load(get_json_body(), partial=True)
    apply_patch(entry, data)
    commit_or_raise('Failed to update meet entry')
    return jsonify(entry.to_dict())


@api_bp.route('/meets/<meet_id>/entries/<entry_id>', methods=['DELETE'])
@coach_required
def delete_meet_entry(meet_id, entry_id, coach_id):
    entry = _get_entry(coach_id, meet_id, entry_id)
    db.session.delete(entry)
    commit_or_raise('Failed to delete meet entry')
    return jsonify({'success': True})
