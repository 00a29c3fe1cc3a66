from flask import jsonify, request

from coachdesk.auth import athlete_required
from coachdesk.errors import NotFoundError, ValidationError
from coachdesk.extensions import db
from coachdesk.models import Athlete
from coachdesk.models.message import SENDER_ATHLETE
from coachdesk.services.messaging import fetch_messages, find_conversation, mark_read, parse_page_size, send_message
from coachdesk.utils.helpers import get_json_body

from . import athlete_bp


@athlete_bp.route('/messages', methods=['GET'])
@athlete_required
def thread(athlete_id):
    athlete = db.session.get(Athlete, athlete_id)
    limit = parse_page_size(request.args.get('limit'))
    conversation = find_conversation(athlete.coach_id, athlete.id)
    messages, has_more = fetch_messages(
        conversation,
        cursor=request.args.get('cursor'),
        after=request.args.get('after'),
        limit=limit,
    )
    return jsonify({'messages': [m.to_dict() for m in messages], 'hasMore': has_more})


@athlete_bp.route('/messages', methods=['POST'])
@athlete_required
def send_to_coach(athlete_id):
    content = get_json_body().get('content')
    if not isinstance(content, str) or not content.strip():
        raise ValidationError('content is required')

    athlete = db.session.get(Athlete, athlete_id)
    message = send_message(athlete.coach_id, athlete.id, SENDER_ATHLETE, athlete.id, content)
    return jsonify(message.to_dict()), 201


@athlete_bp.route('/messages/read', methods=['PATCH'])
@athlete_required
def mark_thread_read(athlete_id):
    athlete = db.session.get(Athlete, athlete_id)
    conversation = find_conversation(athlete.coach_id, athlete.id)
    if conversation is None:
        raise NotFoundError('Conversation not found')
    mark_read(conversation, SENDER_ATHLETE)
    return jsonify({'success': True})
