from flask import jsonify, request
from sqlalchemy import func

from coachdesk.auth import coach_required
from coachdesk.errors import NotFoundError, ValidationError
from coachdesk.extensions import db
from coachdesk.models import Conversation
from coachdesk.models.message import SENDER_COACH
from coachdesk.services.messaging import fetch_messages, find_conversation, mark_read, parse_page_size, send_message
from coachdesk.utils.helpers import get_json_body
from coachdesk.utils.lookups import get_owned_athlete

from . import api_bp


@api_bp.route('/messages', methods=['GET'])
@coach_required
def inbox(coach_id):
    conversations = (
        Conversation.query
        .filter(Conversation.coach_id == coach_id)
        .order_by(Conversation.last_message_at.is_(None), Conversation.last_message_at.desc())
        .all()
    )
    return jsonify([c.inbox_dict() for c in conversations])


@api_bp.route('/messages', methods=['POST'])
@coach_required
def send_to_athlete(coach_id):
    body = get_json_body()
    athlete_id = body.get('athleteId')
    content = body.get('content')
    if not athlete_id or not isinstance(content, str) or not content.strip():
        raise ValidationError('athleteId and content are required')

    athlete = get_owned_athlete(coach_id, athlete_id)
    message = send_message(coach_id, athlete.id, SENDER_COACH, coach_id, content)
    return jsonify(message.to_dict()), 201


@api_bp.route('/messages/unread', methods=['GET'])
@coach_required
def unread_count(coach_id):
    total = (
        db.session.query(func.coalesce(func.sum(Conversation.unread_count_coach), 0))
        .filter(Conversation.coach_id == coach_id)
        .scalar()
    )
    return jsonify({'unreadCount': int(total)})


@api_bp.route('/messages/<athlete_id>', methods=['GET'])
@coach_required
def thread(athlete_id, coach_id):
    limit = parse_page_size(request.args.get('limit'))
    conversation = find_conversation(coach_id, athlete_id)
    messages, has_more = fetch_messages(
        conversation,
        cursor=request.args.get('cursor'),
        after=request.args.get('after'),
        limit=limit,
    )
    return jsonify({'messages': [m.to_dict() for m in messages], 'hasMore': has_more})


@api_bp.route('/messages/<athlete_id>/read', methods=['PATCH'])
@coach_required
def mark_thread_read(athlete_id, coach_id):
    conversation = find_conversation(coach_id, athlete_id)
    if conversation is None:
        raise NotFoundError('Conversation not found')
    mark_read(conversation, SENDER_COACH)
    return jsonify({'success': True})
