from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow

SENDER_COACH = "COACH"
SENDER_ATHLETE = "ATHLETE"


class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    conversation_id = db.Column(db.String(32), db.ForeignKey("conversations.id"), nullable=False, index=True)
    sender_id = db.Column(db.String(32), nullable=False)
    sender_type = db.Column(db.String(10), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    read_at = db.Column(db.DateTime)

    conversation = db.relationship("Conversation", back_populates="messages")

    __table_args__ = (
        db.Index("idx_messages_conversation_created", "conversation_id", "created_at"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "conversationId": self.conversation_id,
            "senderId": self.sender_id,
            "senderType": self.sender_type,
            "content": self.content,
            "createdAt": iso(self.created_at),
            "readAt": iso(self.read_at),
        }
