from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class Conversation(db.Model):
    __tablename__ = "conversations"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    coach_id = db.Column(db.String(32), db.ForeignKey("coaches.id"), nullable=False, index=True)
    athlete_id = db.Column(db.String(32), db.ForeignKey("athletes.id"), nullable=False, index=True)
    last_message_at = db.Column(db.DateTime, index=True)
    last_message_preview = db.Column(db.String(120))
    unread_count_coach = db.Column(db.Integer, nullable=False, default=0)
    unread_count_athlete = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=utcnow)

    coach = db.relationship("Coach", back_populates="conversations")
    athlete = db.relationship("Athlete")
    messages = db.relationship("Message", back_populates="conversation", cascade="all, delete-orphan", lazy="dynamic")

    __table_args__ = (
        db.UniqueConstraint("coach_id", "athlete_id", name="uq_conversation_coach_athlete"),
    )

    def inbox_dict(self):
        return {
            "id": self.id,
            "athleteId": self.athlete_id,
            "athleteName": self.athlete.name if self.athlete else None,
            "lastMessageAt": iso(self.last_message_at),
            "lastMessagePreview": self.last_message_preview,
            "unreadCount": self.unread_count_coach,
        }
