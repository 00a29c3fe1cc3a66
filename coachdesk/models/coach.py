from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class Coach(db.Model):
    __tablename__ = "coaches"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    brand_name = db.Column(db.String(150))

    # Settings
    default_weight_unit = db.Column(db.String(3), nullable=False, default="lbs")
    timezone = db.Column(db.String(64), nullable=False, default="America/New_York")
    default_rest_timer_seconds = db.Column(db.Integer, nullable=False, default=120)
    notification_preferences = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    athletes = db.relationship("Athlete", back_populates="coach", lazy="dynamic")
    programs = db.relationship("Program", back_populates="coach", lazy="dynamic")
    exercises = db.relationship("Exercise", back_populates="coach", lazy="dynamic")
    meets = db.relationship("CompetitionMeet", back_populates="coach", lazy="dynamic")
    conversations = db.relationship("Conversation", back_populates="coach", lazy="dynamic")

    def to_dict(self, with_counts=False):
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "brandName": self.brand_name,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_counts:
            data["_count"] = {
                "athletes": self.athletes.count(),
                "programs": self.programs.count(),
            }
        return data

    def settings_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "brandName": self.brand_name,
            "defaultWeightUnit": self.default_weight_unit,
            "timezone": self.timezone,
            "defaultRestTimerSeconds": self.default_rest_timer_seconds,
            "notificationPreferences": self.notification_preferences,
        }

    def __repr__(self):
        return f"<Coach {self.email}>"
