from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class Athlete(db.Model):
    __tablename__ = "athletes"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    coach_id = db.Column(db.String(32), db.ForeignKey("coaches.id"), nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(255))
    bodyweight = db.Column(db.Float)
    weight_class = db.Column(db.String(20))
    experience_level = db.Column(db.String(20), nullable=False, default="intermediate")
    is_remote = db.Column(db.Boolean, nullable=False, default=True)
    is_competitor = db.Column(db.Boolean, nullable=False, default=False)
    federation = db.Column(db.String(50))
    notes = db.Column(db.Text)
    # "metadata" is reserved on declarative models
    extra_metadata = db.Column("metadata", db.JSON)
    notification_preferences = db.Column(db.JSON)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    coach = db.relationship("Coach", back_populates="athletes")
    set_logs = db.relationship("SetLog", back_populates="athlete", lazy="dynamic")
    workout_sessions = db.relationship("WorkoutSession", back_populates="athlete", lazy="dynamic")
    program_assignments = db.relationship("ProgramAssignment", back_populates="athlete", lazy="dynamic")
    bodyweight_logs = db.relationship("BodyweightLog", back_populates="athlete", lazy="dynamic")
    meet_entries = db.relationship("MeetEntry", back_populates="athlete", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_athletes_coach_name", "coach_id", "name"),
    )

    def data_counts(self):
        """Rows that make a permanent delete destructive."""
        return {
            "setLogs": self.set_logs.count(),
            "workoutSessions": self.workout_sessions.count(),
            "programAssignments": self.program_assignments.count(),
            "bodyweightLogs": self.bodyweight_logs.count(),
            "meetEntries": self.meet_entries.count(),
        }

    def wants_message_emails(self):
        """Athletes receive message emails unless they explicitly opt out."""
        prefs = self.notification_preferences
        if not isinstance(prefs, dict):
            return True
        value = prefs.get("emailOnMessage")
        if isinstance(value, bool):
            return value
        return True

    def to_dict(self, with_counts=False):
        data = {
            "id": self.id,
            "coachId": self.coach_id,
            "name": self.name,
            "email": self.email,
            "bodyweight": self.bodyweight,
            "weightClass": self.weight_class,
            "experienceLevel": self.experience_level,
            "isRemote": self.is_remote,
            "isCompetitor": self.is_competitor,
            "federation": self.federation,
            "notes": self.notes,
            "metadata": self.extra_metadata,
            "notificationPreferences": self.notification_preferences,
            "isActive": self.is_active,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_counts:
            data["_count"] = {
                "setLogs": self.set_logs.count(),
                "workoutSessions": self.workout_sessions.count(),
                "programAssignments": self.program_assignments.count(),
            }
        return data

    def __repr__(self):
        return f"<Athlete {self.name}>"
