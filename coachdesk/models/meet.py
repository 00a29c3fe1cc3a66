from coachdesk.extensions import db
from coachdesk.models.athlete import Athlete
from coachdesk.utils.helpers import generate_id, iso, utcnow

ATTEMPT_FIELDS = (
    "squat1", "squat2", "squat3",
    "bench1", "bench2", "bench3",
    "deadlift1", "deadlift2", "deadlift3",
)


class CompetitionMeet(db.Model):
    __tablename__ = "competition_meets"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    coach_id = db.Column(db.String(32), db.ForeignKey("coaches.id"), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    federation = db.Column(db.String(50))
    location = db.Column(db.String(200))

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    coach = db.relationship("Coach", back_populates="meets")
    entries = db.relationship("MeetEntry", back_populates="meet", cascade="all, delete-orphan", lazy="dynamic")

    def to_dict(self, with_entries=False):
        data = {
            "id": self.id,
            "coachId": self.coach_id,
            "name": self.name,
            "date": iso(self.date),
            "federation": self.federation,
            "location": self.location,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_entries:
            entries = self.entries.join(Athlete, MeetEntry.athlete_id == Athlete.id).order_by(Athlete.name.asc())
            data["entries"] = [e.to_dict() for e in entries]
        else:
            data["_count"] = {"entries": self.entries.count()}
        return data


class MeetEntry(db.Model):
    __tablename__ = "meet_entries"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    meet_id = db.Column(db.String(32), db.ForeignKey("competition_meets.id"), nullable=False, index=True)
    athlete_id = db.Column(db.String(32), db.ForeignKey("athletes.id"), nullable=False, index=True)
    weight_class = db.Column(db.String(20))

    # Attempts in the athlete's working unit
    squat1 = db.Column(db.Float)
    squat2 = db.Column(db.Float)
    squat3 = db.Column(db.Float)
    bench1 = db.Column(db.Float)
    bench2 = db.Column(db.Float)
    bench3 = db.Column(db.Float)
    deadlift1 = db.Column(db.Float)
    deadlift2 = db.Column(db.Float)
    deadlift3 = db.Column(db.Float)
    attempt_results = db.Column(db.JSON)
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    meet = db.relationship("CompetitionMeet", back_populates="entries")
    athlete = db.relationship("Athlete", back_populates="meet_entries")

    __table_args__ = (
        db.UniqueConstraint("meet_id", "athlete_id", name="uq_meet_entry_meet_athlete"),
    )

    def to_dict(self):
        data = {
            "id": self.id,
            "meetId": self.meet_id,
            "athleteId": self.athlete_id,
            "athlete": {
                "id": self.athlete.id,
                "name": self.athlete.name,
                "weightClass": self.athlete.weight_class,
            } if self.athlete else None,
            "weightClass": self.weight_class,
            "attemptResults": self.attempt_results,
            "notes": self.notes,
        }
        for field in ATTEMPT_FIELDS:
            data[field] = getattr(self, field)
        return data
