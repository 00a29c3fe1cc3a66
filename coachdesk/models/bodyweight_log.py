from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class BodyweightLog(db.Model):
    __tablename__ = "bodyweight_logs"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    athlete_id = db.Column(db.String(32), db.ForeignKey("athletes.id"), nullable=False, index=True)
    weight = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(3), nullable=False, default="lbs")
    logged_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    athlete = db.relationship("Athlete", back_populates="bodyweight_logs")

    def to_dict(self):
        return {
            "id": self.id,
            "athleteId": self.athlete_id,
            "weight": self.weight,
            "unit": self.unit,
            "loggedAt": iso(self.logged_at),
        }
