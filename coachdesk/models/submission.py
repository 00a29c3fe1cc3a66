from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class Submission(db.Model):
    """A stored trainer-interview result."""

    __tablename__ = "submissions"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    generated_at = db.Column(db.DateTime, nullable=False)
    trainer_profile = db.Column(db.JSON, nullable=False)
    sections = db.Column(db.JSON, nullable=False)
    raw_answers = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    def to_dict(self, full=False):
        data = {
            "id": self.id,
            "generatedAt": iso(self.generated_at),
            "trainerProfile": self.trainer_profile,
            "createdAt": iso(self.created_at),
        }
        if full:
            data["sections"] = self.sections
            data["rawAnswers"] = self.raw_answers
        return data
