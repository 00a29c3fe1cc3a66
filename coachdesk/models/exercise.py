from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class Exercise(db.Model):
    __tablename__ = "exercises"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    # Null coach_id marks a global library exercise
    coach_id = db.Column(db.String(32), db.ForeignKey("coaches.id"), nullable=True, index=True)
    name = db.Column(db.String(150), nullable=False, index=True)
    category = db.Column(db.String(50), nullable=False, index=True)
    force = db.Column(db.String(20))
    level = db.Column(db.String(20))
    mechanic = db.Column(db.String(20))
    equipment = db.Column(db.String(50))
    primary_muscles = db.Column(db.JSON, default=list)
    secondary_muscles = db.Column(db.JSON, default=list)
    instructions = db.Column(db.JSON, default=list)
    images = db.Column(db.JSON, default=list)
    tags = db.Column(db.JSON, default=list)
    video_url = db.Column(db.String(500))
    cues = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    coach = db.relationship("Coach", back_populates="exercises")
    workout_exercises = db.relationship("WorkoutExercise", back_populates="exercise", lazy="dynamic")

    @property
    def is_global(self):
        return self.coach_id is None

    def to_dict(self):
        return {
            "id": self.id,
            "coachId": self.coach_id,
            "name": self.name,
            "category": self.category,
            "force": self.force,
            "level": self.level,
            "mechanic": self.mechanic,
            "equipment": self.equipment,
            "primaryMuscles": self.primary_muscles or [],
            "secondaryMuscles": self.secondary_muscles or [],
            "instructions": self.instructions or [],
            "images": self.images or [],
            "tags": self.tags or [],
            "videoUrl": self.video_url,
            "cues": self.cues,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Exercise {self.name}>"
