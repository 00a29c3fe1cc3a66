from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class SetLog(db.Model):
    __tablename__ = "set_logs"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    workout_exercise_id = db.Column(
        db.String(32), db.ForeignKey("workout_exercises.id"), nullable=False, index=True
    )
    athlete_id = db.Column(db.String(32), db.ForeignKey("athletes.id"), nullable=False, index=True)
    set_number = db.Column(db.Integer, nullable=False)
    reps = db.Column(db.Integer, nullable=False)
    weight = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(3), nullable=False, default="lbs")
    rpe = db.Column(db.Float)
    rir = db.Column(db.Integer)
    velocity = db.Column(db.Float)
    notes = db.Column(db.Text)
    completed_at = db.Column(db.DateTime, default=utcnow, index=True)

    workout_exercise = db.relationship("WorkoutExercise", back_populates="set_logs")
    athlete = db.relationship("Athlete", back_populates="set_logs")

    def to_dict(self, nested=True):
        data = {
            "id": self.id,
            "workoutExerciseId": self.workout_exercise_id,
            "athleteId": self.athlete_id,
            "setNumber": self.set_number,
            "reps": self.reps,
            "weight": self.weight,
            "unit": self.unit,
            "rpe": self.rpe,
            "rir": self.rir,
            "velocity": self.velocity,
            "notes": self.notes,
            "completedAt": iso(self.completed_at),
        }
        if nested:
            data["workoutExercise"] = self.workout_exercise.to_dict() if self.workout_exercise else None
        return data
