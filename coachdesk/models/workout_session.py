from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow

NOT_STARTED = "NOT_STARTED"
PARTIALLY_COMPLETED = "PARTIALLY_COMPLETED"
FULLY_COMPLETED = "FULLY_COMPLETED"
SESSION_STATUSES = (NOT_STARTED, PARTIALLY_COMPLETED, FULLY_COMPLETED)


class WorkoutSession(db.Model):
    __tablename__ = "workout_sessions"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    athlete_id = db.Column(db.String(32), db.ForeignKey("athletes.id"), nullable=False, index=True)
    program_id = db.Column(db.String(32), db.ForeignKey("programs.id"), nullable=True, index=True)
    workout_id = db.Column(db.String(32), db.ForeignKey("workouts.id"), nullable=True)
    program_assignment_id = db.Column(
        db.String(32), db.ForeignKey("program_assignments.id", ondelete="SET NULL"), nullable=True
    )
    date = db.Column(db.Date, nullable=False)
    title = db.Column(db.String(200))
    status = db.Column(db.String(30), nullable=False, default=NOT_STARTED)
    is_skipped = db.Column(db.Boolean, nullable=False, default=False)
    is_manually_scheduled = db.Column(db.Boolean, nullable=False, default=False)
    completion_percentage = db.Column(db.Integer, nullable=False, default=0)
    completed_items = db.Column(db.Integer, nullable=False, default=0)
    total_items = db.Column(db.Integer, nullable=False, default=0)
    week_number = db.Column(db.Integer)
    day_number = db.Column(db.Integer)
    notes = db.Column(db.Text)
    coach_notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    athlete = db.relationship("Athlete", back_populates="workout_sessions")
    program = db.relationship("Program")
    workout = db.relationship("Workout")
    program_assignment = db.relationship("ProgramAssignment", back_populates="sessions")

    __table_args__ = (
        db.UniqueConstraint("athlete_id", "date", name="uq_session_athlete_date"),
        db.Index("idx_sessions_athlete_date", "athlete_id", "date"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "athleteId": self.athlete_id,
            "date": iso(self.date),
            "title": self.title,
            "status": self.status,
            "isSkipped": self.is_skipped,
            "isManuallyScheduled": self.is_manually_scheduled,
            "completionPercentage": self.completion_percentage,
            "completedItems": self.completed_items,
            "totalItems": self.total_items,
            "weekNumber": self.week_number,
            "dayNumber": self.day_number,
            "notes": self.notes,
            "coachNotes": self.coach_notes,
            "workoutId": self.workout_id,
            "programId": self.program_id,
            "programName": self.program.name if self.program else None,
        }

    def __repr__(self):
        return f"<WorkoutSession {self.athlete_id} {self.date}>"
