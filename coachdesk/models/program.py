from coachdesk.extensions import db
from coachdesk.utils.helpers import generate_id, iso, utcnow


class Program(db.Model):
    __tablename__ = "programs"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    coach_id = db.Column(db.String(32), db.ForeignKey("coaches.id"), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    type = db.Column(db.String(30), nullable=False, default="individual")  # individual, group, template
    periodization_type = db.Column(db.String(30))
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    is_template = db.Column(db.Boolean, nullable=False, default=False)
    is_archived = db.Column(db.Boolean, nullable=False, default=False, index=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, index=True)

    coach = db.relationship("Coach", back_populates="programs")
    workouts = db.relationship(
        "Workout",
        back_populates="program",
        cascade="all, delete-orphan",
        order_by="[Workout.week_number, Workout.day_number]",
    )
    assignments = db.relationship(
        "ProgramAssignment",
        back_populates="program",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )

    def to_dict(self, detail=False):
        data = {
            "id": self.id,
            "coachId": self.coach_id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "periodizationType": self.periodization_type,
            "startDate": iso(self.start_date),
            "endDate": iso(self.end_date),
            "isTemplate": self.is_template,
            "isArchived": self.is_archived,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if detail:
            data["workouts"] = [w.to_dict() for w in self.workouts]
            data["assignments"] = [a.to_dict() for a in self.assignments]
        else:
            data["_count"] = {
                "workouts": len(self.workouts),
                "assignments": self.assignments.count(),
            }
        return data

    def __repr__(self):
        return f"<Program {self.name}>"


class Workout(db.Model):
    __tablename__ = "workouts"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    program_id = db.Column(db.String(32), db.ForeignKey("programs.id"), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    week_number = db.Column(db.Integer, nullable=False, default=1)
    day_number = db.Column(db.Integer, nullable=False, default=1)
    notes = db.Column(db.Text)

    program = db.relationship("Program", back_populates="workouts")
    exercises = db.relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "programId": self.program_id,
            "name": self.name,
            "weekNumber": self.week_number,
            "dayNumber": self.day_number,
            "notes": self.notes,
            "exercises": [e.to_dict() for e in self.exercises],
        }


class WorkoutExercise(db.Model):
    __tablename__ = "workout_exercises"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    workout_id = db.Column(db.String(32), db.ForeignKey("workouts.id"), nullable=False, index=True)
    exercise_id = db.Column(db.String(32), db.ForeignKey("exercises.id"), nullable=False, index=True)
    order = db.Column(db.Integer, nullable=False, default=0)

    # Prescription
    prescription_type = db.Column(db.String(30), nullable=False, default="fixed")
    prescribed_sets = db.Column(db.String(20))
    prescribed_reps = db.Column(db.String(20))
    prescribed_load = db.Column(db.String(50))
    prescribed_rpe = db.Column(db.Float)
    prescribed_rir = db.Column(db.Integer)
    velocity_target = db.Column(db.Float)
    percentage_of_1rm = db.Column(db.Float)

    superset_group = db.Column(db.String(10))
    superset_color = db.Column(db.String(20))
    is_unilateral = db.Column(db.Boolean, nullable=False, default=False)
    rest_time_seconds = db.Column(db.Integer)
    tempo = db.Column(db.String(20))
    notes = db.Column(db.Text)
    athlete_notes = db.Column(db.Text)

    workout = db.relationship("Workout", back_populates="exercises")
    exercise = db.relationship("Exercise", back_populates="workout_exercises")
    set_logs = db.relationship("SetLog", back_populates="workout_exercise", lazy="dynamic")

    @property
    def prescribed_set_count(self):
        """Integer value of the sets prescription, 0 when absent or unparseable."""
        try:
            return int(str(self.prescribed_sets).strip())
        except (TypeError, ValueError):
            return 0

    def to_dict(self):
        return {
            "id": self.id,
            "workoutId": self.workout_id,
            "exerciseId": self.exercise_id,
            "exercise": self.exercise.to_dict() if self.exercise else None,
            "order": self.order,
            "prescriptionType": self.prescription_type,
            "prescribedSets": self.prescribed_sets,
            "prescribedReps": self.prescribed_reps,
            "prescribedLoad": self.prescribed_load,
            "prescribedRPE": self.prescribed_rpe,
            "prescribedRIR": self.prescribed_rir,
            "velocityTarget": self.velocity_target,
            "percentageOf1RM": self.percentage_of_1rm,
            "supersetGroup": self.superset_group,
            "supersetColor": self.superset_color,
            "isUnilateral": self.is_unilateral,
            "restTimeSeconds": self.rest_time_seconds,
            "tempo": self.tempo,
            "notes": self.notes,
            "athleteNotes": self.athlete_notes,
        }


class ProgramAssignment(db.Model):
    __tablename__ = "program_assignments"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    program_id = db.Column(db.String(32), db.ForeignKey("programs.id"), nullable=False, index=True)
    athlete_id = db.Column(db.String(32), db.ForeignKey("athletes.id"), nullable=False, index=True)
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    assigned_at = db.Column(db.DateTime, default=utcnow)

    program = db.relationship("Program", back_populates="assignments")
    athlete = db.relationship("Athlete", back_populates="program_assignments")
    sessions = db.relationship("WorkoutSession", back_populates="program_assignment", lazy="dynamic")

    __table_args__ = (
        db.UniqueConstraint("program_id", "athlete_id", name="uq_assignment_program_athlete"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "programId": self.program_id,
            "athleteId": self.athlete_id,
            "athlete": {"id": self.athlete.id, "name": self.athlete.name} if self.athlete else None,
            "startDate": iso(self.start_date),
            "endDate": iso(self.end_date),
            "isActive": self.is_active,
            "assignedAt": iso(self.assigned_at),
        }
