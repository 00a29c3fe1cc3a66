from marshmallow import fields, validate

from coachdesk.schemas.base import BaseSchema, LooseDate, Prescription, TrimmedString


class WorkoutExerciseSchema(BaseSchema):
    exercise_id = fields.String(data_key="exerciseId", required=True)
    order = fields.Integer()
    prescription_type = fields.String(data_key="prescriptionType")
    prescribed_sets = Prescription(data_key="prescribedSets", allow_none=True)
    prescribed_reps = Prescription(data_key="prescribedReps", allow_none=True)
    prescribed_load = Prescription(data_key="prescribedLoad", allow_none=True)
    prescribed_rpe = fields.Float(data_key="prescribedRPE", allow_none=True)
    prescribed_rir = fields.Integer(data_key="prescribedRIR", allow_none=True)
    velocity_target = fields.Float(data_key="velocityTarget", allow_none=True)
    percentage_of_1rm = fields.Float(data_key="percentageOf1RM", allow_none=True)
    superset_group = fields.String(data_key="supersetGroup", allow_none=True)
    superset_color = fields.String(data_key="supersetColor", allow_none=True)
    is_unilateral = fields.Boolean(data_key="isUnilateral")
    rest_time_seconds = fields.Integer(data_key="restTimeSeconds", allow_none=True)
    tempo = fields.String(allow_none=True)
    notes = fields.String(allow_none=True)


class WorkoutSchema(BaseSchema):
    name = TrimmedString(required=True, validate=validate.Length(min=1))
    week_number = fields.Integer(data_key="weekNumber", load_default=1, validate=validate.Range(min=1))
    day_number = fields.Integer(data_key="dayNumber", load_default=1, validate=validate.Range(min=1))
    notes = fields.String(allow_none=True)
    exercises = fields.List(fields.Nested(WorkoutExerciseSchema), load_default=list)


class ProgramFieldsSchema(BaseSchema):
    name = TrimmedString(required=True, validate=validate.Length(min=1))
    description = fields.String(allow_none=True)
    type = fields.String()
    periodization_type = fields.String(data_key="periodizationType", allow_none=True)
    start_date = LooseDate(data_key="startDate", allow_none=True)
    end_date = LooseDate(data_key="endDate", allow_none=True)
    is_template = fields.Boolean(data_key="isTemplate")


class ProgramSchema(ProgramFieldsSchema):
    workouts = fields.List(fields.Nested(WorkoutSchema), load_default=list)


class ProgramUpdateSchema(ProgramFieldsSchema):
    is_archived = fields.Boolean(data_key="isArchived")


class AssignProgramSchema(BaseSchema):
    athlete_ids = fields.List(
        fields.String(),
        data_key="athleteIds",
        required=True,
        validate=validate.Length(min=1, error="athleteIds must be a non-empty array of athlete IDs"),
        error_messages={
            "required": "athleteIds must be a non-empty array of athlete IDs",
            "invalid": "athleteIds must be a non-empty array of athlete IDs",
        },
    )
    start_date = LooseDate(data_key="startDate", allow_none=True)
    end_date = LooseDate(data_key="endDate", allow_none=True)
    training_days = fields.List(
        fields.Integer(validate=validate.Range(min=0, max=6)),
        data_key="trainingDays",
        validate=validate.Length(min=1),
    )


class TemplateSchema(BaseSchema):
    name = TrimmedString(validate=validate.Length(min=1))
