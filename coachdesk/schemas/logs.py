from marshmallow import fields, validate

from coachdesk.schemas.base import BaseSchema, UTCDateTime

UNITS = ("kg", "lbs")


class BodyweightLogSchema(BaseSchema):
    athlete_id = fields.String(data_key="athleteId", required=True)
    weight = fields.Float(required=True, validate=validate.Range(min=0, min_inclusive=False))
    unit = fields.String(validate=validate.OneOf(UNITS))
    logged_at = UTCDateTime(data_key="loggedAt")


class BodyweightLogUpdateSchema(BaseSchema):
    weight = fields.Float(validate=validate.Range(min=0, min_inclusive=False))
    unit = fields.String(validate=validate.OneOf(UNITS))
    logged_at = UTCDateTime(data_key="loggedAt")


class SetLogSchema(BaseSchema):
    workout_exercise_id = fields.String(data_key="workoutExerciseId", required=True)
    athlete_id = fields.String(data_key="athleteId", required=True)
    set_number = fields.Integer(data_key="setNumber", required=True, validate=validate.Range(min=1))
    reps = fields.Integer(required=True, validate=validate.Range(min=0))
    weight = fields.Float(required=True, validate=validate.Range(min=0))
    unit = fields.String(validate=validate.OneOf(UNITS))
    rpe = fields.Float(allow_none=True, validate=validate.Range(min=1, max=10))
    rir = fields.Integer(allow_none=True, validate=validate.Range(min=0))
    velocity = fields.Float(allow_none=True)
    notes = fields.String(allow_none=True)


class SetLogUpdateSchema(BaseSchema):
    reps = fields.Integer(validate=validate.Range(min=0))
    weight = fields.Float(validate=validate.Range(min=0))
    unit = fields.String(validate=validate.OneOf(UNITS))
    rpe = fields.Float(allow_none=True, validate=validate.Range(min=1, max=10))
    rir = fields.Integer(allow_none=True, validate=validate.Range(min=0))
    velocity = fields.Float(allow_none=True)
    notes = fields.String(allow_none=True)
