from marshmallow import fields, validate

from coachdesk.schemas.base import BaseSchema, LooseDate, TrimmedString


class MeetEntryFieldsSchema(BaseSchema):
    weight_class = fields.String(data_key="weightClass", allow_none=True)
    squat1 = fields.Float(allow_none=True)
    squat2 = fields.Float(allow_none=True)
    squat3 = fields.Float(allow_none=True)
    bench1 = fields.Float(allow_none=True)
    bench2 = fields.Float(allow_none=True)
    bench3 = fields.Float(allow_none=True)
    deadlift1 = fields.Float(allow_none=True)
    deadlift2 = fields.Float(allow_none=True)
    deadlift3 = fields.Float(allow_none=True)
    attempt_results = fields.Raw(data_key="attemptResults", allow_none=True)
    notes = fields.String(allow_none=True)


class MeetEntrySchema(MeetEntryFieldsSchema):
    athlete_id = fields.String(
        data_key="athleteId",
        required=True,
        error_messages={"required": "athleteId is required"},
    )


class MeetSchema(BaseSchema):
    name = TrimmedString(required=True, validate=validate.Length(min=1))
    date = LooseDate(required=True)
    federation = fields.String(allow_none=True)
    location = fields.String(allow_none=True)


class MeetCreateSchema(MeetSchema):
    entries = fields.List(fields.Nested(MeetEntrySchema), load_default=list)
