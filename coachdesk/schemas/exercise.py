from marshmallow import fields, validate

from coachdesk.schemas.base import BaseSchema, TrimmedString


class ExerciseSchema(BaseSchema):
    name = TrimmedString(required=True, validate=validate.Length(min=1))
    category = TrimmedString(required=True, validate=validate.Length(min=1))
    force = fields.String(allow_none=True)
    level = fields.String(allow_none=True)
    mechanic = fields.String(allow_none=True)
    equipment = fields.String(allow_none=True)
    primary_muscles = fields.List(fields.String(), data_key="primaryMuscles", allow_none=True)
    secondary_muscles = fields.List(fields.String(), data_key="secondaryMuscles", allow_none=True)
    instructions = fields.List(fields.String(), allow_none=True)
    images = fields.List(fields.String(), allow_none=True)
    tags = fields.List(fields.String(), allow_none=True)
    video_url = fields.String(data_key="videoUrl", allow_none=True)
    cues = fields.String(allow_none=True)
