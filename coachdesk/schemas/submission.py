from marshmallow import fields

from coachdesk.schemas.base import BaseSchema, UTCDateTime


class SubmissionSchema(BaseSchema):
    generated_at = UTCDateTime(data_key="generatedAt", required=True)
    trainer_profile = fields.Raw(data_key="trainerProfile", required=True)
    sections = fields.Raw(required=True)
    raw_answers = fields.Raw(data_key="rawAnswers", required=True)
