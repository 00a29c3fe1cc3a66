from marshmallow import fields, validate

from coachdesk.schemas.base import BaseSchema, TrimmedString


class AthleteSchema(BaseSchema):
    name = TrimmedString(required=True, validate=validate.Length(min=1))
    email = fields.String(allow_none=True)
    bodyweight = fields.Float(allow_none=True)
    weight_class = fields.String(data_key="weightClass", allow_none=True)
    experience_level = fields.String(data_key="experienceLevel")
    is_remote = fields.Boolean(data_key="isRemote")
    is_competitor = fields.Boolean(data_key="isCompetitor")
    federation = fields.String(allow_none=True)
    notes = fields.String(allow_none=True)
    extra_metadata = fields.Dict(data_key="metadata", allow_none=True)
    notification_preferences = fields.Dict(data_key="notificationPreferences", allow_none=True)


class AthleteUpdateSchema(AthleteSchema):
    is_active = fields.Boolean(data_key="isActive")
