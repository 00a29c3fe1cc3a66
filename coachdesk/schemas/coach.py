from marshmallow import fields, post_load, validate

from coachdesk.schemas.base import BaseSchema, TrimmedString

WEIGHT_UNITS = ("kg", "lbs")


class CoachSchema(BaseSchema):
    name = TrimmedString(required=True, validate=validate.Length(min=1))
    email = TrimmedString(required=True, validate=validate.Email())
    brand_name = fields.String(data_key="brandName", allow_none=True)


class SettingsSchema(BaseSchema):
    name = TrimmedString(validate=validate.Length(min=1, error="Name cannot be empty."))
    email = TrimmedString(validate=validate.Email())
    brand_name = fields.String(data_key="brandName", allow_none=True)
    default_weight_unit = fields.String(
        data_key="defaultWeightUnit",
        validate=validate.OneOf(WEIGHT_UNITS, error='Invalid weight unit. Must be "kg" or "lbs".'),
    )
    timezone = fields.String()
    default_rest_timer_seconds = fields.Integer(
        data_key="defaultRestTimerSeconds",
        validate=validate.Range(min=0, max=600, error="Rest timer must be between 0 and 600 seconds."),
        error_messages={"invalid": "Rest timer must be between 0 and 600 seconds."},
    )
    notification_preferences = fields.Dict(data_key="notificationPreferences", allow_none=True)

    @post_load
    def blank_brand_to_none(self, data, **kwargs):
        if "brand_name" in data:
            data["brand_name"] = (data["brand_name"] or "").strip() or None
        return data
