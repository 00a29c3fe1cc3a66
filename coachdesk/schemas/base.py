from datetime import date, datetime

from marshmallow import EXCLUDE, fields

from coachdesk.extensions import ma
from coachdesk.utils.helpers import parse_datetime, to_naive_utc


class BaseSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE


class UTCDateTime(fields.DateTime):
    """ISO datetime, stored as naive UTC."""

    def _deserialize(self, value, attr, data, **kwargs):
        result = super()._deserialize(value, attr, data, **kwargs)
        return to_naive_utc(result)


class LooseDate(fields.Field):
    """Accepts ``YYYY-MM-DD`` or a full ISO datetime and keeps the date part."""

    default_error_messages = {"invalid": "Not a valid date."}

    def _serialize(self, value, attr, obj, **kwargs):
        return value.isoformat() if value is not None else None

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            raise self.make_error("invalid")
        parsed = parse_datetime(value)
        if parsed is None:
            raise self.make_error("invalid")
        return parsed.date()


class TrimmedString(fields.String):
    def _deserialize(self, value, attr, data, **kwargs):
        return super()._deserialize(value, attr, data, **kwargs).strip()


class Prescription(fields.String):
    """Prescriptions such as ``"3"``, ``"5-8"`` or ``"AMRAP"``; bare numbers are accepted."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        return super()._deserialize(value, attr, data, **kwargs)


def apply_patch(row, data):
    """Write loaded schema data onto a model row. Only sent keys are present."""
    for key, value in data.items():
        setattr(row, key, value)
    return row
