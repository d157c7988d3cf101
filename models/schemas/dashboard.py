from marshmallow import EXCLUDE, Schema, fields, validates_schema, post_load, ValidationError

from models.schemas.common import to_naive_utc


class DashboardQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    start_date = fields.DateTime(data_key="startDate")
    end_date = fields.DateTime(data_key="endDate")

    @validates_schema
    def _check_period(self, data, **kwargs):
        if "start_date" in data and "end_date" in data \
                and to_naive_utc(data["start_date"]) > to_naive_utc(data["end_date"]):
            raise ValidationError("startDate must not be after endDate.", "startDate")

    @post_load
    def _normalize(self, data, **kwargs):
        return {key: to_naive_utc(value) for key, value in data.items()}
