from decimal import Decimal

from marshmallow import EXCLUDE, Schema, fields, validate, validates_schema, post_load, ValidationError

from models.schemas.common import not_blank, to_naive_utc
from models.schemas.category import CategoryOutSchema

_positive = validate.Range(min=0, min_inclusive=False, error="Amount must be positive")
# Numeric(12, 2) holds at most 10 integer digits
MAX_AMOUNT = Decimal("9999999999.99")
_within_column = validate.Range(max=MAX_AMOUNT, error="Amount must not exceed {max}")


class ExpenseCreateSchema(Schema):
    amount = fields.Decimal(required=True, places=2, validate=[_positive, _within_column])
    description = fields.String(required=True, validate=[not_blank, validate.Length(max=255)])
    date = fields.DateTime(allow_none=True)
    payment_method = fields.String(required=True, data_key="paymentMethod",
                                   validate=[not_blank, validate.Length(max=64)])
    attachment_url = fields.Url(allow_none=True, data_key="attachmentUrl", validate=validate.Length(max=2048))
    category_id = fields.String(required=True, data_key="categoryId", validate=not_blank)

    @post_load
    def _normalize_date(self, data, **kwargs):
        if data.get("date") is not None:
            data["date"] = to_naive_utc(data["date"])
        return data


class ExpenseUpdateSchema(ExpenseCreateSchema):
    """Same fields as create; callers load it with partial=True."""


class ExpenseFilterSchema(Schema):
    """Query-string filters for GET /expenses."""

    class Meta:
        unknown = EXCLUDE

    category_id = fields.String(data_key="categoryId")
    start_date = fields.DateTime(data_key="startDate")
    end_date = fields.DateTime(data_key="endDate")
    min_amount = fields.Decimal(data_key="minAmount")
    max_amount = fields.Decimal(data_key="maxAmount")

    @validates_schema
    def _check_ranges(self, data, **kwargs):
        if "start_date" in data and "end_date" in data \
                and to_naive_utc(data["start_date"]) > to_naive_utc(data["end_date"]):
            raise ValidationError("startDate must not be after endDate.", "startDate")
        if "min_amount" in data and "max_amount" in data and data["min_amount"] > data["max_amount"]:
            raise ValidationError("minAmount must not exceed maxAmount.", "minAmount")

    @post_load
    def _normalize_dates(self, data, **kwargs):
        for key in ("start_date", "end_date"):
            if key in data:
                data[key] = to_naive_utc(data[key])
        return data


class ExpenseOutSchema(Schema):
    id = fields.String()
    amount = fields.Decimal(places=2, as_string=True)
    description = fields.String()
    date = fields.DateTime()
    payment_method = fields.String(data_key="paymentMethod")
    attachment_url = fields.String(allow_none=True, data_key="attachmentUrl")
    category_id = fields.String(data_key="categoryId")
    user_id = fields.String(data_key="userId")
    category = fields.Nested(CategoryOutSchema, allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
