from marshmallow import Schema, fields, validate, ValidationError

from models.schemas.common import not_blank, validate_hex_color


def _valid_name(s):
    not_blank(s)
    if len(s) > 64:
        raise ValidationError("Name must be at most 64 characters long.")


class CategoryCreateSchema(Schema):
    name = fields.String(required=True, validate=_valid_name)
    description = fields.String(allow_none=True, validate=validate.Length(max=255))
    color = fields.String(allow_none=True, validate=validate_hex_color)


class CategoryUpdateSchema(Schema):
    name = fields.String(validate=_valid_name)
    description = fields.String(allow_none=True, validate=validate.Length(max=255))
    color = fields.String(allow_none=True, validate=validate_hex_color)


class CategoryOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    color = fields.String(allow_none=True)
    user_id = fields.String(data_key="userId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
