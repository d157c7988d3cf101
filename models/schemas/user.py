from marshmallow import Schema, fields, pre_load, validate, validates, ValidationError

from models.schemas.common import not_blank


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class UserCreateSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    name = fields.String(required=True, validate=[not_blank, validate.Length(max=255)])

    @pre_load
    def normalize(self, data, **kwargs):
        # Emails are compared exactly as stored; only surrounding whitespace is dropped
        if isinstance(data, dict):
            data = dict(data)
            for key in ("email", "name"):
                if key in data:
                    data[key] = _strip(data[key])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class UserLoginSchema(Schema):
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _strip(data["email"])
        return data


class UserOutSchema(Schema):
    """Public projection of a user: never includes the hash or refresh token."""
    id = fields.String()
    email = fields.String()
    name = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
