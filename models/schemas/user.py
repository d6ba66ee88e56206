from marshmallow import EXCLUDE, Schema, fields, pre_load, validate


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class RegisterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(
        required=True,
        validate=validate.Length(
            min=3, max=50, error="Username must be between 3 and 50 characters"
        ),
    )
    email = fields.Email(required=True, error_messages={"invalid": "Invalid email address"})
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=8, error="Password must be at least 8 characters"),
    )

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data


class RefreshSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.Integer()
    username = fields.String()
    email = fields.String()
    created_at = fields.DateTime()


class AuthOutSchema(Schema):
    user = fields.Nested(UserOutSchema)
    access_token = fields.String()
    refresh_token = fields.Method("get_refresh_token_id")

    def get_refresh_token_id(self, obj):
        return obj.refresh_token.id
