# razorblog/api/authors/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from razorblog.core.passwords import MIN_PASSWORD_LENGTH

_password = dict(
    validate=validate.Length(min=MIN_PASSWORD_LENGTH, error=f"Password must be at least {MIN_PASSWORD_LENGTH} characters."),
    load_only=True
)


class AuthorRegisterSchema(Schema):
    """POST /api/authors/register"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True)
    phone = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=30))
    password = fields.Str(required=True, **_password)


class AuthorLoginSchema(Schema):
    """POST /api/authors/login"""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class AuthorUpdateSchema(Schema):
    """
    PUT /api/authors/{author_id}
    Every field is optional and only supplied fields are changed. Fields not
    declared here (e.g. ``password_hash``, ``created_at``) are rejected.
    """
    name = fields.Str(validate=validate.Length(min=1, max=100))
    email = fields.Email()
    phone = fields.Str(allow_none=True, validate=validate.Length(max=30))
    password = fields.Str(**_password)
    avatar_url = fields.Str(allow_none=True)
    bio = fields.Str(validate=validate.Length(max=1000))

    @validates_schema
    def validate_not_empty(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one field must be supplied.")


class AuthorPublicSchema(Schema):
    """
    Author as seen by anyone other than the author.
    Email, phone and the password hash are left out.
    """
    author_id = fields.Str(dump_only=True)
    name = fields.Str()
    avatar_url = fields.Str(allow_none=True)
    bio = fields.Str()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class AuthorPrivateSchema(AuthorPublicSchema):
    """Author as returned to the token holder. Still never includes the password hash."""
    email = fields.Email()
    phone = fields.Str(allow_none=True)
