# razorblog/api/posts/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE


# --- Shared query-string schema ---
class PaginationSchema(Schema):
    """``?limit=&offset=`` for listing endpoints. Defaults to 10/0; limit 0 (unbounded) is refused."""
    class Meta:
        unknown = EXCLUDE

    limit = fields.Int(load_default=10, validate=validate.Range(min=1, max=100))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))


# --- Request schemas ---

class PostCreateSchema(Schema):
    """
    POST /api/posts
    There is deliberately no author field: the author is the token subject.
    """
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    content = fields.Str(required=True, validate=validate.Length(min=1))
    image_url = fields.Str(load_default=None, allow_none=True)
    category = fields.Str(load_default="", validate=validate.Length(max=50))


class PostUpdateSchema(Schema):
    """PUT /api/posts/{post_id}. Counters, likes and ownership cannot be set from here."""
    title = fields.Str(validate=validate.Length(min=1, max=200))
    content = fields.Str(validate=validate.Length(min=1))
    image_url = fields.Str(allow_none=True)
    category = fields.Str(validate=validate.Length(max=50))

    @validates_schema
    def validate_not_empty(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one field must be supplied.")


# --- Response schema ---

class PostResponseSchema(Schema):
    post_id = fields.Str(dump_only=True)
    author_id = fields.Str()
    author_name = fields.Str(dump_default="")
    title = fields.Str()
    content = fields.Str()
    image_url = fields.Str(allow_none=True)
    category = fields.Str()
    readers = fields.Int()
    like_count = fields.Int()
    liked_by = fields.List(fields.Str())
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
