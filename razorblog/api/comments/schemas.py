# razorblog/api/comments/schemas.py
from marshmallow import Schema, fields, validate

from razorblog.utils.ids import validate_id_field
from razorblog.api.posts.schemas import PaginationSchema  # reused for ?limit=&offset=


class CommentCreateSchema(Schema):
    """
    POST /api/comments
    Commenters are not authenticated; ``username`` is whatever name they give.
    """
    post_id = fields.Str(required=True, validate=validate_id_field)
    username = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    content = fields.Str(required=True, validate=validate.Length(min=1, max=1000, error="Comments must be 1-1000 characters."))


class CommentLikeSchema(Schema):
    """POST /api/comments/{comment_id}/like"""
    username = fields.Str(required=True, validate=validate.Length(min=1, max=50),
                          error_messages={"required": "username is required"})


class CommentResponseSchema(Schema):
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    username = fields.Str(required=True)
    content = fields.Str(required=True)
    like_count = fields.Int(required=True)
    liked_by = fields.List(fields.Str())
    created_at = fields.DateTime(required=True)
