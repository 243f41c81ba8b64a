# razorblog/api/shares/schemas.py
from marshmallow import Schema, fields, validate

from razorblog.utils.ids import validate_id_field


class ShareCreateSchema(Schema):
    """POST /api/shares"""
    post_id = fields.Str(required=True, validate=validate_id_field)
    platform = fields.Str(required=True, validate=validate.Length(min=1, max=50),
                          metadata={"description": "Where the post was shared, e.g. twitter, facebook"})


class ShareResponseSchema(Schema):
    share_id = fields.Str(dump_only=True)
    post_id = fields.Str()
    platform = fields.Str()
    created_at = fields.DateTime()
