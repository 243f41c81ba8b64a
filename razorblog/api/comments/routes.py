# razorblog/api/comments/routes.py
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from razorblog.api.comments.schemas import (
    CommentCreateSchema,
    CommentLikeSchema,
    CommentResponseSchema,
    PaginationSchema
)
from razorblog.core.security import jwt_required
from razorblog.utils.ids import require_valid_id

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('', methods=['POST'])
def create_comment():
    """Anyone can comment by giving a name; no token is needed."""
    comment_service = current_app.services['comments']
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        new_comment = comment_service.create_comment(data['post_id'], data['username'], data['content'])
        return jsonify(CommentResponseSchema().dump(new_comment)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400


@comments_bp.route('/<string:post_id>', methods=['GET'])
def list_comments(post_id: str):
    comment_service = current_app.services['comments']
    post_id = require_valid_id(post_id, 'post_id')
    try:
        params = PaginationSchema().load(request.args)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    page = comment_service.list_comments(post_id, limit=params['limit'], offset=params['offset'])
    return jsonify({
        "comments": CommentResponseSchema(many=True).dump(page.items),
        "limit": page.limit,
        "offset": page.offset,
        "next_offset": page.next_offset
    }), 200


@comments_bp.route('/<string:comment_id>/like', methods=['POST'])
def like_comment(comment_id: str):
    """One like per name. A repeated name gets 409 and the count is unchanged."""
    comment_service = current_app.services['comments']
    comment_id = require_valid_id(comment_id, 'comment_id')
    try:
        data = CommentLikeSchema().load(request.get_json(silent=True) or {})
        updated = comment_service.like_comment(comment_id, data['username'])
        return jsonify(CommentResponseSchema().dump(updated)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400


@comments_bp.route('/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    comment_service = current_app.services['comments']
    comment_id = require_valid_id(comment_id, 'comment_id')
    comment_service.delete_comment(comment_id)
    return jsonify({"message": "comment deleted"}), 200
