# razorblog/api/posts/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from razorblog.api.posts.schemas import (
    PaginationSchema,
    PostCreateSchema,
    PostUpdateSchema,
    PostResponseSchema
)
from razorblog.core.security import jwt_required, get_current_author_id
from razorblog.utils.ids import require_valid_id

posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('', methods=['GET'])
def list_posts():
    """Newest-first page of posts with author names."""
    post_service = current_app.services['posts']
    try:
        params = PaginationSchema().load(request.args)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    page = post_service.list_posts(limit=params['limit'], offset=params['offset'])
    return jsonify({
        "posts": PostResponseSchema(many=True).dump(page.items),
        "limit": page.limit,
        "offset": page.offset,
        "next_offset": page.next_offset
    }), 200


@posts_bp.route('/<string:post_id>', methods=['GET'])
def view_post(post_id: str):
    """Returns one post and counts the view."""
    post_service = current_app.services['posts']
    post_id = require_valid_id(post_id, 'post_id')
    post = post_service.view_post(post_id)
    return jsonify(PostResponseSchema().dump(post)), 200


@posts_bp.route('/author/<string:author_id>', methods=['GET'])
def list_posts_by_author(author_id: str):
    post_service = current_app.services['posts']
    author_id = require_valid_id(author_id, 'author_id')
    posts = post_service.list_by_author(author_id)
    return jsonify({"posts": PostResponseSchema(many=True).dump(posts)}), 200


@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    post_service = current_app.services['posts']
    author_id = get_current_author_id()
    try:
        data = PostCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    new_post = post_service.create_post(author_id=author_id, **data)
    logging.info(f"Post created (post_id: {new_post['post_id']}, author_id: {author_id})")
    return jsonify(PostResponseSchema().dump(new_post)), 201


@posts_bp.route('/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id: str):
    # Any authenticated author can edit any post: ownership is not checked.
    post_service = current_app.services['posts']
    post_id = require_valid_id(post_id, 'post_id')
    try:
        data = PostUpdateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    updated = post_service.update_post(post_id, data)
    return jsonify(PostResponseSchema().dump(updated)), 200


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    post_service = current_app.services['posts']
    post_id = require_valid_id(post_id, 'post_id')
    post_service.delete_post(post_id)
    return jsonify({"message": "post deleted"}), 200


@posts_bp.route('/<string:post_id>/like', methods=['PATCH'])
@jwt_required()
def like_post(post_id: str):
    post_service = current_app.services['posts']
    post_id = require_valid_id(post_id, 'post_id')
    post_service.like_post(post_id, get_current_author_id())
    return jsonify({"message": "post liked"}), 200


@posts_bp.route('/<string:post_id>/unlike', methods=['PATCH'])
@jwt_required()
def unlike_post(post_id: str):
    post_service = current_app.services['posts']
    post_id = require_valid_id(post_id, 'post_id')
    post_service.unlike_post(post_id, get_current_author_id())
    return jsonify({"message": "post unliked"}), 200
