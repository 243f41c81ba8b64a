# razorblog/api/authors/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from razorblog.api.authors.schemas import (
    AuthorRegisterSchema,
    AuthorLoginSchema,
    AuthorUpdateSchema,
    AuthorPublicSchema,
    AuthorPrivateSchema
)
from razorblog.core.exceptions import Unauthenticated
from razorblog.core.security import jwt_required, get_current_author_id
from razorblog.utils.ids import require_valid_id

authors_bp = Blueprint('authors_bp', __name__)


@authors_bp.route('/register', methods=['POST'])
def register_author():
    """Creates an author account. Responds with the private view of the new author."""
    author_service = current_app.services['authors']
    try:
        data = AuthorRegisterSchema().load(request.get_json(silent=True) or {})
        author = author_service.register(
            name=data['name'],
            email=data['email'],
            password=data['password'],
            phone=data.get('phone')
        )
        return jsonify({"author": AuthorPrivateSchema().dump(author)}), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400


@authors_bp.route('/login', methods=['POST'])
def login_author():
    author_service = current_app.services['authors']
    try:
        data = AuthorLoginSchema().load(request.get_json(silent=True) or {})
        token, author_id = author_service.login(data['email'], data['password'])
        return jsonify({"token": token, "author_id": author_id}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Unauthenticated as e:
        # Same answer for an unknown email and a wrong password.
        return jsonify(e.to_dict()), 401


@authors_bp.route('/<string:author_id>', methods=['GET'])
@jwt_required()
def get_author(author_id: str):
    """The token holder gets their own email and phone; everyone else gets the public profile."""
    author_service = current_app.services['authors']
    author_id = require_valid_id(author_id, 'author_id')
    author = author_service.get(author_id)
    schema = AuthorPrivateSchema() if get_current_author_id() == author_id else AuthorPublicSchema()
    return jsonify({"author": schema.dump(author)}), 200


@authors_bp.route('/<string:author_id>', methods=['PUT'])
@jwt_required()
def update_author(author_id: str):
    author_service = current_app.services['authors']
    author_id = require_valid_id(author_id, 'author_id')
    try:
        data = AuthorUpdateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    author_service.update(author_id, data)
    logging.info(f"Author updated (author_id: {author_id}, by: {get_current_author_id()}, fields: {sorted(data)})")
    return jsonify({"message": "author updated"}), 200


@authors_bp.route('/<string:author_id>', methods=['DELETE'])
@jwt_required()
def delete_author(author_id: str):
    author_service = current_app.services['authors']
    author_id = require_valid_id(author_id, 'author_id')
    author_service.delete(author_id)
    return jsonify({"message": "author deleted"}), 200
