# razorblog/api/shares/routes.py
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from razorblog.api.shares.schemas import ShareCreateSchema, ShareResponseSchema
from razorblog.utils.ids import require_valid_id

shares_bp = Blueprint('shares_bp', __name__)


@shares_bp.route('', methods=['POST'])
def create_share():
    """Records that a post was shared to some platform."""
    share_service = current_app.services['shares']
    try:
        data = ShareCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    share = share_service.create_share(data['post_id'], data['platform'])
    return jsonify(ShareResponseSchema().dump(share)), 201


@shares_bp.route('/<string:post_id>', methods=['GET'])
def list_shares(post_id: str):
    share_service = current_app.services['shares']
    post_id = require_valid_id(post_id, 'post_id')
    shares = share_service.list_shares(post_id)
    return jsonify({"shares": ShareResponseSchema(many=True).dump(shares)}), 200
