# razorblog/api/health/routes.py
import logging
from flask import Blueprint, jsonify, current_app
from google.api_core import exceptions as gcp_exceptions

health_bp = Blueprint('health_bp', __name__)


@health_bp.route('/', methods=['GET'])
def index():
    return jsonify({"message": "RazorBlog backend running"}), 200


@health_bp.route('/health', methods=['GET'])
def health():
    """Reports whether Firestore answers a trivial read."""
    try:
        list(current_app.db.collection('posts').limit(1).stream())
    except gcp_exceptions.GoogleAPIError as e:
        logging.error(f"Health check failed: {e}")
        return jsonify({"status": "fail", "db": "disconnected"}), 503
    return jsonify({"status": "ok", "db": "connected"}), 200
