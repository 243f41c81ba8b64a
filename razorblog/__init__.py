# razorblog/__init__.py

# =====================================================================================
# 1. Environment (loaded before anything reads os.environ)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Module imports
# =====================================================================================
import os
import logging
import secrets
from datetime import timedelta
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials, firestore

# - Settings
from razorblog.core.config import config_by_name
from razorblog.core.exceptions import BlogError
from razorblog.core.security import TokenService

# - API blueprints
from razorblog.api.health.routes import health_bp
from razorblog.api.authors.routes import authors_bp
from razorblog.api.posts.routes import posts_bp
from razorblog.api.comments.routes import comments_bp
from razorblog.api.shares.routes import shares_bp

# - Services
from razorblog.api.authors.services import AuthorService
from razorblog.api.posts.services import PostService
from razorblog.api.comments.services import CommentService
from razorblog.api.shares.services import ShareService


def _init_firestore(app: Flask):
    """Initialises the default Firebase app once per process and returns a Firestore client."""
    if not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        options = {}
        if app.config.get('FIREBASE_PROJECT_ID'):
            options['projectId'] = app.config['FIREBASE_PROJECT_ID']

        if cred_path:
            if not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
        else:
            # Application default credentials, or the emulator when FIRESTORE_EMULATOR_HOST is set.
            firebase_admin.initialize_app(options=options)
    return firestore.client()


def create_app(config_name=None, db=None):
    """
    Flask application factory.

    ``db`` lets callers supply an already built Firestore client; otherwise
    one is created from the Firebase settings of the selected config.
    """
    # =====================================================================================
    # 3. Flask app and base settings
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    missing = [key for key in app.config.get('REQUIRED_SETTINGS', ()) if not app.config.get(key)]
    if missing:
        raise ValueError(f"Required settings are not configured: {', '.join(missing)}")

    if not app.config.get('JWT_SECRET_KEY') and app.config.get('EPHEMERAL_JWT_SECRET'):
        # Tokens from this process stop validating once it exits.
        app.config['JWT_SECRET_KEY'] = secrets.token_urlsafe(32)
        logging.warning("JWT_SECRET_KEY is not set; using a random signing secret for this process")

    # =====================================================================================
    # 4. External services
    # =====================================================================================
    app.db = db if db is not None else _init_firestore(app)

    # =====================================================================================
    # 5. Service instances on 'app.services' (dependency injection)
    # =====================================================================================
    app.services = {}

    # 5-1. Services nothing else depends on
    app.services['tokens'] = TokenService(
        secret=app.config['JWT_SECRET_KEY'],
        algorithm=app.config['JWT_ALGORITHM'],
        ttl=timedelta(hours=app.config['JWT_ACCESS_TOKEN_TTL_HOURS'])
    )

    # 5-2. Domain services
    app.services['authors'] = AuthorService(token_service=app.services['tokens'], db=app.db)
    app.services['posts'] = PostService(author_service=app.services['authors'], db=app.db)
    app.services['comments'] = CommentService(db=app.db)
    app.services['shares'] = ShareService(db=app.db)
    logging.info("Services initialized successfully")

    # =====================================================================================
    # 6. Blueprints
    # =====================================================================================
    app.register_blueprint(health_bp)
    app.register_blueprint(authors_bp, url_prefix='/api/authors')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api/comments')
    app.register_blueprint(shares_bp, url_prefix='/api/shares')

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(BlogError)
    def handle_blog_error(err):
        if err.status_code >= 500:
            logging.error(f"{type(err).__name__}: {err.message}", exc_info=err)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # Routing errors (unknown path, wrong method) keep their own status.
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # Anything not handled above. Internal error text never reaches the client.
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "An unexpected server error occurred."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. Logging
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
