# razorblog/core/security.py
import logging
import jwt
from datetime import datetime, timedelta
from functools import wraps
from typing import Callable, Optional
from flask import request, jsonify, g, current_app

from razorblog.core.exceptions import TokenRejected, Unauthenticated
from razorblog.utils.datetime_utils import DateTimeUtils

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
DEFAULT_TTL = timedelta(hours=72)


class TokenService:
    """
    Issues and validates signed bearer tokens.

    The signing secret is fixed at construction time; nothing here reads
    application config or module globals. Validation only accepts the HMAC
    family, so a token whose header names another algorithm (``none``, RS256,
    ...) is rejected before its signature is trusted.
    """
    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = DEFAULT_TTL,
                 clock: Callable[[], datetime] = DateTimeUtils.now):
        if not secret:
            raise ValueError("A non-empty signing secret is required.")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    def issue(self, subject_id: str, ttl: Optional[timedelta] = None) -> str:
        issued_at = self._clock()
        payload = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def validate(self, token: str) -> str:
        """Returns the subject id bound in ``token`` or raises TokenRejected."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=list(HMAC_ALGORITHMS),
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as e:
            # Expired and tampered tokens look the same to the caller.
            logging.info(f"Token rejected: {type(e).__name__}")
            raise TokenRejected() from e
        return payload["sub"]


def _extract_bearer_token() -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def jwt_required():
    """Route decorator. Resolves the bearer token to an author id on ``g.author_id``."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            g.author_id = None
            token = _extract_bearer_token()
            if token is None:
                return jsonify(Unauthenticated("Authorization header is missing or invalid").to_dict()), 401

            try:
                g.author_id = current_app.services['tokens'].validate(token)
            except TokenRejected as e:
                return jsonify(e.to_dict()), 401

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def get_current_author_id() -> Optional[str]:
    return g.get("author_id")
