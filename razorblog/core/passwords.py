# razorblog/core/passwords.py
import logging
from werkzeug.security import generate_password_hash, check_password_hash

from razorblog.core.exceptions import HashingFailure, MalformedDigest

MIN_PASSWORD_LENGTH = 6
HASH_METHOD = "scrypt"
SUPPORTED_METHODS = ("scrypt", "pbkdf2")

# Verified against when an email is unknown so login timing does not reveal registration.
_DUMMY_DIGEST = None


def hash_password(password: str) -> str:
    """Salted adaptive hash. Two calls with the same password never return the same digest."""
    try:
        return generate_password_hash(password, method=HASH_METHOD)
    except (MemoryError, ValueError) as e:
        logging.error(f"Password hashing failed: {e}", exc_info=True)
        raise HashingFailure() from e


def verify_password(password: str, digest: str) -> bool:
    """
    Compares ``password`` against ``digest`` in constant time.
    Returns False on mismatch; raises MalformedDigest when ``digest`` is not ``method$salt$hash``.
    """
    parts = digest.split("$", 2) if isinstance(digest, str) else []
    if len(parts) != 3 or not all(parts):
        raise MalformedDigest()
    method = parts[0].split(":", 1)[0]
    if method not in SUPPORTED_METHODS:
        raise MalformedDigest()
    return check_password_hash(digest, password)


def burn_verification(password: str) -> None:
    """Runs one full verify against a fixed digest and discards the result."""
    global _DUMMY_DIGEST
    if _DUMMY_DIGEST is None:
        _DUMMY_DIGEST = hash_password("razorblog-dummy-password")
    verify_password(password, _DUMMY_DIGEST)
