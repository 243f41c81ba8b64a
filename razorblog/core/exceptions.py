# razorblog/core/exceptions.py
"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; the handlers registered in ``create_app`` turn them into
``{"error_code", "message"}`` JSON bodies with the class status code. Messages
are safe to show to untrusted callers; underlying causes are only logged.
"""


class BlogError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "An unexpected error occurred."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"error_code": self.error_code, "message": self.message}


class InvalidInput(BlogError):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "The request contains missing or malformed fields."


class Unauthenticated(BlogError):
    status_code = 401
    error_code = "UNAUTHENTICATED"
    default_message = "Invalid credentials."


class TokenRejected(Unauthenticated):
    """Raised for any token that fails signature, algorithm or expiry checks."""
    default_message = "Invalid or expired token."


class NotFound(BlogError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "The requested resource was not found."


class Conflict(BlogError):
    status_code = 409
    error_code = "EMAIL_ALREADY_REGISTERED"
    default_message = "Email already registered."


class AlreadyLiked(BlogError):
    status_code = 409
    error_code = "ALREADY_LIKED"
    default_message = "This name has already liked the comment."


class StorageFailure(BlogError):
    error_code = "STORAGE_FAILURE"
    default_message = "The data store could not complete the request."


class HashingFailure(BlogError):
    error_code = "PASSWORD_HASHING_FAILED"
    default_message = "Failed to hash password."


class MalformedDigest(BlogError):
    error_code = "MALFORMED_DIGEST"
    default_message = "Stored password digest is malformed."
