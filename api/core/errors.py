"""
Service-level error kinds.

Each error carries the HTTP status and the user-facing message it maps to.
`main.py` registers a handler that renders them as `{"message": ...}`.
"""

from __future__ import annotations

SERVER_ERROR_MESSAGE = "server error - contact support"


class ServiceError(RuntimeError):
    status_code = 500
    default_message = SERVER_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingParameters(ServiceError):
    status_code = 400
    default_message = "Missing required information"


class InvalidCredentials(ServiceError):
    status_code = 400
    default_message = "Invalid Credentials"


class InvalidPriority(ServiceError):
    status_code = 400
    default_message = "Invalid or missing Priority - please refer to documentation"


class DuplicateName(ServiceError):
    status_code = 400
    default_message = "Name exists"


class Unauthorized(ServiceError):
    status_code = 401
    default_message = "Auth token is not valid"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Name not found"


class IntegrityFault(ServiceError):
    pass


class StoreFault(ServiceError):
    pass
