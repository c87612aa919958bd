from __future__ import annotations

from typing import Optional


class DevCamperError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DevCamperError):
    status_code = 400
    default_message = "Invalid input."


class DuplicateFieldError(ValidationError):
    default_message = "Duplicate field value entered."


class InvalidCredentials(DevCamperError):
    status_code = 401
    default_message = "Invalid credentials."


class Unauthenticated(DevCamperError):
    status_code = 401
    default_message = "Not authorized to access this route."


class InvalidSignature(Unauthenticated):
    default_message = "Token signature is invalid."


class Expired(Unauthenticated):
    default_message = "Token has expired."


class Malformed(Unauthenticated):
    default_message = "Token is malformed."


class Forbidden(DevCamperError):
    status_code = 403
    default_message = "User role is not authorized to access this route."


class ResourceNotFound(DevCamperError):
    status_code = 404
    default_message = "Resource not found."


class UserNotFound(ResourceNotFound):
    default_message = "There is no user with that email."


class InvalidOrExpiredToken(DevCamperError):
    status_code = 400
    default_message = "Invalid token."


class DeliveryFailed(DevCamperError):
    status_code = 500
    default_message = "Email could not be sent."


class StoreError(DevCamperError):
    status_code = 500
    default_message = "Database error."
