"""
Domain exceptions.

Services raise these; ``athlinked.server.exception_handlers`` maps each one to
an HTTP status and a ``{"success": false, "message": ...}`` body.
"""

from __future__ import annotations


class AthLinkedError(Exception):
    """Base class for errors that carry a client-facing message."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DomainValidationError(AthLinkedError):
    """The request is well-formed but violates a business rule."""

    status_code = 400


class AuthenticationError(AthLinkedError):
    """Missing, expired or otherwise unusable credentials."""

    status_code = 401


class PermissionDeniedError(AthLinkedError):
    """The caller may not act on the target resource."""

    status_code = 403


class NotFoundError(AthLinkedError):
    status_code = 404


class ConflictError(AthLinkedError):
    """The operation would duplicate existing state."""

    status_code = 409
