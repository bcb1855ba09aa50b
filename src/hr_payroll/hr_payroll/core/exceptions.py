from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    POLICY_VIOLATION = "policy_violation"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = ErrorKind.INTERNAL
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""

    kind = ErrorKind.VALIDATION
    http_status = 400


class AuthorizationError(DomainError):
    """Raised when the caller's scope lacks permission for an action."""

    kind = ErrorKind.AUTHORIZATION
    http_status = 403


class NotFoundError(DomainError):
    """Raised when an entity is absent or outside the caller's scope."""

    kind = ErrorKind.NOT_FOUND
    http_status = 404


class ConflictError(DomainError):
    """Raised on uniqueness violations and on actions already processed."""

    kind = ErrorKind.CONFLICT
    http_status = 409


class PolicyViolationError(DomainError):
    """Raised when a working-time policy (e.g. minimum shift) is not met."""

    kind = ErrorKind.POLICY_VIOLATION
    http_status = 422


class InternalError(DomainError):
    """Raised when the store or a collaborator fails unexpectedly."""
