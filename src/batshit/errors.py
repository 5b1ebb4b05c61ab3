"""Domain error taxonomy.

Services raise these; ``batshit.middleware.error_handler`` turns them into
JSON responses. Nothing here is ever retried automatically.
"""

from __future__ import annotations

from typing import Any


class BatshitError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.detail}


class ValidationError(BatshitError, ValueError):
    """Malformed or out-of-range input. Carries field-level detail."""

    status_code = 422

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    @property
    def errors(self) -> list[dict[str, Any]]:
        return [{"loc": [self.field], "msg": self.detail, "type": "value_error"}]

    def to_content(self) -> dict[str, Any]:
        return {"detail": "Validation error", "errors": self.errors}


class UnauthorizedError(BatshitError):
    """Missing, expired, or unknown session."""

    status_code = 401


class ForbiddenError(BatshitError):
    """Authenticated, but not allowed to act on this resource."""

    status_code = 403


class NotFoundError(BatshitError, LookupError):
    """Unknown idea, user, or friendship record."""

    status_code = 404


class ConflictError(BatshitError):
    """Duplicate rating, duplicate friend request, stale state transition."""

    status_code = 409
