"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; ``postit.main`` registers a
single handler that renders any of them as the standard
``{"success": false, "message": ...}`` envelope.
"""


class PostitError(Exception):
    """Base exception for every failure a service reports to the caller."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PostitError):
    """Raised when a required field is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class ForbiddenError(PostitError):
    """Raised when the acting user does not own the target resource."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(PostitError):
    """Raised when the target row is missing or soft-deleted."""

    status_code = 404
    default_message = "Not found"


class ConflictError(PostitError):
    """Raised when a write would break email/username uniqueness."""

    status_code = 409
    default_message = "Conflict"


class StoreError(PostitError):
    """Raised when the underlying database fails."""
