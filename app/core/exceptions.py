"""
Domain errors raised by the service layer.
Each error carries a stable code and the HTTP status it maps to; a single
exception handler in app.main renders them, so endpoints stay thin.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse


class DomainError(Exception):
    """Base class for expected, user-facing failures."""

    code = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DomainError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ForbiddenError(DomainError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class ItemUnavailableError(DomainError):
    code = "item_unavailable"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Food item is no longer available"


class OfferedItemUnavailableError(DomainError):
    code = "offered_item_unavailable"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Offered item is not available"


class InvalidTransitionError(DomainError):
    code = "invalid_transition"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Status change not allowed"


class NotCompletedError(DomainError):
    code = "not_completed"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Can only review completed swaps"


class AlreadyReviewedError(DomainError):
    code = "already_reviewed"
    status_code = status.HTTP_409_CONFLICT
    default_message = "This side of the swap has already been reviewed"


class InputValidationError(DomainError):
    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render any DomainError as {"detail": ..., "error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )
