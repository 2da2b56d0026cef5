"""Custom exceptions for the Newsroom publication engine."""

import logging
from typing import Any, Optional

from django.db.models import ProtectedError
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NewsroomException(Exception):
    """Base exception for publication engine errors."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(NewsroomException):
    """Missing or invalid field. No state was mutated."""

    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(NewsroomException):
    """Referenced record does not exist."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(NewsroomException):
    """Operation conflicts with existing relational state."""

    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class SlugConflictError(ConflictError):
    """Could not find a free slug within the configured attempt budget."""

    pass


class MirrorSyncError(NewsroomException):
    """Filesystem mirror could not be written or removed.

    Raised by the synchronizer itself; mutation paths use the quiet wrappers
    so this never reaches a client.
    """

    code = "MIRROR_SYNC_FAILED"


# DRF exception class -> envelope error code
_DRF_CODES = {
    drf_exceptions.ValidationError: "VALIDATION_ERROR",
    drf_exceptions.ParseError: "VALIDATION_ERROR",
    drf_exceptions.NotAuthenticated: "NOT_AUTHENTICATED",
    drf_exceptions.AuthenticationFailed: "NOT_AUTHENTICATED",
    drf_exceptions.PermissionDenied: "PERMISSION_DENIED",
    drf_exceptions.NotFound: "NOT_FOUND",
    drf_exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    drf_exceptions.Throttled: "THROTTLED",
}


def error_envelope(
    code: str, message: str, details: Optional[Any] = None
) -> dict[str, Any]:
    """Build the failure envelope returned by every endpoint."""
    body: dict[str, Any] = {"success": False, "error": message, "code": code}
    if details is not None:
        body["details"] = details
    return body


def envelope_exception_handler(exc: Exception, context: dict) -> Response:
    """
    Render every API error as `{success: false, error, code, details?}`.

    Engine exceptions map to their status codes, DRF exceptions keep theirs,
    ProtectedError is a conflict and anything else is an internal error.
    """
    if isinstance(exc, NewsroomException):
        return Response(
            error_envelope(exc.code, exc.message, exc.details),
            status=exc.status_code,
        )

    if isinstance(exc, ProtectedError):
        return Response(
            error_envelope(
                ConflictError.code,
                "Record is still referenced by other records",
            ),
            status=status.HTTP_409_CONFLICT,
        )

    response = exception_handler(exc, context)
    if response is not None:
        code = "ERROR"
        for exc_class, exc_code in _DRF_CODES.items():
            if isinstance(exc, exc_class):
                code = exc_code
                break

        if isinstance(exc, drf_exceptions.ValidationError):
            message = "Invalid request data"
            details = response.data
        else:
            message = str(getattr(exc, "detail", exc))
            details = None

        response.data = error_envelope(code, message, details)
        return response

    view = context.get("view")
    logger.error(
        f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
        exc_info=exc,
    )
    return Response(
        error_envelope("INTERNAL_ERROR", "Internal server error"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
