"""
Domain errors for the weekly/daily log engine and global exception handlers
for the FastAPI application.

Business-rule violations are raised as ``TimesheetError`` subclasses inside the
validators and state machine, and converted into result envelopes by the
services. Only unexpected failures reach the handlers registered here.
"""

import enum
import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from timesheet_api.core.config import settings


logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """Categories of business-rule failures."""
    VALIDATION = "ValidationError"
    NOT_FOUND_OR_FORBIDDEN = "NotFoundOrForbidden"
    INVALID_TRANSITION = "InvalidTransition"
    AGGREGATION_INCONSISTENCY = "AggregationInconsistency"


class TimesheetError(Exception):
    """Base class for weekly/daily log business-rule violations."""
    kind: ErrorKind = ErrorKind.VALIDATION
    code: str = "TimesheetError"
    message: str = "Request could not be completed"

    def __init__(self, detail: str, message: Optional[str] = None):
        self.detail = detail
        if message is not None:
            self.message = message
        super().__init__(detail)

    @property
    def errors(self) -> List[str]:
        return [self.detail]


class ValidationError(TimesheetError):
    """Malformed or out-of-policy input."""
    kind = ErrorKind.VALIDATION
    code = "ValidationError"
    message = "Validation failed"


class InvalidRangeError(ValidationError):
    code = "InvalidRange"


class InvalidDurationError(ValidationError):
    code = "InvalidDuration"


class OverlappingPeriodError(ValidationError):
    code = "OverlappingPeriod"


class OutOfRangeError(ValidationError):
    code = "OutOfRange"


class DuplicateDateError(ValidationError):
    code = "DuplicateDate"


class DuplicateEntryError(ValidationError):
    code = "DuplicateEntry"


class FieldValidationError(ValidationError):
    """A single field is outside its allowed bounds."""
    code = "FieldValidation"

    def __init__(self, field: str, detail: str):
        self.field = field
        super().__init__(detail)


class PeriodLockedError(ValidationError):
    """The weekly log is no longer editable in its current status."""
    code = "PeriodLocked"
    message = "Cannot edit timesheet"


class NotFoundOrForbiddenError(TimesheetError):
    """
    Entity is missing or the caller may not see it.

    Both cases share one error; a caller cannot tell whether another team's
    timesheet exists.
    """
    kind = ErrorKind.NOT_FOUND_OR_FORBIDDEN
    code = "NotFoundOrForbidden"
    message = "Timesheet not found"


class InvalidTransitionError(TimesheetError):
    kind = ErrorKind.INVALID_TRANSITION
    code = "InvalidTransition"


class AggregationInconsistencyError(TimesheetError):
    """Totals could not be recalculated because the weekly log is gone."""
    kind = ErrorKind.AGGREGATION_INCONSISTENCY
    code = "AggregationInconsistency"
    message = "Weekly totals could not be recalculated"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"success": False, "message": exc.detail, "errors": []}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def _serialize_validation_errors(errors: list) -> List[str]:
    """Flatten pydantic validation errors into readable messages."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        msg = error.get("msg", "Invalid value")
        messages.append(f"{location}: {msg}" if location else msg)
    return messages


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    serialized_errors = _serialize_validation_errors(exc.errors())

    logger.warning(
        f"Validation error: {serialized_errors}",
        extra={
            "path": request.url.path,
            "errors": serialized_errors,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Validation failed",
            "errors": serialized_errors,
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    # Exception detail only leaves the process in debug deployments
    errors = [f"{type(exc).__name__}: {exc}"] if settings.DEBUG else []
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Internal server error",
            "errors": errors,
            "path": request.url.path,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
