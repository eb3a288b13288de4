"""
Shared response envelopes.
"""

from pydantic import BaseModel, Field
from typing import Generic, List, Optional, TypeVar

from timesheet_api.core.exceptions import ErrorKind, FieldValidationError, TimesheetError

T = TypeVar("T")


class ServiceResult(BaseModel, Generic[T]):
    """
    Outcome of a service operation.

    Business-rule violations come back as ``success=False`` with the error kind
    and code filled in; they are never raised to the caller.
    """
    success: bool
    message: str = ""
    errors: List[str] = Field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    error_code: Optional[str] = None
    error_field: Optional[str] = None
    data: Optional[T] = None

    @classmethod
    def ok(cls, data: Optional[T] = None, message: str = "") -> "ServiceResult[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: TimesheetError, message: Optional[str] = None) -> "ServiceResult[T]":
        return cls(
            success=False,
            message=message or error.message,
            errors=error.errors,
            error_kind=error.kind,
            error_code=error.code,
            error_field=error.field if isinstance(error, FieldValidationError) else None,
        )

    @classmethod
    def fail_many(
        cls,
        errors: List[TimesheetError],
        message: str,
    ) -> "ServiceResult[T]":
        """Failure carrying several collected errors; kind and code come from the first."""
        first = errors[0]
        return cls(
            success=False,
            message=message,
            errors=[e.detail for e in errors],
            error_kind=first.kind,
            error_code=first.code,
            error_field=first.field if isinstance(first, FieldValidationError) else None,
        )


class PagedResult(BaseModel, Generic[T]):
    """One page of results."""
    data: List[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, data: List[T], total_count: int, page: int, page_size: int) -> "PagedResult[T]":
        total_pages = -(-total_count // page_size) if page_size else 0
        return cls(
            data=data,
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        )
