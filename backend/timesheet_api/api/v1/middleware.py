"""
API middleware for authentication and common concerns.

Authentication itself happens upstream: the gateway forwards the caller's
user id in a header (``settings.USER_ID_HEADER``). These dependencies resolve
it to an active ``User`` and turn service result envelopes into HTTP responses.
"""

import logging
from typing import Dict, TypeVar

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.core.config import settings
from timesheet_api.core.exceptions import ErrorKind
from timesheet_api.db.repositories.user_repository import UserRepository
from timesheet_api.db.session import get_db
from timesheet_api.models.user import User, UserRole
from timesheet_api.schemas.common import ServiceResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_BY_ERROR_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND_OR_FORBIDDEN: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorKind.AGGREGATION_INCONSISTENCY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def require_authentication(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Centralized authentication dependency.
    Used at router level for every protected route and injected into
    endpoints that need the current user.

    Raises:
        HTTPException: 401 if the header is missing or names no user,
            403 if the user is inactive
    """
    raw_user_id = request.headers.get(settings.USER_ID_HEADER)
    if not raw_user_id:
        raise _unauthorized("Authentication required")

    try:
        user_id = int(raw_user_id)
    except ValueError:
        raise _unauthorized("Invalid user id")

    user = await UserRepository(db).get(user_id)
    if user is None:
        logger.warning("Unknown user in identity header", extra={"user_id": user_id})
        raise _unauthorized("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is not active",
        )

    return user


async def require_manager(current_user: User = Depends(require_authentication)) -> User:
    """Allow only users with the Manager or Admin role."""
    if current_user.role not in (UserRole.MANAGER, UserRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Manager role required",
        )
    return current_user


def ensure_success(result: ServiceResult[T]) -> ServiceResult[T]:
    """
    Return a successful result unchanged; raise the failed one as an HTTP error
    whose body is the envelope itself. Raising also rolls back the request session.
    """
    if result.success:
        return result
    status_code = STATUS_BY_ERROR_KIND.get(result.error_kind, status.HTTP_400_BAD_REQUEST)
    raise HTTPException(status_code=status_code, detail=result.model_dump(mode="json"))
