"""FastAPI dependency — bearer token verification."""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.application.services.auth_service import decode_access_token
from app.application.services.user_service import UserService
from app.core.exceptions import ForbiddenError, ResourceNotFoundError, UnauthorizedError
from app.domain.schemas.user import UserRead
from app.interfaces.deps import get_user_service

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    users: UserService = Depends(get_user_service),
) -> UserRead:
    """Extract and validate the current user from the JWT token."""
    if credentials is None:
        raise UnauthorizedError("A bearer token is required")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError("The token is invalid or expired")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("The token is invalid")

    try:
        user = await users.find_by_id(user_id)
    except ResourceNotFoundError:
        raise UnauthorizedError("The user was not found or is disabled")
    if user.deleted_at is not None:
        raise UnauthorizedError("The user was not found or is disabled")

    return user


async def require_admin(user: UserRead = Depends(get_current_user)) -> UserRead:
    """Require admin role."""
    if user.user_role != "admin":
        raise ForbiddenError("Only administrators can access this resource")
    return user
