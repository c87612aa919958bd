from typing import Optional

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.access_guard import AccessGuard
from ...core.dependencies import get_access_guard
from ...domain.errors import Forbidden
from ...domain.models import Role, User

_bearer_scheme = HTTPBearer(auto_error=False)


def protect(
    token: Optional[str] = Cookie(default=None),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    guard: AccessGuard = Depends(get_access_guard),
) -> User:
    bearer = credentials.credentials if credentials else None
    return guard.authenticate_request(token, bearer)


def require_roles(*roles: Role):
    """Build a dependency admitting only authenticated users holding one of ``roles``."""

    def dependency(user: User = Depends(protect)) -> User:
        if not AccessGuard.authorize(user, roles):
            raise Forbidden(f"User role {user.role.value} is not authorized to access this route.")
        return user

    return dependency
