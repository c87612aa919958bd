from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ...core.config import TOKEN_SOURCES
from ...domain.errors import Unauthenticated
from ...domain.models import Role, User
from ...domain.ports.persistence import UserRepository
from ...services.tokens import TokenIssuer

TOKEN_COOKIE = "token"
# Value written into the cookie on logout.
LOGGED_OUT_TOKEN = "none"


class AccessGuard:
    """Resolves the user behind a session token and checks role permissions."""

    def __init__(
        self,
        users: UserRepository,
        token_issuer: TokenIssuer,
        token_sources: Sequence[str] = TOKEN_SOURCES,
    ) -> None:
        self._users = users
        self._tokens = token_issuer
        self._sources = tuple(token_sources)

    def extract_token(self, cookie: Optional[str], bearer: Optional[str]) -> Optional[str]:
        """Pick the session token from the cookie or the bearer header, in configured order."""
        candidates = {
            "cookie": cookie if cookie != LOGGED_OUT_TOKEN else None,
            "header": bearer,
        }
        for source in self._sources:
            if candidates.get(source):
                return candidates[source]
        return None

    def authenticate(self, token: Optional[str]) -> User:
        if not token:
            raise Unauthenticated()
        user_id = self._tokens.verify(token)
        user = self._users.get_user_by_id(user_id)
        if not user:
            raise Unauthenticated()
        return user

    def authenticate_request(self, cookie: Optional[str], bearer: Optional[str]) -> User:
        return self.authenticate(self.extract_token(cookie, bearer))

    @staticmethod
    def authorize(user: User, allowed_roles: Iterable[Role]) -> bool:
        return user.role in {Role(role) for role in allowed_roles}
