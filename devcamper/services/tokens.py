"""Signed session tokens (JWT)."""

from datetime import datetime, timezone
from typing import Callable, Optional

import jwt

from ..core.config import TokenConfig
from ..domain.errors import Expired, InvalidSignature, Malformed

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Issues and verifies the bearer tokens handed out after authentication."""

    def __init__(self, config: TokenConfig, clock: Optional[Clock] = None) -> None:
        self._config = config
        self._clock = clock or utc_now

    @property
    def lifetime_seconds(self) -> int:
        return int(self._config.lifetime.total_seconds())

    def issue(self, user_id: int) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self._config.lifetime,
        }
        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    def verify(self, token: str) -> int:
        """
        Verify a token and return the user id it was issued for.

        Raises:
            InvalidSignature: If the token was not signed with the server secret
            Expired: If the token is past its expiry
            Malformed: If the token cannot be decoded or lacks the expected claims
        """
        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature() from exc
        except jwt.InvalidTokenError as exc:
            raise Malformed() from exc

        # Expiry is checked against the issuer clock.
        expires_at = payload["exp"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise Malformed()
        if expires_at <= self._clock().timestamp():
            raise Expired()

        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise Malformed() from exc
