from __future__ import annotations

import logging
import secrets
from typing import Callable, Optional

from ...domain.errors import (
    DeliveryFailed,
    InvalidCredentials,
    InvalidOrExpiredToken,
    Unauthenticated,
    UserNotFound,
    ValidationError,
)
from ...domain.models import Role, User
from ...domain.ports.notifications import EmailMessage, Notifier
from ...domain.ports.persistence import UserRepository
from ...services.passwords import PasswordHasher
from ...services.reset_tokens import ResetTokenGenerator
from ...services.tokens import Clock, TokenIssuer, utc_now

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = frozenset({Role.USER, Role.PUBLISHER})


class AuthService:
    """Coordinates registration, login and password recovery for user accounts.

    Being logged in is not server-side state: every successful flow ends with a
    freshly issued session token and nothing else is remembered.
    """

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        reset_tokens: ResetTokenGenerator,
        notifier: Notifier,
        clock: Optional[Clock] = None,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = token_issuer
        self._reset_tokens = reset_tokens
        self._notifier = notifier
        self._clock = clock or utc_now
        # Stand-in hash verified for unknown emails.
        self._dummy_hash = hasher.hash(secrets.token_hex(16))

    # ------------------------------------------------------------------
    def register(self, name: str, email: str, password: str, role: Role = Role.USER) -> str:
        role = Role(role)
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError(f"Role '{role.value}' cannot be chosen at registration.")
        password_hash = self._hasher.hash(password)
        user = self._users.create_user(name=name, email=email, password_hash=password_hash, role=role)
        logger.info("Registered user %s with role %s", user.id, user.role.value)
        return self._tokens.issue(user.id)

    def login(self, email: str, password: str) -> str:
        user = self._users.get_user_by_email(email, include_password=True)
        password_hash = user.password_hash if user and user.password_hash else self._dummy_hash
        if not self._hasher.verify(password, password_hash) or not user:
            logger.info("Rejected login attempt for %s", email)
            raise InvalidCredentials()
        return self._tokens.issue(user.id)

    def logout(self, user: User) -> None:
        # Tokens are not tracked; the client discards its copy.
        logger.info("User %s logged out", user.id)

    def get_me(self, user_id: int) -> User:
        user = self._users.get_user_by_id(user_id)
        if not user:
            raise Unauthenticated()
        return user

    def update_details(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        user = self._users.update_user(user_id, name=name, email=email)
        if not user:
            raise Unauthenticated()
        return user

    def update_password(self, user_id: int, current_password: str, new_password: str) -> str:
        user = self._users.get_user_by_id(user_id, include_password=True)
        if not user:
            raise Unauthenticated()
        if not self._hasher.verify(current_password, user.password_hash or ""):
            raise InvalidCredentials("Password is incorrect.")
        self._users.update_user_password(user.id, self._hasher.hash(new_password))
        logger.info("User %s changed their password", user.id)
        return self._tokens.issue(user.id)

    # Password recovery ----------------------------------------------------
    def forgot_password(self, email: str, reset_url: Callable[[str], str]) -> None:
        """
        Store a reset token for the account and mail its raw value.

        Args:
            email: Account email
            reset_url: Builds the link the user follows from the raw token

        Raises:
            UserNotFound: If no account uses the email
            DeliveryFailed: If the email could not be sent; the token is discarded
        """
        user = self._users.get_user_by_email(email)
        if not user:
            raise UserNotFound()

        token = self._reset_tokens.generate()
        self._users.set_reset_token(user.id, token.token_hash, token.expires_at)

        message = EmailMessage(
            to=user.email,
            subject="Password reset token",
            body=(
                "You are receiving this email because you (or someone else) has requested "
                "the reset of a password. Please make a PUT request to:\n\n"
                f"{reset_url(token.raw)}"
            ),
        )
        try:
            self._notifier.send(message)
        except DeliveryFailed:
            logger.warning("Discarding reset token for user %s after delivery failure", user.id)
            self._users.set_reset_token(user.id, None, None)
            raise
        logger.info("Password reset token sent to user %s", user.id)

    def reset_password(self, raw_token: str, password: str) -> str:
        token_hash = self._reset_tokens.hash_token(raw_token)
        password_hash = self._hasher.hash(password)
        user = self._users.consume_reset_token(token_hash, self._clock(), password_hash)
        if not user:
            raise InvalidOrExpiredToken()
        logger.info("User %s reset their password", user.id)
        return self._tokens.issue(user.id)
