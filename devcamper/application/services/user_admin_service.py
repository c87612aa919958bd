from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import ResourceNotFound
from ...domain.models import Role, User
from ...domain.ports.persistence import UserRepository
from ...services.passwords import PasswordHasher
from ..pagination import Page, offset_for

logger = logging.getLogger(__name__)


class UserAdminService:
    """Administrator-side management of user accounts."""

    def __init__(self, users: UserRepository, hasher: PasswordHasher) -> None:
        self._users = users
        self._hasher = hasher

    # ------------------------------------------------------------------
    def ensure_default_admin(self, name: str, email: Optional[str], password: Optional[str]) -> Optional[User]:
        if not email or not password:
            return None
        existing = self._users.get_user_by_email(email)
        if existing:
            return existing
        logger.info("Creating default administrator account for %s", email)
        return self._users.create_user(
            name=name,
            email=email,
            password_hash=self._hasher.hash(password),
            role=Role.ADMIN,
        )

    def list_users(self, page: int, limit: int) -> Page[User]:
        items = self._users.list_users(offset_for(page, limit), limit)
        return Page(items=items, total=self._users.count_users(), page=page, limit=limit)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_user_by_id(user_id)
        if not user:
            raise ResourceNotFound(f"No user with the id of {user_id}.")
        return user

    def create_user(self, name: str, email: str, password: str, role: Role = Role.USER) -> User:
        user = self._users.create_user(
            name=name,
            email=email,
            password_hash=self._hasher.hash(password),
            role=role,
        )
        logger.info("Administrator created user %s with role %s", user.id, user.role.value)
        return user

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> User:
        user = self._users.update_user(user_id, name=name, email=email, role=role)
        if not user:
            raise ResourceNotFound(f"No user with the id of {user_id}.")
        return user

    def delete_user(self, user_id: int) -> None:
        if not self._users.delete_user(user_id):
            raise ResourceNotFound(f"No user with the id of {user_id}.")
        logger.info("Administrator deleted user %s", user_id)
