from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from ..models import Bootcamp, Role, User


class UserRepository(Protocol):
    """Persistence functions related to user accounts.

    Reads leave ``password_hash`` unset unless ``include_password`` is requested.
    """

    def get_user_by_email(self, email: str, *, include_password: bool = False) -> Optional[User]:
        ...

    def get_user_by_id(self, user_id: int, *, include_password: bool = False) -> Optional[User]:
        ...

    def consume_reset_token(self, token_hash: str, now: datetime, password_hash: str) -> Optional[User]:
        """Set a new password for the holder of an unexpired reset token and clear the token."""
        ...

    def list_users(self, offset: int, limit: int) -> List[User]:
        ...

    def count_users(self) -> int:
        ...

    def create_user(self, name: str, email: str, password_hash: str, role: Role = Role.USER) -> User:
        ...

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> Optional[User]:
        ...

    def update_user_password(self, user_id: int, password_hash: str) -> User:
        ...

    def set_reset_token(
        self,
        user_id: int,
        token_hash: Optional[str],
        expires_at: Optional[datetime],
    ) -> None:
        ...

    def delete_user(self, user_id: int) -> bool:
        ...


class BootcampRepository(Protocol):
    """Persistence functions related to bootcamp listings."""

    def create_bootcamp(self, fields: Dict[str, Any]) -> Bootcamp:
        ...

    def update_bootcamp(self, bootcamp_id: int, fields: Dict[str, Any]) -> Optional[Bootcamp]:
        ...

    def delete_bootcamp(self, bootcamp_id: int) -> bool:
        ...

    def get_bootcamp(self, bootcamp_id: int) -> Optional[Bootcamp]:
        ...

    def list_bootcamps(self, offset: int, limit: int) -> List[Bootcamp]:
        ...

    def count_bootcamps(self) -> int:
        ...


class PersistenceGateway(UserRepository, BootcampRepository, Protocol):
    """Composite gateway combining every persistence concern used by the app."""

    pass
