"""User domain model for authentication and administration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"


@dataclass(slots=True)
class User:
    """
    User account.

    Attributes:
        id: Unique identifier
        name: Display name
        email: Email address (unique, lower-cased)
        role: Permission tier
        created_at: Account creation timestamp
        password_hash: bcrypt digest; None unless explicitly selected from the store
        reset_password_token: SHA-256 hash of a pending reset token
        reset_password_expire: Expiry of the pending reset token
    """

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime
    password_hash: Optional[str] = None
    reset_password_token: Optional[str] = None
    reset_password_expire: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role.value}>"
