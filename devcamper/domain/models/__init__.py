"""Domain models for the DevCamper API."""

from .bootcamp import CAREERS, Bootcamp
from .user import Role, User

__all__ = [
    "Bootcamp",
    "CAREERS",
    "Role",
    "User",
]
