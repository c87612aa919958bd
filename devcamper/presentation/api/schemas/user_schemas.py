"""Pydantic schemas for the user administration endpoints."""

from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from ....domain.models import Role

# Surrounding whitespace is dropped before the length check.
UserName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


class UserCreateRequest(BaseModel):
    """Request schema for creating a user as an administrator."""

    name: UserName
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role = Role.USER


class UserUpdateRequest(BaseModel):
    """Request schema for updating a user as an administrator."""

    name: Optional[UserName] = None
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
