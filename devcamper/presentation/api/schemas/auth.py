from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ....domain.models import Role
from .user_schemas import UserName


class RegisterRequest(BaseModel):
    name: UserName
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role = Role.USER


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateDetailsRequest(BaseModel):
    name: Optional[UserName] = None
    email: Optional[EmailStr] = None


class UpdatePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=6)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6)
