from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, StringConstraints, field_validator

from ....domain.models import CAREERS

# Fields persisted as NULL when a PUT sends an explicit null.
CLEARABLE_FIELDS = frozenset({"website", "phone", "email", "average_rating", "average_cost"})

BootcampName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
Address = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _check_careers(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return value
    unknown = [career for career in value if career not in CAREERS]
    if unknown:
        raise ValueError(f"unknown careers: {', '.join(unknown)}")
    return value


class BootcampCreatePayload(BaseModel):
    name: BootcampName
    description: Description
    website: Optional[HttpUrl] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    address: Address
    careers: List[str] = Field(..., min_length=1)
    average_rating: Optional[float] = Field(default=None, ge=1, le=10)
    average_cost: Optional[float] = Field(default=None, ge=0)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False

    @field_validator("careers")
    @classmethod
    def validate_careers(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _check_careers(value)


class BootcampUpdatePayload(BaseModel):
    name: Optional[BootcampName] = None
    description: Optional[Description] = None
    website: Optional[HttpUrl] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    address: Optional[Address] = None
    careers: Optional[List[str]] = Field(default=None, min_length=1)
    average_rating: Optional[float] = Field(default=None, ge=1, le=10)
    average_cost: Optional[float] = Field(default=None, ge=0)
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = None
    job_guarantee: Optional[bool] = None
    accept_gi: Optional[bool] = None

    @field_validator("careers")
    @classmethod
    def validate_careers(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _check_careers(value)
