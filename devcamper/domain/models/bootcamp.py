from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

CAREERS = (
    "Web Development",
    "Mobile Development",
    "UI/UX",
    "Data Science",
    "Business",
    "Other",
)


@dataclass(slots=True)
class Bootcamp:
    id: int
    name: str
    description: str
    address: str
    careers: List[str]
    created_at: datetime
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    average_rating: Optional[float] = None
    average_cost: Optional[float] = None
    photo: str = "no-photo.jpg"
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False
