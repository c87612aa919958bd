from typing import Any, Dict

from ...application.pagination import Page
from ...domain.models import Bootcamp, User


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "created_at": user.created_at.replace(microsecond=0).isoformat(),
    }


def serialize_bootcamp(bootcamp: Bootcamp) -> Dict[str, Any]:
    return {
        "id": bootcamp.id,
        "name": bootcamp.name,
        "description": bootcamp.description,
        "website": bootcamp.website,
        "phone": bootcamp.phone,
        "email": bootcamp.email,
        "address": bootcamp.address,
        "careers": list(bootcamp.careers),
        "average_rating": bootcamp.average_rating,
        "average_cost": bootcamp.average_cost,
        "photo": bootcamp.photo,
        "housing": bootcamp.housing,
        "job_assistance": bootcamp.job_assistance,
        "job_guarantee": bootcamp.job_guarantee,
        "accept_gi": bootcamp.accept_gi,
        "created_at": bootcamp.created_at.replace(microsecond=0).isoformat(),
    }


def serialize_page(page: Page, serializer) -> Dict[str, Any]:
    return {
        "success": True,
        "count": len(page.items),
        "total": page.total,
        "pagination": page.links(),
        "data": [serializer(item) for item in page.items],
    }
