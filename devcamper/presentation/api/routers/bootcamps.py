from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from ....application.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ....application.services.bootcamp_service import BootcampService
from ....core.dependencies import get_bootcamp_service
from ....domain.models import Role, User
from ...api.dependencies import require_roles
from ...api.schemas.bootcamp import CLEARABLE_FIELDS, BootcampCreatePayload, BootcampUpdatePayload
from ...api.serializers import serialize_bootcamp, serialize_page

router = APIRouter(prefix="/bootcamps", tags=["Bootcamps"])

require_publisher = require_roles(Role.PUBLISHER, Role.ADMIN)


@router.get("")
def list_bootcamps(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: BootcampService = Depends(get_bootcamp_service),
) -> Dict[str, Any]:
    return serialize_page(service.list_bootcamps(page, limit), serialize_bootcamp)


@router.get("/{bootcamp_id}")
def get_bootcamp(
    bootcamp_id: int,
    service: BootcampService = Depends(get_bootcamp_service),
) -> Dict[str, Any]:
    return {"success": True, "data": serialize_bootcamp(service.get_bootcamp(bootcamp_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_bootcamp(
    payload: BootcampCreatePayload,
    _: User = Depends(require_publisher),
    service: BootcampService = Depends(get_bootcamp_service),
) -> Dict[str, Any]:
    bootcamp = service.create_bootcamp(payload.model_dump(mode="json"))
    return {"success": True, "data": serialize_bootcamp(bootcamp)}


@router.put("/{bootcamp_id}")
def update_bootcamp(
    bootcamp_id: int,
    payload: BootcampUpdatePayload,
    _: User = Depends(require_publisher),
    service: BootcampService = Depends(get_bootcamp_service),
) -> Dict[str, Any]:
    fields = {
        key: value
        for key, value in payload.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or key in CLEARABLE_FIELDS
    }
    bootcamp = service.update_bootcamp(bootcamp_id, fields)
    return {"success": True, "data": serialize_bootcamp(bootcamp)}


@router.delete("/{bootcamp_id}")
def delete_bootcamp(
    bootcamp_id: int,
    _: User = Depends(require_publisher),
    service: BootcampService = Depends(get_bootcamp_service),
) -> Dict[str, Any]:
    service.delete_bootcamp(bootcamp_id)
    return {"success": True, "data": {}}
