"""Administrator-only user management endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from ....application.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ....application.services.user_admin_service import UserAdminService
from ....core.dependencies import get_user_admin_service
from ....domain.models import Role
from ...api.dependencies import require_roles
from ...api.schemas.user_schemas import UserCreateRequest, UserUpdateRequest
from ...api.serializers import serialize_page, serialize_user

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


@router.get("")
def list_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    return serialize_page(service.list_users(page, limit), serialize_user)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    user = service.create_user(payload.name, payload.email, payload.password, payload.role)
    return {"success": True, "data": serialize_user(user)}


@router.get("/{user_id}")
def get_user(
    user_id: int,
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    return {"success": True, "data": serialize_user(service.get_user(user_id))}


@router.put("/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    user = service.update_user(user_id, name=payload.name, email=payload.email, role=payload.role)
    return {"success": True, "data": serialize_user(user)}


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    service: UserAdminService = Depends(get_user_admin_service),
) -> Dict[str, Any]:
    service.delete_user(user_id)
    return {"success": True, "data": {}}
