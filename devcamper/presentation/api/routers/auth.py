from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ....application.services.access_guard import LOGGED_OUT_TOKEN, TOKEN_COOKIE
from ....application.services.auth_service import AuthService
from ....core.config import Settings
from ....core.dependencies import get_auth_service, get_settings
from ....domain.models import User
from ...api.dependencies import protect
from ...api.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
)
from ...api.serializers import serialize_user

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Lifetime of the placeholder cookie written on logout.
LOGOUT_COOKIE_SECONDS = 10


@router.post("/register")
def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    token = auth_service.register(payload.name, payload.email, payload.password, payload.role)
    return _token_response(token, settings)


@router.post("/login")
def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    token = auth_service.login(payload.email, payload.password)
    return _token_response(token, settings)


@router.get("/logout")
def logout(
    current_user: User = Depends(protect),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    auth_service.logout(current_user)
    response = JSONResponse({"success": True, "data": {}})
    response.set_cookie(
        TOKEN_COOKIE,
        LOGGED_OUT_TOKEN,
        max_age=LOGOUT_COOKIE_SECONDS,
        httponly=True,
    )
    return response


@router.get("/me")
def me(
    current_user: User = Depends(protect),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    user = auth_service.get_me(current_user.id)
    return {"success": True, "data": serialize_user(user)}


@router.put("/updatedetails")
def update_details(
    payload: UpdateDetailsRequest,
    current_user: User = Depends(protect),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    user = auth_service.update_details(current_user.id, name=payload.name, email=payload.email)
    return {"success": True, "data": serialize_user(user)}


@router.put("/updatepassword")
def update_password(
    payload: UpdatePasswordRequest,
    current_user: User = Depends(protect),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    token = auth_service.update_password(
        current_user.id, payload.current_password, payload.new_password
    )
    return _token_response(token, settings)


@router.post("/forgotpassword")
def forgot_password(
    payload: ForgotPasswordRequest,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    auth_service.forgot_password(
        payload.email,
        lambda raw_token: str(request.url_for("reset_password", resettoken=raw_token)),
    )
    return {"success": True, "data": "Email sent"}


@router.put("/resetpassword/{resettoken}", name="reset_password")
def reset_password(
    resettoken: str,
    payload: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    token = auth_service.reset_password(resettoken, payload.password)
    return _token_response(token, settings)


def _token_response(token: str, settings: Settings) -> JSONResponse:
    response = JSONResponse({"success": True, "token": token})
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.jwt_cookie_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
    )
    return response
