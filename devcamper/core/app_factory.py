from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import DEFAULT_JWT_SECRET, Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.access_guard import AccessGuard
from ..application.services.auth_service import AuthService
from ..application.services.bootcamp_service import BootcampService
from ..application.services.user_admin_service import UserAdminService
from ..domain.errors import DevCamperError
from ..domain.ports.notifications import Notifier
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import bootcamps as bootcamps_router
from ..presentation.api.routers import users as users_router
from ..services.email_service import EmailService
from ..services.passwords import PasswordHasher
from ..services.reset_tokens import ResetTokenGenerator
from ..services.tokens import TokenIssuer

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="DevCamper API", lifespan=_create_lifespan(settings, notifier))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router, prefix=settings.api_prefix)
    app.include_router(bootcamps_router.router, prefix=settings.api_prefix)
    app.include_router(users_router.router, prefix=settings.api_prefix)

    _register_error_handlers(app)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DevCamperError)
    async def handle_application_error(request: Request, exc: DevCamperError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ())[1:])
            messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "; ".join(messages) or "Invalid input."},
        )


def _create_lifespan(settings: Settings, notifier: Optional[Notifier]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        if settings.jwt_secret == DEFAULT_JWT_SECRET:
            logger.warning("JWT_SECRET is using the default value. Configure a strong secret in production.")

        persistence = SQLitePersistence(settings.database_path)
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        token_issuer = TokenIssuer(settings.token_config())
        reset_tokens = ResetTokenGenerator(settings.reset_token_config())
        if notifier is None:
            mailer: Notifier = EmailService(
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                smtp_username=settings.smtp_username,
                smtp_password=settings.smtp_password,
                from_email=settings.smtp_from_email,
                from_name=settings.smtp_from_name,
            )
        else:
            mailer = notifier

        access_guard = AccessGuard(persistence, token_issuer, settings.token_sources)
        auth_service = AuthService(persistence, hasher, token_issuer, reset_tokens, mailer)
        user_admin_service = UserAdminService(persistence, hasher)
        user_admin_service.ensure_default_admin(
            "Administrator", settings.admin_default_email, settings.admin_default_password
        )
        bootcamp_service = BootcampService(persistence)

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            token_issuer=token_issuer,
            access_guard=access_guard,
            auth_service=auth_service,
            user_admin_service=user_admin_service,
            bootcamp_service=bootcamp_service,
        )

        app.state.container = container  # type: ignore[attr-defined]

        try:
            yield
        finally:
            persistence.close()

    return lifespan
