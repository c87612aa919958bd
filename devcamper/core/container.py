from dataclasses import dataclass

from ..application.services.access_guard import AccessGuard
from ..application.services.auth_service import AuthService
from ..application.services.bootcamp_service import BootcampService
from ..application.services.user_admin_service import UserAdminService
from ..domain.ports.persistence import PersistenceGateway
from ..services.tokens import TokenIssuer
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    token_issuer: TokenIssuer
    access_guard: AccessGuard
    auth_service: AuthService
    user_admin_service: UserAdminService
    bootcamp_service: BootcampService
