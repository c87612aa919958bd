from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

import pytest
from fastapi.testclient import TestClient

from devcamper.core.app_factory import create_application
from devcamper.core.config import ResetTokenConfig, Settings, TokenConfig
from devcamper.domain.errors import DeliveryFailed
from devcamper.domain.ports.notifications import EmailMessage
from devcamper.infrastructure.persistence.sqlite import SQLitePersistence
from devcamper.services.passwords import PasswordHasher
from devcamper.services.reset_tokens import ResetTokenGenerator
from devcamper.services.tokens import TokenIssuer

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpass"


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier:
    """Keeps sent messages in memory; raises DeliveryFailed when ``fail`` is set."""

    def __init__(self) -> None:
        self.sent: List[EmailMessage] = []
        self.fail = False

    def send(self, message: EmailMessage) -> None:
        if self.fail:
            raise DeliveryFailed()
        self.sent.append(message)

    @property
    def last_reset_token(self) -> str:
        return self.sent[-1].body.rstrip().rsplit("/", 1)[-1]


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def persistence(tmp_path: Path):
    store = SQLitePersistence(tmp_path / "store.db")
    yield store
    store.close()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(TokenConfig(secret=TEST_SECRET, lifetime=timedelta(hours=1)))


@pytest.fixture
def reset_tokens(clock: FrozenClock) -> ResetTokenGenerator:
    return ResetTokenGenerator(ResetTokenConfig(window=timedelta(minutes=10)), clock=clock)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "devcamper.db"))
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    for key in (
        "API_PREFIX",
        "ENVIRONMENT",
        "TOKEN_SOURCES",
        "SMTP_HOST",
        "JWT_EXPIRE_MINUTES",
        "JWT_COOKIE_EXPIRE_DAYS",
        "RESET_TOKEN_EXPIRE_MINUTES",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def settings(env: pytest.MonkeyPatch) -> Settings:
    return Settings()


@pytest.fixture
def client(settings: Settings, notifier: RecordingNotifier):
    app = create_application(settings, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, email: str, password: str = "password123", **extra) -> str:
    """Register an account and return its token, leaving the client's cookie jar empty."""
    payload = {"name": extra.pop("name", "Test User"), "email": email, "password": password, **extra}
    res = client.post("/api/v1/auth/register", json=payload)
    assert res.status_code == 200, res.text
    client.cookies.clear()
    return res.json()["token"]


def login(client: TestClient, email: str, password: str) -> str:
    res = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    client.cookies.clear()
    return res.json()["token"]
