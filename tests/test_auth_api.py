from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from devcamper.core.app_factory import create_application
from devcamper.core.config import Settings

from conftest import bearer, login, register

API = "/api/v1/auth"


def test_register_then_me_with_cookie(client):
    res = client.post(
        f"{API}/register",
        json={"name": "Jane", "email": "jane@example.com", "password": "password123"},
    )
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["success"] is True
    token = body["token"]
    assert client.cookies.get("token") == token
    set_cookie = res.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "secure" not in set_cookie

    res_me = client.get(f"{API}/me")
    assert res_me.status_code == 200, res_me.text
    me = res_me.json()["data"]
    user_id = client.app.state.container.token_issuer.verify(token)
    assert me["id"] == user_id
    assert me["email"] == "jane@example.com"
    assert me["role"] == "user"
    assert "password_hash" not in me
    assert "password" not in me


def test_me_with_bearer_header(client):
    token = register(client, "jane@example.com")
    res = client.get(f"{API}/me", headers=bearer(token))
    assert res.status_code == 200
    assert res.json()["data"]["email"] == "jane@example.com"


def test_register_twice_with_same_email(client):
    register(client, "jane@example.com")
    res = client.post(
        f"{API}/register",
        json={"name": "Jane Again", "email": "JANE@example.com", "password": "password123"},
    )
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Duplicate field value entered."}


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Jane", "email": "not-an-email", "password": "password123"},
        {"name": "Jane", "email": "jane@example.com", "password": "short"},
        {"name": "   ", "email": "jane@example.com", "password": "password123"},
        {"email": "jane@example.com", "password": "password123"},
        {"name": "Jane", "email": "jane@example.com", "password": "password123", "role": "owner"},
    ],
)
def test_register_validation_errors(client, payload):
    res = client.post(f"{API}/register", json=payload)
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_register_cannot_self_assign_admin(client):
    res = client.post(
        f"{API}/register",
        json={"name": "Eve", "email": "eve@example.com", "password": "password123", "role": "admin"},
    )
    assert res.status_code == 400


def test_login_failures_have_identical_shape(client):
    register(client, "jane@example.com")
    wrong_password = client.post(f"{API}/login", json={"email": "jane@example.com", "password": "nope-nope"})
    unknown_email = client.post(f"{API}/login", json={"email": "ghost@example.com", "password": "nope-nope"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert "token" not in client.cookies


def test_login_sets_cookie_and_returns_token(client):
    register(client, "jane@example.com")
    res = client.post(f"{API}/login", json={"email": "jane@example.com", "password": "password123"})
    assert res.status_code == 200
    assert res.json()["token"] == client.cookies.get("token")


def test_logout_replaces_cookie(client):
    client.post(
        f"{API}/register",
        json={"name": "Jane", "email": "jane@example.com", "password": "password123"},
    )
    assert client.get(f"{API}/me").status_code == 200

    res = client.get(f"{API}/logout")
    assert res.status_code == 200
    assert res.json() == {"success": True, "data": {}}
    assert client.cookies.get("token") == "none"

    assert client.get(f"{API}/me").status_code == 401


def test_protected_routes_require_valid_token(client):
    assert client.get(f"{API}/me").status_code == 401
    assert client.get(f"{API}/logout").status_code == 401
    res = client.get(f"{API}/me", headers=bearer("garbage"))
    assert res.status_code == 401
    assert res.json()["success"] is False


def test_token_of_deleted_user_is_rejected(client):
    token = register(client, "jane@example.com")
    container = client.app.state.container
    container.persistence.delete_user(container.token_issuer.verify(token))
    assert client.get(f"{API}/me", headers=bearer(token)).status_code == 401


def test_update_details(client):
    token = register(client, "jane@example.com")
    res = client.put(
        f"{API}/updatedetails",
        json={"name": "Jane Doe", "email": "jane.doe@example.com"},
        headers=bearer(token),
    )
    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["name"] == "Jane Doe"
    assert data["email"] == "jane.doe@example.com"


def test_update_details_rejects_taken_email(client):
    register(client, "taken@example.com")
    token = register(client, "jane@example.com")
    res = client.put(f"{API}/updatedetails", json={"email": "taken@example.com"}, headers=bearer(token))
    assert res.status_code == 400


def test_update_password_with_wrong_current_password(client):
    token = register(client, "jane@example.com")
    res = client.put(
        f"{API}/updatepassword",
        json={"currentPassword": "wrong-password", "newPassword": "brand-new-pass"},
        headers=bearer(token),
    )
    assert res.status_code == 401
    assert login(client, "jane@example.com", "password123")


def test_update_password(client):
    token = register(client, "jane@example.com")
    res = client.put(
        f"{API}/updatepassword",
        json={"currentPassword": "password123", "newPassword": "brand-new-pass"},
        headers=bearer(token),
    )
    assert res.status_code == 200, res.text
    assert res.json()["token"]
    client.cookies.clear()
    assert login(client, "jane@example.com", "brand-new-pass")
    bad = client.post(f"{API}/login", json={"email": "jane@example.com", "password": "password123"})
    assert bad.status_code == 401


def test_forgot_password_for_unknown_email(client, notifier):
    res = client.post(f"{API}/forgotpassword", json={"email": "ghost@example.com"})
    assert res.status_code == 404
    assert res.json()["success"] is False
    assert notifier.sent == []


def test_forgot_and_reset_password(client, notifier):
    register(client, "jane@example.com")

    res = client.post(f"{API}/forgotpassword", json={"email": "jane@example.com"})
    assert res.status_code == 200, res.text
    assert res.json() == {"success": True, "data": "Email sent"}

    raw = notifier.last_reset_token
    assert f"http://testserver{API}/resetpassword/{raw}" in notifier.sent[-1].body

    res = client.put(f"{API}/resetpassword/{raw}", json={"password": "fresh-password"})
    assert res.status_code == 200, res.text
    assert client.cookies.get("token") == res.json()["token"]
    client.cookies.clear()

    assert login(client, "jane@example.com", "fresh-password")
    again = client.put(f"{API}/resetpassword/{raw}", json={"password": "other-password"})
    assert again.status_code == 400


def test_reset_with_invalid_token(client):
    register(client, "jane@example.com")
    res = client.put(f"{API}/resetpassword/deadbeef", json={"password": "fresh-password"})
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Invalid token."}


def test_reset_with_expired_token(client, notifier):
    register(client, "jane@example.com")
    client.post(f"{API}/forgotpassword", json={"email": "jane@example.com"})
    raw = notifier.last_reset_token

    persistence = client.app.state.container.persistence
    user = persistence.get_user_by_email("jane@example.com")
    persistence.set_reset_token(
        user.id,
        user.reset_password_token,
        datetime.now(timezone.utc) - timedelta(minutes=1),
    )

    res = client.put(f"{API}/resetpassword/{raw}", json={"password": "fresh-password"})
    assert res.status_code == 400
    assert login(client, "jane@example.com", "password123")


def test_forgot_password_delivery_failure_clears_token(client, notifier):
    register(client, "jane@example.com")
    notifier.fail = True

    res = client.post(f"{API}/forgotpassword", json={"email": "jane@example.com"})
    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "Email could not be sent."}

    user = client.app.state.container.persistence.get_user_by_email("jane@example.com")
    assert user.reset_password_token is None
    assert user.reset_password_expire is None


def test_cookie_is_secure_in_production(env, notifier):
    env.setenv("ENVIRONMENT", "production")
    app = create_application(Settings(), notifier=notifier)
    with TestClient(app) as client:
        res = client.post(
            f"{API}/register",
            json={"name": "Jane", "email": "jane@example.com", "password": "password123"},
        )
    assert res.status_code == 200
    assert "secure" in res.headers["set-cookie"].lower()


def test_header_only_token_source_ignores_cookie(env, notifier):
    env.setenv("TOKEN_SOURCES", "header")
    app = create_application(Settings(), notifier=notifier)
    with TestClient(app) as client:
        res = client.post(
            f"{API}/register",
            json={"name": "Jane", "email": "jane@example.com", "password": "password123"},
        )
        token = res.json()["token"]
        assert client.get(f"{API}/me").status_code == 401
        assert client.get(f"{API}/me", headers=bearer(token)).status_code == 200


def test_blank_name_is_rejected_on_update(client):
    token = register(client, "jane@example.com", name="  Jane  ")
    me = client.get(f"{API}/me", headers=bearer(token)).json()["data"]
    assert me["name"] == "Jane"

    res = client.put(f"{API}/updatedetails", json={"name": "   "}, headers=bearer(token))
    assert res.status_code == 400
    assert client.get(f"{API}/me", headers=bearer(token)).json()["data"]["name"] == "Jane"
