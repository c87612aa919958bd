import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, bearer, login, register

API = "/api/v1/bootcamps"

BOOTCAMP = {
    "name": "Devworks Bootcamp",
    "description": "Devworks is a full stack JavaScript bootcamp.",
    "website": "https://devworks.com",
    "phone": "(111) 111-1111",
    "email": "enroll@devworks.com",
    "address": "233 Bay State Rd Boston MA 02215",
    "careers": ["Web Development", "UI/UX", "Business"],
    "housing": True,
    "job_assistance": True,
}


@pytest.fixture
def publisher_headers(client):
    return bearer(register(client, "publisher@example.com", role="publisher"))


def test_listing_is_public(client):
    res = client.get(API)
    assert res.status_code == 200
    assert res.json() == {"success": True, "count": 0, "total": 0, "pagination": {}, "data": []}


def test_create_requires_publisher_or_admin(client):
    assert client.post(API, json=BOOTCAMP).status_code == 401

    user_token = register(client, "user@example.com")
    res = client.post(API, json=BOOTCAMP, headers=bearer(user_token))
    assert res.status_code == 403

    admin_token = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert client.post(API, json=BOOTCAMP, headers=bearer(admin_token)).status_code == 201


def test_bootcamp_crud(client, publisher_headers):
    res = client.post(API, json=BOOTCAMP, headers=publisher_headers)
    assert res.status_code == 201, res.text
    created = res.json()["data"]
    assert created["careers"] == BOOTCAMP["careers"]
    assert created["housing"] is True
    assert created["job_guarantee"] is False
    assert created["photo"] == "no-photo.jpg"
    bootcamp_id = created["id"]

    res = client.get(f"{API}/{bootcamp_id}")
    assert res.status_code == 200
    assert res.json()["data"]["name"] == "Devworks Bootcamp"

    res = client.put(
        f"{API}/{bootcamp_id}",
        json={"average_cost": 10000, "job_guarantee": True},
        headers=publisher_headers,
    )
    assert res.status_code == 200, res.text
    updated = res.json()["data"]
    assert updated["average_cost"] == 10000
    assert updated["job_guarantee"] is True
    assert updated["name"] == "Devworks Bootcamp"

    res = client.delete(f"{API}/{bootcamp_id}", headers=publisher_headers)
    assert res.status_code == 200
    assert client.get(f"{API}/{bootcamp_id}").status_code == 404


def test_missing_bootcamp(client, publisher_headers):
    res = client.get(f"{API}/404")
    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Bootcamp not found with id of 404."}
    assert client.put(f"{API}/404", json={"name": "x"}, headers=publisher_headers).status_code == 404
    assert client.delete(f"{API}/404", headers=publisher_headers).status_code == 404


@pytest.mark.parametrize(
    "override",
    [
        {"careers": ["Underwater Basket Weaving"]},
        {"careers": []},
        {"name": "x" * 51},
        {"name": "   "},
        {"description": "  "},
        {"address": "\t"},
        {"website": "not a url"},
        {"average_rating": 11},
    ],
)
def test_invalid_bootcamp_payloads(client, publisher_headers, override):
    res = client.post(API, json={**BOOTCAMP, **override}, headers=publisher_headers)
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_duplicate_bootcamp_name(client, publisher_headers):
    assert client.post(API, json=BOOTCAMP, headers=publisher_headers).status_code == 201
    res = client.post(API, json=BOOTCAMP, headers=publisher_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Duplicate field value entered."


def test_update_can_clear_optional_fields(client, publisher_headers):
    created = client.post(
        API, json={**BOOTCAMP, "average_cost": 9000}, headers=publisher_headers
    ).json()["data"]

    res = client.put(
        f"{API}/{created['id']}",
        json={"website": None, "phone": None, "average_cost": None, "name": None},
        headers=publisher_headers,
    )
    assert res.status_code == 200, res.text
    updated = res.json()["data"]
    assert updated["website"] is None
    assert updated["phone"] is None
    assert updated["average_cost"] is None
    assert updated["name"] == "Devworks Bootcamp"
    assert updated["email"] == "enroll@devworks.com"


def test_text_fields_are_trimmed(client, publisher_headers):
    res = client.post(
        API, json={**BOOTCAMP, "name": "  Devworks Bootcamp  "}, headers=publisher_headers
    )
    assert res.status_code == 201, res.text
    assert res.json()["data"]["name"] == "Devworks Bootcamp"
