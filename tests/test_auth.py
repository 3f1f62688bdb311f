import uuid

import pytest


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("AUTH_USERNAME", "admin")
    monkeypatch.setenv("AUTH_PASSWORD", "s3cret")


async def test_login_success(client, credentials):
    response = await client.post("/api/auth", json={"username": "admin", "password": "s3cret"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["username"] == "admin"
    uuid.UUID(data["token"])


async def test_login_wrong_password(client, credentials):
    response = await client.post("/api/auth", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid username or password"}


async def test_login_non_ascii_password(client, credentials):
    response = await client.post("/api/auth", json={"username": "admin", "password": "pässwort"})
    assert response.status_code == 401


async def test_login_not_configured(client, monkeypatch):
    monkeypatch.delenv("AUTH_USERNAME", raising=False)
    monkeypatch.delenv("AUTH_PASSWORD", raising=False)

    response = await client.post("/api/auth", json={"username": "admin", "password": "s3cret"})
    assert response.status_code == 500
    assert response.json() == {"error": "Authentication not configured"}
