import httpx
import pytest

from video_manager.actions import utility
from video_manager.services.api_client import ApiError


async def test_profile_round_trip(manager):
    profile = await manager.get_profile()
    assert profile.is_public is False

    profile = await manager.update_profile(is_public=True, public_slug="my-videos")
    assert profile.is_public is True
    assert profile.public_slug == "my-videos"
    assert (await manager.get_profile()).public_slug == "my-videos"


async def test_update_profile_rejects_bad_slug(manager):
    with pytest.raises(ApiError) as excinfo:
        await manager.update_profile(public_slug="No Spaces")
    assert excinfo.value.status_code == 400


async def test_fetch_title(manager, monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, html="<title>Example</title>"))
    monkeypatch.setattr(utility.title_service, "transport", transport)

    assert await manager.fetch_title("https://example.com") == "Example"


async def test_fetch_title_failure_is_none(manager, monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    monkeypatch.setattr(utility.title_service, "transport", transport)

    assert await manager.fetch_title("https://example.com") is None


async def test_login(manager, monkeypatch):
    monkeypatch.setenv("AUTH_USERNAME", "admin")
    monkeypatch.setenv("AUTH_PASSWORD", "s3cret")

    data = await manager.login("admin", "s3cret")
    assert data["success"] is True

    with pytest.raises(ApiError) as excinfo:
        await manager.login("admin", "wrong")
    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid username or password"


async def test_invalid_action_raises(manager):
    with pytest.raises(ApiError) as excinfo:
        await manager.call("dropEverything")
    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Invalid action"
