import json

import httpx
import pytest
from click.testing import CliRunner

from video_manager import cli as cli_module
from video_manager.cli import cli
from video_manager.services.api_client import ManagerClient

CATEGORIES = [
    {"id": "music", "name": "Music", "color": "340 82% 52%", "parent_id": None},
    {"id": "jazz", "name": "Jazz", "color": "340 82% 40%", "parent_id": "music"},
]

VIDEOS = [
    {
        "id": f"v{n}", "title": f"Video {n}", "url": f"https://youtu.be/v{n}",
        "category_id": "jazz" if n % 2 else None, "tags": [], "created_at": "2025-01-01T00:00:00",
    }
    for n in range(10)
]

PROFILE = {
    "display_name": None, "is_public": False, "share_videos": True, "share_links": True, "public_slug": None,
}

RESPONSES = {
    "getProfile": {"profile": PROFILE},
    "getVideos": {"videos": VIDEOS},
    "getLinks": {"links": []},
    "getCategories": {"categories": CATEGORIES},
    "getLinkCategories": {"categories": []},
}


@pytest.fixture
def fake_api(monkeypatch):
    def handler(request):
        if request.url.path == "/api/auth":
            body = json.loads(request.content)
            if body["password"] != "s3cret":
                return httpx.Response(401, json={"error": "Invalid username or password"})
            return httpx.Response(200, json={"success": True, "token": "tok-1", "username": body["username"]})

        action = request.url.params["action"]
        if action == "fetchTitle":
            return httpx.Response(200, json={"title": "Example Domain"})
        if action == "updateProfile":
            return httpx.Response(200, json={"profile": {**PROFILE, **json.loads(request.content)}})
        if action not in RESPONSES:
            return httpx.Response(400, json={"error": "Invalid action"})
        return httpx.Response(200, json=RESPONSES[action])

    monkeypatch.setattr(
        cli_module, "make_client",
        lambda api_url: ManagerClient(base_url=api_url, transport=httpx.MockTransport(handler)),
    )


def test_help():
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("migrate", "export", "import", "videos", "links", "categories", "serve", "title", "profile", "login"):
        assert command in result.output


def test_migrate(tmp_path):
    result = CliRunner().invoke(cli, ["migrate", "--database-url", f"sqlite:///{tmp_path / 'cli.db'}"])
    assert result.exit_code == 0, result.output
    assert "up to date" in result.output
    assert (tmp_path / "cli.db").exists()


def test_migrate_without_database(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    result = CliRunner().invoke(cli, ["migrate"])
    assert result.exit_code == 1
    assert "DATABASE_URL not configured" in result.output


def test_import_invalid_file(tmp_path):
    path = tmp_path / "backup.json"
    path.write_text(json.dumps({"videos": []}))

    result = CliRunner().invoke(cli, ["import", str(path)])
    assert result.exit_code == 1
    assert "Invalid backup file format" in result.output


def test_videos(fake_api):
    result = CliRunner().invoke(cli, ["videos"])
    assert result.exit_code == 0, result.output
    assert "Videos (10)" in result.output
    assert "Page" in result.output


def test_videos_by_category(fake_api):
    result = CliRunner().invoke(cli, ["videos", "--category", "music"])
    assert result.exit_code == 0, result.output
    assert "Videos (5)" in result.output


def test_categories(fake_api):
    result = CliRunner().invoke(cli, ["categories"])
    assert result.exit_code == 0, result.output
    assert "Music" in result.output
    assert "Jazz" in result.output


def test_links_empty(fake_api):
    result = CliRunner().invoke(cli, ["links"])
    assert result.exit_code == 0
    assert "No links found" in result.output


def test_title(fake_api):
    result = CliRunner().invoke(cli, ["title", "https://example.com"])
    assert result.exit_code == 0, result.output
    assert "Example Domain" in result.output


def test_profile_show(fake_api):
    result = CliRunner().invoke(cli, ["profile"])
    assert result.exit_code == 0, result.output
    assert "Share videos" in result.output


def test_profile_update(fake_api):
    result = CliRunner().invoke(cli, ["profile", "--public", "--slug", "my-videos", "--hide-links"])
    assert result.exit_code == 0, result.output
    assert "my-videos" in result.output


def test_login(fake_api):
    result = CliRunner().invoke(cli, ["login", "--username", "admin"], input="s3cret\n")
    assert result.exit_code == 0, result.output
    assert "tok-1" in result.output


def test_login_rejected(fake_api):
    result = CliRunner().invoke(cli, ["login", "--username", "admin", "--password", "wrong"])
    assert result.exit_code == 1
    assert "Invalid username or password" in result.output
