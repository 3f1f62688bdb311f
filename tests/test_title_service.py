import httpx
import pytest

from video_manager import database
from video_manager.actions import utility
from video_manager.services.title_service import TitleService, extract_title, unescape_title


def _service(handler):
    return TitleService(timeout=5.0, transport=httpx.MockTransport(handler))


def test_extract_title():
    html = "<html><head><TITLE lang='en'>\n  My   Page\n</TITLE></head></html>"
    assert extract_title(html) == "My Page"
    assert extract_title("<html><body>no title</body></html>") is None
    assert extract_title("<title>   </title>") is None


def test_unescape_title():
    assert unescape_title("Tom &amp; Jerry &lt;3 &quot;cats&quot; &#39;n&nbsp;mice") == "Tom & Jerry <3 \"cats\" 'n mice"
    # Decoded once only
    assert unescape_title("&amp;lt;") == "&lt;"


async def test_fetch_title():
    service = _service(lambda request: httpx.Response(200, html="<title>Hello &amp; welcome</title>"))
    assert await service.fetch_title("https://example.com") == {"title": "Hello & welcome"}


async def test_fetch_title_follows_redirects():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, html="<title>Moved</title>")

    result = await _service(handler).fetch_title("https://example.com/old")
    assert result == {"title": "Moved"}


async def test_fetch_title_http_error():
    result = await _service(lambda request: httpx.Response(404)).fetch_title("https://example.com")
    assert result == {"title": None, "error": "HTTP 404"}


async def test_fetch_title_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    result = await _service(handler).fetch_title("https://example.com")
    assert result == {"title": None, "error": "Request timed out"}


async def test_fetch_title_connection_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    result = await _service(handler).fetch_title("https://example.com")
    assert result == {"title": None, "error": "Failed to fetch page"}


async def test_fetch_title_no_title():
    result = await _service(lambda request: httpx.Response(200, text="plain text")).fetch_title("https://example.com")
    assert result == {"title": None, "error": "No title found"}


@pytest.mark.parametrize("url", ["ftp://example.com", "example.com", ""])
async def test_fetch_title_rejects_non_http(url):
    result = await TitleService().fetch_title(url)
    assert result["title"] is None
    assert result["error"] == "URL must start with http:// or https://"


async def test_fetch_title_action(call, monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, html="<title>From action</title>"))
    monkeypatch.setattr(utility.title_service, "transport", transport)

    response = await call("fetchTitle", {"url": "https://example.com"})
    assert response.status_code == 200
    assert response.json() == {"title": "From action"}


async def test_fetch_title_action_soft_fails(call, monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    monkeypatch.setattr(utility.title_service, "transport", transport)

    response = await call("fetchTitle", {"url": "https://example.com"})
    assert response.status_code == 200
    assert response.json() == {"title": None, "error": "HTTP 500"}


async def test_fetch_title_without_database(call, monkeypatch):
    monkeypatch.setattr(database, "async_session_maker", None)
    transport = httpx.MockTransport(lambda request: httpx.Response(200, html="<title>Still works</title>"))
    monkeypatch.setattr(utility.title_service, "transport", transport)

    response = await call("fetchTitle", {"url": "https://example.com"})
    assert response.json() == {"title": "Still works"}
