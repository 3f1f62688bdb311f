import httpx
from typing import Dict, Optional
import logging
import re

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)

# &amp; goes last so "&amp;lt;" decodes to "&lt;" and not "<"
HTML_ENTITIES = [
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
    ("&amp;", "&"),
]

USER_AGENT = "Mozilla/5.0 (compatible; VideoManager/0.1; +title-fetch)"


def unescape_title(raw: str) -> str:
    for entity, char in HTML_ENTITIES:
        raw = raw.replace(entity, char)
    return " ".join(raw.split())


def extract_title(html: str) -> Optional[str]:
    """First <title> of an HTML document, unescaped; None if absent or blank."""
    match = TITLE_PATTERN.search(html or "")
    if not match:
        return None
    return unescape_title(match.group(1)) or None


class TitleService:
    """Fetch the <title> of a web page.

    Never raises: every failure becomes {"title": None, "error": ...} so that
    adding a bookmark is never blocked on it.
    """

    def __init__(self, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def fetch_title(self, url: str) -> Dict[str, Optional[str]]:
        if not url or not url.strip().startswith(("http://", "https://")):
            return {"title": None, "error": "URL must start with http:// or https://"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = await client.get(url.strip())
                response.raise_for_status()

        except httpx.TimeoutException:
            logger.warning(f"Title fetch timed out for {url}")
            return {"title": None, "error": "Request timed out"}

        except httpx.HTTPStatusError as e:
            logger.warning(f"Title fetch for {url} returned {e.response.status_code}")
            return {"title": None, "error": f"HTTP {e.response.status_code}"}

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Title fetch failed for {url}: {e}")
            return {"title": None, "error": "Failed to fetch page"}

        title = extract_title(response.text)
        if not title:
            return {"title": None, "error": "No title found"}

        return {"title": title}
