import httpx
from typing import Any, Dict, List, Optional
import logging

from video_manager.schemas import CategoryResponse, LinkResponse, ProfileResponse, VideoResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ManagerClient:
    """Async client for the /api/videos action endpoint.

    Pass ``transport`` to talk to an in-process app (httpx.ASGITransport).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "ManagerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def call(self, action: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self._client.post("/api/videos", params={"action": action}, json=payload or {})
        except httpx.HTTPError as e:
            raise ApiError(0, f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            raise ApiError(response.status_code, data.get("error") or response.reason_phrase)
        return data

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        try:
            response = await self._client.post("/api/auth", json={"username": username, "password": password})
        except httpx.HTTPError as e:
            raise ApiError(0, f"Request failed: {e}") from e

        data = response.json()
        if response.status_code >= 400:
            raise ApiError(response.status_code, data.get("error", "Login failed"))
        return data

    # Videos

    async def get_videos(self) -> List[VideoResponse]:
        data = await self.call("getVideos")
        return [VideoResponse.model_validate(v) for v in data.get("videos", [])]

    async def add_video(self, **fields) -> VideoResponse:
        data = await self.call("addVideo", fields)
        return VideoResponse.model_validate(data["video"])

    async def update_video(self, video_id: str, **changes) -> VideoResponse:
        data = await self.call("updateVideo", {"id": video_id, **changes})
        return VideoResponse.model_validate(data["video"])

    async def delete_video(self, video_id: str) -> None:
        await self.call("deleteVideo", {"id": video_id})

    async def get_categories(self) -> List[CategoryResponse]:
        data = await self.call("getCategories")
        return [CategoryResponse.model_validate(c) for c in data.get("categories", [])]

    async def add_category(self, name: str, color: str, parent_id: Optional[str] = None) -> CategoryResponse:
        data = await self.call("addCategory", {"name": name, "color": color, "parentId": parent_id})
        return CategoryResponse.model_validate(data["category"])

    async def update_category(self, category_id: str, **changes) -> CategoryResponse:
        data = await self.call("updateCategory", {"id": category_id, **changes})
        return CategoryResponse.model_validate(data["category"])

    async def delete_category(self, category_id: str) -> None:
        await self.call("deleteCategory", {"id": category_id})

    # Links

    async def get_links(self) -> List[LinkResponse]:
        data = await self.call("getLinks")
        return [LinkResponse.model_validate(l) for l in data.get("links", [])]

    async def add_link(self, **fields) -> LinkResponse:
        data = await self.call("addLink", fields)
        return LinkResponse.model_validate(data["link"])

    async def update_link(self, link_id: str, **changes) -> LinkResponse:
        data = await self.call("updateLink", {"id": link_id, **changes})
        return LinkResponse.model_validate(data["link"])

    async def delete_link(self, link_id: str) -> None:
        await self.call("deleteLink", {"id": link_id})

    async def get_link_categories(self) -> List[CategoryResponse]:
        data = await self.call("getLinkCategories")
        return [CategoryResponse.model_validate(c) for c in data.get("categories", [])]

    async def add_link_category(self, name: str, color: str, parent_id: Optional[str] = None) -> CategoryResponse:
        data = await self.call("addLinkCategory", {"name": name, "color": color, "parentId": parent_id})
        return CategoryResponse.model_validate(data["category"])

    async def update_link_category(self, category_id: str, **changes) -> CategoryResponse:
        data = await self.call("updateLinkCategory", {"id": category_id, **changes})
        return CategoryResponse.model_validate(data["category"])

    async def delete_link_category(self, category_id: str) -> None:
        await self.call("deleteLinkCategory", {"id": category_id})

    # Utility

    async def fetch_title(self, url: str) -> Optional[str]:
        data = await self.call("fetchTitle", {"url": url})
        return data.get("title")

    async def get_profile(self) -> ProfileResponse:
        data = await self.call("getProfile")
        return ProfileResponse.model_validate(data["profile"])

    async def update_profile(self, **changes) -> ProfileResponse:
        data = await self.call("updateProfile", changes)
        return ProfileResponse.model_validate(data["profile"])
