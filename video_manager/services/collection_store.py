"""Client-side cache of a collection.

The store is the single owner of the local copies of videos, links and both
category lists. Its contract with the server is fetch-then-replace:

- ``load()`` replaces every list with what the server returns.
- Each mutation sends one request, waits for the authoritative record and
  only then patches the local list. A failed request raises ``ApiError`` and
  leaves local state untouched.

Nothing is retried and nothing is pushed from the server, so the cache is
stale until the next ``load()`` when another client writes.
"""

import asyncio
import logging
from typing import List, Optional

from video_manager import categories as tree
from video_manager.filters import FilterState, Page, filter_links, filter_videos, paginate
from video_manager.schemas import CategoryResponse, LinkResponse, VideoResponse
from video_manager.services.api_client import ManagerClient

logger = logging.getLogger(__name__)


class CollectionStore:
    def __init__(self, client: ManagerClient):
        self.client = client
        self.videos: List[VideoResponse] = []
        self.links: List[LinkResponse] = []
        self.categories: List[CategoryResponse] = []
        self.link_categories: List[CategoryResponse] = []
        self.video_filter = FilterState()
        self.link_filter = FilterState()
        self.loaded = False

    async def load(self) -> None:
        videos, links, categories, link_categories = await asyncio.gather(
            self.client.get_videos(),
            self.client.get_links(),
            self.client.get_categories(),
            self.client.get_link_categories(),
        )
        self.videos = videos
        self.links = links
        self.categories = categories
        self.link_categories = link_categories
        self.loaded = True
        logger.info(f"Loaded {len(videos)} videos and {len(links)} links")

    # Videos

    async def add_video(self, **fields) -> VideoResponse:
        video = await self.client.add_video(**fields)
        self.videos.insert(0, video)
        return video

    async def update_video(self, video_id: str, **changes) -> VideoResponse:
        video = await self.client.update_video(video_id, **changes)
        self.videos = [video if v.id == video_id else v for v in self.videos]
        return video

    async def delete_video(self, video_id: str) -> None:
        await self.client.delete_video(video_id)
        self.videos = [v for v in self.videos if v.id != video_id]

    async def add_category(self, name: str, color: str, parent_id: Optional[str] = None) -> CategoryResponse:
        category = await self.client.add_category(name, color, parent_id)
        self.categories.append(category)
        return category

    async def update_category(self, category_id: str, **changes) -> CategoryResponse:
        category = await self.client.update_category(category_id, **changes)
        self.categories = [category if c.id == category_id else c for c in self.categories]
        return category

    async def delete_category(self, category_id: str) -> None:
        await self.client.delete_category(category_id)
        self.categories, self.videos = _without_category(self.categories, self.videos, category_id)
        if self.video_filter.selection.is_selected(category_id):
            self.video_filter.selection.clear()

    # Links

    async def add_link(self, **fields) -> LinkResponse:
        link = await self.client.add_link(**fields)
        self.links.insert(0, link)
        return link

    async def update_link(self, link_id: str, **changes) -> LinkResponse:
        link = await self.client.update_link(link_id, **changes)
        self.links = [link if l.id == link_id else l for l in self.links]
        return link

    async def delete_link(self, link_id: str) -> None:
        await self.client.delete_link(link_id)
        self.links = [l for l in self.links if l.id != link_id]

    async def add_link_category(self, name: str, color: str, parent_id: Optional[str] = None) -> CategoryResponse:
        category = await self.client.add_link_category(name, color, parent_id)
        self.link_categories.append(category)
        return category

    async def update_link_category(self, category_id: str, **changes) -> CategoryResponse:
        category = await self.client.update_link_category(category_id, **changes)
        self.link_categories = [category if c.id == category_id else c for c in self.link_categories]
        return category

    async def delete_link_category(self, category_id: str) -> None:
        await self.client.delete_link_category(category_id)
        self.link_categories, self.links = _without_category(self.link_categories, self.links, category_id)
        if self.link_filter.selection.is_selected(category_id):
            self.link_filter.selection.clear()

    # Derived state

    def parent_categories(self) -> List[CategoryResponse]:
        return tree.get_parent_categories(self.categories)

    def subcategories(self, parent_id: str) -> List[CategoryResponse]:
        return tree.get_subcategories(self.categories, parent_id)

    def video_count(self, category_id: Optional[str] = None) -> int:
        """Count for a filter button: all, uncategorized, or a category tree."""
        if category_id is None:
            return tree.count_all(self.videos)
        if category_id == tree.UNCATEGORIZED:
            return tree.count_uncategorized(self.videos)
        return tree.count_for_category(self.videos, self.categories, category_id)

    def link_count(self, category_id: Optional[str] = None) -> int:
        if category_id is None:
            return tree.count_all(self.links)
        if category_id == tree.UNCATEGORIZED:
            return tree.count_uncategorized(self.links)
        return tree.count_for_category(self.links, self.link_categories, category_id)

    def filtered_videos(self) -> List[VideoResponse]:
        state = self.video_filter
        return filter_videos(
            self.videos,
            selection=state.selection.value,
            categories=self.categories,
            platform=state.platform,
            query=state.query,
        )

    def filtered_links(self) -> List[LinkResponse]:
        state = self.link_filter
        return filter_links(
            self.links,
            selection=state.selection.value,
            categories=self.link_categories,
            query=state.query,
        )

    def video_page(self) -> Page:
        page = paginate(self.filtered_videos(), self.video_filter.page)
        self.video_filter.page = page.page
        return page

    def link_page(self) -> Page:
        page = paginate(self.filtered_links(), self.link_filter.page)
        self.link_filter.page = page.page
        return page


def _without_category(categories: list, items: list, category_id: str):
    """Local mirror of a server-side category delete."""
    remaining = []
    for category in categories:
        if category.id == category_id:
            continue
        if category.parent_id == category_id:
            category = category.model_copy(update={"parent_id": None})
        remaining.append(category)

    items = [
        item.model_copy(update={"category_id": None}) if item.category_id == category_id else item
        for item in items
    ]
    return remaining, items
