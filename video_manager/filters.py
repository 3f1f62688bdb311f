from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional
import math

from video_manager.categories import UNCATEGORIZED, CategorySelection, category_family, item_value
from video_manager.platforms import VideoPlatform, detect_platform

ITEMS_PER_PAGE = 8
MAX_VISIBLE_PAGES = 5


@dataclass
class Page:
    items: List[Any]
    page: int
    total_pages: int
    total: int


@dataclass
class FilterState:
    """Search/filter/page state of one grid."""
    selection: CategorySelection = field(default_factory=CategorySelection)
    platform: Optional[VideoPlatform] = None
    query: str = ""
    page: int = 1


def _matches_category(item: Any, selection: Optional[str], categories: Iterable[Any]) -> bool:
    if selection is None:
        return True
    if selection == UNCATEGORIZED:
        return not item_value(item, "category_id")
    return item_value(item, "category_id") in category_family(categories, selection)


def _matches_query(query: str, *texts: str, tags: Iterable[str] = ()) -> bool:
    query = (query or "").strip().lower()
    if not query:
        return True
    if any(query in (text or "").lower() for text in texts):
        return True
    return any(query in tag.lower() for tag in tags or ())


def filter_videos(
    videos: Iterable[Any],
    selection: Optional[str] = None,
    categories: Iterable[Any] = (),
    platform: Optional[VideoPlatform] = None,
    query: str = "",
) -> List[Any]:
    """Videos matching category, platform and a title/tag search."""
    categories = list(categories)
    result = []
    for video in videos:
        if not _matches_category(video, selection, categories):
            continue
        if platform and detect_platform(item_value(video, "url")) != VideoPlatform(platform):
            continue
        if not _matches_query(query, item_value(video, "title"), tags=item_value(video, "tags")):
            continue
        result.append(video)
    return result


def filter_links(
    links: Iterable[Any],
    selection: Optional[str] = None,
    categories: Iterable[Any] = (),
    query: str = "",
) -> List[Any]:
    """Links matching category and a title/URL/tag search."""
    categories = list(categories)
    return [
        link for link in links
        if _matches_category(link, selection, categories)
        and _matches_query(query, item_value(link, "title"), item_value(link, "url"), tags=item_value(link, "tags"))
    ]


def paginate(items: List[Any], page: int = 1, per_page: int = ITEMS_PER_PAGE) -> Page:
    total_pages = math.ceil(len(items) / per_page)
    # A page past the end (e.g. after narrowing a filter) falls back to the first
    if page < 1 or (page > total_pages and total_pages > 0):
        page = 1
    start = (page - 1) * per_page
    return Page(
        items=items[start:start + per_page],
        page=page,
        total_pages=total_pages,
        total=len(items),
    )


def page_window(current: int, total_pages: int, max_visible: int = MAX_VISIBLE_PAGES) -> List[int]:
    """Page numbers to show around the current page."""
    if total_pages <= 0:
        return []
    start = max(1, current - max_visible // 2)
    end = min(total_pages, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))
