from video_manager.config import get_settings
from video_manager.schemas import FetchTitlePayload
from video_manager.services.title_service import TitleService
from .decorator import action_handler
from .registry import Action

title_service = TitleService(timeout=get_settings().title_fetch_timeout)


@action_handler(Action.fetch_title, payload=FetchTitlePayload, needs_db=False)
async def fetch_title(payload: FetchTitlePayload, session=None) -> dict:
    """Fetch a page's <title>; soft-fails with {"title": null, "error": ...}"""
    return await title_service.fetch_title(payload.url)
