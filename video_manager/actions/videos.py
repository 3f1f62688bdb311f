from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from video_manager.errors import NotFoundError
from video_manager.models import Category, Video
from video_manager.schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse, EmptyPayload, IdPayload,
    VideoCreate, VideoUpdate, VideoResponse,
)
from video_manager.services.category_service import CategoryService
from .decorator import action_handler
from .registry import Action

logger = logging.getLogger(__name__)

category_service = CategoryService(Category, Video, label="Category")


def _video(video: Video) -> dict:
    return VideoResponse.model_validate(video).model_dump(mode="json")


def _category(category: Category) -> dict:
    return CategoryResponse.model_validate(category).model_dump(mode="json")


@action_handler(Action.get_videos)
async def get_videos(payload: EmptyPayload, session: AsyncSession) -> dict:
    """List all videos, newest first"""
    result = await session.execute(select(Video).order_by(Video.created_at.desc()))
    return {"videos": [_video(v) for v in result.scalars().all()]}


@action_handler(Action.get_categories)
async def get_categories(payload: EmptyPayload, session: AsyncSession) -> dict:
    """List video categories"""
    categories = await category_service.list(session)
    return {"categories": [_category(c) for c in categories]}


@action_handler(Action.add_video, payload=VideoCreate)
async def add_video(payload: VideoCreate, session: AsyncSession) -> dict:
    """Add a video"""
    data = payload.model_dump()
    data["title"] = (data.get("title") or "").strip() or payload.url

    video = Video(**data)
    session.add(video)
    await session.commit()
    await session.refresh(video)

    logger.info(f"Video added: {video.id}")
    return {"video": _video(video)}


@action_handler(Action.update_video, payload=VideoUpdate)
async def update_video(payload: VideoUpdate, session: AsyncSession) -> dict:
    """Update the given fields of a video"""
    video = await session.get(Video, payload.id)
    if not video:
        raise NotFoundError("Video not found")

    for field, value in payload.model_dump(exclude_unset=True, exclude={"id"}).items():
        # title, url and tags cannot be cleared
        if value is None and field in {"title", "url", "tags"}:
            continue
        setattr(video, field, value)

    await session.commit()
    await session.refresh(video)

    logger.info(f"Video updated: {video.id}")
    return {"video": _video(video)}


@action_handler(Action.delete_video, payload=IdPayload)
async def delete_video(payload: IdPayload, session: AsyncSession) -> dict:
    """Delete a video"""
    await session.execute(delete(Video).where(Video.id == payload.id))
    await session.commit()

    logger.info(f"Video deleted: {payload.id}")
    return {"success": True}


@action_handler(Action.add_category, payload=CategoryCreate)
async def add_category(payload: CategoryCreate, session: AsyncSession) -> dict:
    """Add a video category"""
    category = await category_service.add(session, payload)
    return {"category": _category(category)}


@action_handler(Action.update_category, payload=CategoryUpdate)
async def update_category(payload: CategoryUpdate, session: AsyncSession) -> dict:
    """Rename, recolor or re-parent a video category"""
    category = await category_service.update(session, payload)
    return {"category": _category(category)}


@action_handler(Action.delete_category, payload=IdPayload)
async def delete_category(payload: IdPayload, session: AsyncSession) -> dict:
    """Delete a video category; its videos become uncategorized"""
    await category_service.delete(session, payload.id)
    return {"success": True}
