from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from video_manager.database import get_db
from video_manager.models import Category, Link, LinkCategory, Profile, Video
from video_manager.schemas import LinkResponse, VideoResponse

router = APIRouter(prefix="/api/public", tags=["public"])


def _with_category(record: dict, categories: dict) -> dict:
    category = categories.get(record["category_id"])
    record["category_name"] = category.name if category else None
    record["category_color"] = category.color if category else None
    return record


async def _category_map(session: AsyncSession, model) -> dict:
    result = await session.execute(select(model))
    return {c.id: c for c in result.scalars().all()}


@router.get("/{slug}")
async def get_public_collection(slug: str, session: AsyncSession = Depends(get_db)):
    """Public view of a shared collection"""
    result = await session.execute(
        select(Profile).where(Profile.public_slug == slug, Profile.is_public == True)  # noqa: E712
    )
    profile = result.scalar_one_or_none()

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found or is private"
        )

    videos: List[dict] = []
    if profile.share_videos:
        categories = await _category_map(session, Category)
        rows = await session.execute(select(Video).order_by(Video.created_at.desc()))
        videos = [
            _with_category(VideoResponse.model_validate(v).model_dump(mode="json"), categories)
            for v in rows.scalars().all()
        ]

    links: List[dict] = []
    if profile.share_links:
        categories = await _category_map(session, LinkCategory)
        rows = await session.execute(select(Link).order_by(Link.created_at.desc()))
        links = [
            _with_category(LinkResponse.model_validate(l).model_dump(mode="json"), categories)
            for l in rows.scalars().all()
        ]

    return {
        "profile": {
            "display_name": profile.display_name,
            "share_videos": profile.share_videos,
            "share_links": profile.share_links,
        },
        "videos": videos,
        "links": links,
    }
