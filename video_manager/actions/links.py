from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from video_manager.errors import NotFoundError
from video_manager.models import Link, LinkCategory
from video_manager.schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse, EmptyPayload, IdPayload,
    LinkCreate, LinkUpdate, LinkResponse,
)
from video_manager.services.category_service import CategoryService
from .decorator import action_handler
from .registry import Action

logger = logging.getLogger(__name__)

link_category_service = CategoryService(LinkCategory, Link, label="Link category")


def _link(link: Link) -> dict:
    return LinkResponse.model_validate(link).model_dump(mode="json")


def _category(category: LinkCategory) -> dict:
    return CategoryResponse.model_validate(category).model_dump(mode="json")


@action_handler(Action.get_links)
async def get_links(payload: EmptyPayload, session: AsyncSession) -> dict:
    """List all links, newest first"""
    result = await session.execute(select(Link).order_by(Link.created_at.desc()))
    return {"links": [_link(l) for l in result.scalars().all()]}


@action_handler(Action.get_link_categories)
async def get_link_categories(payload: EmptyPayload, session: AsyncSession) -> dict:
    """List link categories"""
    categories = await link_category_service.list(session)
    return {"categories": [_category(c) for c in categories]}


@action_handler(Action.add_link, payload=LinkCreate)
async def add_link(payload: LinkCreate, session: AsyncSession) -> dict:
    """Add a link"""
    data = payload.model_dump()
    data["title"] = (data.get("title") or "").strip() or payload.url

    link = Link(**data)
    session.add(link)
    await session.commit()
    await session.refresh(link)

    logger.info(f"Link added: {link.id}")
    return {"link": _link(link)}


@action_handler(Action.update_link, payload=LinkUpdate)
async def update_link(payload: LinkUpdate, session: AsyncSession) -> dict:
    """Update the given fields of a link"""
    link = await session.get(Link, payload.id)
    if not link:
        raise NotFoundError("Link not found")

    for field, value in payload.model_dump(exclude_unset=True, exclude={"id"}).items():
        if value is None and field in {"title", "url", "tags"}:
            continue
        setattr(link, field, value)

    await session.commit()
    await session.refresh(link)

    logger.info(f"Link updated: {link.id}")
    return {"link": _link(link)}


@action_handler(Action.delete_link, payload=IdPayload)
async def delete_link(payload: IdPayload, session: AsyncSession) -> dict:
    """Delete a link"""
    await session.execute(delete(Link).where(Link.id == payload.id))
    await session.commit()

    logger.info(f"Link deleted: {payload.id}")
    return {"success": True}


@action_handler(Action.add_link_category, payload=CategoryCreate)
async def add_link_category(payload: CategoryCreate, session: AsyncSession) -> dict:
    """Add a link category"""
    category = await link_category_service.add(session, payload)
    return {"category": _category(category)}


@action_handler(Action.update_link_category, payload=CategoryUpdate)
async def update_link_category(payload: CategoryUpdate, session: AsyncSession) -> dict:
    """Rename, recolor or re-parent a link category"""
    category = await link_category_service.update(session, payload)
    return {"category": _category(category)}


@action_handler(Action.delete_link_category, payload=IdPayload)
async def delete_link_category(payload: IdPayload, session: AsyncSession) -> dict:
    """Delete a link category; its links become uncategorized"""
    await link_category_service.delete(session, payload.id)
    return {"success": True}
