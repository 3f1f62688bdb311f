from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from video_manager.errors import ActionError
from video_manager.migrations import PROFILE_ID
from video_manager.models import Profile
from video_manager.schemas import EmptyPayload, ProfileResponse, ProfileUpdate
from .decorator import action_handler
from .registry import Action

logger = logging.getLogger(__name__)


async def get_or_create_profile(session: AsyncSession) -> Profile:
    profile = await session.get(Profile, PROFILE_ID)
    if profile is None:
        profile = Profile(id=PROFILE_ID)
        session.add(profile)
        await session.commit()
        await session.refresh(profile)
    return profile


@action_handler(Action.get_profile)
async def get_profile(payload: EmptyPayload, session: AsyncSession) -> dict:
    """Sharing settings of the collection"""
    profile = await get_or_create_profile(session)
    return {"profile": ProfileResponse.model_validate(profile).model_dump()}


@action_handler(Action.update_profile, payload=ProfileUpdate)
async def update_profile(payload: ProfileUpdate, session: AsyncSession) -> dict:
    """Update display name, public slug and share flags"""
    profile = await get_or_create_profile(session)
    changes = payload.model_dump(exclude_unset=True)

    slug = changes.get("public_slug")
    if slug:
        taken = await session.scalar(
            select(Profile.id).where(Profile.public_slug == slug, Profile.id != profile.id)
        )
        if taken is not None:
            raise ActionError("This URL slug is already taken. Please choose another.")

    for field, value in changes.items():
        if value is None and field not in {"public_slug", "display_name"}:
            continue
        if field == "display_name" and value is not None:
            value = value.strip() or None
        setattr(profile, field, value)

    await session.commit()
    await session.refresh(profile)

    logger.info("Profile updated")
    return {"profile": ProfileResponse.model_validate(profile).model_dump()}
