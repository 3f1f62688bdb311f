from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Optional
import re

from video_manager.platforms import detect_platform

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


def normalize_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Lowercase, strip and de-duplicate tags, keeping first-seen order."""
    if not isinstance(tags, (list, tuple)):
        # None and non-list values go on to field validation
        return tags
    seen = []
    for tag in tags:
        tag = str(tag).strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class ActionPayload(BaseModel):
    """Request body of an action; accepts camelCase or snake_case keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmptyPayload(ActionPayload):
    pass


class IdPayload(ActionPayload):
    id: str


class FetchTitlePayload(ActionPayload):
    url: str


class _BookmarkFields(ActionPayload):
    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def _normalize_tags(cls, value):
        return normalize_tags(value)

    @field_validator("url", check_fields=False)
    @classmethod
    def _url_not_blank(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("URL is required")
        return value


class VideoCreate(_BookmarkFields):
    url: str
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    description: Optional[str] = None
    channel_name: Optional[str] = None
    channel_url: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class VideoUpdate(_BookmarkFields):
    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    description: Optional[str] = None
    channel_name: Optional[str] = None
    channel_url: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None


class LinkCreate(_BookmarkFields):
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    favicon: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class LinkUpdate(_BookmarkFields):
    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    favicon: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None


class CategoryCreate(ActionPayload):
    name: str
    color: str
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Category name is required")
        return value


class CategoryUpdate(ActionPayload):
    id: str
    name: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Category name is required")
        return value


class ProfileUpdate(ActionPayload):
    display_name: Optional[str] = Field(default=None, max_length=100)
    is_public: Optional[bool] = None
    share_videos: Optional[bool] = None
    share_links: Optional[bool] = None
    public_slug: Optional[str] = None

    @field_validator("public_slug")
    @classmethod
    def _valid_slug(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            return None
        if len(value) < 3:
            raise ValueError("Slug must be at least 3 characters")
        if len(value) > 50:
            raise ValueError("Slug is too long")
        if not SLUG_PATTERN.match(value):
            raise ValueError("Slug can only contain lowercase letters, numbers, and hyphens")
        return value


class AuthRequest(BaseModel):
    username: str = ""
    password: str = ""


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    parent_id: Optional[str] = None


class _BookmarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def _tags_default(cls, value):
        # Rows created before the tags column existed hold NULL
        return value or []


class VideoResponse(_BookmarkResponse):
    id: str
    title: str
    url: str
    thumbnail_url: Optional[str] = None
    description: Optional[str] = None
    channel_name: Optional[str] = None
    channel_url: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime

    @computed_field
    @property
    def platform(self) -> str:
        return detect_platform(self.url).value


class LinkResponse(_BookmarkResponse):
    id: str
    title: str
    url: str
    description: Optional[str] = None
    favicon: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    display_name: Optional[str] = None
    is_public: bool = False
    share_videos: bool = True
    share_links: bool = True
    public_slug: Optional[str] = None
