from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, JSON
from datetime import datetime
import uuid
from video_manager.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Category(Base):
    """Video category, optionally nested one level under a parent."""
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    color = Column(String, nullable=False)  # HSL triple, e.g. "340 82% 52%"
    parent_id = Column(String(36), nullable=True, index=True)


class LinkCategory(Base):
    __tablename__ = "link_categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    color = Column(String, nullable=False)
    parent_id = Column(String(36), nullable=True, index=True)


class Video(Base):
    __tablename__ = "videos"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False, index=True)
    thumbnail_url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    channel_name = Column(String, nullable=True)
    channel_url = Column(String, nullable=True)
    category_id = Column(String(36), nullable=True, index=True)  # NULL = uncategorized
    tags = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class Link(Base):
    __tablename__ = "links"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    favicon = Column(String, nullable=True)
    category_id = Column(String(36), nullable=True, index=True)
    tags = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class Profile(Base):
    """Single-row sharing settings for the collection owner."""
    __tablename__ = "profile"

    id = Column(Integer, primary_key=True)
    display_name = Column(String, nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    share_videos = Column(Boolean, default=True, nullable=False)
    share_links = Column(Boolean, default=True, nullable=False)
    public_slug = Column(String, unique=True, nullable=True, index=True)
