#!/usr/bin/env python3
"""
Schema migration for the video manager database.

Runs once per deploy (or once at application startup), never per request:
1. Creates missing tables
2. Adds columns introduced after a table was first created
3. Seeds the default video and link categories when their table is empty
4. Creates the profile row

Every step checks current state first, so running it twice is a no-op.
"""
import asyncio
import logging
import sys

from sqlalchemy import func, inspect, select, text

from video_manager import database
from video_manager.database import Base

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("11111111-1111-1111-1111-111111111111", "Music", "340 82% 52%"),
    ("22222222-2222-2222-2222-222222222222", "Education", "200 98% 39%"),
    ("33333333-3333-3333-3333-333333333333", "Entertainment", "262 83% 58%"),
]

DEFAULT_LINK_CATEGORIES = [
    ("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa", "Articles", "220 70% 50%"),
    ("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb", "Tools", "150 60% 45%"),
    ("cccccccc-cccc-cccc-cccc-cccccccccccc", "Reference", "35 90% 55%"),
]

PROFILE_ID = 1


def add_missing_columns(sync_conn) -> list:
    """Add model columns that are missing from existing tables.

    New columns are always added as nullable; rows that predate a column
    hold NULL for it.
    """
    inspector = inspect(sync_conn)
    existing_tables = set(inspector.get_table_names())
    added = []

    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            continue
        columns = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in columns:
                continue
            col_type = column.type.compile(dialect=sync_conn.dialect)
            sync_conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {column.name} {col_type}"))
            added.append(f"{table.name}.{column.name}")

    return added


async def seed_defaults(session) -> None:
    from video_manager.models import Category, LinkCategory, Profile

    for model, defaults in ((Category, DEFAULT_CATEGORIES), (LinkCategory, DEFAULT_LINK_CATEGORIES)):
        count = await session.scalar(select(func.count()).select_from(model))
        if count == 0:
            for category_id, name, color in defaults:
                session.add(model(id=category_id, name=name, color=color))
            logger.info(f"Seeded {len(defaults)} default rows into {model.__tablename__}")

    if await session.get(Profile, PROFILE_ID) is None:
        session.add(Profile(id=PROFILE_ID))

    await session.commit()


async def run_migrations() -> None:
    """Bring the configured database up to date."""
    if not database.is_configured():
        raise database.DatabaseNotConfigured()

    # Import models to register them with Base.metadata
    from video_manager import models  # noqa: F401

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        added = await conn.run_sync(add_missing_columns)

    for column in added:
        logger.info(f"Added column {column}")

    async with database.async_session_maker() as session:
        await seed_defaults(session)

    logger.info("Migrations complete")


async def migrate(database_url: str = None) -> None:
    await database.init_db(database_url)
    try:
        await run_migrations()
    finally:
        await database.dispose_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    url = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        asyncio.run(migrate(url))
    except database.DatabaseNotConfigured as e:
        print(f"Migration failed: {e}", file=sys.stderr)
        sys.exit(1)
