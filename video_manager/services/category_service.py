from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from typing import List, Optional
import logging

from video_manager.errors import ActionError, NotFoundError
from video_manager.schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    """Category writes for one category table and the items referencing it.

    Used for both video categories and link categories. The hierarchy is one
    level deep: a parent must exist in the same table and be top-level, and
    a category that has subcategories cannot itself become a subcategory.
    """

    def __init__(self, category_model, item_model, label: str = "Category"):
        self.category_model = category_model
        self.item_model = item_model
        self.label = label

    async def list(self, session: AsyncSession) -> List:
        result = await session.execute(select(self.category_model))
        return result.scalars().all()

    async def _validate_parent(
        self,
        session: AsyncSession,
        parent_id: Optional[str],
        category_id: Optional[str] = None
    ) -> None:
        if parent_id is None:
            return

        if parent_id == category_id:
            raise ActionError("A category cannot be its own parent")

        parent = await session.get(self.category_model, parent_id)
        if not parent:
            raise ActionError("Parent category not found")
        if parent.parent_id is not None:
            raise ActionError("Subcategories cannot have subcategories")

        if category_id is not None:
            children = await session.scalar(
                select(func.count()).select_from(self.category_model)
                .where(self.category_model.parent_id == category_id)
            )
            if children:
                raise ActionError("A category with subcategories cannot become a subcategory")

    async def add(self, session: AsyncSession, data: CategoryCreate):
        await self._validate_parent(session, data.parent_id)

        category = self.category_model(name=data.name, color=data.color, parent_id=data.parent_id)
        session.add(category)
        await session.commit()
        await session.refresh(category)

        logger.info(f"{self.label} added: {category.id}")
        return category

    async def update(self, session: AsyncSession, data: CategoryUpdate):
        category = await session.get(self.category_model, data.id)
        if not category:
            raise NotFoundError(f"{self.label} not found")

        changes = data.model_dump(exclude_unset=True, exclude={"id"})
        if "parent_id" in changes:
            await self._validate_parent(session, changes["parent_id"], category.id)

        for field, value in changes.items():
            if value is None and field != "parent_id":
                continue
            setattr(category, field, value)

        await session.commit()
        await session.refresh(category)

        logger.info(f"{self.label} updated: {category.id}")
        return category

    async def delete(self, session: AsyncSession, category_id: str) -> None:
        """Delete a category; its items and subcategories become unassigned."""
        await session.execute(
            update(self.item_model)
            .where(self.item_model.category_id == category_id)
            .values(category_id=None)
        )
        await session.execute(
            update(self.category_model)
            .where(self.category_model.parent_id == category_id)
            .values(parent_id=None)
        )
        await session.execute(
            delete(self.category_model).where(self.category_model.id == category_id)
        )
        await session.commit()

        logger.info(f"{self.label} deleted: {category_id}")
