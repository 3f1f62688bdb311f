"""Category hierarchy queries.

Categories form a one-level tree: a category either has no parent or its
parent is a top-level category. Counting therefore only ever looks at a
category and its direct children.

The helpers accept ORM rows, pydantic models or plain dicts, anything that
exposes ``id``/``parent_id`` (categories) or ``category_id`` (items).
"""

from typing import Any, Iterable, List, Optional, Sequence

UNCATEGORIZED = "uncategorized"


def item_value(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def get_parent_categories(categories: Iterable[Any]) -> List[Any]:
    """Top-level categories in source order."""
    return [c for c in categories if item_value(c, "parent_id") is None]


def get_subcategories(categories: Iterable[Any], parent_id: Optional[str]) -> List[Any]:
    """Direct children of parent_id in source order."""
    return [c for c in categories if item_value(c, "parent_id") == parent_id]


def count_all(items: Sequence[Any]) -> int:
    return len(items)


def count_direct(items: Iterable[Any], category_id: str) -> int:
    return sum(1 for item in items if item_value(item, "category_id") == category_id)


def count_uncategorized(items: Iterable[Any]) -> int:
    return sum(1 for item in items if not item_value(item, "category_id"))


def category_family(categories: Iterable[Any], category_id: str) -> set:
    """The category id together with the ids of its direct children."""
    ids = {category_id}
    ids.update(item_value(c, "id") for c in get_subcategories(categories, category_id))
    return ids


def count_for_category(items: Iterable[Any], categories: Iterable[Any], category_id: str) -> int:
    """Items in the category plus items in its direct subcategories."""
    family = category_family(categories, category_id)
    return sum(1 for item in items if item_value(item, "category_id") in family)


class CategorySelection:
    """Active category filter: a category id, UNCATEGORIZED, or None."""

    def __init__(self, value: Optional[str] = None):
        self.value = value

    def select(self, value: Optional[str]) -> Optional[str]:
        """Select value, or clear the filter if it is already selected."""
        self.value = None if value == self.value else value
        return self.value

    def clear(self) -> None:
        self.value = None

    @property
    def is_all(self) -> bool:
        return self.value is None

    @property
    def is_uncategorized(self) -> bool:
        return self.value == UNCATEGORIZED

    def is_selected(self, category_id: str) -> bool:
        return self.value == category_id

    def is_parent_active(self, parent_id: str, categories: Iterable[Any]) -> bool:
        # Display only: a parent looks active while one of its children is selected
        if self.value is None or self.value == UNCATEGORIZED:
            return False
        return self.value in category_family(categories, parent_id)

    def __repr__(self) -> str:
        return f"CategorySelection({self.value!r})"
