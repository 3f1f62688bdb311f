"""Action registry: the closed set of operations the API dispatches to."""

from dataclasses import dataclass
from typing import Callable, Optional, Type
import enum

from pydantic import BaseModel


class Action(str, enum.Enum):
    get_videos = "getVideos"
    get_categories = "getCategories"
    add_video = "addVideo"
    update_video = "updateVideo"
    delete_video = "deleteVideo"
    add_category = "addCategory"
    update_category = "updateCategory"
    delete_category = "deleteCategory"

    get_links = "getLinks"
    get_link_categories = "getLinkCategories"
    add_link = "addLink"
    update_link = "updateLink"
    delete_link = "deleteLink"
    add_link_category = "addLinkCategory"
    update_link_category = "updateLinkCategory"
    delete_link_category = "deleteLinkCategory"

    fetch_title = "fetchTitle"
    get_profile = "getProfile"
    update_profile = "updateProfile"


@dataclass
class ActionMeta:
    """Metadata for a registered action."""

    action: Action
    payload_model: Type[BaseModel]
    handler: Callable
    description: str = ""
    needs_db: bool = True


class ActionRegistry:
    def __init__(self):
        self._actions: dict[Action, ActionMeta] = {}

    def register(self, meta: ActionMeta) -> None:
        if meta.action in self._actions:
            raise ValueError(f"Handler for {meta.action.value} already registered")
        self._actions[meta.action] = meta

    def get(self, action: Action) -> Optional[ActionMeta]:
        return self._actions.get(action)

    def all(self) -> list[ActionMeta]:
        """All registered actions (returns copy)."""
        return list(self._actions.values())

    def missing(self) -> list[Action]:
        """Actions without a handler."""
        return [a for a in Action if a not in self._actions]

    def ensure_complete(self) -> None:
        missing = self.missing()
        if missing:
            names = ", ".join(a.value for a in missing)
            raise RuntimeError(f"No handler registered for: {names}")


registry = ActionRegistry()


def parse_action(value: Optional[str]) -> Optional[Action]:
    """Map the action query value to an Action, None if unknown."""
    try:
        return Action(value)
    except ValueError:
        return None
