"""Decorator binding an action to its payload model and handler."""

from typing import Callable, Optional, Type

from pydantic import BaseModel

from video_manager.schemas import EmptyPayload
from .registry import Action, ActionMeta, ActionRegistry, registry as default_registry


def action_handler(
    action: Action,
    payload: Type[BaseModel] = EmptyPayload,
    description: str = "",
    needs_db: bool = True,
    registry: Optional[ActionRegistry] = None,
):
    """
    Decorator that registers a coroutine as the handler of an action.

    The handler is called with the validated payload and an AsyncSession
    (None when needs_db is False) and returns the JSON response body.

    Usage:
        @action_handler(Action.delete_video, payload=IdPayload, description="Delete a video")
        async def delete_video(payload: IdPayload, session: AsyncSession) -> dict:
            ...
    """

    def decorator(func: Callable) -> Callable:
        meta = ActionMeta(
            action=action,
            payload_model=payload,
            handler=func,
            description=description or (func.__doc__ or "").strip(),
            needs_db=needs_db,
        )
        (registry or default_registry).register(meta)
        func._action_meta = meta
        return func

    return decorator
