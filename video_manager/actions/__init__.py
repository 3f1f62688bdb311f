"""Action handlers for the /api/videos dispatcher."""

from .registry import Action, ActionMeta, ActionRegistry, registry, parse_action
from .decorator import action_handler

# Import handler modules to trigger decorator registration
from . import videos, links, profile, utility  # noqa: F401,E402

# Every Action must have a handler before the app can serve requests
registry.ensure_complete()

__all__ = [
    "Action",
    "ActionMeta",
    "ActionRegistry",
    "registry",
    "parse_action",
    "action_handler",
]
