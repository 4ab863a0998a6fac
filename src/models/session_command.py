"""
Custom session commands

Opaque actions whose effect is implemented by the remote media session.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class SessionCommand:
    """Custom command sent to the media session"""

    TOGGLE_SHUFFLE = "toggle_shuffle"
    CYCLE_REPEAT_MODE = "cycle_repeat_mode"
    LIKE = "like"
    SET_FAVORITE_STATE = "set_favorite_state"

    EXTRA_FAVORITE_ENABLED = "favorite_enabled"

    action: str
    args: Dict[str, Any] = field(default_factory=dict)
