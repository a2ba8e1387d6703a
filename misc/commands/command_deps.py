from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable

from config.defaults import DEFAULT_ISOLATE_ROLE_NAME
from config.defaults import DEFAULT_MUTE_ROLE_NAME
from config.messages import BotMessages


def _default_false(*args, **kwargs) -> bool:
    return False


@dataclass(frozen=True)
class CommandDeps:
    # Core/shared
    messages: BotMessages = field(default_factory=BotMessages)
    conversation_service: Any = None
    reminder_scheduler: Any = None

    # Moderation
    mute_role_name: str = DEFAULT_MUTE_ROLE_NAME
    isolate_role_name: str = DEFAULT_ISOLATE_ROLE_NAME


@dataclass(frozen=True)
class CommandGates:
    user_is_admin: Callable[[Any], bool] = _default_false
