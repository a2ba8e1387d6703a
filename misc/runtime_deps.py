from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from config.messages import BotMessages


@dataclass(frozen=True)
class RuntimeDeps:
    # conversation relay
    conversation_service: Any
    messages: BotMessages

    # keyword shortcuts
    allowed_channel_ids: set[int]
    help_keyword: str
    help_embeds_factory: Callable[[], list]


@dataclass(frozen=True)
class RuntimeBootDeps:
    panel_factory: Callable[[], list]
    sync_commands: bool
    http_port: int | None
    start_health_server_func: Callable | None
