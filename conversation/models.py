from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

TurnRole = Literal["user", "model"]


def _utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True, frozen=True)
class Turn:
    role: TurnRole
    text: str


@dataclass(slots=True, frozen=True)
class Reservation:
    user_id: int
    token: int


@dataclass(slots=True)
class Conversation:
    owner_user_id: int
    channel_id: int
    history: list[Turn] = field(default_factory=list)
    created_at_utc: str = field(default_factory=_utc_iso)
