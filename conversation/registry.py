from __future__ import annotations

import asyncio
import itertools

from conversation.models import Conversation
from conversation.models import Reservation
from conversation.models import Turn
from misc.errors import AlreadyOpen
from misc.errors import NotOwner
from misc.errors import UnknownChannel


class ConversationRegistry:
    """
    In-memory store of active conversations, keyed both by owner and by channel.

    A user occupies a slot from the moment `try_open` reserves it until the
    conversation is closed or the reservation is released. Every mutation runs
    under one asyncio.Lock so check-and-reserve is atomic and the owner and
    channel mappings are always updated together.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._pending: dict[int, Reservation] = {}
        self._owners: dict[int, int] = {}
        self._conversations: dict[int, Conversation] = {}
        self._channel_locks: dict[int, asyncio.Lock] = {}
        self._tokens = itertools.count(1)

    # ---- read helpers (no await, safe to call from any task) ----

    def has_channel(self, channel_id: int) -> bool:
        return int(channel_id) in self._conversations

    def owner_of(self, channel_id: int) -> int | None:
        conversation = self._conversations.get(int(channel_id))
        return conversation.owner_user_id if conversation else None

    def channel_of(self, user_id: int) -> int | None:
        return self._owners.get(int(user_id))

    def is_reserved(self, user_id: int) -> bool:
        return int(user_id) in self._pending

    def active_count(self) -> int:
        return len(self._conversations)

    def channel_lock(self, channel_id: int) -> asyncio.Lock:
        channel_id = int(channel_id)
        lock = self._channel_locks.get(channel_id)
        if lock is None:
            lock = self._channel_locks[channel_id] = asyncio.Lock()
        return lock

    def discard_channel_lock(self, channel_id: int) -> None:
        channel_id = int(channel_id)
        if channel_id not in self._conversations:
            self._channel_locks.pop(channel_id, None)

    # ---- lifecycle ----

    async def try_open(self, user_id: int) -> Reservation:
        user_id = int(user_id)
        async with self._lock:
            if user_id in self._owners or user_id in self._pending:
                raise AlreadyOpen(user_id)
            reservation = Reservation(user_id=user_id, token=next(self._tokens))
            self._pending[user_id] = reservation
            return reservation

    async def release(self, reservation: Reservation) -> None:
        async with self._lock:
            if self._pending.get(reservation.user_id) == reservation:
                del self._pending[reservation.user_id]

    async def bind(self, reservation: Reservation, channel_id: int) -> Conversation:
        channel_id = int(channel_id)
        async with self._lock:
            if self._pending.get(reservation.user_id) != reservation:
                raise ValueError(f"reservation for user {reservation.user_id} is not pending")
            if channel_id in self._conversations:
                raise ValueError(f"channel {channel_id} is already registered")
            del self._pending[reservation.user_id]
            conversation = Conversation(owner_user_id=reservation.user_id, channel_id=channel_id)
            self._owners[reservation.user_id] = channel_id
            self._conversations[channel_id] = conversation
            return conversation

    async def close(self, user_id: int, channel_id: int) -> Conversation:
        user_id = int(user_id)
        channel_id = int(channel_id)
        async with self._lock:
            if self._owners.get(user_id) != channel_id or channel_id not in self._conversations:
                raise NotOwner(user_id, channel_id)
            del self._owners[user_id]
            # the channel lock outlives the entry; see discard_channel_lock
            return self._conversations.pop(channel_id)

    async def restore(self, conversation: Conversation) -> None:
        async with self._lock:
            user_id = conversation.owner_user_id
            if user_id in self._owners or user_id in self._pending:
                raise AlreadyOpen(user_id)
            if conversation.channel_id in self._conversations:
                raise ValueError(f"channel {conversation.channel_id} is already registered")
            self._owners[user_id] = conversation.channel_id
            self._conversations[conversation.channel_id] = conversation

    # ---- history ----

    async def append_user_turn(self, channel_id: int, text: str) -> None:
        await self._append(channel_id, Turn(role="user", text=text))

    async def append_model_turn(self, channel_id: int, text: str) -> None:
        await self._append(channel_id, Turn(role="model", text=text))

    async def _append(self, channel_id: int, turn: Turn) -> None:
        async with self._lock:
            conversation = self._conversations.get(int(channel_id))
            if conversation is None:
                raise UnknownChannel(channel_id)
            conversation.history.append(turn)

    async def history_of(self, channel_id: int) -> tuple[Turn, ...]:
        async with self._lock:
            conversation = self._conversations.get(int(channel_id))
            if conversation is None:
                raise UnknownChannel(channel_id)
            return tuple(conversation.history)
