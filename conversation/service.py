from __future__ import annotations

import re

import discord
from config.defaults import CONVERSATION_CHANNEL_PREFIX
from config.messages import BotMessages
from conversation.models import Conversation
from conversation.registry import ConversationRegistry
from misc.errors import AlreadyOpen
from misc.errors import ExternalPlatformError
from relay.generative import GenerativeRelay
from relay.generative import truncate_for_discord


def _slug_channel_token(text: str) -> str:
    raw = str(text or "").strip().lower()
    raw = re.sub(r"[^a-z0-9]+", "-", raw).strip("-")
    return raw or "usuario"


class ConversationService:
    """
    Opens, relays and closes private conversation channels.

    External channel calls happen here so the registry never holds an entry
    without a backing channel: a slot is reserved first, the channel is
    created, and only then is the reservation bound to the channel id.
    """

    def __init__(
        self,
        *,
        registry: ConversationRegistry,
        relay: GenerativeRelay,
        messages: BotMessages | None = None,
        channel_prefix: str = CONVERSATION_CHANNEL_PREFIX,
        panel_image_path: str | None = None,
    ) -> None:
        self.registry = registry
        self.relay = relay
        self.messages = messages or BotMessages()
        self.channel_prefix = channel_prefix
        self.panel_image_path = panel_image_path

    def channel_name_for(self, user) -> str:
        name = getattr(user, "name", None) or str(getattr(user, "id", ""))
        return f"{self.channel_prefix}{_slug_channel_token(name)}"[:100]

    def has_prefix(self, channel) -> bool:
        return str(getattr(channel, "name", "") or "").startswith(self.channel_prefix)

    def is_conversation_channel(self, channel_id: int) -> bool:
        return self.registry.has_channel(channel_id)

    def user_has_conversation(self, user_id: int) -> bool:
        return self.registry.channel_of(user_id) is not None or self.registry.is_reserved(user_id)

    def is_owner(self, user_id: int, channel_id: int) -> bool:
        return self.registry.channel_of(user_id) == int(channel_id)

    @staticmethod
    def private_overwrites(guild, user) -> dict:
        return {
            guild.default_role: discord.PermissionOverwrite(view_channel=False),
            user: discord.PermissionOverwrite(view_channel=True, send_messages=True),
            guild.me: discord.PermissionOverwrite(view_channel=True, send_messages=True),
        }

    async def open_conversation(self, *, guild, user):
        reservation = await self.registry.try_open(user.id)
        try:
            channel = await guild.create_text_channel(
                name=self.channel_name_for(user),
                overwrites=self.private_overwrites(guild, user),
                reason=self.messages.channel_create_reason,
            )
        except Exception as e:
            await self.registry.release(reservation)
            print(f"[Conversation] Error creating channel for user={user.id}: {e}")
            raise ExternalPlatformError(str(e)) from e

        await self.registry.bind(reservation, channel.id)
        print(f"[Conversation] opened channel={channel.id} user={user.id} active={self.registry.active_count()}")
        return channel

    async def close_conversation(self, *, user_id: int, channel) -> Conversation:
        conversation = await self.registry.close(user_id, channel.id)
        try:
            await channel.delete(reason=self.messages.channel_delete_reason)
        except Exception as e:
            print(f"[Conversation] Error deleting channel={channel.id}: {e}")
            await self._restore_after_failed_delete(conversation)
            raise ExternalPlatformError(str(e)) from e

        self.registry.discard_channel_lock(channel.id)
        print(f"[Conversation] closed channel={channel.id} user={user_id} turns={len(conversation.history)}")
        return conversation

    async def _restore_after_failed_delete(self, conversation: Conversation) -> None:
        try:
            await self.registry.restore(conversation)
        except (AlreadyOpen, ValueError) as e:
            # the user opened a new conversation while the delete was in flight
            print(f"[Conversation] channel={conversation.channel_id} left unregistered: {e}")

    async def relay_turn(self, channel_id: int, text: str) -> str:
        async with self.registry.channel_lock(channel_id):
            history = await self.registry.history_of(channel_id)
            await self.registry.append_user_turn(channel_id, text)
            generated = await self.relay.generate(text, history)
            reply = truncate_for_discord(generated)
            await self.registry.append_model_turn(channel_id, reply)
        return reply

    async def answer_prompt(self, text: str) -> str:
        generated = await self.relay.generate(text)
        return truncate_for_discord(generated)
