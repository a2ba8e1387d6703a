from __future__ import annotations

import discord


def message_in_allowed_channels(message: discord.Message, allowed_channel_ids: set[int]) -> bool:
    # keyword shortcuts only answer inside the configured guild channels
    if getattr(message, "guild", None) is None:
        return False

    channel_id = int(getattr(message.channel, "id", 0) or 0)
    if channel_id in allowed_channel_ids:
        return True
    # thread: allow if parent is allowed
    if isinstance(message.channel, discord.Thread) and message.channel.parent:
        return int(message.channel.parent.id) in allowed_channel_ids
    return False


def user_is_admin(user) -> bool:
    permissions = getattr(user, "guild_permissions", None)
    return bool(getattr(permissions, "administrator", False))
