from __future__ import annotations

import traceback

import discord
from discord import app_commands
from discord.ext import commands
from misc.discord_gates import message_in_allowed_channels
from misc.errors import BackendError
from misc.errors import UnknownChannel
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def is_help_keyword(message: discord.Message, deps: RuntimeDeps) -> bool:
    if (message.content or "").strip().lower() != deps.help_keyword:
        return False
    return message_in_allowed_channels(message, deps.allowed_channel_ids)


async def relay_conversation_message(message: discord.Message, deps: RuntimeDeps) -> None:
    text = message.content or ""
    if not text.strip():
        return

    try:
        async with message.channel.typing():
            reply = await deps.conversation_service.relay_turn(message.channel.id, text)
    except BackendError:
        # the user turn stays in history; only the model turn is missing
        await message.reply(deps.messages.backend_error)
        return
    except UnknownChannel:
        # conversation closed while the reply was being generated
        return

    await message.reply(reply or deps.messages.empty_reply)


async def route_message(message: discord.Message, deps: RuntimeDeps) -> str:
    """Handles one inbound message and returns the route it took."""
    if message.author.bot:
        return "ignored"

    service = deps.conversation_service
    channel_id = int(getattr(message.channel, "id", 0) or 0)

    if service.is_conversation_channel(channel_id):
        await relay_conversation_message(message, deps)
        return "conversation"

    if getattr(message, "guild", None) is not None and service.has_prefix(message.channel):
        await message.reply(deps.messages.conversation_inactive)
        return "inactive_conversation"

    if is_help_keyword(message, deps):
        await message.reply(embeds=deps.help_embeds_factory())
        return "help_keyword"

    return "ignored"


def register_runtime_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
    boot: RuntimeBootDeps,
) -> None:
    @bot.event
    async def on_ready():
        if not getattr(bot, "_conversation_panels_registered", False):
            for view in boot.panel_factory():
                bot.add_view(view)
            bot._conversation_panels_registered = True

        print(f"Bot is online as {bot.user}")

        if boot.sync_commands and not getattr(bot, "_commands_synced", False):
            try:
                synced = await bot.tree.sync()
                bot._commands_synced = True
                print(f"[Commands] synced {len(synced)} application commands")
            except discord.HTTPException as e:
                print(f"[Commands] sync failed: {e}")

        if boot.http_port and boot.start_health_server_func and not getattr(bot, "_health_runner", None):
            try:
                bot._health_runner = await boot.start_health_server_func(boot.http_port)
            except OSError as e:
                print(f"[HTTP] could not start health endpoint on port {boot.http_port}: {e}")

    @bot.event
    async def on_message(message: discord.Message):
        await route_message(message, deps)

    @bot.event
    async def on_error(event_method: str, *args, **kwargs):
        print(f"[Error] unhandled exception in {event_method}")
        traceback.print_exc()

    @bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
        name = getattr(interaction.command, "name", "?")
        print(f"[Error] /{name} failed: {error}")
        traceback.print_exception(type(error), error, error.__traceback__)
        try:
            if interaction.response.is_done():
                await interaction.followup.send(deps.messages.unexpected_error, ephemeral=True)
            else:
                await interaction.response.send_message(deps.messages.unexpected_error, ephemeral=True)
        except discord.HTTPException as e:
            print(f"[Error] could not report failure for /{name}: {e}")
