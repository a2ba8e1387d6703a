from __future__ import annotations

import discord
from config.defaults import COMMAND_DESCRIPTIONS
from discord import app_commands
from discord.ext import commands
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.errors import BackendError
from misc.errors import MalformedDuration
from misc.help_embeds import build_help_embeds
from misc.timespec import parse_duration_ms
from relay.generative import truncate_for_discord


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    service = deps.conversation_service
    msgs = deps.messages

    async def _answer_prompt(interaction: discord.Interaction, text: str) -> None:
        # generation routinely exceeds the interactive reply window
        await interaction.response.defer(thinking=True)
        try:
            reply = await service.answer_prompt(text)
        except BackendError:
            await interaction.edit_original_response(content=msgs.backend_error)
            return
        await interaction.edit_original_response(content=reply or msgs.empty_reply)

    @bot.tree.command(name="help", description=COMMAND_DESCRIPTIONS["help"])
    async def help_command(interaction: discord.Interaction):
        await interaction.response.send_message(embeds=build_help_embeds(msgs))

    @bot.tree.command(name="ping", description=COMMAND_DESCRIPTIONS["ping"])
    async def ping(interaction: discord.Interaction):
        latency_ms = int((discord.utils.utcnow() - interaction.created_at).total_seconds() * 1000)
        await interaction.response.send_message(msgs.pong.format(latency_ms=max(0, latency_ms)))

    @bot.tree.command(name="prompt", description=COMMAND_DESCRIPTIONS["prompt"])
    @app_commands.rename(text="input")
    @app_commands.describe(text="Pregunta")
    async def prompt(interaction: discord.Interaction, text: str):
        await _answer_prompt(interaction, text)

    @bot.tree.command(name="solicitud", description=COMMAND_DESCRIPTIONS["solicitud"])
    @app_commands.rename(text="input")
    @app_commands.describe(text="Solicitud")
    async def solicitud(interaction: discord.Interaction, text: str):
        await _answer_prompt(interaction, text)

    @bot.tree.command(name="reminder", description=COMMAND_DESCRIPTIONS["reminder"])
    @app_commands.rename(when="time")
    @app_commands.describe(when="Tiempo en formato 1m, 1h, 1d", message="Mensaje del recordatorio")
    async def reminder(interaction: discord.Interaction, when: str, message: str):
        try:
            delay_ms = parse_duration_ms(when)
        except MalformedDuration:
            await interaction.response.send_message(msgs.reminder_invalid, ephemeral=True)
            return

        channel = interaction.channel
        mention = interaction.user.mention

        async def _deliver() -> None:
            await channel.send(truncate_for_discord(msgs.reminder_fired.format(user=mention, message=message)))

        deps.reminder_scheduler.schedule(
            delay_ms,
            _deliver,
            label=f"user={interaction.user.id} channel={interaction.channel_id}",
        )
        # the time option can be longer than one Discord message
        await interaction.response.send_message(truncate_for_discord(msgs.reminder_set.format(time=when)))
