from __future__ import annotations

import discord
from config.defaults import COMMAND_DESCRIPTIONS
from discord.ext import commands
from misc.adhoc_modules.conversation_panel import build_close_embed
from misc.adhoc_modules.conversation_panel import build_close_panel
from misc.adhoc_modules.conversation_panel import build_start_embed
from misc.adhoc_modules.conversation_panel import build_start_panel
from misc.adhoc_modules.conversation_panel import panel_message
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    service = deps.conversation_service
    msgs = deps.messages

    @bot.tree.command(name="empezar", description=COMMAND_DESCRIPTIONS["empezar"])
    async def empezar(interaction: discord.Interaction):
        if interaction.guild is None:
            await interaction.response.send_message(msgs.guild_only, ephemeral=True)
            return
        if service.user_has_conversation(interaction.user.id):
            await interaction.response.send_message(msgs.already_open, ephemeral=True)
            return

        await interaction.response.send_message(
            **panel_message(service, build_start_embed(service)),
            view=build_start_panel(service),
        )

    @bot.tree.command(name="salirsa", description=COMMAND_DESCRIPTIONS["salirsa"])
    async def salirsa(interaction: discord.Interaction):
        if not service.is_conversation_channel(interaction.channel_id or 0):
            await interaction.response.send_message(msgs.exit_menu_wrong_channel, ephemeral=True)
            return

        await interaction.response.send_message(
            **panel_message(service, build_close_embed(service)),
            view=build_close_panel(service),
            ephemeral=True,
        )
