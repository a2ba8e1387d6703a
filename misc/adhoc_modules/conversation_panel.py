from __future__ import annotations

from pathlib import Path

import discord
from config.defaults import EMBED_COLOUR
from conversation.service import ConversationService
from misc.errors import AlreadyOpen
from misc.errors import ExternalPlatformError
from misc.errors import NotOwner

START_CONVERSATION_ID = "start_conversation"
CLOSE_CONVERSATION_ID = "close_conversation"
CONFIRM_CLOSE_ID = "confirm_close_conversation"
CANCEL_CLOSE_ID = "cancel_close_conversation"


def build_start_embed(service: ConversationService) -> discord.Embed:
    return discord.Embed(
        title=service.messages.start_panel_title,
        description=service.messages.start_panel_description,
        colour=discord.Colour(EMBED_COLOUR),
    )


def build_close_embed(service: ConversationService) -> discord.Embed:
    return discord.Embed(
        title=service.messages.close_panel_title,
        description=service.messages.close_panel_description,
        colour=discord.Colour(EMBED_COLOUR),
    )


def panel_message(service: ConversationService, embed: discord.Embed) -> dict:
    """
    Send kwargs for a panel embed. When a panel image is configured it is
    attached fresh for every send and shown as the embed image.
    """
    kwargs = {"embed": embed}
    path = service.panel_image_path
    if not path:
        return kwargs

    p = Path(path)
    if not p.is_file():
        print(f"[Conversation] panel image not found at {p}; sending panel without it")
        return kwargs

    kwargs["file"] = discord.File(str(p), filename=p.name)
    embed.set_image(url=f"attachment://{p.name}")
    return kwargs


async def handle_start_pressed(interaction: discord.Interaction, service: ConversationService) -> None:
    msgs = service.messages
    guild = interaction.guild
    if guild is None:
        await interaction.response.send_message(msgs.guild_only, ephemeral=True)
        return

    # channel creation can outlast the initial response window
    await interaction.response.defer(ephemeral=True, thinking=True)
    try:
        channel = await service.open_conversation(guild=guild, user=interaction.user)
    except AlreadyOpen:
        await interaction.followup.send(msgs.already_open, ephemeral=True)
        return
    except ExternalPlatformError:
        await interaction.followup.send(msgs.channel_create_failed, ephemeral=True)
        return

    try:
        await channel.send(**panel_message(service, build_close_embed(service)), view=build_close_panel(service))
    except discord.HTTPException as e:
        print(f"[Conversation] could not post close panel in channel={channel.id}: {e}")

    await interaction.followup.send(msgs.channel_created.format(channel=channel.mention), ephemeral=True)


async def handle_close_pressed(interaction: discord.Interaction, service: ConversationService) -> None:
    msgs = service.messages
    if not service.is_owner(interaction.user.id, interaction.channel_id or 0):
        await interaction.response.send_message(msgs.cannot_close, ephemeral=True)
        return

    await interaction.response.send_message(
        msgs.confirm_close_prompt,
        view=build_confirm_close_panel(service),
        ephemeral=True,
    )


async def handle_confirm_close(interaction: discord.Interaction, service: ConversationService) -> None:
    msgs = service.messages
    if not service.is_owner(interaction.user.id, interaction.channel_id or 0):
        await interaction.response.send_message(msgs.cannot_close, ephemeral=True)
        return

    await interaction.response.defer(ephemeral=True)
    try:
        await service.close_conversation(user_id=interaction.user.id, channel=interaction.channel)
    except NotOwner:
        await interaction.followup.send(msgs.cannot_close, ephemeral=True)
    except ExternalPlatformError:
        await interaction.followup.send(msgs.channel_delete_failed, ephemeral=True)


async def handle_cancel_close(interaction: discord.Interaction, service: ConversationService) -> None:
    await interaction.response.edit_message(content=service.messages.close_cancelled, view=None)


def build_start_panel(service: ConversationService) -> discord.ui.View:
    class StartConversationPanel(discord.ui.View):
        def __init__(self):
            super().__init__(timeout=None)

        @discord.ui.button(
            label=service.messages.start_button_label,
            style=discord.ButtonStyle.primary,
            custom_id=START_CONVERSATION_ID,
        )
        async def start_button(self, interaction: discord.Interaction, button: discord.ui.Button):
            await handle_start_pressed(interaction, service)

    return StartConversationPanel()


def build_close_panel(service: ConversationService) -> discord.ui.View:
    class CloseConversationPanel(discord.ui.View):
        def __init__(self):
            super().__init__(timeout=None)

        @discord.ui.button(
            label=service.messages.close_button_label,
            style=discord.ButtonStyle.danger,
            custom_id=CLOSE_CONVERSATION_ID,
        )
        async def close_button(self, interaction: discord.Interaction, button: discord.ui.Button):
            await handle_close_pressed(interaction, service)

    return CloseConversationPanel()


def build_confirm_close_panel(service: ConversationService) -> discord.ui.View:
    class ConfirmClosePanel(discord.ui.View):
        def __init__(self):
            super().__init__(timeout=None)

        @discord.ui.button(
            label=service.messages.confirm_label,
            style=discord.ButtonStyle.danger,
            custom_id=CONFIRM_CLOSE_ID,
        )
        async def confirm_button(self, interaction: discord.Interaction, button: discord.ui.Button):
            await handle_confirm_close(interaction, service)

        @discord.ui.button(
            label=service.messages.cancel_label,
            style=discord.ButtonStyle.secondary,
            custom_id=CANCEL_CLOSE_ID,
        )
        async def cancel_button(self, interaction: discord.Interaction, button: discord.ui.Button):
            await handle_cancel_close(interaction, service)

    return ConfirmClosePanel()


def build_persistent_panels(service: ConversationService) -> list[discord.ui.View]:
    return [
        build_start_panel(service),
        build_close_panel(service),
        build_confirm_close_panel(service),
    ]
