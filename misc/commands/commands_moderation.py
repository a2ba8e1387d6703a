from __future__ import annotations

from typing import Awaitable, Callable

import discord
from config.defaults import COMMAND_DESCRIPTIONS
from config.defaults import EMBED_COLOUR
from discord import app_commands
from discord.ext import commands
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.errors import ExternalPlatformError
from misc.errors import PermissionDenied
from misc.errors import RoleNotFound


def resolve_role(guild: discord.Guild, role_name: str) -> discord.Role:
    role = discord.utils.get(guild.roles, name=role_name)
    if role is None:
        raise RoleNotFound(role_name)
    return role


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    msgs = deps.messages

    async def _run_moderation(
        interaction: discord.Interaction,
        action: Callable[[], Awaitable[str]],
        *,
        failure_text: str,
    ) -> None:
        # permission check -> target resolution -> external mutation -> confirmation
        try:
            if interaction.guild is None:
                await interaction.response.send_message(msgs.guild_only, ephemeral=True)
                return
            if not gates.user_is_admin(interaction.user):
                raise PermissionDenied(f"user {interaction.user.id} is not an administrator")
            text = await action()
        except PermissionDenied as e:
            print(f"[Moderation] denied: {e}")
            text = msgs.permission_denied
        except RoleNotFound as e:
            text = msgs.role_not_found.format(role=e.role_name)
        except ExternalPlatformError as e:
            print(f"[Moderation] Error: {e}")
            text = failure_text
        await interaction.response.send_message(text)

    async def _change_role(
        interaction: discord.Interaction,
        target: discord.Member,
        *,
        role_name: str,
        add: bool,
        reason: str,
    ) -> None:
        role = resolve_role(interaction.guild, role_name)
        try:
            if add:
                await target.add_roles(role, reason=reason)
            else:
                await target.remove_roles(role, reason=reason)
        except discord.HTTPException as e:
            raise ExternalPlatformError(f"role {role_name!r} change failed for {target.id}: {e}") from e

    @bot.tree.command(name="mute", description=COMMAND_DESCRIPTIONS["mute"])
    @app_commands.describe(target="El usuario a mutear", reason="Motivo")
    async def mute(interaction: discord.Interaction, target: discord.Member, reason: str | None = None):
        reason = reason or msgs.no_reason

        async def action() -> str:
            await _change_role(interaction, target, role_name=deps.mute_role_name, add=True, reason=reason)
            return msgs.muted.format(user=target, reason=reason)

        await _run_moderation(interaction, action, failure_text=msgs.moderation_failed.format(user=target))

    @bot.tree.command(name="unmute", description=COMMAND_DESCRIPTIONS["unmute"])
    @app_commands.describe(target="El usuario a desmutear")
    async def unmute(interaction: discord.Interaction, target: discord.Member):
        async def action() -> str:
            await _change_role(interaction, target, role_name=deps.mute_role_name, add=False, reason="unmute")
            return msgs.unmuted.format(user=target)

        await _run_moderation(interaction, action, failure_text=msgs.moderation_failed.format(user=target))

    @bot.tree.command(name="aislar", description=COMMAND_DESCRIPTIONS["aislar"])
    @app_commands.describe(target="El usuario a aislar", reason="Motivo")
    async def aislar(interaction: discord.Interaction, target: discord.Member, reason: str | None = None):
        reason = reason or msgs.no_reason

        async def action() -> str:
            await _change_role(interaction, target, role_name=deps.isolate_role_name, add=True, reason=reason)
            return msgs.isolated.format(user=target, reason=reason)

        await _run_moderation(interaction, action, failure_text=msgs.moderation_failed.format(user=target))

    @bot.tree.command(name="unaislar", description=COMMAND_DESCRIPTIONS["unaislar"])
    @app_commands.describe(target="El usuario a desaislar")
    async def unaislar(interaction: discord.Interaction, target: discord.Member):
        async def action() -> str:
            await _change_role(interaction, target, role_name=deps.isolate_role_name, add=False, reason="unaislar")
            return msgs.unisolated.format(user=target)

        await _run_moderation(interaction, action, failure_text=msgs.moderation_failed.format(user=target))

    @bot.tree.command(name="ban", description=COMMAND_DESCRIPTIONS["ban"])
    @app_commands.describe(target="El usuario a banear", reason="Motivo")
    async def ban(interaction: discord.Interaction, target: discord.Member, reason: str | None = None):
        reason = reason or msgs.no_reason

        async def action() -> str:
            try:
                await interaction.guild.ban(target, reason=reason)
            except discord.HTTPException as e:
                raise ExternalPlatformError(f"ban failed for {target.id}: {e}") from e
            return msgs.banned.format(user=target, reason=reason)

        await _run_moderation(interaction, action, failure_text=msgs.moderation_failed.format(user=target))

    @bot.tree.command(name="unban", description=COMMAND_DESCRIPTIONS["unban"])
    @app_commands.describe(userid="El ID del usuario a desbanear")
    async def unban(interaction: discord.Interaction, userid: str):
        async def action() -> str:
            try:
                user_id = int(userid.strip())
                await interaction.guild.unban(discord.Object(id=user_id))
            except (ValueError, discord.HTTPException) as e:
                raise ExternalPlatformError(f"unban failed for {userid!r}: {e}") from e
            return msgs.unbanned.format(user_id=user_id)

        await _run_moderation(interaction, action, failure_text=msgs.unban_failed)

    @bot.tree.command(name="userinfo", description=COMMAND_DESCRIPTIONS["userinfo"])
    @app_commands.describe(target="El usuario objetivo")
    async def userinfo(interaction: discord.Interaction, target: discord.Member):
        if interaction.guild is None:
            await interaction.response.send_message(msgs.guild_only, ephemeral=True)
            return
        if not gates.user_is_admin(interaction.user):
            await interaction.response.send_message(msgs.permission_denied)
            return

        joined = target.joined_at.strftime("%d/%m/%Y") if target.joined_at else "N/A"
        embed = discord.Embed(
            title=msgs.userinfo_title,
            colour=discord.Colour(EMBED_COLOUR),
            timestamp=discord.utils.utcnow(),
        )
        embed.add_field(name="ID", value=str(target.id), inline=True)
        embed.add_field(name="Apodo", value=target.nick or "Ninguno", inline=True)
        embed.add_field(name="Fecha de ingreso", value=joined, inline=False)
        embed.set_thumbnail(url=target.display_avatar.url)
        await interaction.response.send_message(embed=embed)
