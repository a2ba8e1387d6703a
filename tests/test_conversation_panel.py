from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

try:
    import discord

    from conversation.service import ConversationService
    from misc.adhoc_modules import conversation_panel
except ModuleNotFoundError:
    discord = None
    ConversationService = None
    conversation_panel = None

from config.messages import BotMessages
from conversation.registry import ConversationRegistry


class _FakeUser:
    def __init__(self, user_id: int, name: str = "ana"):
        self.id = int(user_id)
        self.name = name
        self.mention = f"<@{user_id}>"


class _FakeChannel:
    def __init__(self, channel_id: int, name: str = ""):
        self.id = int(channel_id)
        self.name = name
        self.mention = f"<#{channel_id}>"
        self.sent: list[dict] = []
        self.deleted = False
        self.fail_delete = False

    async def send(self, content=None, **kwargs):
        self.sent.append({"content": content, **kwargs})

    async def delete(self, reason=None):
        if self.fail_delete:
            raise RuntimeError("missing permissions")
        self.deleted = True


class _FakeGuild:
    def __init__(self, *, fail_create: bool = False):
        self.default_role = object()
        self.me = object()
        self.fail_create = fail_create
        self.created: list[_FakeChannel] = []

    async def create_text_channel(self, name, overwrites=None, reason=None):
        if self.fail_create:
            raise RuntimeError("channel limit reached")
        channel = _FakeChannel(2000 + len(self.created), name)
        self.created.append(channel)
        return channel


class _FakeResponse:
    def __init__(self):
        self.sent: list[dict] = []
        self.deferred: dict | None = None
        self.edited: dict | None = None

    async def send_message(self, content=None, **kwargs):
        self.sent.append({"content": content, **kwargs})

    async def defer(self, **kwargs):
        self.deferred = kwargs

    async def edit_message(self, **kwargs):
        self.edited = kwargs


class _FakeFollowup:
    def __init__(self):
        self.sent: list[dict] = []

    async def send(self, content=None, **kwargs):
        self.sent.append({"content": content, **kwargs})


class _FakeInteraction:
    def __init__(self, *, user, guild=None, channel=None):
        self.user = user
        self.guild = guild
        self.channel = channel
        self.channel_id = channel.id if channel is not None else None
        self.response = _FakeResponse()
        self.followup = _FakeFollowup()


class _NoopRelay:
    async def generate(self, prompt, history=()):
        return "ok"


@unittest.skipIf(conversation_panel is None, "discord.py not installed")
class ConversationPanelTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.messages = BotMessages()
        self.registry = ConversationRegistry()
        self.service = ConversationService(registry=self.registry, relay=_NoopRelay(), messages=self.messages)

    async def _open(self, user_id: int = 1) -> _FakeChannel:
        return await self.service.open_conversation(guild=_FakeGuild(), user=_FakeUser(user_id))

    async def test_start_creates_channel_and_posts_close_panel(self):
        guild = _FakeGuild()
        interaction = _FakeInteraction(user=_FakeUser(1), guild=guild, channel=_FakeChannel(10))

        await conversation_panel.handle_start_pressed(interaction, self.service)

        channel = guild.created[0]
        self.assertEqual(interaction.response.deferred, {"ephemeral": True, "thinking": True})
        self.assertEqual(
            interaction.followup.sent,
            [{"content": self.messages.channel_created.format(channel=channel.mention), "ephemeral": True}],
        )
        self.assertEqual(len(channel.sent), 1)
        self.assertEqual(channel.sent[0]["embed"].title, self.messages.close_panel_title)
        self.assertEqual(
            [item.custom_id for item in channel.sent[0]["view"].children],
            [conversation_panel.CLOSE_CONVERSATION_ID],
        )

    async def test_start_twice_reports_already_open(self):
        await self._open(1)
        guild = _FakeGuild()
        interaction = _FakeInteraction(user=_FakeUser(1), guild=guild, channel=_FakeChannel(10))

        await conversation_panel.handle_start_pressed(interaction, self.service)

        self.assertEqual(guild.created, [])
        self.assertEqual(interaction.followup.sent, [{"content": self.messages.already_open, "ephemeral": True}])

    async def test_start_reports_creation_failure(self):
        interaction = _FakeInteraction(user=_FakeUser(1), guild=_FakeGuild(fail_create=True), channel=_FakeChannel(10))

        await conversation_panel.handle_start_pressed(interaction, self.service)

        self.assertEqual(
            interaction.followup.sent,
            [{"content": self.messages.channel_create_failed, "ephemeral": True}],
        )
        self.assertFalse(self.service.user_has_conversation(1))

    async def test_start_outside_guild(self):
        interaction = _FakeInteraction(user=_FakeUser(1), guild=None, channel=_FakeChannel(10))
        await conversation_panel.handle_start_pressed(interaction, self.service)
        self.assertEqual(interaction.response.sent, [{"content": self.messages.guild_only, "ephemeral": True}])

    async def test_close_by_non_owner_is_refused(self):
        channel = await self._open(1)
        interaction = _FakeInteraction(user=_FakeUser(2), guild=_FakeGuild(), channel=channel)

        await conversation_panel.handle_close_pressed(interaction, self.service)

        self.assertEqual(interaction.response.sent, [{"content": self.messages.cannot_close, "ephemeral": True}])
        self.assertTrue(self.service.is_conversation_channel(channel.id))

    async def test_close_by_owner_asks_for_confirmation(self):
        channel = await self._open(1)
        interaction = _FakeInteraction(user=_FakeUser(1), guild=_FakeGuild(), channel=channel)

        await conversation_panel.handle_close_pressed(interaction, self.service)

        sent = interaction.response.sent[0]
        self.assertEqual(sent["content"], self.messages.confirm_close_prompt)
        self.assertTrue(sent["ephemeral"])
        self.assertEqual(
            [item.custom_id for item in sent["view"].children],
            [conversation_panel.CONFIRM_CLOSE_ID, conversation_panel.CANCEL_CLOSE_ID],
        )
        self.assertFalse(channel.deleted)

    async def test_confirm_deletes_channel_and_clears_state(self):
        channel = await self._open(1)
        interaction = _FakeInteraction(user=_FakeUser(1), guild=_FakeGuild(), channel=channel)

        await conversation_panel.handle_confirm_close(interaction, self.service)

        self.assertTrue(channel.deleted)
        self.assertFalse(self.service.user_has_conversation(1))
        self.assertFalse(self.service.is_conversation_channel(channel.id))
        self.assertEqual(interaction.followup.sent, [])

    async def test_confirm_reports_delete_failure(self):
        channel = await self._open(1)
        channel.fail_delete = True
        interaction = _FakeInteraction(user=_FakeUser(1), guild=_FakeGuild(), channel=channel)

        await conversation_panel.handle_confirm_close(interaction, self.service)

        self.assertEqual(
            interaction.followup.sent,
            [{"content": self.messages.channel_delete_failed, "ephemeral": True}],
        )
        self.assertTrue(self.service.is_conversation_channel(channel.id))

    async def test_confirm_by_non_owner_is_refused(self):
        channel = await self._open(1)
        interaction = _FakeInteraction(user=_FakeUser(2), guild=_FakeGuild(), channel=channel)

        await conversation_panel.handle_confirm_close(interaction, self.service)

        self.assertEqual(interaction.response.sent, [{"content": self.messages.cannot_close, "ephemeral": True}])
        self.assertFalse(channel.deleted)

    async def test_cancel_leaves_conversation_open(self):
        channel = await self._open(1)
        interaction = _FakeInteraction(user=_FakeUser(1), guild=_FakeGuild(), channel=channel)

        await conversation_panel.handle_cancel_close(interaction, self.service)

        self.assertEqual(interaction.response.edited, {"content": self.messages.close_cancelled, "view": None})
        self.assertTrue(self.service.is_conversation_channel(channel.id))

    def _image_path(self) -> str:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "ai.gif"
        path.write_bytes(b"GIF89a")
        return str(path)

    async def test_panel_message_without_image(self):
        embed = conversation_panel.build_start_embed(self.service)
        self.assertEqual(conversation_panel.panel_message(self.service, embed), {"embed": embed})
        self.assertIsNone(embed.image.url)

    async def test_panel_message_attaches_configured_image(self):
        self.service.panel_image_path = self._image_path()
        embed = conversation_panel.build_close_embed(self.service)

        kwargs = conversation_panel.panel_message(self.service, embed)
        self.addCleanup(kwargs["file"].close)

        self.assertIs(kwargs["embed"], embed)
        self.assertEqual(kwargs["file"].filename, "ai.gif")
        self.assertEqual(embed.image.url, "attachment://ai.gif")

    async def test_panel_message_skips_missing_image(self):
        self.service.panel_image_path = "/nonexistent/ai.gif"
        embed = conversation_panel.build_start_embed(self.service)

        with redirect_stdout(io.StringIO()) as out:
            kwargs = conversation_panel.panel_message(self.service, embed)

        self.assertNotIn("file", kwargs)
        self.assertIn("panel image not found", out.getvalue())

    async def test_start_posts_close_panel_with_image(self):
        self.service.panel_image_path = self._image_path()
        guild = _FakeGuild()
        interaction = _FakeInteraction(user=_FakeUser(1), guild=guild, channel=_FakeChannel(10))

        await conversation_panel.handle_start_pressed(interaction, self.service)

        sent = guild.created[0].sent[0]
        self.addCleanup(sent["file"].close)
        self.assertEqual(sent["file"].filename, "ai.gif")
        self.assertEqual(sent["embed"].image.url, "attachment://ai.gif")

    async def test_persistent_panels_cover_every_button(self):
        views = conversation_panel.build_persistent_panels(self.service)
        custom_ids = {item.custom_id for view in views for item in view.children}
        self.assertEqual(
            custom_ids,
            {
                conversation_panel.START_CONVERSATION_ID,
                conversation_panel.CLOSE_CONVERSATION_ID,
                conversation_panel.CONFIRM_CLOSE_ID,
                conversation_panel.CANCEL_CLOSE_ID,
            },
        )
        self.assertTrue(all(view.timeout is None for view in views))
        self.assertTrue(all(view.is_persistent() for view in views))


if __name__ == "__main__":
    unittest.main()
