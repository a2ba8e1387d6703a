from __future__ import annotations

import importlib
from types import SimpleNamespace


class _DummyCompletions:
    def create(self, *args, **kwargs):
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="ok"))]
        )


class _DummyClient:
    def __init__(self):
        self.chat = SimpleNamespace(completions=_DummyCompletions())


def _try_import_or_skip(module_name: str, pip_name: str | None = None) -> bool:
    try:
        importlib.import_module(module_name)
        return True
    except ModuleNotFoundError:
        install_name = pip_name or module_name
        print(
            f"Smoke wiring check skipped: missing dependency '{module_name}'. "
            f"Install requirements and retry (e.g. `pip install {install_name}` "
            f"or `pip install -e .`)."
        )
        return False


def _main() -> int:
    if not _try_import_or_skip("discord", "discord.py"):
        return 0

    import discord
    from discord.ext import commands
    from config.messages import BotMessages
    from conversation.registry import ConversationRegistry
    from conversation.service import ConversationService
    from misc.reminders import ReminderScheduler
    from misc.runtime_wiring import wire_bot_runtime
    from relay.generative import GenerativeRelay

    intents = discord.Intents.none()
    bot = commands.Bot(command_prefix="!", intents=intents)
    messages = BotMessages()

    wire_bot_runtime(
        bot,
        conversation_service=ConversationService(
            registry=ConversationRegistry(),
            relay=GenerativeRelay(client=_DummyClient(), model="smoke-model"),
            messages=messages,
        ),
        reminder_scheduler=ReminderScheduler(),
        messages=messages,
        allowed_channel_ids={123456789012345678},
        user_is_admin=lambda user: True,
        mute_role_name="Muted",
        isolate_role_name="Isolated",
        sync_commands=False,
    )

    expected_commands = {
        "help",
        "prompt",
        "solicitud",
        "ping",
        "userinfo",
        "reminder",
        "mute",
        "unmute",
        "ban",
        "unban",
        "aislar",
        "unaislar",
        "empezar",
        "salirsa",
    }
    existing_commands = {cmd.name for cmd in bot.tree.get_commands()}
    missing = sorted(expected_commands - existing_commands)
    if missing:
        raise RuntimeError(f"Missing expected commands: {missing}")

    for event_name in ("on_ready", "on_message", "on_error"):
        if getattr(bot, event_name, None) is None:
            raise RuntimeError(f"Runtime event {event_name} was not registered")

    print("Smoke wiring check passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
