from __future__ import annotations

from config.defaults import HELP_KEYWORD
from config.messages import BotMessages
from misc.adhoc_modules.conversation_panel import build_persistent_panels
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_conversation import register as register_conversation
from misc.commands.commands_general import register as register_general
from misc.commands.commands_moderation import register as register_moderation
from misc.events_runtime import register_runtime_events
from misc.help_embeds import build_help_embeds
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def wire_bot_runtime(
    bot,
    *,
    conversation_service,
    reminder_scheduler,
    messages: BotMessages,
    allowed_channel_ids: set[int],
    user_is_admin,
    mute_role_name: str,
    isolate_role_name: str,
    sync_commands: bool = True,
    http_port: int | None = None,
    start_health_server_func=None,
) -> None:
    command_deps = CommandDeps(
        messages=messages,
        conversation_service=conversation_service,
        reminder_scheduler=reminder_scheduler,
        mute_role_name=mute_role_name,
        isolate_role_name=isolate_role_name,
    )
    command_gates = CommandGates(
        user_is_admin=user_is_admin,
    )

    register_general(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_conversation(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_moderation(
        bot,
        deps=command_deps,
        gates=command_gates,
    )

    register_runtime_events(
        bot,
        deps=RuntimeDeps(
            conversation_service=conversation_service,
            messages=messages,
            allowed_channel_ids=allowed_channel_ids,
            help_keyword=HELP_KEYWORD,
            help_embeds_factory=lambda: build_help_embeds(messages),
        ),
        boot=RuntimeBootDeps(
            panel_factory=lambda: build_persistent_panels(conversation_service),
            sync_commands=sync_commands,
            http_port=http_port,
            start_health_server_func=start_health_server_func,
        ),
    )
