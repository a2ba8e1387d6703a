from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml


@dataclass(slots=True, frozen=True)
class BotMessages:
    # conversation lifecycle
    already_open: str = "Ya tienes una conversación abierta. No puedes crear más de una."
    start_panel_title: str = "Abrir Conversación con S.A 🤖"
    start_panel_description: str = "Para iniciar una conversación con S.A, haz clic en el botón de abajo."
    start_button_label: str = "Crear Conversación 💭"
    close_panel_title: str = "S.A 🤖"
    close_panel_description: str = "Para salir de la conversación con S.A, haz clic en el botón de abajo."
    close_button_label: str = "Salir de la conversación ❌"
    channel_created: str = "He creado un canal para ti: {channel}"
    channel_create_failed: str = "Hubo un error al crear el canal."
    channel_create_reason: str = "Conversación privada con el bot."
    cannot_close: str = "No puedes cerrar este canal."
    confirm_close_prompt: str = "¿Estás seguro de que quieres salir de la conversación?"
    confirm_label: str = "Sí"
    cancel_label: str = "No"
    close_cancelled: str = "La conversación no se ha cerrado."
    channel_delete_failed: str = "Hubo un error al eliminar el canal."
    channel_delete_reason: str = "Conversación finalizada por el usuario."
    exit_menu_wrong_channel: str = "No puedes desplegar el menú de salida de conversación en este canal."
    conversation_inactive: str = "Esta conversación ya no está activa. Usa /empezar para abrir una nueva."

    # relay
    backend_error: str = "Hubo un error al generar la respuesta. Inténtalo de nuevo."
    empty_reply: str = "(sin respuesta)"

    # moderation
    permission_denied: str = "No tienes permisos para usar este comando."
    role_not_found: str = 'No se encontró el rol "{role}".'
    no_reason: str = "No se especificó motivo"
    muted: str = "{user} ha sido muteado. Motivo: {reason}"
    unmuted: str = "{user} ha sido desmuteado."
    banned: str = "{user} ha sido baneado. Motivo: {reason}"
    unbanned: str = "El usuario con ID {user_id} ha sido desbaneado."
    unban_failed: str = "Hubo un error al intentar desbanear al usuario. Asegúrate de que la ID es correcta."
    isolated: str = "{user} ha sido aislado. Motivo: {reason}"
    unisolated: str = "{user} ha sido desaislado."
    moderation_failed: str = "No pude completar la acción sobre {user}."
    guild_only: str = "Este comando solo funciona dentro del servidor."
    userinfo_title: str = "Información del Usuario"

    # general
    pong: str = "Pong! Latencia: {latency_ms}ms"
    reminder_invalid: str = "Formato de tiempo no válido. Usa m para minutos, h para horas, d para días."
    reminder_set: str = "Recordatorio configurado para {time} desde ahora."
    reminder_fired: str = "{user} Recordatorio: {message}"
    help_title: str = "Comandos S.A"
    help_title_continued: str = "Comandos S.A - Parte 2"
    unexpected_error: str = "Algo salió mal. Revisa los registros."


def load_bot_messages(path: str | Path | None) -> tuple[BotMessages, str | None]:
    """
    Returns (messages, warning_message). warning_message is None on clean load
    or when no override path is configured.
    """
    defaults = BotMessages()
    if not path:
        return (defaults, None)

    p = Path(path)
    if not p.exists():
        return (defaults, f"Bot messages file not found at {p}; using built-in defaults.")

    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as exc:
        return (defaults, f"Failed to read bot messages from {p}: {exc}; using built-in defaults.")

    if not isinstance(payload, dict):
        return (defaults, f"Invalid bot messages format in {p}; using built-in defaults.")

    known = {f.name for f in fields(BotMessages)}
    overrides: dict[str, str] = {}
    unknown: list[str] = []
    for key, value in payload.items():
        name = str(key)
        if name not in known:
            unknown.append(name)
            continue
        text = str(value or "").strip()
        if text:
            overrides[name] = text

    messages = replace(defaults, **overrides)
    if unknown:
        return (messages, f"Ignored unknown bot message keys in {p}: {', '.join(sorted(unknown))}")
    return (messages, None)
