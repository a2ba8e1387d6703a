from __future__ import annotations

DEFAULT_MODEL_NAME = "gpt-4o-mini"
DEFAULT_HTTP_PORT = 3000

DEFAULT_MUTE_ROLE_NAME = "Muted"
DEFAULT_ISOLATE_ROLE_NAME = "Isolated"

# Generation profile
DEFAULT_TEMPERATURE = 0.9
DEFAULT_TOP_P = 1.0
DEFAULT_TOP_K: int | None = None
DEFAULT_MAX_OUTPUT_TOKENS = 2048
DEFAULT_GENERATION_TIMEOUT_SECONDS = 60.0

CONVERSATION_CHANNEL_PREFIX = "conversacion-"

DISCORD_MAX_MESSAGE_LEN = 2000
TRUNCATION_SUFFIX = "..."

HELP_KEYWORD = "ayuda"
HEALTH_RESPONSE_TEXT = "Bot is running!"
EMBED_COLOUR = 0x000000

# Slash command name -> description; the help embeds list them in this order.
COMMAND_DESCRIPTIONS: dict[str, str] = {
    "help": "Muestra la lista de comandos disponibles",
    "prompt": "Haz una pregunta al bot",
    "solicitud": "Haz una solicitud específica al bot",
    "ping": "Muestra el ping del bot",
    "userinfo": "Muestra información sobre el usuario",
    "reminder": "Configura un recordatorio",
    "mute": "Mutea a un usuario",
    "unmute": "Desmutea a un usuario",
    "ban": "Banea a un usuario",
    "unban": "Desbanea a un usuario",
    "aislar": "Aisla a un usuario",
    "unaislar": "Desaisla a un usuario",
    "empezar": "Inicia una conversación continua con el bot",
    "salirsa": "Despliega el menú para salir de la conversación",
}
HELP_EMBED_SPLIT_AT = 10
