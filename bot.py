import discord
from discord.ext import commands
from openai import OpenAI
from config.messages import load_bot_messages
from config.settings import load_settings
from conversation.registry import ConversationRegistry
from conversation.service import ConversationService
from misc.discord_gates import user_is_admin
from misc.health_server import start_health_server
from misc.reminders import ReminderScheduler
from misc.runtime_wiring import wire_bot_runtime
from relay.generative import GenerationProfile
from relay.generative import GenerativeRelay

# =========================
# ENV
# =========================
# Required: DISCORD_BOT_TOKEN, GENERATIVE_AI_API_KEY
# Everything else has a default; see config/settings.py.
SETTINGS = load_settings()
print(f"[CFG] {SETTINGS.describe()}")

BOT_MESSAGES, BOT_MESSAGES_WARNING = load_bot_messages(SETTINGS.messages_path)
if BOT_MESSAGES_WARNING:
    print(f"[CFG] {BOT_MESSAGES_WARNING}")

# =========================
# GENERATIVE BACKEND
# =========================
# No retries: every user action reaches the backend at most once.
client = OpenAI(
    api_key=SETTINGS.api_key,
    base_url=SETTINGS.base_url,
    max_retries=0,
)

relay = GenerativeRelay(
    client=client,
    model=SETTINGS.model_name,
    profile=GenerationProfile(
        temperature=SETTINGS.temperature,
        top_p=SETTINGS.top_p,
        top_k=SETTINGS.top_k,
        max_output_tokens=SETTINGS.max_output_tokens,
        request_timeout_seconds=SETTINGS.request_timeout_seconds,
    ),
)

# =========================
# CONVERSATIONS (memory-resident, cleared on restart)
# =========================
conversation_registry = ConversationRegistry()
conversation_service = ConversationService(
    registry=conversation_registry,
    relay=relay,
    messages=BOT_MESSAGES,
    channel_prefix=SETTINGS.channel_prefix,
    panel_image_path=SETTINGS.panel_image_path,
)
reminder_scheduler = ReminderScheduler()

# =========================
# DISCORD BOT
# =========================
intents = discord.Intents.default()
intents.message_content = True

bot = commands.Bot(command_prefix="!", intents=intents)

wire_bot_runtime(
    bot,
    conversation_service=conversation_service,
    reminder_scheduler=reminder_scheduler,
    messages=BOT_MESSAGES,
    allowed_channel_ids=SETTINGS.allowed_channel_ids,
    user_is_admin=user_is_admin,
    mute_role_name=SETTINGS.mute_role_name,
    isolate_role_name=SETTINGS.isolate_role_name,
    sync_commands=True,
    http_port=SETTINGS.http_port,
    start_health_server_func=start_health_server,
)


bot.run(SETTINGS.discord_token)
