from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Mapping

from config.defaults import CONVERSATION_CHANNEL_PREFIX
from config.defaults import DEFAULT_GENERATION_TIMEOUT_SECONDS
from config.defaults import DEFAULT_HTTP_PORT
from config.defaults import DEFAULT_ISOLATE_ROLE_NAME
from config.defaults import DEFAULT_MAX_OUTPUT_TOKENS
from config.defaults import DEFAULT_MODEL_NAME
from config.defaults import DEFAULT_MUTE_ROLE_NAME
from config.defaults import DEFAULT_TEMPERATURE
from config.defaults import DEFAULT_TOP_K
from config.defaults import DEFAULT_TOP_P


@dataclass(frozen=True)
class Settings:
    discord_token: str
    api_key: str
    model_name: str = DEFAULT_MODEL_NAME
    base_url: str | None = None
    allowed_channel_ids: set[int] = field(default_factory=set)
    mute_role_name: str = DEFAULT_MUTE_ROLE_NAME
    isolate_role_name: str = DEFAULT_ISOLATE_ROLE_NAME
    http_port: int = DEFAULT_HTTP_PORT
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    top_k: int | None = DEFAULT_TOP_K
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    request_timeout_seconds: float = DEFAULT_GENERATION_TIMEOUT_SECONDS
    channel_prefix: str = CONVERSATION_CHANNEL_PREFIX
    messages_path: str | None = None
    panel_image_path: str | None = None

    def describe(self) -> str:
        # secrets are never echoed
        return (
            f"model={self.model_name} base_url={self.base_url or '(default)'} "
            f"allowed_channels={len(self.allowed_channel_ids)} "
            f"mute_role={self.mute_role_name!r} isolate_role={self.isolate_role_name!r} "
            f"port={self.http_port} temperature={self.temperature} top_p={self.top_p} "
            f"top_k={self.top_k} max_tokens={self.max_output_tokens} "
            f"timeout={self.request_timeout_seconds}s prefix={self.channel_prefix!r} "
            f"panel_image={self.panel_image_path or '(none)'}"
        )


def parse_id_set(raw: str | None) -> set[int]:
    if not raw:
        return set()
    out: set[int] = set()
    for tok in re.split(r"[\s,;]+", raw.strip()):
        if not tok:
            continue
        if re.fullmatch(r"\d{8,22}", tok):
            out.add(int(tok))
    return out


def _env_str(env: Mapping[str, str], name: str, default: str | None) -> str | None:
    raw = env.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    return raw or default


def _env_int(env: Mapping[str, str], name: str, default: int | None) -> int | None:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"[CFG] invalid {name}={raw!r}; falling back to {default!r}")
        return default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"[CFG] invalid {name}={raw!r}; falling back to {default!r}")
        return default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ

    discord_token = _env_str(env, "DISCORD_BOT_TOKEN", None)
    api_key = _env_str(env, "GENERATIVE_AI_API_KEY", None)
    if not discord_token:
        raise RuntimeError("Missing DISCORD_BOT_TOKEN env var")
    if not api_key:
        raise RuntimeError("Missing GENERATIVE_AI_API_KEY env var")

    return Settings(
        discord_token=discord_token,
        api_key=api_key,
        model_name=_env_str(env, "MODEL_NAME", DEFAULT_MODEL_NAME),
        base_url=_env_str(env, "GENERATIVE_AI_BASE_URL", None),
        allowed_channel_ids=parse_id_set(env.get("ALLOWED_CHANNEL_IDS")),
        mute_role_name=_env_str(env, "MUTE_ROLE_NAME", DEFAULT_MUTE_ROLE_NAME),
        isolate_role_name=_env_str(env, "ISOLATE_ROLE_NAME", DEFAULT_ISOLATE_ROLE_NAME),
        http_port=_env_int(env, "PORT", DEFAULT_HTTP_PORT),
        temperature=_env_float(env, "GENERATION_TEMPERATURE", DEFAULT_TEMPERATURE),
        top_p=_env_float(env, "GENERATION_TOP_P", DEFAULT_TOP_P),
        top_k=_env_int(env, "GENERATION_TOP_K", DEFAULT_TOP_K),
        max_output_tokens=_env_int(env, "GENERATION_MAX_OUTPUT_TOKENS", DEFAULT_MAX_OUTPUT_TOKENS),
        request_timeout_seconds=_env_float(env, "GENERATION_TIMEOUT_SECONDS", DEFAULT_GENERATION_TIMEOUT_SECONDS),
        channel_prefix=_env_str(env, "CONVERSATION_CHANNEL_PREFIX", CONVERSATION_CHANNEL_PREFIX),
        messages_path=_env_str(env, "BOT_MESSAGES_PATH", None),
        panel_image_path=_env_str(env, "PANEL_IMAGE_PATH", None),
    )
