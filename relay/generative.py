from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Iterable

from config.defaults import DEFAULT_GENERATION_TIMEOUT_SECONDS
from config.defaults import DEFAULT_MAX_OUTPUT_TOKENS
from config.defaults import DEFAULT_TEMPERATURE
from config.defaults import DEFAULT_TOP_K
from config.defaults import DEFAULT_TOP_P
from config.defaults import DISCORD_MAX_MESSAGE_LEN
from config.defaults import TRUNCATION_SUFFIX
from conversation.models import Turn
from misc.errors import BackendError

# history role -> chat-completions role
_ROLE_MAP = {"user": "user", "model": "assistant"}


@dataclass(frozen=True)
class GenerationProfile:
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    top_k: int | None = DEFAULT_TOP_K
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    request_timeout_seconds: float = DEFAULT_GENERATION_TIMEOUT_SECONDS


def truncate_for_discord(text: str, limit: int = DISCORD_MAX_MESSAGE_LEN) -> str:
    text = text or ""
    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


def build_chat_messages(prompt: str, history: Iterable[Turn] = ()) -> list[dict[str, str]]:
    messages = [{"role": _ROLE_MAP[turn.role], "content": turn.text} for turn in history]
    messages.append({"role": "user", "content": prompt})
    return messages


class GenerativeRelay:
    """Stateless adapter over an OpenAI-compatible chat-completions client."""

    def __init__(
        self,
        *,
        client: Any,
        model: str,
        profile: GenerationProfile | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.profile = profile or GenerationProfile()

    def _request_kwargs(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.profile.temperature,
            "top_p": self.profile.top_p,
            "max_completion_tokens": self.profile.max_output_tokens,
            "timeout": self.profile.request_timeout_seconds,
        }
        # top_k is not part of the OpenAI schema; compatible backends read it from the body
        if self.profile.top_k is not None:
            kwargs["extra_body"] = {"top_k": int(self.profile.top_k)}
        return kwargs

    async def generate(self, prompt: str, history: Iterable[Turn] = ()) -> str:
        messages = build_chat_messages(prompt, history)
        try:
            resp = await asyncio.to_thread(
                self.client.chat.completions.create,
                **self._request_kwargs(messages),
            )
            text = resp.choices[0].message.content
        except Exception as e:
            print(f"[Relay] Error: {e}")
            raise BackendError(str(e)) from e
        if text is None:
            raise BackendError("backend returned no text")
        return text
