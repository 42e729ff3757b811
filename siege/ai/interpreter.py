"""Command interpretation collaborator.

Asks a hosted text-generation model how a commander of a given
personality reads the player's order. Any failure (no key, network error,
timeout, malformed payload) degrades to the personality's fixed fallback
line; this module never raises past its caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Sequence

import httpx

from siege.ai.personalities import get_strategy

if TYPE_CHECKING:
    from siege.config import SiegeConfig
    from siege.core.enums import Personality
    from siege.core.models import Commander

logger = logging.getLogger(__name__)


class CommandInterpreter:
    """Cached, concurrency-limited client for the interpretation service."""

    def __init__(
        self,
        config: SiegeConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._cache: dict[tuple[str, Personality], str] = {}
        self._semaphore = asyncio.Semaphore(max(1, config.interpreter_concurrency))

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def interpret(
        self,
        command: str,
        personality: Personality,
        api_key: str | None,
        previous_command: str = "",
    ) -> str:
        """Return the commander's reading of *command*, or its fallback line."""
        strategy = get_strategy(personality)
        key = (command, personality)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if not api_key:
            return strategy.fallback_interpretation

        message = f'Interpret this command for your role: "{command}"'
        if previous_command:
            message = f'Your previous orders were: "{previous_command}". {message}'

        async with self._semaphore:
            try:
                text = await self._request(api_key, strategy.system_prompt, message)
            except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
                logger.warning("Interpretation failed for %s, using fallback: %s", personality.value, exc)
                return strategy.fallback_interpretation

        self._cache[key] = text
        return text

    async def interpret_all(
        self,
        command: str,
        commanders: Sequence[Commander],
        api_key: str | None,
    ) -> dict[str, str]:
        """Interpret *command* for every commander concurrently."""
        texts = await asyncio.gather(*(
            self.interpret(command, c.personality, api_key, previous_command=c.last_command)
            for c in commanders
        ))
        return {c.id: text for c, text in zip(commanders, texts)}

    async def _request(self, api_key: str, system_prompt: str, message: str) -> str:
        cfg = self._config
        url = f"{cfg.interpreter_url}/{cfg.interpreter_model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": f"{system_prompt}\n\n{message}"}]}],
            "generationConfig": {"temperature": 0.7, "maxOutputTokens": 200},
        }
        async with httpx.AsyncClient(transport=self._transport, timeout=cfg.interpreter_timeout) as client:
            resp = await client.post(url, params={"key": api_key}, json=body)
            resp.raise_for_status()

        data = resp.json()
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        if not isinstance(text, str) or not text.strip():
            raise ValueError("empty interpretation")
        return text.strip()
