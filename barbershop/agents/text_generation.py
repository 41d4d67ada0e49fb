"""
Text-generation collaborator.

The scheduling core only sees the ``TextGenerator`` protocol: a system
prompt and a user prompt go in, raw text comes out. ``HttpTextGenerator``
talks to any OpenAI-compatible chat-completions endpoint over httpx.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from barbershop.config import settings
from barbershop.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def generate(self, system_prompt: str, user_prompt: str) -> str:
        ...


class HttpTextGenerator:
    """Chat-completions client. Every failure surfaces as ExternalServiceError."""

    def __init__(
        self,
        *,
        base_url: str = settings.model.llm_base_url,
        api_key: str = settings.model.llm_api_key,
        model: str = settings.model.llm_model,
        temperature: float = settings.model.llm_temperature,
        timeout_seconds: float = settings.model.llm_timeout_sec,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}

        try:
            r = self._client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"Text generation request failed: {exc}") from exc
        except ValueError as exc:
            raise ExternalServiceError("Text generation returned a non-JSON body") from exc

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ExternalServiceError(f"Unexpected completion payload: {data!r:.200}") from exc

        if not isinstance(text, str) or not text.strip():
            raise ExternalServiceError("Text generation returned an empty completion")
        logger.debug("Completion received from %s (%d chars)", self.model, len(text))
        return text.strip()
