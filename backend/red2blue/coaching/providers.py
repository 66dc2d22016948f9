"""Language-model providers behind a single ``generate`` contract.

The coaching adapter talks only to :class:`LLMProvider`; switching between
OpenAI and Gemini is a configuration change.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from google import genai
from google.genai import types as genai_types
from openai import OpenAI

from red2blue.config import Settings, get_settings
from red2blue.errors import ExternalServiceError

LOGGER = logging.getLogger(__name__)


class LLMProvider(ABC):
    name = "unknown"

    @abstractmethod
    def generate(
        self,
        prompt: str,
        prior_messages: list[dict[str, str]] | None = None,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        json_mode: bool = True,
        max_tokens: int | None = None,
    ) -> str:
        """Return the raw model text for ``prompt``.

        Raises :class:`ExternalServiceError` on any transport, timeout or
        provider failure.
        """


class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o", timeout_seconds: float = 20.0, client: Any = None) -> None:
        self.model = model
        self.client = client or OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=1)

    def generate(
        self,
        prompt: str,
        prior_messages: list[dict[str, str]] | None = None,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        json_mode: bool = True,
        max_tokens: int | None = None,
    ) -> str:
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.extend(prior_messages or [])
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {"model": self.model, "messages": messages, "temperature": temperature}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        try:
            response = self.client.chat.completions.create(**kwargs)
            return response.choices[0].message.content or ""
        except Exception as exc:  # external API protection
            raise ExternalServiceError(str(exc) or type(exc).__name__, provider=self.name) from exc


class GeminiProvider(LLMProvider):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout_seconds: float = 20.0,
        client: Any = None,
    ) -> None:
        self.model = model
        self.client = client or genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    def generate(
        self,
        prompt: str,
        prior_messages: list[dict[str, str]] | None = None,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        json_mode: bool = True,
        max_tokens: int | None = None,
    ) -> str:
        contents = []
        for message in prior_messages or []:
            role = "model" if message.get("role") == "assistant" else "user"
            contents.append(
                genai_types.Content(role=role, parts=[genai_types.Part(text=message.get("content", ""))])
            )
        contents.append(genai_types.Content(role="user", parts=[genai_types.Part(text=prompt)]))

        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )
        try:
            response = self.client.models.generate_content(model=self.model, contents=contents, config=config)
            return response.text or ""
        except Exception as exc:  # external API protection
            raise ExternalServiceError(str(exc) or type(exc).__name__, provider=self.name) from exc


def build_provider(settings: Settings | None = None) -> LLMProvider | None:
    """Pick the configured provider, or ``None`` when no model is reachable."""
    settings = settings or get_settings()
    choice = settings.llm_provider
    if choice == "none":
        return None
    if choice in {"openai", "auto"} and settings.openai_api_key:
        return OpenAIProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    if choice in {"gemini", "auto"} and settings.gemini_api_key:
        return GeminiProvider(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    if choice not in {"openai", "gemini", "auto"}:
        LOGGER.warning("Unknown RED2BLUE_LLM_PROVIDER %r; using heuristic coaching only", choice)
    else:
        LOGGER.info("No API key configured for %s provider; using heuristic coaching only", choice)
    return None
