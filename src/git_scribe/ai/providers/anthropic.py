"""Anthropic Messages API adapter."""

from __future__ import annotations

import logging
from typing import Any

from git_scribe.ai.providers.base import (
    ChatRequest,
    ChatResponse,
    Provider,
    Role,
    Usage,
)
from git_scribe.errors import ConfigError, ProviderError

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(Provider):
    """Adapter for the Anthropic ``/messages`` API.

    Anthropic takes system instructions as a top-level ``system`` field, so
    every system message is pulled out of the list and joined with newlines
    in the order encountered. User and assistant turns stay in ``messages``.
    """

    name = "anthropic"
    base_url = "https://api.anthropic.com/v1"

    @classmethod
    def get_default_model(cls) -> str:
        return "claude-3-sonnet-20240229"

    @classmethod
    def validate_config(cls, api_key: str, model: str) -> None:
        super().validate_config(api_key, model)
        if not api_key.startswith("sk-ant-"):
            raise ConfigError("invalid Anthropic API key format", component=cls.name)

    def _endpoint(self) -> str:
        return f"{self.base_url}/messages"

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

    def _build_payload(self, request: ChatRequest) -> dict[str, Any]:
        system_parts: list[str] = []
        messages: list[dict[str, str]] = []

        for message in request.messages:
            if message.role == Role.SYSTEM:
                system_parts.append(message.content)
            else:
                messages.append({"role": message.role.value, "content": message.content})

        payload: dict[str, Any] = {
            "model": request.model,
            "messages": messages,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        if system_parts:
            payload["system"] = "\n".join(system_parts)
        return payload

    def _parse_response(self, data: dict[str, Any]) -> ChatResponse:
        blocks = data.get("content") or []
        if not isinstance(blocks, list):
            raise ProviderError("unexpected response shape", vendor=self.name)

        texts = [
            block.get("text") or ""
            for block in blocks
            if isinstance(block, dict) and block.get("type", "text") == "text"
        ]
        if not texts:
            raise ProviderError("no completion content returned", vendor=self.name)
        if not isinstance(texts[0], str):
            raise ProviderError("unexpected response shape", vendor=self.name)

        usage = data.get("usage")
        input_tokens = self._token_count(usage, "input_tokens")
        output_tokens = self._token_count(usage, "output_tokens")

        return ChatResponse(
            content=texts[0],
            usage=Usage(
                prompt_tokens=input_tokens,
                completion_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            ),
        )
