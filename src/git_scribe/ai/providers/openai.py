"""OpenAI chat completions adapter."""

from __future__ import annotations

import logging
from typing import Any

from git_scribe.ai.providers.base import ChatRequest, ChatResponse, Provider, Usage
from git_scribe.errors import ConfigError, ProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider(Provider):
    """Adapter for the OpenAI ``/chat/completions`` API.

    Messages are sent inline with their roles; system messages stay in the
    message list.
    """

    name = "openai"
    base_url = "https://api.openai.com/v1"

    @classmethod
    def get_default_model(cls) -> str:
        return "gpt-4"

    @classmethod
    def validate_config(cls, api_key: str, model: str) -> None:
        super().validate_config(api_key, model)
        if not api_key.startswith("sk-"):
            raise ConfigError("invalid OpenAI API key format", component=cls.name)

    def _endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _resolve_model(self, model: str) -> str:
        """Map the requested model onto one this vendor serves."""
        return model

    def _build_payload(self, request: ChatRequest) -> dict[str, Any]:
        return {
            "model": self._resolve_model(request.model),
            "messages": [
                {"role": message.role.value, "content": message.content}
                for message in request.messages
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

    def _parse_response(self, data: dict[str, Any]) -> ChatResponse:
        choices = data.get("choices") or []
        if not isinstance(choices, list) or not choices:
            raise ProviderError("no completion choices returned", vendor=self.name)

        choice = choices[0]
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            raise ProviderError("unexpected response shape", vendor=self.name)

        content = message.get("content") or ""
        if not isinstance(content, str):
            raise ProviderError("unexpected response shape", vendor=self.name)

        usage = data.get("usage")
        return ChatResponse(
            content=content,
            usage=Usage(
                prompt_tokens=self._token_count(usage, "prompt_tokens"),
                completion_tokens=self._token_count(usage, "completion_tokens"),
                total_tokens=self._token_count(usage, "total_tokens"),
            ),
        )
