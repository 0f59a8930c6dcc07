"""DeepSeek adapter.

DeepSeek serves an OpenAI-compatible API, so the adapter reuses the OpenAI
wire translation and only changes the endpoint, key rules and model aliases.
"""

from __future__ import annotations

import logging

from git_scribe.ai.providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)

# Generic OpenAI model names rewritten to DeepSeek's own default
MODEL_ALIASES = {
    "gpt-4": "deepseek-chat",
    "gpt-3.5-turbo": "deepseek-chat",
}


class DeepSeekProvider(OpenAIProvider):
    """Adapter for the DeepSeek chat completions API."""

    name = "deepseek"
    base_url = "https://api.deepseek.com/v1"

    @classmethod
    def get_default_model(cls) -> str:
        return "deepseek-chat"

    @classmethod
    def validate_config(cls, api_key: str, model: str) -> None:
        # No key format rule for DeepSeek, only presence
        super(OpenAIProvider, cls).validate_config(api_key, model)

    def _resolve_model(self, model: str) -> str:
        resolved = MODEL_ALIASES.get(model, model)
        if resolved != model:
            logger.debug(f"Mapped model {model} to {resolved}")
        return resolved
