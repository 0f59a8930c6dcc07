"""Vendor adapters behind the common ``Provider`` contract."""

from .anthropic import AnthropicProvider
from .base import ChatRequest, ChatResponse, Message, Provider, Role, Usage
from .deepseek import DeepSeekProvider
from .openai import OpenAIProvider

__all__ = [
    "Provider",
    "Message",
    "Role",
    "ChatRequest",
    "ChatResponse",
    "Usage",
    "OpenAIProvider",
    "AnthropicProvider",
    "DeepSeekProvider",
]
