"""AI integration for git-scribe.

Provider adapters for several vendors behind one contract, the factory that
picks one from configuration, the prompt library and the client that turns
diffs into commit messages, PR descriptions and reviews.
"""

from .client import AIClient, clean_commit_message
from .factory import PROVIDERS, new_provider, register_provider
from .prompts import PromptKind, PromptLibrary
from .providers import ChatRequest, ChatResponse, Message, Provider, Role, Usage

__all__ = [
    "AIClient",
    "clean_commit_message",
    "PROVIDERS",
    "new_provider",
    "register_provider",
    "PromptKind",
    "PromptLibrary",
    "Provider",
    "Message",
    "Role",
    "ChatRequest",
    "ChatResponse",
    "Usage",
]
