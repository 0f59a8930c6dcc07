"""git-scribe - AI-written commit messages, PR descriptions and code reviews.

Library API:

    from git_scribe import AIClient, Config

    app_config = Config().load()
    with AIClient(app_config) as client:
        message = client.generate_commit_message(diff)
"""

__version__ = "0.1.0"

from git_scribe.ai import AIClient, clean_commit_message, new_provider
from git_scribe.config import AppConfig, Config, ProviderConfig
from git_scribe.errors import (
    ClipboardError,
    ConfigError,
    ContentError,
    ErrorKind,
    GitError,
    GitScribeError,
    ProviderError,
)

__all__ = [
    # Core API
    "AIClient",
    "clean_commit_message",
    "new_provider",
    "AppConfig",
    "Config",
    "ProviderConfig",
    # Exceptions
    "ErrorKind",
    "GitScribeError",
    "ConfigError",
    "ProviderError",
    "ContentError",
    "GitError",
    "ClipboardError",
]
