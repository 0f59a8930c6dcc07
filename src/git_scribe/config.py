"""Configuration management for git-scribe."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from git_scribe.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".git-scribe.config.yaml"

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 500

SUPPORTED_LANGUAGES = ["english", "spanish", "french", "german", "chinese", "japanese"]

ENV_OVERRIDES = {
    "GIT_SCRIBE_API_KEY": "api_key",
    "GIT_SCRIBE_PROVIDER": "provider",
    "GIT_SCRIBE_MODEL": "model",
}


class ProviderConfig(BaseModel):
    """Settings consumed by the provider factory and the AI client."""

    provider: str = DEFAULT_PROVIDER
    api_key: str = ""
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    @field_validator("provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        """Provider names are matched lowercase."""
        return v.strip().lower()

    @field_validator("api_key", "model", mode="before")
    @classmethod
    def strip_value(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("temperature")
    @classmethod
    def clamp_temperature(cls, v: float) -> float:
        """Clamp temperature into [0.0, 1.0]."""
        return max(0.0, min(1.0, v))

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_tokens must be a positive integer")
        return v


class CommitStyleConfig(BaseModel):
    """Commit message style preferences."""

    conventional: bool = True
    emoji: bool = False
    language: str = "english"

    @field_validator("language")
    @classmethod
    def normalize_language(cls, v: str) -> str:
        return v.strip().lower() or "english"

    def describe(self) -> str:
        """Short human-readable label for the style."""
        style = "conventional commits" if self.conventional else "standard"
        if self.emoji:
            style += " + emojis"
        return style


class DirectoryConfig(BaseModel):
    """Where prompt files and PR templates live."""

    prompts: str = "~/.git-scribe"
    templates: str = "templates"

    @property
    def prompts_path(self) -> Path:
        return Path(self.prompts).expanduser()

    @property
    def templates_path(self) -> Path:
        return Path(self.templates).expanduser()


class PromptFilesConfig(BaseModel):
    """File names of the system prompts inside the prompts directory."""

    commit: str = "commit.md"
    draft: str = "draft.md"
    review: str = "review.md"


class AppConfig(BaseModel):
    """Complete git-scribe configuration."""

    ai: ProviderConfig = Field(default_factory=ProviderConfig)
    commit: CommitStyleConfig = Field(default_factory=CommitStyleConfig)
    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    prompts: PromptFilesConfig = Field(default_factory=PromptFilesConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for YAML serialization."""
        return self.model_dump()


def mask_api_key(api_key: str) -> str:
    """Mask an API key for display, keeping the first and last four characters."""
    if len(api_key) <= 8:
        return "***"
    return f"{api_key[:4]}...{api_key[-4:]}"


class Config:
    """Load and persist the git-scribe YAML configuration file.

    The file is looked up in the working directory first and then in the home
    directory. Saving always writes to the file that was discovered (or the
    home directory when none exists yet) with owner-only permissions.
    """

    def __init__(self, config_file: Path | None = None) -> None:
        """Initialize the config store.

        Args:
            config_file: Explicit config file path, skipping discovery
        """
        self.config_file = config_file or self._discover_config_file()

    def _discover_config_file(self) -> Path:
        """Return the first existing config file, defaulting to the home directory."""
        local = Path.cwd() / CONFIG_FILENAME
        if local.exists():
            return local
        return Path.home() / CONFIG_FILENAME

    def exists(self) -> bool:
        """Check whether the configuration file exists."""
        return self.config_file.exists()

    def _load_raw(self) -> dict[str, Any]:
        """Load the raw YAML mapping, or an empty dict when there is no file."""
        if not self.config_file.exists():
            return {}

        try:
            with self.config_file.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"invalid YAML in {self.config_file}", component="config", cause=e
            ) from e
        except OSError as e:
            raise ConfigError(
                f"cannot read {self.config_file}", component="config", cause=e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"config root must be a mapping in {self.config_file}",
                component="config",
            )
        return data

    def load(self, apply_env: bool = True) -> AppConfig:
        """Load the configuration, falling back to defaults for missing keys.

        Args:
            apply_env: Apply ``GIT_SCRIBE_*`` environment overrides

        Returns:
            Validated application configuration

        Raises:
            ConfigError: If the file is unreadable or fails validation
        """
        data = self._load_raw()

        if apply_env:
            ai_section = dict(data.get("ai") or {})
            for env_var, field in ENV_OVERRIDES.items():
                value = os.getenv(env_var)
                if value:
                    ai_section[field] = value
                    logger.debug(f"Using {field} from {env_var}")
            data["ai"] = ai_section

        try:
            app_config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(
                f"invalid configuration in {self.config_file}",
                component="config",
                cause=e,
            ) from e

        logger.debug(f"Loaded configuration from {self.config_file}")
        return app_config

    def save(self, app_config: AppConfig) -> Path:
        """Write the configuration to disk.

        Args:
            app_config: Configuration to persist

        Returns:
            Path of the written file
        """
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with self.config_file.open("w", encoding="utf-8") as f:
            yaml.safe_dump(app_config.to_dict(), f, sort_keys=False)

        # Set restrictive permissions on the config file
        self.config_file.chmod(0o600)
        logger.info(f"Configuration saved to {self.config_file}")
        return self.config_file

    def get_config_info(self) -> dict[str, Any]:
        """Get information about current configuration.

        Returns:
            Dictionary with config status information
        """
        config_exists = self.config_file.exists()
        return {
            "config_file": str(self.config_file),
            "config_exists": config_exists,
            "config_file_permissions": oct(self.config_file.stat().st_mode)[-3:]
            if config_exists
            else None,
        }
