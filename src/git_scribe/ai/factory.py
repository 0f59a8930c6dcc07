"""Provider factory.

Maps a configured provider name onto its adapter class. Adding a vendor means
one ``Provider`` subclass and one entry in ``PROVIDERS``.
"""

import logging

from git_scribe.ai.providers import (
    AnthropicProvider,
    DeepSeekProvider,
    OpenAIProvider,
    Provider,
)
from git_scribe.config import ProviderConfig
from git_scribe.errors import ConfigError

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[Provider]] = {
    OpenAIProvider.name: OpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
    DeepSeekProvider.name: DeepSeekProvider,
}


def register_provider(name: str, provider_class: type[Provider]) -> None:
    """Register an additional provider under ``name``.

    Args:
        name: Provider identifier used in configuration
        provider_class: Class implementing ``Provider``
    """
    PROVIDERS[name.strip().lower()] = provider_class
    logger.info(f"Registered provider: {name}")


def supported_providers() -> list[str]:
    """Names accepted by ``new_provider``."""
    return list(PROVIDERS)


def new_provider(cfg: ProviderConfig, base_url: str | None = None) -> Provider:
    """Construct the provider named in the configuration.

    Args:
        cfg: Provider configuration
        base_url: Optional API base URL override

    Returns:
        Provider instance

    Raises:
        ConfigError: If the API key is empty or the provider is unsupported
    """
    if not cfg.api_key:
        raise ConfigError(
            f"API key is required for provider: {cfg.provider}", component="factory"
        )

    provider_class = PROVIDERS.get(cfg.provider)
    if provider_class is None:
        raise ConfigError(
            f"unsupported AI provider: {cfg.provider} "
            f"(supported: {', '.join(supported_providers())})",
            component="factory",
        )

    logger.debug(f"Creating {cfg.provider} provider")
    return provider_class(cfg.api_key, base_url=base_url)
