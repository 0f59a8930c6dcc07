"""Provider contract shared by every vendor adapter.

Adapters translate the canonical ``ChatRequest`` into one vendor's JSON wire
format, execute a single HTTP call and translate the reply back into a
``ChatResponse``. All transport plumbing (lazy ``httpx.Client``, status
checks, JSON decoding, error wrapping) lives here so that a concrete adapter
only describes its payload shape.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from git_scribe.errors import ConfigError, ProviderError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Chat message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single role-tagged chat message."""

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.USER, content=content)


class ChatRequest(BaseModel):
    """Canonical chat completion request."""

    model: str
    messages: list[Message]
    temperature: float = 0.7
    max_tokens: int = 500

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, v: list[Message]) -> list[Message]:
        if not v:
            raise ValueError("a chat request needs at least one message")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("temperature must be between 0.0 and 1.0")
        return v

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_tokens must be a positive integer")
        return v


class Usage(BaseModel):
    """Token usage counters, zero when the vendor does not report them."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponse(BaseModel):
    """Canonical chat completion response."""

    content: str
    usage: Usage = Field(default_factory=Usage)


class Provider(ABC):
    """Abstract base class for chat-completion vendors."""

    #: Stable lowercase identifier, also the factory registry key
    name: str = ""
    #: Default API base URL
    base_url: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Vendor API key
            base_url: Override the vendor API base URL
            timeout: HTTP timeout in seconds (None waits until the call
                completes or fails)
            http_client: Pre-built HTTP client (mainly for tests)
        """
        self.api_key = api_key
        self.base_url = (base_url or self.base_url).rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    @abstractmethod
    def get_default_model(cls) -> str:
        """Fallback model used when none is configured."""

    @classmethod
    def validate_config(cls, api_key: str, model: str) -> None:
        """Validate the API key (and model) for this vendor.

        Raises:
            ConfigError: If the key is empty or has the wrong format
        """
        if not api_key:
            raise ConfigError(f"{cls.name} API key is required", component=cls.name)

    @abstractmethod
    def _endpoint(self) -> str:
        """Full URL of the chat completion endpoint."""

    @abstractmethod
    def _headers(self) -> dict[str, str]:
        """Authentication and protocol headers."""

    @abstractmethod
    def _build_payload(self, request: ChatRequest) -> dict[str, Any]:
        """Translate a canonical request into the vendor JSON body."""

    @abstractmethod
    def _parse_response(self, data: dict[str, Any]) -> ChatResponse:
        """Translate the vendor JSON body into a canonical response.

        Raises:
            ProviderError: If the body holds no completion
        """

    def create_chat_completion(self, request: ChatRequest) -> ChatResponse:
        """Send one chat completion request.

        Args:
            request: Canonical request

        Returns:
            Canonical response with completion text and usage counters

        Raises:
            ProviderError: On transport failure, a non-2xx status, an
                undecodable body or an empty completion
        """
        payload = self._build_payload(request)
        logger.debug(
            f"Sending chat completion to {self.name} "
            f"(model={payload.get('model')}, messages={len(request.messages)})"
        )

        data = self._post(payload)
        try:
            response = self._parse_response(data)
        except (AttributeError, TypeError, ValidationError) as e:
            raise ProviderError(
                "unexpected response shape", vendor=self.name, cause=e
            ) from e

        logger.info(
            f"{self.name} completion received: {len(response.content)} chars, "
            f"{response.usage.total_tokens} tokens"
        )
        return response

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST the payload and return the decoded JSON body."""
        try:
            response = self._client().post(
                self._endpoint(), json=payload, headers=self._headers()
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = self._error_detail(e.response)
            logger.error(f"{self.name} API returned {e.response.status_code}: {detail}")
            raise ProviderError(
                f"API error ({e.response.status_code}): {detail}",
                vendor=self.name,
                cause=e,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.name} request failed: {e}")
            raise ProviderError("request failed", vendor=self.name, cause=e) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                "response body is not valid JSON", vendor=self.name, cause=e
            ) from e

        if not isinstance(data, dict):
            raise ProviderError("unexpected response shape", vendor=self.name)
        return data

    @staticmethod
    def _token_count(usage: Any, key: str) -> int:
        """Integer usage counter, zero when missing or not a number."""
        if not isinstance(usage, dict):
            return 0
        value = usage.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Best-effort extraction of the vendor error message."""
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        return response.text or response.reason_phrase

    def _client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=self.timeout)
        return self._http_client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self) -> Provider:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}', base_url='{self.base_url}')>"
