"""Exception hierarchy for git-scribe.

Every error raised by the core carries an ``ErrorKind`` so callers can branch
on the kind without matching message text, plus the name of the component
that raised it and the underlying cause when there is one.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Closed set of error kinds."""

    CONFIG = "config"
    PROVIDER = "provider"
    CONTENT = "content"
    GIT = "git"
    CLIPBOARD = "clipboard"


class GitScribeError(Exception):
    """Base exception for git-scribe errors."""

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(
        self,
        message: str,
        *,
        component: str = "git-scribe",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.component = component
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.component}: {self.message}: {self.cause}"
        return f"{self.component}: {self.message}"


class ConfigError(GitScribeError):
    """Raised for missing or invalid configuration (API key, provider name, ...)."""

    kind = ErrorKind.CONFIG


class ProviderError(GitScribeError):
    """Raised when a vendor call fails: transport, rejection or empty completion."""

    kind = ErrorKind.PROVIDER

    def __init__(
        self,
        message: str,
        *,
        vendor: str,
        cause: BaseException | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, component=vendor, cause=cause)
        self.vendor = vendor
        self.status_code = status_code


class ContentError(GitScribeError):
    """Raised when a required prompt or template is absent or blank."""

    kind = ErrorKind.CONTENT

    def __init__(
        self,
        message: str,
        *,
        component: str = "content",
        path: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, component=component, cause=cause)
        self.path = path


class GitError(GitScribeError):
    """Raised when a git command fails."""

    kind = ErrorKind.GIT

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        stderr: str = "",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, component="git", cause=cause)
        self.command = command or []
        self.stderr = stderr


class ClipboardError(GitScribeError):
    """Raised when text cannot be copied to the system clipboard."""

    kind = ErrorKind.CLIPBOARD

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message, component="clipboard", cause=cause)
