"""AI client for git-scribe.

This module is the single entry point the commands use for generation. It
builds role-tagged messages from diffs, context and templates, sends them
through the configured provider and cleans up the raw completion.
"""

import logging

from git_scribe.ai.factory import new_provider
from git_scribe.ai.prompts import PromptKind, PromptLibrary, build_commit_instructions
from git_scribe.ai.providers import ChatRequest, ChatResponse, Message, Provider
from git_scribe.config import AppConfig, CommitStyleConfig
from git_scribe.errors import ContentError

logger = logging.getLogger(__name__)

COMMIT_MESSAGE_MAX_LENGTH = 200
TRUNCATION_MARKER = "..."
QUOTE_CHARS = "\"'`"


def clean_commit_message(message: str) -> str:
    """Turn a raw completion into a single commit message line.

    Steps, in order: trim whitespace, strip surrounding quote characters,
    drop a leading label whose text before the first colon mentions
    "commit", keep the first line only, truncate to 200 characters plus an
    ellipsis marker.

    Args:
        message: Raw completion text

    Returns:
        Single line of at most 203 characters
    """
    message = message.strip().strip(QUOTE_CHARS)

    # "Commit message: ..." style labels
    colon = message.find(":")
    if colon != -1 and "commit" in message[:colon].lower():
        message = message[colon + 1 :].strip()

    lines = message.splitlines()
    message = lines[0].strip() if lines else ""

    if len(message) > COMMIT_MESSAGE_MAX_LENGTH:
        message = message[:COMMIT_MESSAGE_MAX_LENGTH] + TRUNCATION_MARKER

    return message


def _fence_diff(diff: str) -> str:
    body = diff.rstrip("\n")
    return f"```diff\n{body}\n```"


def build_commit_data(diff: str, context_lines: list[str] | None = None) -> str:
    """Build the user message for commit message generation."""
    sections = []
    if context_lines:
        items = "\n".join(f"- {item}" for item in context_lines)
        sections.append(f"Context:\n{items}")
    sections.append(f"Diff:\n{_fence_diff(diff)}")
    return "\n\n".join(sections)


def build_pr_description_data(
    title: str,
    commits: list[str],
    diff: str,
    diff_stats: str,
    template: str,
) -> str:
    """Build the user message for PR description generation."""
    commit_list = "\n".join(commits) if commits else "(no commits)"
    return (
        f"PR Title: {title}\n\n"
        f"Commits in this PR:\n{commit_list}\n\n"
        f"Change Statistics:\n{diff_stats.strip()}\n\n"
        f"Code Changes:\n{_fence_diff(diff)}\n\n"
        "Template to follow (fill in every section, keep the markdown structure "
        "and every heading exactly as written):\n"
        f"{template}"
    )


class AIClient:
    """Generate commit messages, PR descriptions and PR reviews.

    The client holds one provider and the effective provider settings. It
    keeps no state between calls.
    """

    def __init__(
        self,
        config: AppConfig,
        provider: Provider | None = None,
        prompt_library: PromptLibrary | None = None,
    ) -> None:
        """Initialize the AI client.

        Args:
            config: Application configuration
            provider: Provider to use (built from ``config.ai`` if None)
            prompt_library: Prompt source (built from ``config`` if None)

        Raises:
            ConfigError: If the provider cannot be constructed
        """
        self.config = config
        self.provider = provider or new_provider(config.ai)
        self.prompt_library = prompt_library or PromptLibrary(
            config.directories, config.prompts
        )

        self.model = config.ai.model or self.provider.get_default_model()
        self.temperature = config.ai.temperature
        self.max_tokens = config.ai.max_tokens

        logger.info(
            f"Initialized AI client with provider: {self.provider.name}, model: {self.model}"
        )

    def complete(self, messages: list[Message]) -> ChatResponse:
        """Send one request with the configured model settings.

        Raises:
            ProviderError: If the provider call fails
        """
        request = ChatRequest(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return self.provider.create_chat_completion(request)

    def generate_commit_message(
        self,
        diff: str,
        context_lines: list[str] | None = None,
        commit_style: CommitStyleConfig | None = None,
    ) -> str:
        """Generate a one-line commit message for a diff.

        Args:
            diff: Staged diff text
            context_lines: Extra context such as branch and recent commits
            commit_style: Style preferences (uses the configured style if None)

        Returns:
            Cleaned commit message, one line of at most 203 characters

        Raises:
            ProviderError: If the provider call fails
        """
        style = commit_style or self.config.commit

        messages = [Message.system(build_commit_instructions(style))]
        custom_prompt = self.prompt_library.load(PromptKind.COMMIT)
        if custom_prompt.strip():
            messages.append(Message.system(custom_prompt.strip()))
        messages.append(Message.user(build_commit_data(diff, context_lines)))

        response = self.complete(messages)
        message = clean_commit_message(response.content)

        logger.debug(f"Commit message generated ({len(message)} chars)")
        return message

    def generate_pr_description_with_template(
        self,
        title: str,
        commits: list[str],
        diff: str,
        diff_stats: str,
        template: str,
    ) -> str:
        """Generate a PR description that fills in a markdown template.

        Args:
            title: PR title
            commits: One-line commit summaries in the branch
            diff: Branch diff
            diff_stats: ``git diff --stat`` output
            template: Markdown template whose structure must be preserved

        Returns:
            Filled-in template, whitespace-trimmed

        Raises:
            ContentError: If the draft prompt or the template is blank
            ProviderError: If the provider call fails
        """
        prompt = self.prompt_library.require(PromptKind.DRAFT)
        if not template.strip():
            raise ContentError("PR template is empty", component="client")

        messages = [
            Message.system(prompt.strip()),
            Message.user(
                build_pr_description_data(title, commits, diff, diff_stats, template)
            ),
        ]
        response = self.complete(messages)
        return response.content.strip()

    def generate_pr_review(self, diff: str) -> str:
        """Generate a review of a branch diff.

        Args:
            diff: Branch diff

        Returns:
            Markdown review, whitespace-trimmed

        Raises:
            ContentError: If the review prompt is blank
            ProviderError: If the provider call fails
        """
        prompt = self.prompt_library.require(PromptKind.REVIEW)
        messages = [Message.system(prompt.strip()), Message.user(diff)]
        response = self.complete(messages)
        return response.content.strip()

    def close(self) -> None:
        """Release the provider's HTTP resources."""
        self.provider.close()

    def __enter__(self) -> "AIClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()
