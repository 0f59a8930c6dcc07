"""System prompts for commit messages, PR descriptions and PR reviews.

Prompt files live in the configured prompts directory and can be edited by
the user. The draft and review prompts are required: generation stops when
their file is missing. ``seed`` copies the bundled defaults from
``built_in/`` into the prompts directory.
"""

import logging
from enum import Enum
from pathlib import Path

from git_scribe.config import CommitStyleConfig, DirectoryConfig, PromptFilesConfig
from git_scribe.errors import ContentError

logger = logging.getLogger(__name__)

BUILT_IN_DIR = Path(__file__).parent / "built_in"

CONVENTIONAL_TYPES = [
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "build",
    "ci",
    "chore",
    "revert",
]

SUBJECT_MAX_LENGTH = 72


class PromptKind(Enum):
    """The three generation tasks that take a system prompt."""

    COMMIT = "commit"
    DRAFT = "draft"
    REVIEW = "review"


def build_commit_instructions(style: CommitStyleConfig) -> str:
    """Build the commit-style system message.

    Args:
        style: Commit style preferences

    Returns:
        Instruction text for the model
    """
    lines = [
        "You are an expert software engineer who writes precise git commit messages.",
        "Write exactly one commit message line that summarizes the staged changes in the diff.",
        "",
        "Rules:",
    ]

    if style.conventional:
        lines.append(
            "- Use the Conventional Commits format `<type>(<optional scope>): <subject>`."
        )
        lines.append(f"- Allowed types: {', '.join(CONVENTIONAL_TYPES)}.")
    else:
        lines.append("- Start with a capitalized verb in the imperative mood.")

    if style.emoji:
        lines.append(
            "- Add one fitting emoji (gitmoji style) right before the subject text."
        )
    else:
        lines.append("- Do not use emojis.")

    lines.extend(
        [
            f"- Write the message in {style.language}.",
            f"- Keep the subject under {SUBJECT_MAX_LENGTH} characters, "
            "imperative mood, no trailing period.",
            "- Reply with the commit message only: no quotes, no labels, "
            "no code fences, no explanation.",
        ]
    )
    return "\n".join(lines)


class PromptLibrary:
    """Resolve system prompts from the prompts directory with bundled fallbacks."""

    def __init__(
        self,
        directories: DirectoryConfig | None = None,
        files: PromptFilesConfig | None = None,
    ) -> None:
        """Initialize the prompt library.

        Args:
            directories: Directory settings (uses defaults if None)
            files: Prompt file names (uses defaults if None)
        """
        self.directories = directories or DirectoryConfig()
        self.files = files or PromptFilesConfig()

    @property
    def prompts_dir(self) -> Path:
        return self.directories.prompts_path

    def path_for(self, kind: PromptKind) -> Path:
        """Location of the user prompt file for ``kind``."""
        return self.prompts_dir / getattr(self.files, kind.value)

    def built_in(self, kind: PromptKind) -> str:
        """Bundled default prompt, empty for commit (its instructions are generated)."""
        path = BUILT_IN_DIR / f"{kind.value}.md"
        if not path.exists():
            return ""
        return path.read_text(encoding="utf-8")

    def load(self, kind: PromptKind) -> str:
        """Load the prompt for ``kind``.

        A missing file yields an empty string. Use ``require`` for prompts
        the operation cannot run without.

        Raises:
            ContentError: If the prompt file exists but cannot be read
        """
        path = self.path_for(kind)
        if not path.exists():
            logger.debug(f"No {kind.value} prompt at {path}")
            return ""

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ContentError(
                f"failed to read prompt file {path}",
                component="prompts",
                path=str(path),
                cause=e,
            ) from e

        logger.debug(f"Loaded {kind.value} prompt from {path}")
        return content

    def require(self, kind: PromptKind) -> str:
        """Load a prompt whose file must exist and hold text.

        Raises:
            ContentError: If the prompt file is absent or blank
        """
        path = self.path_for(kind)
        if not path.exists():
            raise ContentError(
                f"prompt is missing, check your {kind.value} prompt file ({path}), "
                "run 'git-scribe init' to create it",
                component="prompts",
                path=str(path),
            )

        content = self.load(kind)
        if not content.strip():
            raise ContentError(
                f"{kind.value} prompt file ({path.name}) is empty",
                component="prompts",
                path=str(path),
            )
        return content

    def seed(self, overwrite: bool = False) -> list[Path]:
        """Write the bundled prompts into the prompts directory.

        Args:
            overwrite: Replace files that already exist

        Returns:
            Paths that were written
        """
        self.prompts_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for kind in (PromptKind.DRAFT, PromptKind.REVIEW):
            path = self.path_for(kind)
            if path.exists() and not overwrite:
                continue
            path.write_text(self.built_in(kind), encoding="utf-8")
            written.append(path)
            logger.info(f"Wrote {kind.value} prompt to {path}")
        return written
