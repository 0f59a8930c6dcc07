"""Thin wrapper around the git command line."""

import logging
import subprocess
from pathlib import Path

from git_scribe.errors import GitError

logger = logging.getLogger(__name__)

BASE_BRANCH_CANDIDATES = ["main", "master", "production"]


class GitOperations:
    """Run git commands in a repository and return their output."""

    def __init__(self, repo_dir: Path | None = None) -> None:
        """Initialize git operations.

        Args:
            repo_dir: Repository directory (defaults to the working directory)
        """
        self.repo_dir = repo_dir

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        command = ["git", *args]
        logger.debug(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                cwd=str(self.repo_dir) if self.repo_dir else None,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found", command=command, cause=e) from e

        if check and result.returncode != 0:
            stderr = result.stderr.strip()
            raise GitError(
                f"'{' '.join(command)}' failed: {stderr or f'exit code {result.returncode}'}",
                command=command,
                stderr=stderr,
            )
        return result

    def _lines(self, output: str) -> list[str]:
        return [line for line in output.strip().splitlines() if line.strip()]

    def is_git_repository(self) -> bool:
        try:
            return self._run("rev-parse", "--git-dir", check=False).returncode == 0
        except GitError:
            return False

    def get_staged_diff(self) -> str:
        """Diff of the staged changes.

        Raises:
            GitError: If nothing is staged
        """
        diff = self._run("diff", "--staged").stdout
        if not diff.strip():
            raise GitError(
                "no staged changes found, stage your changes first: git add <files>"
            )
        return diff

    def get_current_branch(self) -> str:
        return self._run("branch", "--show-current").stdout.strip()

    def get_recent_commits(self, count: int = 3) -> list[str]:
        """One-line summaries of the last ``count`` commits."""
        output = self._run("log", f"-{count}", "--oneline", "--no-decorate").stdout
        return self._lines(output)

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)
        logger.info("Created commit")

    def get_diff_between_branches(self, base_branch: str, compare_branch: str) -> str:
        """Diff from ``base_branch`` to ``compare_branch``.

        Raises:
            GitError: If the branches do not differ
        """
        diff = self._run("diff", f"{base_branch}..{compare_branch}").stdout
        if not diff.strip():
            raise GitError(
                f"no changes found between '{base_branch}' and '{compare_branch}'"
            )
        return diff

    def get_commits_between_branches(
        self, base_branch: str, compare_branch: str
    ) -> list[str]:
        output = self._run(
            "log", f"{base_branch}..{compare_branch}", "--oneline", "--no-decorate"
        ).stdout
        return self._lines(output)

    def get_diff_stats_between_branches(
        self, base_branch: str, compare_branch: str
    ) -> str:
        return self._run("diff", "--stat", f"{base_branch}..{compare_branch}").stdout

    def branch_exists(self, branch: str) -> bool:
        result = self._run(
            "show-ref", "--verify", "--quiet", f"refs/heads/{branch}", check=False
        )
        return result.returncode == 0

    def get_default_base_branch(self) -> str:
        """First of main, master and production that exists, else main."""
        for branch in BASE_BRANCH_CANDIDATES:
            if self.branch_exists(branch):
                return branch
        return BASE_BRANCH_CANDIDATES[0]
