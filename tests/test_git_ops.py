"""Tests for git operations."""

import subprocess
from unittest.mock import patch

import pytest

from git_scribe.errors import ErrorKind, GitError
from git_scribe.git_ops import GitOperations


def _completed(stdout: str = "", returncode: int = 0, stderr: str = ""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


class TestGitOperations:
    """Test the git wrapper with subprocess mocked out."""

    def setup_method(self):
        self.git = GitOperations()

    @patch("git_scribe.git_ops.subprocess.run")
    def test_staged_diff(self, mock_run):
        mock_run.return_value = _completed("+++ b/a.py\n+line\n")

        assert self.git.get_staged_diff() == "+++ b/a.py\n+line\n"
        assert mock_run.call_args[0][0] == ["git", "diff", "--staged"]

    @patch("git_scribe.git_ops.subprocess.run")
    def test_staged_diff_empty(self, mock_run):
        mock_run.return_value = _completed("")

        with pytest.raises(GitError, match="no staged changes") as exc_info:
            self.git.get_staged_diff()

        assert exc_info.value.kind == ErrorKind.GIT

    @patch("git_scribe.git_ops.subprocess.run")
    def test_command_failure(self, mock_run):
        mock_run.return_value = _completed(
            returncode=128, stderr="fatal: not a git repository\n"
        )

        with pytest.raises(GitError, match="not a git repository") as exc_info:
            self.git.get_current_branch()

        assert exc_info.value.stderr == "fatal: not a git repository"
        assert exc_info.value.command == ["git", "branch", "--show-current"]

    @patch("git_scribe.git_ops.subprocess.run")
    def test_git_not_installed(self, mock_run):
        mock_run.side_effect = FileNotFoundError("git")

        with pytest.raises(GitError, match="git executable not found"):
            self.git.get_current_branch()

        assert self.git.is_git_repository() is False

    @patch("git_scribe.git_ops.subprocess.run")
    def test_is_git_repository(self, mock_run):
        mock_run.return_value = _completed(".git\n")
        assert self.git.is_git_repository() is True

        mock_run.return_value = _completed(returncode=128)
        assert self.git.is_git_repository() is False

    @patch("git_scribe.git_ops.subprocess.run")
    def test_current_branch(self, mock_run):
        mock_run.return_value = _completed("feature/login\n")
        assert self.git.get_current_branch() == "feature/login"

    @patch("git_scribe.git_ops.subprocess.run")
    def test_recent_commits(self, mock_run):
        mock_run.return_value = _completed("abc fix: one\ndef feat: two\n\n")

        assert self.git.get_recent_commits() == ["abc fix: one", "def feat: two"]
        assert mock_run.call_args[0][0] == [
            "git",
            "log",
            "-3",
            "--oneline",
            "--no-decorate",
        ]

    @patch("git_scribe.git_ops.subprocess.run")
    def test_commit(self, mock_run):
        mock_run.return_value = _completed()

        self.git.commit("feat: add login")

        assert mock_run.call_args[0][0] == ["git", "commit", "-m", "feat: add login"]

    @patch("git_scribe.git_ops.subprocess.run")
    def test_branch_diff(self, mock_run):
        mock_run.return_value = _completed("+change\n")

        assert self.git.get_diff_between_branches("main", "feature") == "+change\n"
        assert mock_run.call_args[0][0] == ["git", "diff", "main..feature"]

    @patch("git_scribe.git_ops.subprocess.run")
    def test_branch_diff_empty(self, mock_run):
        mock_run.return_value = _completed("\n")

        with pytest.raises(GitError, match="no changes found between 'main'"):
            self.git.get_diff_between_branches("main", "feature")

    @patch("git_scribe.git_ops.subprocess.run")
    def test_commits_and_stats_between_branches(self, mock_run):
        mock_run.return_value = _completed("abc feat: a\n")
        assert self.git.get_commits_between_branches("main", "feature") == [
            "abc feat: a"
        ]

        mock_run.return_value = _completed(" a.py | 2 +-\n")
        assert self.git.get_diff_stats_between_branches("main", "feature") == (
            " a.py | 2 +-\n"
        )
        assert mock_run.call_args[0][0] == ["git", "diff", "--stat", "main..feature"]

    @patch("git_scribe.git_ops.subprocess.run")
    def test_default_base_branch(self, mock_run):
        """main is missing, master exists."""
        mock_run.side_effect = [_completed(returncode=1), _completed()]

        assert self.git.get_default_base_branch() == "master"

    @patch("git_scribe.git_ops.subprocess.run")
    def test_default_base_branch_fallback(self, mock_run):
        mock_run.return_value = _completed(returncode=1)

        assert self.git.get_default_base_branch() == "main"

    @patch("git_scribe.git_ops.subprocess.run")
    def test_repo_dir_used_as_cwd(self, mock_run, tmp_path):
        mock_run.return_value = _completed("main\n")

        GitOperations(tmp_path).get_current_branch()

        assert mock_run.call_args.kwargs["cwd"] == str(tmp_path)
