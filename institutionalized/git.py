"""Git operations for institutionalized."""

import subprocess
from pathlib import Path
from typing import Callable, Optional

from .exceptions import GitError

COMMON_DEFAULT_BRANCHES = ("main", "master")
RECENT_COMMIT_LIMIT = 10


class GitRepo:
    """Handles Git repository operations."""

    def __init__(self, repo_path: Optional[str] = None) -> None:
        self.repo_path = Path(repo_path or Path.cwd())
        if not self._is_git_repo():
            raise GitError("not in a git repository")

    def _is_git_repo(self) -> bool:
        """Check if the current directory is a Git repository."""
        try:
            self._run_git_command(["rev-parse", "--git-dir"])
            return True
        except GitError:
            return False

    def _run_git_command(self, args: list[str]) -> str:
        """Run a Git command and return its output."""
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            cmd = " ".join(args)
            raise GitError(f"Git command failed: {cmd}\n{e.stderr}") from e
        except FileNotFoundError as exc:
            raise GitError("Git command not found. Please install Git.") from exc

    def _succeeds(self, args: list[str]) -> bool:
        try:
            self._run_git_command(args)
            return True
        except GitError:
            return False

    def get_staged_diff(self) -> str:
        """Get the diff of staged changes."""
        return self._run_git_command(["diff", "--cached"])

    def has_staged_changes(self) -> bool:
        return bool(self.get_staged_diff().strip())

    def commit(self, message: str) -> None:
        self._run_git_command(["commit", "-m", message])

    def get_current_branch(self) -> str:
        return self._run_git_command(["branch", "--show-current"])

    def get_default_branch(
        self, forge_lookup: Optional[Callable[[], Optional[str]]] = None
    ) -> str:
        """Resolve the repository's default branch.

        Tries ``refs/remotes/origin/HEAD`` first, then ``forge_lookup``
        (usually ``gh repo view``), then whichever of main/master exists on
        origin, and finally assumes ``main``.
        """
        try:
            ref = self._run_git_command(["symbolic-ref", "refs/remotes/origin/HEAD"])
        except GitError:
            ref = ""
        if ref:
            return ref.rsplit("/", 1)[-1]

        if forge_lookup is not None:
            branch = forge_lookup()
            if branch:
                return branch

        for branch in COMMON_DEFAULT_BRANCHES:
            if self._succeeds(
                ["show-ref", "--verify", "--quiet", f"refs/remotes/origin/{branch}"]
            ):
                return branch
        return COMMON_DEFAULT_BRANCHES[0]

    def get_branch_commits(self, base: str, head: str) -> str:
        """One-line log of ``base..head``, or recent commits on ``head``."""
        try:
            return self._run_git_command(["log", f"{base}..{head}", "--oneline"])
        except GitError:
            return self._run_git_command(
                ["log", "--oneline", f"-{RECENT_COMMIT_LIMIT}", head]
            )
