"""GitHub CLI (gh) integration and PR template discovery."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from .exceptions import GitError

logger = logging.getLogger(__name__)

# Searched in order; the first existing file wins.
PR_TEMPLATE_PATHS = (
    ".github/pull_request_template.md",
    ".github/PULL_REQUEST_TEMPLATE.md",
    ".github/PULL_REQUEST_TEMPLATE/pull_request_template.md",
    "docs/pull_request_template.md",
)


def find_pr_template(repo_root: Optional[Path] = None) -> str:
    """Return the stripped PR template text, or "" when there is none."""
    root = Path(repo_root or Path.cwd())
    for rel in PR_TEMPLATE_PATHS:
        candidate = root / rel
        if candidate.is_file():
            try:
                return candidate.read_text().strip()
            except OSError as exc:
                raise GitError(f"failed to read PR template at {rel}: {exc}") from exc
    return ""


class GitHubCLI:
    """Thin wrapper over the ``gh`` executable."""

    def __init__(self, repo_path: Optional[str] = None) -> None:
        self.repo_path = Path(repo_path or Path.cwd())

    def is_available(self) -> bool:
        return shutil.which("gh") is not None

    def is_authenticated(self) -> bool:
        # GitHub Actions exposes a token instead of a gh login.
        if os.environ.get("GH_TOKEN"):
            return True
        try:
            result = subprocess.run(
                ["gh", "auth", "status"],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0

    def default_branch(self) -> Optional[str]:
        if not self.is_authenticated():
            return None
        try:
            result = subprocess.run(
                [
                    "gh",
                    "repo",
                    "view",
                    "--json",
                    "defaultBranchRef",
                    "--jq",
                    ".defaultBranchRef.name",
                ],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as exc:
            logger.debug("gh repo view failed: %s", exc)
            return None
        branch = result.stdout.strip()
        if not branch or branch == "null":
            return None
        return branch

    def create_pr(self, title: str, body: str, base: str, draft: bool = False) -> str:
        """Create the PR and return gh's stdout (normally the PR URL)."""
        args = ["gh", "pr", "create", "--title", title, "--body", body, "--base", base]
        if draft:
            args.append("--draft")
        try:
            result = subprocess.run(
                args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or str(e)
            raise GitError(f"gh CLI error: {detail}") from e
        except FileNotFoundError as exc:
            raise GitError(
                "GitHub CLI (gh) is not available. Please install it from "
                "https://cli.github.com/"
            ) from exc
        return result.stdout.strip()
