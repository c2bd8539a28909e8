"""Command-line interface for institutionalized."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .config import (
    available_keys,
    config_file_path,
    load_preferences,
    PROVIDER_ORDER,
    PROVIDERS,
    Preferences,
    save_preferences,
    set_preference,
)
from .exceptions import InstitutionalizedError, NoProvidersError, ValidationError
from .git import GitRepo
from .github import GitHubCLI, find_pr_template
from .llm import manager_from_preferences

RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"

RULE = "=" * 37


def ask_for_confirmation(question: str) -> bool:
    try:
        response = input(f"{question} (y/N): ")
    except EOFError:
        return False
    return response.strip().lower() in {"y", "yes"}


def _no_providers_hint() -> str:
    names = " or ".join(PROVIDERS[p]["api_key_env"] for p in PROVIDER_ORDER)
    return f"no LLM providers available. Please set {names} environment variable"


class CLI:
    """argparse front-end wiring git, gh and preferences to the LLM layer."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="institutionalized",
            description=(
                "Generate conventional commit messages and pull request "
                "descriptions from your git changes using an LLM."
            ),
        )
        parser.add_argument(
            "--debug", action="store_true", help="Enable debug logging"
        )
        sub = parser.add_subparsers(dest="command", metavar="COMMAND")

        commit = sub.add_parser(
            "commit", help="Generate and commit a message for staged changes"
        )
        commit.add_argument(
            "--emoji",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Use emoji in commit messages (overrides config file setting)",
        )
        commit.add_argument(
            "--dry-run",
            action="store_true",
            help="Show the generated message without committing",
        )
        commit.add_argument(
            "-y", "--yes", action="store_true", help="Skip the confirmation prompt"
        )
        commit.add_argument(
            "-k",
            "--api-key",
            dest="api_key",
            default=None,
            help="Deprecated: OpenAI API key (use OPENAI_API_KEY instead)",
        )
        commit.set_defaults(handler=self._run_commit)

        pr = sub.add_parser("pr", help="Create a pull request using GitHub CLI")
        pr.add_argument(
            "-d", "--draft", action="store_true", help="Create a draft pull request"
        )
        pr.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be done without creating the PR",
        )
        pr.add_argument(
            "-y", "--yes", action="store_true", help="Skip the confirmation prompt"
        )
        pr.add_argument(
            "--emoji",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Allow emoji in the PR (overrides config file setting)",
        )
        pr.set_defaults(handler=self._run_pr)

        cfg = sub.add_parser("config", help="Manage configuration settings")
        cfg_sub = cfg.add_subparsers(dest="config_command", metavar="ACTION")
        show = cfg_sub.add_parser("show", help="Show current configuration")
        show.set_defaults(handler=self._run_config_show)
        setp = cfg_sub.add_parser(
            "set",
            help="Set a configuration value",
            description="Available keys: " + ", ".join(available_keys()),
        )
        setp.add_argument("key")
        setp.add_argument("value")
        setp.set_defaults(handler=self._run_config_set)
        init = cfg_sub.add_parser("init", help="Create a default configuration file")
        init.set_defaults(handler=self._run_config_init)
        return parser

    def run(self, args: Optional[list[str]] = None) -> int:
        try:
            parsed = self.parser.parse_args(args)
        except SystemExit as exc:
            return int(exc.code or 0)

        if parsed.debug:
            logging.basicConfig(
                level=logging.DEBUG,
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            )

        handler = getattr(parsed, "handler", None)
        if handler is None:
            self.parser.print_help()
            return 2

        try:
            return handler(parsed)
        except NoProvidersError:
            print(f"{RED}Error:{RESET} {_no_providers_hint()}", file=sys.stderr)
            return 1
        except InstitutionalizedError as exc:
            print(f"{RED}Error:{RESET} {exc}", file=sys.stderr)
            return 1

    # ------------------------------------------------------------------
    # commit
    # ------------------------------------------------------------------
    def _run_commit(self, args: argparse.Namespace) -> int:
        if args.api_key:
            print(
                f"{YELLOW}Warning:{RESET} --api-key is deprecated; set "
                "OPENAI_API_KEY instead.",
                file=sys.stderr,
            )

        repo = GitRepo()
        diff = repo.get_staged_diff()
        if not diff.strip():
            raise ValidationError(
                "no staged changes found. Use 'git add' to stage changes first"
            )

        prefs = load_preferences()
        use_emoji = prefs.use_emoji if args.emoji is None else args.emoji
        manager = manager_from_preferences(prefs, api_key_override=args.api_key)

        print("Analyzing staged changes...")
        result = manager.generate_commit_message(diff, use_emoji)
        if not result.message:
            raise ValidationError(f"{result.provider} returned an empty commit message")

        print(f"\n{DIM}Generated using {result.provider}{RESET}")
        print(f"\nProposed commit message:\n{BOLD}{result.message}{RESET}\n")

        if args.dry_run:
            print("Dry-run: nothing committed.")
            return 0
        if not args.yes and not ask_for_confirmation(
            "Do you want to commit with this message?"
        ):
            print("Commit cancelled.")
            return 0

        repo.commit(result.message)
        print(f"{GREEN}Changes committed successfully!{RESET}")
        return 0

    # ------------------------------------------------------------------
    # pr
    # ------------------------------------------------------------------
    def _run_pr(self, args: argparse.Namespace) -> int:
        repo = GitRepo()
        gh = GitHubCLI(str(repo.repo_path))
        if not gh.is_available():
            raise InstitutionalizedError(
                "GitHub CLI (gh) is not available. Please install it from "
                "https://cli.github.com/"
            )
        if not args.dry_run and not gh.is_authenticated():
            raise InstitutionalizedError(
                "not authenticated with GitHub CLI. Run 'gh auth login' to "
                "authenticate"
            )

        current = repo.get_current_branch()
        default = repo.get_default_branch(gh.default_branch)
        if current == default:
            raise ValidationError(
                f"cannot create PR from default branch ({default}). Please "
                "create a feature branch first"
            )
        print(f"🔄 Creating PR: {current} -> {default}")

        commits = repo.get_branch_commits(default, current).strip()
        if not commits:
            raise ValidationError(f"no commits found on branch {current}")
        template = find_pr_template(repo.repo_path)

        prefs = load_preferences()
        use_emoji = prefs.use_emoji if args.emoji is None else args.emoji
        manager = manager_from_preferences(prefs)
        result = manager.generate_pr_content(
            commits, current, default, use_emoji, template
        )
        print(f"✨ PR content generated using {result.provider}")

        if args.dry_run:
            print("📋 PR Preview (dry-run mode)")
            print(RULE)
            print(f"Title: {result.title}")
            print(f"Base: {default}")
            print(f"Head: {current}")
            print(f"Draft: {'Yes' if args.draft else 'No'}")
            print(f"\nBody:\n{result.body}")
            print(RULE)
            print("✅ Dry-run completed. Use 'institutionalized pr' to create the actual PR.")
            return 0

        print(f"\nTitle: {BOLD}{result.title}{RESET}\n\n{result.body}\n")
        if not args.yes and not ask_for_confirmation("Create this pull request?"):
            print("Pull request cancelled.")
            return 0

        output = gh.create_pr(result.title, result.body, default, draft=args.draft)
        if output:
            print(output)
        print(f"{GREEN}✅ Pull request created successfully!{RESET}")
        return 0

    # ------------------------------------------------------------------
    # config
    # ------------------------------------------------------------------
    def _run_config_show(self, args: argparse.Namespace) -> int:
        prefs = load_preferences()
        settings = prefs.providers
        print("Current configuration:")
        print(f"  use_emoji: {str(prefs.use_emoji).lower()}")
        print("  providers:")
        for name in PROVIDER_ORDER:
            print(f"    {name}:")
            print(f"      enabled: {str(settings.is_enabled(name)).lower()}")
        print(f"    priority: {settings.priority}")
        print(f"    delay_threshold: {settings.delay_threshold} seconds")

        path = config_file_path()
        if path.exists():
            print(f"\nConfig file: {path}")
        else:
            print(f"\nConfig file: {path} (not found - using defaults)")
        return 0

    def _run_config_set(self, args: argparse.Namespace) -> int:
        prefs = load_preferences()
        set_preference(prefs, args.key, args.value)
        save_preferences(prefs)
        print(f"Configuration updated: {args.key} = {args.value}")
        return 0

    def _run_config_init(self, args: argparse.Namespace) -> int:
        path = save_preferences(Preferences())
        print(f"Default configuration file created at: {path}")
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    return CLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
