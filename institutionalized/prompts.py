"""Prompt rendering for commit messages and pull requests.

Pure functions: no I/O, no validation of the inputs. An empty diff still
produces a well-formed prompt; rejecting it is the caller's job.
"""

from __future__ import annotations

from .parsing import BODY_MARKER, COMMIT_TYPE_EMOJI, TITLE_MARKER, emoji_for

PR_SECTIONS = (
    ("Summary", "Brief overview of what this PR accomplishes"),
    ("Changes Made", "Bullet points of key changes and improvements"),
    ("Testing", "Description of testing performed or needed"),
    ("Additional Notes", "Any important information for reviewers"),
)

TEMPLATE_START = "--- PR TEMPLATE START ---"
TEMPLATE_END = "--- PR TEMPLATE END ---"

PR_EMOJI_INSTRUCTION = (
    "- You may add appropriate emojis to make the PR more engaging if it "
    "fits naturally"
)


def commit_emoji_instruction() -> str:
    """One line listing every commit type with its glyph."""
    pairs = ", ".join(
        f"{emoji_for(kind)}{kind}" for kind in COMMIT_TYPE_EMOJI
    )
    return (
        "- Add an appropriate emoji at the beginning of the commit type "
        f"({pairs})"
    )


def build_commit_prompt(diff: str, use_emoji: bool) -> str:
    emoji_line = "\n" + commit_emoji_instruction() if use_emoji else ""
    return (
        "Analyze the following git diff and generate a conventional commit "
        "message.\n"
        "\n"
        "The commit message should follow the Conventional Commits "
        "specification:\n"
        "- Start with a type (feat, fix, docs, style, refactor, test, chore, "
        "etc.)\n"
        "- Include a brief description in present tense\n"
        "- Keep the first line under 50 characters if possible\n"
        "- Add a body if the change is complex (separate with blank line)"
        f"{emoji_line}\n"
        "\n"
        "Git diff:\n"
        f"{diff}\n"
        "\n"
        "Return only the commit message, nothing else."
    )


def _template_block(template_text: str) -> str:
    return (
        "\n\n"
        "IMPORTANT: This repository has a pull request template that you MUST "
        "follow. Please structure your response to match this template as "
        "closely as possible:\n"
        "\n"
        f"{TEMPLATE_START}\n"
        f"{template_text}\n"
        f"{TEMPLATE_END}\n"
        "\n"
        "When generating the PR body, use the template structure above but "
        "fill it with content based on the commit analysis. Maintain the same "
        "sections and format from the template."
    )


def build_pr_prompt(
    commits: str,
    current_branch: str,
    default_branch: str,
    template_text: str,
    use_emoji: bool,
) -> str:
    template_block = _template_block(template_text) if template_text else ""
    sections = "\n".join(
        f"  - ## {heading}: {hint}" for heading, hint in PR_SECTIONS
    )
    emoji_line = "\n" + PR_EMOJI_INSTRUCTION if use_emoji else ""
    return (
        "Analyze the following git commits and generate a comprehensive pull "
        "request title and body.\n"
        "\n"
        f"The pull request merges branch '{current_branch}' into "
        f"'{default_branch}'.{template_block}\n"
        "\n"
        "Requirements:\n"
        "- Generate a clear, concise PR title that summarizes the main purpose "
        "of the changes\n"
        "- Create a detailed PR body with the following sections (unless "
        "overridden by template above):\n"
        f"{sections}{emoji_line}\n"
        "\n"
        "Commits to analyze:\n"
        f"{commits}\n"
        "\n"
        "Return the response in this exact format:\n"
        f"{TITLE_MARKER} [your generated title here]\n"
        "\n"
        f"{BODY_MARKER}\n"
        "[your generated body here]"
    )
