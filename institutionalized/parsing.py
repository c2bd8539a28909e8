"""Parsing of PR responses and the commit-type emoji table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import MissingBodyError, MissingTitleError

TITLE_MARKER = "TITLE:"
BODY_MARKER = "BODY:"

# Insertion order is the order shown to the model.
COMMIT_TYPE_EMOJI: dict[str, str] = {
    "feat": "✨",
    "fix": "🐛",
    "docs": "📚",
    "style": "💄",
    "refactor": "♻️",
    "test": "✅",
    "chore": "🔧",
    "perf": "⚡",
    "ci": "👷",
    "build": "🏗️",
    "revert": "⏪",
}


def emoji_for(commit_type: str) -> str:
    """Return the glyph plus a trailing space, or "" for unknown types."""
    glyph = COMMIT_TYPE_EMOJI.get(commit_type)
    return f"{glyph} " if glyph else ""


@dataclass(frozen=True)
class PRContent:
    title: str
    body: str


class _State(Enum):
    NOT_STARTED = "not_started"
    SAW_TITLE = "saw_title"
    IN_BODY = "in_body"


def parse_pr_response(raw: str) -> PRContent:
    """Split a model response into title and body.

    Markers are case-sensitive and matched after stripping each line. Until
    ``BODY:`` is seen, a ``TITLE:`` line (re)sets the title and anything
    else is ignored preamble. After ``BODY:`` every line is body text, so
    repeated markers there are kept verbatim.

    Raises:
        MissingTitleError: no ``TITLE:`` line with a payload was found.
        MissingBodyError: ``BODY:`` was absent or followed by nothing.
    """
    state = _State.NOT_STARTED
    title = ""
    body_lines: list[str] = []

    for line in raw.splitlines():
        stripped = line.strip()
        if state is _State.IN_BODY:
            body_lines.append(stripped)
            continue
        if stripped.startswith(TITLE_MARKER):
            title = stripped[len(TITLE_MARKER):].strip()
            state = _State.SAW_TITLE
        elif stripped.startswith(BODY_MARKER):
            state = _State.IN_BODY

    if not title:
        raise MissingTitleError()
    body = "\n".join(body_lines).strip()
    if not body:
        raise MissingBodyError()
    return PRContent(title=title, body=body)
