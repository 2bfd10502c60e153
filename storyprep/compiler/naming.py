"""Story identifiers and display names derived from export keys."""
from __future__ import annotations

import re
from typing import TYPE_CHECKING

from storyprep.errors import InvalidIdentifierError

if TYPE_CHECKING:
    from collections.abc import Sequence

_SEPARATORS = re.compile(r"[\W_]+")
# letter run | number
_RUN_RE = re.compile(r"[^\W\d_]+|\d+")


def sanitize(text: str) -> str:
    return _SEPARATORS.sub("-", text.lower()).strip("-")


def sanitize_safe(text: str, part: str) -> str:
    sanitized = sanitize(text)
    if not sanitized:
        raise InvalidIdentifierError(f"Invalid {part} '{text}', must include alphanumeric characters")
    return sanitized


def to_id(kind: str, name: str) -> str:
    """``to_id("Atoms/Button", "Primary Large")`` -> ``"atoms-button--primary-large"``."""
    return f"{sanitize_safe(kind, 'kind')}--{sanitize_safe(name, 'name')}"


def _case_words(run: str) -> list[str]:
    """Split a letter run at case changes: ``"someHTMLParser"`` -> ``some HTML Parser``."""
    words = []
    current = run[0]
    for prev, ch in zip(run, run[1:]):
        if ch.isupper() and not prev.isupper():
            words.append(current)
            current = ch
        elif not ch.isupper() and prev.isupper() and len(current) > 1 and current.isupper():
            # acronym followed by a capitalized word
            words.append(current[:-1])
            current = current[-1] + ch
        else:
            current += ch
    words.append(current)
    return words


def story_name_from_export(key: str) -> str:
    words = [
        word
        for run in _RUN_RE.findall(key)
        for word in (_case_words(run) if not run.isdigit() else [run])
    ]
    if not words:
        return key
    return " ".join(w[0].upper() + w[1:] for w in words)


def _matches(key: str, pattern: Sequence[str] | str | re.Pattern[str]) -> bool:
    if isinstance(pattern, re.Pattern):
        return pattern.search(key) is not None
    if isinstance(pattern, str):
        return re.search(pattern, key) is not None
    return key in pattern


def is_export_story(
    key: str,
    include_stories: Sequence[str] | str | re.Pattern[str] | None = None,
    exclude_stories: Sequence[str] | str | re.Pattern[str] | None = None,
) -> bool:
    if key.startswith("_"):
        return False
    if include_stories is not None and not _matches(key, include_stories):
        return False
    return exclude_stories is None or not _matches(key, exclude_stories)
