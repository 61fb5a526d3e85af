from __future__ import annotations

import html
import re
from typing import Iterable


_TAG_PATTERN = re.compile(r"<[^>]*>")
_EMOJI_PATTERN = re.compile("[\U0001F300-\U0001F9FF\u2600-\u26FF]")
_NON_WORD_PATTERN = re.compile(r"[^\w]+")


def plain_text(fragment: str) -> str:
    """Reduce an inline HTML fragment to plain text (tags, emoji and entities removed)."""

    text = _TAG_PATTERN.sub("", fragment)
    text = _EMOJI_PATTERN.sub("", text)
    return html.unescape(text).strip()


def slugify(text: str, fallback: str = "section") -> str:
    """Create a stable anchor id from plain heading text."""

    slug = _NON_WORD_PATTERN.sub("-", text.lower()).strip("-")
    return slug or fallback


def humanize_slug(slug: str) -> str:
    """``quick-start`` -> ``Quick start``."""

    text = slug.replace("-", " ")
    return text[:1].upper() + text[1:]


def humanize_category(name: str, acronyms: Iterable[str] = ("api",)) -> str:
    """``api-reference`` -> ``API Reference``."""

    upper = {acronym.lower() for acronym in acronyms}
    words = []
    for word in name.split("-"):
        if word.lower() in upper:
            words.append(word.upper())
        else:
            words.append(word[:1].upper() + word[1:])
    return " ".join(words)


__all__ = ["humanize_category", "humanize_slug", "plain_text", "slugify"]
