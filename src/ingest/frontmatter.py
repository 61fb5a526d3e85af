from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from src.errors import ParseError


_OPENING_PATTERN = re.compile(r"\A---[ \t]*\r?\n")
_BLOCK_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<meta>.*?)^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def split_front_matter(text: str, path: Path | str = "<string>") -> Tuple[Dict[str, Any], str]:
    """Split a source document into its YAML front-matter mapping and markdown body.

    Documents without a leading ``---`` line have no front-matter and are returned
    unchanged with an empty mapping.
    """

    if not _OPENING_PATTERN.match(text):
        return {}, text

    match = _BLOCK_PATTERN.match(text)
    if match is None:
        raise ParseError(path, "front-matter block is not terminated")

    try:
        data = yaml.safe_load(match.group("meta"))
    except yaml.YAMLError as exc:
        raise ParseError(path, f"invalid YAML front-matter ({exc})") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(path, "front-matter must be a mapping")
    return data, text[match.end():]


def coerce_title(value: Any, path: Path | str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ParseError(path, "'title' must be a string")
    title = str(value).strip()
    return title or None


def coerce_description(value: Any, path: Path | str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ParseError(path, "'description' must be a string")
    return str(value).strip() or None


def coerce_order(value: Any, path: Path | str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ParseError(path, "'order' must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ParseError(path, f"'order' must be an integer, got {value!r}") from exc
    raise ParseError(path, f"'order' must be an integer, got {value!r}")


def coerce_tags(value: Any, path: Path | str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(tag).strip() for tag in value if tag is not None and str(tag).strip()]
    raise ParseError(path, "'tags' must be a list of strings")


__all__ = [
    "coerce_description",
    "coerce_order",
    "coerce_tags",
    "coerce_title",
    "split_front_matter",
]
