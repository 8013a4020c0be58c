"""Helpers for parsing YAML frontmatter from MDX content."""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from contentpress.models import EPOCH_DATE, PostMeta

LOGGER = logging.getLogger(__name__)

MARKER = "---"

_KNOWN_KEYS = {"title", "date", "excerpt", "thumbnail", "cover", "tags", "category"}


def parse_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split ``text`` into a frontmatter mapping and the body.

    The header must start on the first line with ``---`` and end at the next
    ``---`` line. Everything after the closing marker line is returned verbatim.
    Documents without a usable header come back as ``({}, text)``.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != MARKER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].rstrip() == MARKER:
            header = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            break
    else:
        LOGGER.debug("Frontmatter closing marker missing; treating as body")
        return {}, text

    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        LOGGER.warning("Failed to parse frontmatter: %s", exc)
        return {}, text

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        LOGGER.warning("Frontmatter is not a mapping: %s", type(data).__name__)
        return {}, text
    return {str(key): value for key, value in data.items()}, body


def read_frontmatter(path: Path, *, encoding: str = "utf-8") -> Tuple[Dict[str, Any], str]:
    """Read a content file and split its frontmatter.

    Raises:
        OSError: If the file cannot be read.
    """
    return parse_frontmatter(Path(path).read_text(encoding=encoding))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return str(value)


def _as_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if isinstance(value, (list, tuple)):
        return [str(tag) for tag in value if tag is not None]
    return [str(value)]


def meta_from_frontmatter(
    slug: str, frontmatter: Dict[str, Any], collection: str | None = None
) -> PostMeta:
    """Build a listing record, applying the per-field defaults."""
    title = _as_text(frontmatter.get("title")) or slug.rsplit("/", 1)[-1]
    date = _as_text(frontmatter.get("date")) or EPOCH_DATE
    thumbnail = _as_text(frontmatter.get("thumbnail")) or _as_text(frontmatter.get("cover"))
    category = frontmatter.get("category")

    return PostMeta(
        slug=slug,
        title=title,
        date=date,
        excerpt=_as_text(frontmatter.get("excerpt")),
        thumbnail=thumbnail,
        tags=_as_tags(frontmatter.get("tags")),
        category=_as_text(category) if category is not None else None,
        collection=collection,
        extra={key: value for key, value in frontmatter.items() if key not in _KNOWN_KEYS},
    )
