"""Metadata index building for content collections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from contentpress.content.frontmatter import meta_from_frontmatter, read_frontmatter
from contentpress.content.slugs import resolve_slug
from contentpress.models import PostMeta
from contentpress.utils.files import iter_content_files

if TYPE_CHECKING:
    from contentpress.content.collections import ContentCollection

LOGGER = logging.getLogger(__name__)

MIN_DATE = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(slots=True)
class IndexStats:
    indexed: int = 0
    failed: int = 0
    failed_files: list[Path] = field(default_factory=list)

    def fail(self, path: Path) -> None:
        self.failed += 1
        self.failed_files.append(path)


def parse_date(value: object) -> datetime:
    """Parse an ISO-ish date for sorting; anything unparsable is ``MIN_DATE``."""
    if not isinstance(value, str) or not value.strip():
        return MIN_DATE
    text = value.strip().replace("/", "-")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return MIN_DATE
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _newest_first(records: Iterable[PostMeta]) -> List[PostMeta]:
    # sorted() is stable with reverse=True, so ties keep walk order.
    return sorted(records, key=lambda record: parse_date(record.date), reverse=True)


def build_index(
    root: Path,
    extension: str = ".mdx",
    collection: Optional[str] = None,
    stats: Optional[IndexStats] = None,
) -> List[PostMeta]:
    """Return frontmatter records for every document under ``root``, newest first."""
    stats = stats if stats is not None else IndexStats()
    records: List[PostMeta] = []
    for segments, path in iter_content_files(root, extension):
        slug = resolve_slug(segments, extension)
        try:
            frontmatter, _ = read_frontmatter(path)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Failed to read %s: %s", path, exc)
            stats.fail(path)
            continue
        records.append(meta_from_frontmatter(slug, frontmatter, collection))
        stats.indexed += 1

    LOGGER.debug("Indexed %d documents under %s", stats.indexed, root)
    return _newest_first(records)


def build_combined_index(collections: Sequence["ContentCollection"]) -> List[PostMeta]:
    """Merge the indexes of several collections into one date-sorted listing."""
    records: List[PostMeta] = []
    for collection in collections:
        records.extend(collection.index())
    return _newest_first(records)


def find_meta(records: Iterable[PostMeta], slug: str) -> Optional[PostMeta]:
    return next((record for record in records if record.slug == slug), None)
