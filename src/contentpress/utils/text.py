"""Text helpers for anchors and Japanese reading normalization."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, Iterator

_HEADING_STRIP = re.compile(r"[^\w\- ]", re.UNICODE)
_ANCHOR_STRIP = re.compile(r"[^a-z0-9\-ぁ-ゖァ-ヺー一-鿿]+")
_KATAKANA = re.compile(r"[ァ-ヶ]")


def slugify_heading(text: str) -> str:
    """Build a heading anchor id.

    Lowercases, drops punctuation and turns spaces into hyphens. Kana and kanji
    are kept as-is, so Japanese headings produce readable ids.
    """
    slug = _HEADING_STRIP.sub("", text.strip().lower())
    return slug.replace(" ", "-")


class UniqueIds:
    """Stateful id allocator: ``ids("intro")`` gives ``intro``, then ``intro-1``..."""

    def __init__(self, fallback: str = "section") -> None:
        self.fallback = fallback
        self._seen: dict[str, int] = {}
        self._taken: set[str] = set()

    def __call__(self, base: str) -> str:
        base = base or self.fallback
        candidate = base
        count = self._seen.get(base, 0)
        while candidate in self._taken:
            count += 1
            candidate = f"{base}-{count}"
        self._seen[base] = count
        self._taken.add(candidate)
        return candidate


def unique_ids(bases: Iterable[str], fallback: str = "section") -> Iterator[str]:
    """Yield ids from ``bases``, suffixing ``-1``, ``-2``... on repeats."""
    ids = UniqueIds(fallback)
    for base in bases:
        yield ids(base)


def to_anchor(text: str) -> str:
    """Normalize a glossary term into a URL fragment."""
    value = unicodedata.normalize("NFKC", text).lower()
    value = _ANCHOR_STRIP.sub("-", value)
    return value.strip("-")


def normalize_kana(text: str) -> str:
    """Fold katakana into hiragana and apply NFKC, for reading-based sorting."""
    folded = _KATAKANA.sub(lambda m: chr(ord(m.group(0)) - 0x60), text)
    return unicodedata.normalize("NFKC", folded).strip()
