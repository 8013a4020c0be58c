"""Glossary filtering, reading-order sorting and gojuon grouping."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence

from contentpress.index.search import is_all_categories
from contentpress.models import GlossaryItem
from contentpress.utils.text import normalize_kana, to_anchor

GOJUON_GROUPS = (
    ("あ", re.compile(r"[ぁ-お]")),
    ("か", re.compile(r"[か-ご]")),
    ("さ", re.compile(r"[さ-ぞ]")),
    ("た", re.compile(r"[た-ど]")),
    ("な", re.compile(r"[な-の]")),
    ("は", re.compile(r"[は-ぽ]")),
    ("ま", re.compile(r"[ま-も]")),
    ("や", re.compile(r"[ゃ-よ]")),
    ("ら", re.compile(r"[ら-ろ]")),
    ("わ", re.compile(r"[ゎ-ん]")),
    ("英", re.compile(r"[A-Za-z]")),
    ("数", re.compile(r"[0-9]")),
)
OTHER_GROUP = "他"


def _reading(item: GlossaryItem) -> str:
    return normalize_kana(item.reading or item.term)


def filter_glossary(
    items: Sequence[GlossaryItem], query: Optional[str] = None, category: Optional[str] = None
) -> List[GlossaryItem]:
    """Filter by category, then by a query over term, reading, synonyms and description."""
    needle = (query or "").strip().lower()
    result = []
    for item in items:
        if not is_all_categories(category) and item.category != category:
            continue
        if needle:
            hay = "\n".join([item.term, item.reading or "", *item.synonyms, item.desc]).lower()
            if needle not in hay:
                continue
        result.append(item)
    return result


def sort_glossary(items: Iterable[GlossaryItem]) -> List[GlossaryItem]:
    return sorted(items, key=_reading)


def glossary_categories(items: Iterable[GlossaryItem]) -> List[str]:
    return sorted({item.category for item in items if item.category})


def group_key(item: GlossaryItem) -> str:
    reading = _reading(item)
    if not reading:
        return OTHER_GROUP
    first = reading[0]
    for key, pattern in GOJUON_GROUPS:
        if pattern.match(first):
            return key
    return OTHER_GROUP


def group_by_gojuon(items: Iterable[GlossaryItem]) -> Dict[str, List[GlossaryItem]]:
    """Bucket items by the gojuon row of their reading, preserving input order."""
    groups: Dict[str, List[GlossaryItem]] = {}
    for item in items:
        groups.setdefault(group_key(item), []).append(item)
    return groups


def glossary_anchor(item: GlossaryItem) -> str:
    return (item.slug or to_anchor(item.term)).lstrip("#")
