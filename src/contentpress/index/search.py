"""Search, category filtering and pagination over listing records.

All functions are pure: they take a sequence of records (``ListingItem``,
``PostMeta`` or plain dicts with the same keys) and return new lists.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, TypeVar
from urllib.parse import urlencode

from contentpress.config import DEFAULT_PAGE_SIZE
from contentpress.index.indexer import parse_date

T = TypeVar("T")

ALL_CATEGORIES = "すべて"
CATEGORY_SENTINELS = frozenset({"all", ALL_CATEGORIES})


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        value = item.get(name, default)
    else:
        value = getattr(item, name, default)
    return default if value is None else value


def is_all_categories(category: Optional[str]) -> bool:
    return not category or category in CATEGORY_SENTINELS


def filter_by_category(items: Sequence[T], category: Optional[str]) -> List[T]:
    """Keep items whose category equals ``category``; sentinels keep everything."""
    if is_all_categories(category):
        return list(items)
    return [item for item in items if _field(item, "category") == category]


def haystack(item: Any) -> str:
    tags = _field(item, "tags", [])
    return f"{_field(item, 'title', '')} {_field(item, 'excerpt', '')} {' '.join(map(str, tags))}".lower()


def search(items: Sequence[T], query: Optional[str]) -> List[T]:
    """Case-insensitive substring match over title, excerpt and tags."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in haystack(item)]


def sort_by_date(items: Iterable[T]) -> List[T]:
    """Newest first; missing or unparsable dates last, ties keep input order."""
    return sorted(items, key=lambda item: parse_date(_field(item, "date")), reverse=True)


@dataclass(slots=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    total_pages: int
    total: int
    page_size: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(items: Sequence[T], page_size: int, requested_page: int) -> Page[T]:
    """Slice out a 1-indexed page, clamping ``requested_page`` into range."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    total = len(items)
    total_pages = max(1, math.ceil(total / page_size))
    page = min(max(1, requested_page), total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=page,
        total_pages=total_pages,
        total=total,
        page_size=page_size,
    )


def categories(items: Iterable[Any], sentinel: str = ALL_CATEGORIES) -> List[str]:
    """Sentinel first, then each distinct category in first-seen order."""
    seen: Dict[str, None] = {}
    for item in items:
        category = _field(item, "category")
        if category:
            seen.setdefault(category, None)
    return [sentinel, *seen]


def latest(items: Iterable[T], limit: int = 4) -> List[T]:
    return sort_by_date(items)[:limit]


@dataclass(frozen=True, slots=True)
class ListingState:
    """Search text, active category and current page of a listing."""

    q: str = ""
    cat: str = ALL_CATEGORIES
    page: int = 1

    @classmethod
    def from_params(
        cls,
        q: Optional[str] = None,
        cat: Optional[str] = None,
        page: Optional[str | int] = None,
    ) -> "ListingState":
        try:
            number = int(page) if page is not None else 1
        except (TypeError, ValueError):
            number = 1
        return cls(q=(q or "").strip(), cat=cat or ALL_CATEGORIES, page=max(1, number))

    def with_query(self, q: str) -> "ListingState":
        return replace(self, q=q.strip(), page=1)

    def with_category(self, cat: str) -> "ListingState":
        return replace(self, cat=cat or ALL_CATEGORIES, page=1)

    def with_page(self, page: int) -> "ListingState":
        return replace(self, page=max(1, page))

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.q:
            params["q"] = self.q
        if not is_all_categories(self.cat):
            params["cat"] = self.cat
        if self.page > 1:
            params["page"] = str(self.page)
        return params

    def href(self) -> str:
        params = self.to_params()
        return f"?{urlencode(params)}" if params else "?"


def apply_listing(
    items: Sequence[T], state: ListingState, page_size: int = DEFAULT_PAGE_SIZE
) -> Page[T]:
    """Category filter, then search, then date sort, then pagination."""
    narrowed = search(filter_by_category(items, state.cat), state.q)
    return paginate(sort_by_date(narrowed), page_size, state.page)
