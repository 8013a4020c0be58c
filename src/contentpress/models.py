"""Core ContentPress data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Sorts after every real date in a descending listing.
EPOCH_DATE = "1970-01-01"


@dataclass(slots=True)
class ContentDocument:
    """A single content file split into metadata and body."""

    slug: str
    path: Path
    frontmatter: Dict[str, Any]
    body: str


@dataclass(slots=True)
class PostMeta:
    """Listing record built from a document's frontmatter."""

    slug: str
    title: str
    date: str = EPOCH_DATE
    excerpt: str = ""
    thumbnail: str = ""
    tags: List[str] = field(default_factory=list)
    category: Optional[str] = None
    collection: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "date": self.date,
            "excerpt": self.excerpt,
            "thumbnail": self.thumbnail,
            "tags": list(self.tags),
            "category": self.category,
            "collection": self.collection,
            **self.extra,
        }


class AffiliateCTA(BaseModel):
    """Call-to-action shown while a video plays between ``start`` and ``end`` seconds."""

    label: str
    href: str
    start: Optional[float] = None
    end: Optional[float] = None


class ListingItem(BaseModel):
    """Pre-serialized record from a static JSON listing dataset."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    slug: str
    title: str
    excerpt: Optional[str] = None
    thumbnail: Optional[str] = None
    cover: Optional[str] = None
    date: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    video: Optional[str] = None
    author: Optional[str] = None
    ctas: List[AffiliateCTA] = Field(default_factory=list)
    read_minutes: Optional[int] = Field(default=None, alias="readMinutes")

    @property
    def image(self) -> Optional[str]:
        # Cards prefer the thumbnail, then the cover, then the video poster.
        return self.thumbnail or self.cover or self.video


class GlossaryItem(BaseModel):
    """A glossary term."""

    model_config = ConfigDict(populate_by_name=True)

    term: str
    reading: Optional[str] = None
    slug: Optional[str] = None
    desc: str = ""
    category: Optional[str] = None
    synonyms: List[str] = Field(default_factory=list)
    badge: Optional[str] = None
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
