"""Exceptions raised by the content pipeline."""

from __future__ import annotations

from typing import Iterable


class ContentError(Exception):
    """Base class for content pipeline errors."""


class DocumentNotFoundError(ContentError):
    """No document exists for the requested slug."""

    def __init__(self, slug: str, collection: str | None = None) -> None:
        self.slug = slug
        self.collection = collection
        where = f" in collection '{collection}'" if collection else ""
        super().__init__(f"Document not found{where}: {slug}")


class InvalidSlugError(DocumentNotFoundError):
    """Slug cannot address a file inside the collection root."""

    def __init__(self, slug: str, reason: str, collection: str | None = None) -> None:
        super().__init__(slug, collection)
        self.reason = reason
        where = f" in collection '{collection}'" if collection else ""
        self.args = (f"Invalid slug{where} {slug!r}: {reason}",)


class UnregisteredComponentError(ContentError):
    """Document embeds a component that the collection does not allow."""

    def __init__(self, name: str, allowed: Iterable[str]) -> None:
        self.name = name
        self.allowed = sorted(allowed)
        available = ", ".join(self.allowed) if self.allowed else "none"
        super().__init__(f"Component <{name}> is not registered (available: {available})")


class ComponentSyntaxError(ContentError):
    """An embedded component tag is malformed or never closed."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Malformed component <{name}>: {reason}")
