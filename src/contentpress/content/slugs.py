"""Slug derivation from content paths and back."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from contentpress.errors import InvalidSlugError


def resolve_slug(segments: Sequence[str], extension: str = ".mdx") -> str:
    """Join relative path segments into a slug, dropping the file extension."""
    if not segments:
        raise ValueError("At least one path segment is required")
    parts = list(segments)
    last = parts[-1]
    if last.endswith(extension):
        parts[-1] = last[: -len(extension)]
    return "/".join(parts)


def validate_slug(slug: str) -> list[str]:
    """Split a slug into segments, rejecting anything that could leave the root."""
    if not slug:
        raise InvalidSlugError(slug, "empty slug")
    if "\0" in slug:
        raise InvalidSlugError(slug, "contains null byte")
    if "\\" in slug:
        raise InvalidSlugError(slug, "contains backslash")
    if slug.startswith("/"):
        raise InvalidSlugError(slug, "must be relative")

    segments = slug.split("/")
    for segment in segments:
        if segment in ("", ".", ".."):
            raise InvalidSlugError(slug, f"invalid segment {segment!r}")
    return segments


def to_file_path(root: Path, slug: str, extension: str = ".mdx") -> Path:
    """Return the file that ``slug`` addresses under ``root``.

    Raises:
        InvalidSlugError: If the slug is malformed or escapes ``root``.
    """
    segments = validate_slug(slug)
    root = Path(root)
    path = root.joinpath(*segments[:-1], segments[-1] + extension)

    # Catches symlinked directories pointing outside the collection.
    resolved_root = root.resolve()
    if not path.resolve().is_relative_to(resolved_root):
        raise InvalidSlugError(slug, "resolves outside the content root")
    return path
