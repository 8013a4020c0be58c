"""Utility helpers for working with content files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Tuple

LOGGER = logging.getLogger(__name__)


def iter_content_files(root: Path, extension: str = ".mdx") -> Iterator[Tuple[List[str], Path]]:
    """Yield ``(segments, path)`` for every content file below ``root``.

    ``segments`` are the path parts relative to ``root``; the last one keeps its
    extension. Sibling order follows the filesystem and carries no meaning.
    A missing root yields nothing.
    """
    root = Path(root)
    if not root.is_dir():
        LOGGER.debug("Content root not found: %s", root)
        return
    yield from _walk(root, [], extension)


def _walk(directory: Path, parents: List[str], extension: str) -> Iterator[Tuple[List[str], Path]]:
    try:
        children = list(directory.iterdir())
    except OSError as exc:
        LOGGER.warning("Skipping unreadable directory %s: %s", directory, exc)
        return

    for child in children:
        segments = [*parents, child.name]
        try:
            if child.is_dir():
                yield from _walk(child, segments, extension)
            elif child.is_file() and child.name.endswith(extension):
                yield segments, child.resolve()
        except OSError as exc:
            LOGGER.warning("Skipping %s: %s", child, exc)
