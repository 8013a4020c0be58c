"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

CONTENT_EXTENSION = ".mdx"
DEFAULT_PAGE_SIZE = 9


def _get_default_content_root() -> Path:
    """Get the default content root for the current working tree."""
    # Next-style layout keeps collections under src/content
    nested = Path("src/content")
    if nested.exists():
        return nested
    return Path("content")


def _get_default_data_dir() -> Path:
    """Get the directory holding the static JSON listing datasets."""
    public = Path("public")
    if public.exists():
        return public
    return Path("data")


@dataclass(slots=True)
class AppConfig:
    content_root: Path | None = None
    data_dir: Path | None = None
    extension: str = CONTENT_EXTENSION
    page_size: int = DEFAULT_PAGE_SIZE
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if self.content_root is None:
            self.content_root = _get_default_content_root()
        if self.data_dir is None:
            self.data_dir = _get_default_data_dir()
        if not self.extension.startswith("."):
            self.extension = f".{self.extension}"
        self.page_size = max(1, self.page_size)

    def resolve_content_root(self, base_dir: Path | None = None) -> Path:
        if self.content_root is None:
            self.content_root = _get_default_content_root()
        return _resolve(Path(self.content_root), base_dir)

    def resolve_data_dir(self, base_dir: Path | None = None) -> Path:
        if self.data_dir is None:
            self.data_dir = _get_default_data_dir()
        return _resolve(Path(self.data_dir), base_dir)


def _resolve(path: Path, base_dir: Path | None) -> Path:
    if path.is_absolute() or base_dir is None:
        return path
    return base_dir / path
