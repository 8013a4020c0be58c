"""Named content collections and single-document lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from contentpress.config import AppConfig
from contentpress.content.compiler import CompiledDocument, ComponentRegistry, compile_document
from contentpress.content.components import ARTICLE_COMPONENTS, GUIDE_COMPONENTS, TOPIC_COMPONENTS
from contentpress.content.frontmatter import read_frontmatter
from contentpress.content.render import RenderContext, render_html
from contentpress.content.slugs import resolve_slug, to_file_path
from contentpress.errors import DocumentNotFoundError, InvalidSlugError
from contentpress.index.indexer import IndexStats, build_index, find_meta
from contentpress.models import ContentDocument, PostMeta
from contentpress.utils.files import iter_content_files

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ContentCollection:
    """A root directory whose documents share a component registry and route."""

    name: str
    root: Path
    components: ComponentRegistry = field(default_factory=dict)
    route_prefix: str = ""
    extension: str = ".mdx"

    def __post_init__(self) -> None:
        if not self.route_prefix:
            self.route_prefix = self.name

    def url_for(self, slug: str) -> str:
        return f"/{self.route_prefix.strip('/')}/{slug}"

    def get(self, slug: str) -> ContentDocument:
        """Load one document.

        Raises:
            DocumentNotFoundError: If the slug is invalid, the file is missing or
                the file cannot be read.
        """
        try:
            path = to_file_path(self.root, slug, self.extension)
        except InvalidSlugError as exc:
            raise InvalidSlugError(slug, exc.reason, self.name) from exc
        try:
            if not path.is_file():
                raise DocumentNotFoundError(slug, self.name)
            frontmatter, body = read_frontmatter(path)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Failed to read %s: %s", path, exc)
            raise DocumentNotFoundError(slug, self.name) from exc
        return ContentDocument(slug=slug, path=path, frontmatter=frontmatter, body=body)

    def documents(self) -> Iterator[ContentDocument]:
        for segments, path in iter_content_files(self.root, self.extension):
            slug = resolve_slug(segments, self.extension)
            try:
                frontmatter, body = read_frontmatter(path)
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.warning("Skipping unreadable document %s: %s", path, exc)
                continue
            yield ContentDocument(slug=slug, path=path, frontmatter=frontmatter, body=body)

    def slugs(self) -> List[str]:
        return [
            resolve_slug(segments, self.extension)
            for segments, _ in iter_content_files(self.root, self.extension)
        ]

    def index(self, stats: Optional[IndexStats] = None) -> List[PostMeta]:
        return build_index(self.root, self.extension, collection=self.name, stats=stats)

    def compile(self, slug: str) -> Tuple[ContentDocument, CompiledDocument]:
        """Load and compile one document against this collection's registry."""
        document = self.get(slug)
        return document, compile_document(document.body, self.components)

    def render(self, slug: str) -> Tuple[ContentDocument, CompiledDocument, str]:
        document, compiled = self.compile(slug)
        records: Optional[List[PostMeta]] = None

        def lookup(related: str) -> Optional[PostMeta]:
            nonlocal records
            if records is None:
                records = self.index()
            return find_meta(records, related)

        context = RenderContext(
            collection=self.name,
            route_prefix=self.route_prefix,
            headings=compiled.headings,
            lookup=lookup,
        )
        return document, compiled, render_html(compiled, context)


def default_collections(config: AppConfig, base_dir: Path | None = None) -> Dict[str, ContentCollection]:
    """Build the site's collections below the configured content root."""
    root = config.resolve_content_root(base_dir)
    collections = [
        ContentCollection("articles", root / "articles", ARTICLE_COMPONENTS, "articles", config.extension),
        ContentCollection("topics", root / "topics", TOPIC_COMPONENTS, "topics", config.extension),
        ContentCollection("guides", root / "GuideArticles", GUIDE_COMPONENTS, "guides", config.extension),
    ]
    return {collection.name: collection for collection in collections}
