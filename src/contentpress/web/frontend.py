"""Server-rendered HTML pages for content documents."""

from __future__ import annotations

import logging
from html import escape
from importlib.resources import files
from pathlib import Path
from string import Template

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from contentpress.config import AppConfig
from contentpress.content.collections import default_collections
from contentpress.content.components import PR_DISCLOSURE
from contentpress.errors import ComponentSyntaxError, DocumentNotFoundError, UnregisteredComponentError
from contentpress.index.indexer import build_combined_index
from contentpress.index.search import latest

LOGGER = logging.getLogger(__name__)

router = APIRouter()


def _load_template(name: str = "document.html") -> Template:
    template = files("contentpress.web").joinpath("templates", name)
    return Template(template.read_text(encoding="utf-8"))


def _page(title: str, content: str, status_code: int = 200) -> HTMLResponse:
    html = _load_template("page.html").substitute(title=escape(title), content=content)
    return HTMLResponse(content=html, status_code=status_code)


def _not_found(message: str) -> HTMLResponse:
    return _page("ページが見つかりません", f'<p class="error">{escape(message)}</p>', status_code=404)


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    collections = default_collections(AppConfig(), Path.cwd())
    records = latest(
        build_combined_index([collections["articles"], collections["topics"]]), limit=12
    )
    rows = "".join(
        f'<li><a href="{escape(collections[record.collection].url_for(record.slug))}">'
        f"{escape(record.title)}</a> <time>{escape(record.date)}</time></li>"
        for record in records
    )
    return _page("最新記事", f'<ul class="latest">{rows}</ul>')


@router.get("/{collection}/{slug:path}", response_class=HTMLResponse)
async def document_page(collection: str, slug: str) -> HTMLResponse:
    collections = default_collections(AppConfig(), Path.cwd())
    if collection not in collections:
        return _not_found(f"Unknown collection: {collection}")

    try:
        document, _, body = collections[collection].render(slug)
    except DocumentNotFoundError as exc:
        return _not_found(str(exc))
    except (UnregisteredComponentError, ComponentSyntaxError) as exc:
        LOGGER.error("Failed to compile %s/%s: %s", collection, slug, exc)
        return _page("表示エラー", f'<p class="error">{escape(str(exc))}</p>', status_code=500)

    title = str(document.frontmatter.get("title") or slug.rsplit("/", 1)[-1])
    date = document.frontmatter.get("date")
    html = _load_template("document.html").substitute(
        title=escape(title),
        date=escape(str(date)) if date else "",
        category=escape(str(document.frontmatter.get("category") or "")),
        disclosure=escape(PR_DISCLOSURE),
        body=body,
    )
    return _page(title, html)
