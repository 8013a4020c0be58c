"""FastAPI application serving content documents and listings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from contentpress import __version__
from contentpress.config import AppConfig
from contentpress.content.collections import ContentCollection, default_collections
from contentpress.errors import ComponentSyntaxError, DocumentNotFoundError, UnregisteredComponentError
from contentpress.index.datasets import DATASETS, active_ctas, dataset_path, find_item, load_dataset
from contentpress.index.search import ListingState, apply_listing, categories
from contentpress.models import ListingItem
from contentpress.web.frontend import router as frontend_router

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="ContentPress", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


class HeadingOut(BaseModel):
    level: int
    text: str
    id: str


class DocumentOut(BaseModel):
    collection: str
    slug: str
    frontmatter: Dict[str, Any]
    headings: List[HeadingOut]
    components: List[str]
    html: str


class ListingOut(BaseModel):
    items: List[ListingItem]
    page: int
    total_pages: int
    total: int
    categories: List[str]
    state: Dict[str, str]
    error: Optional[str] = None


def _config() -> AppConfig:
    return AppConfig()


def _collection(name: str) -> ContentCollection:
    collections = default_collections(_config(), Path.cwd())
    if name not in collections:
        raise HTTPException(status_code=404, detail=f"Unknown collection: {name}")
    return collections[name]


def _dataset_file(name: str) -> Path:
    if name not in DATASETS:
        raise HTTPException(status_code=404, detail=f"Unknown listing: {name}")
    return dataset_path(_config().resolve_data_dir(Path.cwd()), name)


def render_document(collection: ContentCollection, slug: str) -> DocumentOut:
    """Compile and render one document, mapping content errors to HTTP errors."""
    try:
        document, compiled, html = collection.render(slug)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (UnregisteredComponentError, ComponentSyntaxError) as exc:
        LOGGER.error("Failed to compile %s/%s: %s", collection.name, slug, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return DocumentOut(
        collection=collection.name,
        slug=document.slug,
        frontmatter=document.frontmatter,
        headings=[HeadingOut(level=h.level, text=h.text, id=h.id) for h in compiled.headings],
        components=[call.name for call in compiled.components],
        html=html,
    )


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/api/collections/{collection}")
async def list_collection(collection: str) -> Dict[str, Any]:
    """Metadata index of a collection, newest first."""
    records = _collection(collection).index()
    return {"collection": collection, "documents": [record.to_dict() for record in records]}


@app.get("/api/collections/{collection}/{slug:path}")
async def get_document(collection: str, slug: str) -> DocumentOut:
    return render_document(_collection(collection), slug)


@app.get("/api/listings/{dataset}")
async def get_listing(
    dataset: str,
    q: Optional[str] = None,
    cat: Optional[str] = None,
    page: Optional[str] = None,
) -> ListingOut:
    """Filter, search and paginate a static listing dataset."""
    result = load_dataset(_dataset_file(dataset))
    state = ListingState.from_params(q=q, cat=cat, page=page)
    current = apply_listing(result.items, state, _config().page_size)

    return ListingOut(
        items=current.items,
        page=current.page,
        total_pages=current.total_pages,
        total=current.total,
        categories=categories(result.items),
        state=state.with_page(current.page).to_params(),
        error=result.error,
    )


@app.get("/api/listings/{dataset}/{slug}")
async def get_listing_item(dataset: str, slug: str, t: Optional[str] = None) -> Dict[str, Any]:
    result = load_dataset(_dataset_file(dataset))
    item = find_item(result.items, slug)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item not found: {slug}")

    try:
        start_at = max(0, int(t or 0))
    except ValueError:
        start_at = 0
    return {
        "item": item.model_dump(by_alias=True),
        "start_at": start_at,
        "active_ctas": [cta.model_dump() for cta in active_ctas(item.ctas, start_at)],
    }


app.include_router(frontend_router)
