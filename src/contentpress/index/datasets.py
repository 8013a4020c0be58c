"""Loading of the static JSON listing datasets."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from contentpress.models import AffiliateCTA, ListingItem

LOGGER = logging.getLogger(__name__)

DATASETS = ("interviews", "guides", "topics")

M = TypeVar("M", bound=BaseModel)


@dataclass(slots=True)
class DatasetResult(Generic[M]):
    items: List[M] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def dataset_path(data_dir: Path, name: str) -> Path:
    return Path(data_dir) / f"{name}.json"


def load_dataset(path: Path, model: Type[M] = ListingItem) -> DatasetResult[M]:
    """Read a JSON array of records.

    Never raises: a missing file, invalid JSON or a non-array payload yields an
    empty result with ``error`` set. Invalid entries are dropped and flagged.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        LOGGER.warning("Dataset not found: %s", path)
        return DatasetResult(error=f"Dataset not found: {path.name}")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.error("Failed to read dataset %s: %s", path, exc)
        return DatasetResult(error=f"Failed to read dataset: {path.name}")

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        LOGGER.error("Invalid JSON in %s: %s", path, exc)
        return DatasetResult(error=f"Invalid JSON in {path.name}")

    if not isinstance(payload, list):
        LOGGER.error("Dataset %s is not an array", path)
        return DatasetResult(error=f"Dataset {path.name} is not an array")

    items: List[M] = []
    invalid = 0
    for index, entry in enumerate(payload):
        try:
            items.append(model.model_validate(entry))
        except ValidationError as exc:
            invalid += 1
            LOGGER.warning("Skipping invalid record %d in %s: %s", index, path, exc.errors()[0]["msg"])

    error = f"Skipped {invalid} invalid records in {path.name}" if invalid else None
    return DatasetResult(items=items, error=error)


def find_item(items: Sequence[ListingItem], slug: str) -> Optional[ListingItem]:
    return next((item for item in items if item.slug == slug), None)


def active_ctas(ctas: Sequence[AffiliateCTA], t: float) -> List[AffiliateCTA]:
    """CTAs whose ``[start, end]`` window contains playback time ``t``."""
    active = []
    for cta in ctas:
        start = max(0.0, cta.start or 0.0)
        end = cta.end if cta.end is not None else float("inf")
        if start <= t <= end:
            active.append(cta)
    return active
