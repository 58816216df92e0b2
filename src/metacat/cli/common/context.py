"""Application context management for the CLI."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from metacat.cli.common.exits import die
from metacat.core.adapters.filestore import FileCatalogStore, StoreError
from metacat.core.config import Settings, load_settings


@dataclass
class CatalogAppContext:
    """Application context holding resolved settings and the catalog store."""

    settings: Settings
    store: FileCatalogStore

    def limit(self, value: int | None) -> int:
        """Return the explicit `--limit`, or the configured page size."""
        return self.settings.page_limit if value is None else value


def build_catalog_context(store_path: Path | None) -> CatalogAppContext:
    """Build and return the application context with settings and store.

    Args:
        store_path: Optional store file overriding the configured location.

    Returns:
        CatalogAppContext: Context with an opened store, default tags seeded.
    """
    settings = load_settings(store_path)
    try:
        store = FileCatalogStore(settings.store_path)
        store.seed_tags(settings.default_tags)
    except StoreError as exc:
        die(str(exc), code=1)
    return CatalogAppContext(settings=settings, store=store)


def read_payload(source: str) -> Any:
    """Read a JSON request payload from a file path, or stdin when `source` is `-`."""
    try:
        if source == "-":
            text = sys.stdin.read()
        else:
            text = Path(source).read_text()
    except OSError as exc:
        die(f"Cannot read request file {source}: {exc}", code=1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        die(f"Request file {source} is not valid JSON: {exc}", code=1)
