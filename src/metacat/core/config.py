"""Runtime settings read from the environment.

Every setting has a safe default; malformed values fall back to the default
rather than failing, the same way the store path and page size are resolved
for every CLI invocation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from metacat.core.errors import InvalidArgument
from metacat.core.models import Tag
from metacat.core.names import TagName

STORE_PATH_ENV = "METACAT_STORE_PATH"
DATA_DIR_ENV = "METACAT_DATA_DIR"
PAGE_LIMIT_ENV = "METACAT_PAGE_LIMIT"
DEFAULT_TAGS_ENV = "METACAT_DEFAULT_TAGS"

DEFAULT_PAGE_LIMIT = 100
DEFAULT_TAGS = (
    "PII:Personally identifiable information,"
    "SENSITIVE:Contains sensitive information"
)


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    store_path: Path
    page_limit: int
    default_tags: tuple[Tag, ...]


def _default_store_path() -> Path:
    data_dir = os.getenv(DATA_DIR_ENV)
    if data_dir:
        return Path(data_dir) / "catalog.json"
    xdg = os.getenv("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / "metacat" / "catalog.json"


def _page_limit() -> int:
    raw = os.getenv(PAGE_LIMIT_ENV)
    if raw is None:
        return DEFAULT_PAGE_LIMIT
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_PAGE_LIMIT
    return value if value > 0 else DEFAULT_PAGE_LIMIT


def parse_tags(raw: str) -> tuple[Tag, ...]:
    """
    Parse `NAME[:description]` entries separated by commas.

    Blank entries are skipped; a later entry with the same name wins.

    Raises:
        InvalidArgument: If an entry has a blank name.
    """
    tags: dict[TagName, Tag] = {}
    for entry in raw.split(","):
        if not entry.strip():
            continue
        name, _, description = entry.partition(":")
        tag = Tag(name=TagName.of(name), description=description.strip() or None)
        tags[tag.name] = tag
    return tuple(tags.values())


def load_settings(store_path: Path | None = None) -> Settings:
    """
    Resolve settings from the environment.

    Args:
        store_path: Explicit store path (e.g. from `--store`), overriding
                    `METACAT_STORE_PATH`.
    """
    if store_path is None:
        env_path = os.getenv(STORE_PATH_ENV)
        store_path = Path(env_path) if env_path else _default_store_path()

    try:
        default_tags = parse_tags(os.getenv(DEFAULT_TAGS_ENV, DEFAULT_TAGS))
    except InvalidArgument:
        default_tags = parse_tags(DEFAULT_TAGS)

    return Settings(
        store_path=Path(store_path).expanduser(),
        page_limit=_page_limit(),
        default_tags=default_tags,
    )
