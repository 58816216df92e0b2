from pathlib import Path

import pytest

from metacat.core.config import (
    DATA_DIR_ENV,
    DEFAULT_TAGS_ENV,
    PAGE_LIMIT_ENV,
    STORE_PATH_ENV,
    load_settings,
    parse_tags,
)
from metacat.core.errors import InvalidArgument
from metacat.core.models import Tag
from metacat.core.names import TagName


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in (STORE_PATH_ENV, DATA_DIR_ENV, PAGE_LIMIT_ENV, DEFAULT_TAGS_ENV):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))


def test_defaults(tmp_path):
    settings = load_settings()

    assert settings.store_path == tmp_path / "xdg" / "metacat" / "catalog.json"
    assert settings.page_limit == 100
    assert [t.name.value for t in settings.default_tags] == ["PII", "SENSITIVE"]


def test_store_path_resolution_order(monkeypatch, tmp_path):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "data"))
    assert load_settings().store_path == tmp_path / "data" / "catalog.json"

    monkeypatch.setenv(STORE_PATH_ENV, str(tmp_path / "env.json"))
    assert load_settings().store_path == tmp_path / "env.json"

    explicit = tmp_path / "cli.json"
    assert load_settings(Path(explicit)).store_path == explicit


@pytest.mark.parametrize("raw, expected", [("25", 25), ("abc", 100), ("0", 100)])
def test_page_limit_falls_back_on_bad_values(monkeypatch, raw: str, expected: int):
    monkeypatch.setenv(PAGE_LIMIT_ENV, raw)

    assert load_settings().page_limit == expected


def test_parse_tags_skips_blanks_and_keeps_last_duplicate():
    tags = parse_tags("PII, SENSITIVE:Secret data,,PII:Personal")

    assert tags == (
        Tag(TagName("PII"), "Personal"),
        Tag(TagName("SENSITIVE"), "Secret data"),
    )


def test_parse_tags_rejects_blank_names():
    with pytest.raises(InvalidArgument):
        parse_tags(" :no name")


def test_invalid_default_tags_fall_back(monkeypatch):
    monkeypatch.setenv(DEFAULT_TAGS_ENV, " :no name")

    assert [t.name.value for t in load_settings().default_tags] == ["PII", "SENSITIVE"]
