import json

import pytest

from metacat.core import catalog
from metacat.core.adapters.filestore import FileCatalogStore, StoreError
from metacat.core.models import Field
from metacat.core.requests import (
    JobRequest,
    NamespaceRequest,
    RunRequest,
    SourceRequest,
    StreamRequest,
)


def _populate(store) -> str:
    catalog.create_or_update_namespace(store, "ns", NamespaceRequest(owner_name="me"))
    catalog.create_or_update_source(
        store, "kafka", SourceRequest(type="KAFKA", connection_url="kafka://b:9092")
    )
    catalog.create_or_update_tag(store, "PII")
    catalog.create_or_update_dataset(
        store,
        "ns",
        "events",
        StreamRequest(
            physical_name="events",
            source_name="kafka",
            fields=(Field(name="email", type="STRING", tags={"PII"}),),
            schema_location="http://registry/events.avsc",
        ),
    )
    catalog.create_or_update_job(
        store,
        "ns",
        "ingest",
        JobRequest(type="STREAM", output_ids=()),
    )
    run = catalog.create_run(
        store, "ns", "ingest", RunRequest(nominal_start_time="2024-01-01T00:00:00Z")
    )
    catalog.mark_run(store, run.id, "RUNNING")
    return run.id


def test_reopened_store_returns_the_same_entities(tmp_path, clock):
    path = tmp_path / "catalog.json"
    store = FileCatalogStore(path, clock=clock)
    run_id = _populate(store)

    reopened = FileCatalogStore(path, clock=clock)

    assert catalog.get_dataset(reopened, "ns", "events") == catalog.get_dataset(
        store, "ns", "events"
    )
    assert catalog.get_job(reopened, "ns", "ingest") == catalog.get_job(
        store, "ns", "ingest"
    )
    assert catalog.get_run(reopened, run_id).state == "RUNNING"
    assert catalog.list_tags(reopened, limit=10) == catalog.list_tags(store, limit=10)
    assert catalog.get_source(reopened, "kafka").type == "KAFKA"


def test_store_file_holds_runs_with_their_job(tmp_path, clock):
    path = tmp_path / "nested" / "catalog.json"
    _populate(FileCatalogStore(path, clock=clock))

    document = json.loads(path.read_text())

    assert document["version"] == 1
    assert document["runs"][0]["job"] == {"namespace": "ns", "name": "ingest"}
    assert "durationMs" not in document["runs"][0]
    assert "latestRun" not in document["jobs"][0]


def test_missing_file_is_an_empty_catalog(tmp_path):
    store = FileCatalogStore(tmp_path / "absent.json")

    assert catalog.list_namespaces(store, limit=10).namespaces == ()
    assert not (tmp_path / "absent.json").exists()


@pytest.mark.parametrize("content", ["{not json", "[]", '{"namespaces": [{}]}'])
def test_corrupt_file_raises_store_error(tmp_path, content: str):
    path = tmp_path / "catalog.json"
    path.write_text(content)

    with pytest.raises(StoreError):
        FileCatalogStore(path)
