"""JSON-file-backed catalog store.

Keeps the whole catalog in memory (see `MemoryCatalogStore`) and rewrites a
single JSON document after every mutation, so CLI invocations share state.
Entities are written in their response shape and read back through the same
parsers the request path uses. The store is meant for a single process; it
does no file locking.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from metacat.core.adapters.memory import MemoryCatalogStore
from metacat.core.errors import CatalogError
from metacat.core.models import (
    DatasetType,
    DbTable,
    Job,
    JobType,
    Namespace,
    Run,
    RunState,
    Source,
    SourceType,
    Stream,
    Tag,
)
from metacat.core.names import (
    DatasetName,
    JobId,
    NamespaceName,
    OwnerName,
    SourceName,
    TagName,
)
from metacat.core.parsing import parse_enum, parse_instant, parse_uuid
from metacat.core.project import (
    to_dataset_response,
    to_job_response,
    to_namespace_response,
    to_run_response,
    to_source_response,
    to_tag_response,
)
from metacat.core.requests import dataset_id_from_payload, field_from_payload
from metacat.core.responses import as_payload

_FORMAT_VERSION = 1


class StoreError(RuntimeError):
    """Raised when the store file cannot be read or written."""


def _optional_instant(raw: Any) -> datetime | None:
    return None if raw is None else parse_instant(raw)


def _decode_namespace(item: dict) -> Namespace:
    return Namespace(
        name=NamespaceName.of(item["name"]),
        created_at=parse_instant(item["createdAt"]),
        updated_at=parse_instant(item["updatedAt"]),
        owner_name=OwnerName.of(item["ownerName"]),
        description=item.get("description"),
    )


def _decode_source(item: dict) -> Source:
    return Source(
        name=SourceName.of(item["name"]),
        type=parse_enum(SourceType, item["type"]),
        connection_url=item["connectionUrl"],
        created_at=parse_instant(item["createdAt"]),
        updated_at=parse_instant(item["updatedAt"]),
        description=item.get("description"),
    )


def _decode_dataset(item: dict) -> DbTable | Stream:
    common = {
        "id": dataset_id_from_payload(item["id"]),
        "name": DatasetName.of(item["name"]),
        "physical_name": DatasetName.of(item["physicalName"]),
        "created_at": parse_instant(item["createdAt"]),
        "updated_at": parse_instant(item["updatedAt"]),
        "source_name": SourceName.of(item["sourceName"]),
        "fields": tuple(field_from_payload(f) for f in item.get("fields", [])),
        "tags": item.get("tags", []),
        "last_modified_at": _optional_instant(item.get("lastModifiedAt")),
        "description": item.get("description"),
    }
    if parse_enum(DatasetType, item["type"]) is DatasetType.STREAM:
        return Stream(schema_location=item["schemaLocation"], **common)
    return DbTable(**common)


def _decode_job(item: dict) -> Job:
    return Job(
        id=JobId.of(item["id"]["namespace"], item["id"]["name"]),
        type=parse_enum(JobType, item["type"]),
        created_at=parse_instant(item["createdAt"]),
        updated_at=parse_instant(item["updatedAt"]),
        inputs=tuple(dataset_id_from_payload(i) for i in item.get("inputs", [])),
        outputs=tuple(dataset_id_from_payload(o) for o in item.get("outputs", [])),
        location=item.get("location"),
        context=dict(item.get("context", {})),
        description=item.get("description"),
    )


def _decode_run(item: dict) -> tuple[JobId, Run]:
    job = JobId.of(item["job"]["namespace"], item["job"]["name"])
    run = Run(
        id=parse_uuid(item["id"]),
        created_at=parse_instant(item["createdAt"]),
        updated_at=parse_instant(item["updatedAt"]),
        state=parse_enum(RunState, item["state"]),
        nominal_start_time=_optional_instant(item.get("nominalStartTime")),
        nominal_end_time=_optional_instant(item.get("nominalEndTime")),
        started_at=_optional_instant(item.get("startedAt")),
        ended_at=_optional_instant(item.get("endedAt")),
        args=dict(item.get("args", {})),
    )
    return job, run


def _decode_tag(item: dict) -> Tag:
    return Tag(name=TagName.of(item["name"]), description=item.get("description"))


class FileCatalogStore(MemoryCatalogStore):
    """Catalog store persisted to a JSON file."""

    def __init__(self, path: Path, clock: Callable[[], datetime] | None = None):
        super().__init__(clock=clock)
        self.path = Path(path)
        self._loading = False
        self.load()

    def load(self) -> None:
        """Read the store file if it exists; a missing file is an empty catalog."""
        if not self.path.exists():
            return
        try:
            payload = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Cannot read catalog store {self.path}: {exc}") from exc

        self._loading = True
        try:
            for item in payload.get("namespaces", []):
                namespace = _decode_namespace(item)
                self.namespaces.items[namespace.name] = namespace
            for item in payload.get("sources", []):
                source = _decode_source(item)
                self.sources.items[source.name] = source
            for item in payload.get("datasets", []):
                dataset = _decode_dataset(item)
                self.datasets.items[dataset.id] = dataset
            for item in payload.get("jobs", []):
                job = _decode_job(item)
                self.jobs.items[job.id] = job
            for item in payload.get("runs", []):
                self.runs.add(*_decode_run(item))
            for item in payload.get("tags", []):
                tag = _decode_tag(item)
                self.tags.items[tag.name] = tag
        except (KeyError, TypeError, AttributeError, CatalogError) as exc:
            raise StoreError(f"Corrupt catalog store {self.path}: {exc}") from exc
        finally:
            self._loading = False

    def dump(self) -> dict[str, Any]:
        """Return the whole catalog as a JSON-ready document."""
        runs = []
        for run_id, run in self.runs.items.items():
            job = self.runs.job_of[run_id]
            item = as_payload(to_run_response(run))
            item.pop("durationMs", None)
            item["job"] = {"namespace": job.namespace.value, "name": job.name.value}
            runs.append(item)

        jobs = []
        for job in self.jobs.items.values():
            item = as_payload(to_job_response(job))
            item.pop("latestRun", None)
            jobs.append(item)

        return {
            "version": _FORMAT_VERSION,
            "namespaces": [
                as_payload(to_namespace_response(n))
                for n in self.namespaces.items.values()
            ],
            "sources": [
                as_payload(to_source_response(s)) for s in self.sources.items.values()
            ],
            "datasets": [
                as_payload(to_dataset_response(d)) for d in self.datasets.items.values()
            ],
            "jobs": jobs,
            "runs": runs,
            "tags": [as_payload(to_tag_response(t)) for t in self.tags.items.values()],
        }

    def save(self) -> None:
        """Write the catalog to disk (atomically replacing the previous file)."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(self.dump(), indent=2))
            tmp.replace(self.path)
        except OSError as exc:
            raise StoreError(f"Cannot write catalog store {self.path}: {exc}") from exc

    def changed(self) -> None:
        if not self._loading:
            self.save()
