"""Client-facing response shapes.

Responses are plain frozen dataclasses holding already-rendered values
(strings, ints, tuples). `as_payload` turns any of them into a JSON-ready
dict with camelCase keys; unset optional values are omitted.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class IdResponse:
    namespace: str
    name: str


@dataclass(frozen=True)
class NamespaceResponse:
    name: str
    created_at: str
    updated_at: str
    owner_name: str
    description: str | None = None


@dataclass(frozen=True)
class SourceResponse:
    type: str
    name: str
    created_at: str
    updated_at: str
    connection_url: str
    description: str | None = None


@dataclass(frozen=True)
class FieldResponse:
    name: str
    type: str
    tags: tuple[str, ...] = ()
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class DatasetResponse:
    type: str
    id: IdResponse
    name: str
    physical_name: str
    created_at: str
    updated_at: str
    namespace: str
    source_name: str
    fields: tuple[FieldResponse, ...] = ()
    tags: tuple[str, ...] = ()
    last_modified_at: str | None = None
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class DbTableResponse(DatasetResponse):
    type: str = "DB_TABLE"


@dataclass(frozen=True, kw_only=True)
class StreamResponse(DatasetResponse):
    type: str = "STREAM"
    schema_location: str


@dataclass(frozen=True)
class RunResponse:
    id: str
    created_at: str
    updated_at: str
    nominal_start_time: str | None
    nominal_end_time: str | None
    started_at: str | None
    ended_at: str | None
    duration_ms: int | None
    state: str
    args: Mapping[str, str]


@dataclass(frozen=True)
class JobResponse:
    id: IdResponse
    type: str
    name: str
    created_at: str
    updated_at: str
    namespace: str
    inputs: tuple[IdResponse, ...]
    outputs: tuple[IdResponse, ...]
    location: str | None
    context: Mapping[str, str]
    description: str | None
    latest_run: RunResponse | None


@dataclass(frozen=True)
class TagResponse:
    name: str
    description: str | None = None


@dataclass(frozen=True)
class NamespacesResponse:
    namespaces: tuple[NamespaceResponse, ...]


@dataclass(frozen=True)
class SourcesResponse:
    sources: tuple[SourceResponse, ...]


@dataclass(frozen=True)
class DatasetsResponse:
    datasets: tuple[DatasetResponse, ...]


@dataclass(frozen=True)
class JobsResponse:
    jobs: tuple[JobResponse, ...]


@dataclass(frozen=True)
class RunsResponse:
    runs: tuple[RunResponse, ...]


@dataclass(frozen=True)
class TagsResponse:
    tags: tuple[TagResponse, ...]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def as_payload(value: Any) -> Any:
    """
    Render a response (or any nesting of responses) into JSON-ready values.

    Dataclass attribute names become camelCase keys and `None` attributes
    are dropped. Keys of opaque mappings (job context, run args) are kept
    as-is.
    """
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            out[_camel(f.name)] = as_payload(item)
        return out
    if isinstance(value, Mapping):
        return {k: as_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [as_payload(v) for v in value]
    return value
