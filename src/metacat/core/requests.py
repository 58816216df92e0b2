"""Client request shapes and their JSON payload parsing.

Request objects hold values the way a client sent them: names, URIs, UUIDs,
enumerated values and instants stay raw strings until the normalizer parses
them. Payload parsing here only checks structure (required keys, value
types) and accepts the camelCase keys of the HTTP API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

from metacat.core.errors import InvalidArgument
from metacat.core.models import DatasetType, Field
from metacat.core.names import DatasetId
from metacat.core.parsing import parse_string_map


@dataclass(frozen=True)
class NamespaceRequest:
    owner_name: str
    description: str | None = None


@dataclass(frozen=True)
class SourceRequest:
    type: str
    connection_url: str
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class DatasetRequest:
    """Fields shared by every dataset request variant."""

    type: ClassVar[DatasetType]

    physical_name: str
    source_name: str
    fields: tuple[Field, ...] = ()
    tags: tuple[str, ...] = ()
    description: str | None = None
    run_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class DbTableRequest(DatasetRequest):
    type: ClassVar[DatasetType] = DatasetType.DB_TABLE


@dataclass(frozen=True, kw_only=True)
class StreamRequest(DatasetRequest):
    type: ClassVar[DatasetType] = DatasetType.STREAM

    schema_location: str


@dataclass(frozen=True)
class JobRequest:
    """
    A job registration request.

    Inputs and outputs come in two generations: legacy bare dataset names
    (`inputs`/`outputs`, qualified with the job's namespace) and
    namespace-qualified references (`input_ids`/`output_ids`). `None` means
    the client did not send the key at all.
    """

    type: str
    inputs: tuple[str, ...] | None = None
    outputs: tuple[str, ...] | None = None
    input_ids: tuple[DatasetId, ...] | None = None
    output_ids: tuple[DatasetId, ...] | None = None
    location: str | None = None
    context: Mapping[str, str] = field(default_factory=dict)
    description: str | None = None


@dataclass(frozen=True)
class RunRequest:
    nominal_start_time: str | None = None
    nominal_end_time: str | None = None
    args: Mapping[str, str] = field(default_factory=dict)


def _as_object(payload: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise InvalidArgument(f"{kind} payload must be a JSON object.")
    return payload


def _required_str(payload: Mapping[str, Any], key: str, kind: str) -> str:
    value = payload.get(key)
    if value is None:
        raise InvalidArgument(f"{kind} is missing required key '{key}'.")
    if not isinstance(value, str):
        raise InvalidArgument(f"{kind} key '{key}' must be a string.")
    return value


def _optional_str(payload: Mapping[str, Any], key: str, kind: str) -> str | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidArgument(f"{kind} key '{key}' must be a string.")
    return value


def _optional_list(payload: Mapping[str, Any], key: str, kind: str) -> list | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, list):
        raise InvalidArgument(f"{kind} key '{key}' must be a list.")
    return value


def _str_tuple(items: list, key: str, kind: str) -> tuple[str, ...]:
    if not all(isinstance(i, str) for i in items):
        raise InvalidArgument(f"{kind} key '{key}' must be a list of strings.")
    return tuple(items)


def field_from_payload(payload: Any) -> Field:
    """Parse a `{name, type, tags?, description?}` object into a Field."""
    data = _as_object(payload, "Field")
    tags = _optional_list(data, "tags", "Field") or []
    return Field(
        name=_required_str(data, "name", "Field"),
        type=_required_str(data, "type", "Field"),
        tags=_str_tuple(tags, "tags", "Field"),
        description=_optional_str(data, "description", "Field"),
    )


def dataset_id_from_payload(payload: Any) -> DatasetId:
    """Parse a `{namespace, name}` object into a DatasetId."""
    data = _as_object(payload, "Dataset id")
    return DatasetId.of(
        _required_str(data, "namespace", "Dataset id"),
        _required_str(data, "name", "Dataset id"),
    )


def namespace_request_from_payload(payload: Any) -> NamespaceRequest:
    data = _as_object(payload, "Namespace request")
    return NamespaceRequest(
        owner_name=_required_str(data, "ownerName", "Namespace request"),
        description=_optional_str(data, "description", "Namespace request"),
    )


def source_request_from_payload(payload: Any) -> SourceRequest:
    data = _as_object(payload, "Source request")
    return SourceRequest(
        type=_required_str(data, "type", "Source request"),
        connection_url=_required_str(data, "connectionUrl", "Source request"),
        description=_optional_str(data, "description", "Source request"),
    )


def dataset_request_from_payload(payload: Any) -> DatasetRequest:
    """
    Parse a dataset request, dispatching on its `type` key.

    Raises:
        InvalidArgument: If `type` is missing or names an unknown variant.
    """
    kind = "Dataset request"
    data = _as_object(payload, kind)
    variant = _required_str(data, "type", kind)

    common: dict[str, Any] = {
        "physical_name": _required_str(data, "physicalName", kind),
        "source_name": _required_str(data, "sourceName", kind),
        "fields": tuple(
            field_from_payload(f) for f in _optional_list(data, "fields", kind) or []
        ),
        "tags": _str_tuple(_optional_list(data, "tags", kind) or [], "tags", kind),
        "description": _optional_str(data, "description", kind),
        "run_id": _optional_str(data, "runId", kind),
    }

    if variant == DatasetType.DB_TABLE.value:
        return DbTableRequest(**common)
    if variant == DatasetType.STREAM.value:
        return StreamRequest(
            schema_location=_required_str(data, "schemaLocation", kind), **common
        )
    raise InvalidArgument(f"Unknown dataset type '{variant}'.")


def job_request_from_payload(payload: Any) -> JobRequest:
    kind = "Job request"
    data = _as_object(payload, kind)

    inputs = _optional_list(data, "inputs", kind)
    outputs = _optional_list(data, "outputs", kind)
    input_ids = _optional_list(data, "inputIds", kind)
    output_ids = _optional_list(data, "outputIds", kind)

    return JobRequest(
        type=_required_str(data, "type", kind),
        inputs=None if inputs is None else _str_tuple(inputs, "inputs", kind),
        outputs=None if outputs is None else _str_tuple(outputs, "outputs", kind),
        input_ids=None
        if input_ids is None
        else tuple(dataset_id_from_payload(i) for i in input_ids),
        output_ids=None
        if output_ids is None
        else tuple(dataset_id_from_payload(o) for o in output_ids),
        location=_optional_str(data, "location", kind),
        context=parse_string_map(data.get("context"), label="Job context"),
        description=_optional_str(data, "description", kind),
    )


def run_request_from_payload(payload: Any) -> RunRequest:
    kind = "Run request"
    data = _as_object({} if payload is None else payload, kind)
    return RunRequest(
        nominal_start_time=_optional_str(data, "nominalStartTime", kind),
        nominal_end_time=_optional_str(data, "nominalEndTime", kind),
        args=parse_string_map(data.get("args"), label="Run args"),
    )
