"""Request normalization.

Pure functions turning client requests into the canonical Meta values the
persistence collaborators accept. Every value that needs parsing (names,
URIs, UUIDs, enumerated values, instants) is parsed here, so a malformed
request fails with InvalidArgument before anything is written.
"""

from __future__ import annotations

from typing import Iterable

from metacat.core.errors import InvalidArgument
from metacat.core.models import (
    DatasetMeta,
    DbTableMeta,
    JobMeta,
    JobType,
    NamespaceMeta,
    RunMeta,
    SourceMeta,
    SourceType,
    StreamMeta,
)
from metacat.core.names import (
    DatasetId,
    DatasetName,
    NamespaceName,
    OwnerName,
    SourceName,
)
from metacat.core.parsing import parse_enum, parse_instant, parse_uri, parse_uuid
from metacat.core.requests import (
    DatasetRequest,
    DbTableRequest,
    JobRequest,
    NamespaceRequest,
    RunRequest,
    SourceRequest,
    StreamRequest,
)


def to_namespace_meta(request: NamespaceRequest) -> NamespaceMeta:
    return NamespaceMeta(
        owner_name=OwnerName.of(request.owner_name),
        description=request.description,
    )


def to_source_meta(request: SourceRequest) -> SourceMeta:
    return SourceMeta(
        type=parse_enum(SourceType, request.type),
        connection_url=parse_uri(request.connection_url, label="Connection URL"),
        description=request.description,
    )


def _dataset_meta_kwargs(request: DatasetRequest) -> dict:
    return {
        "physical_name": DatasetName.of(request.physical_name),
        "source_name": SourceName.of(request.source_name),
        "fields": request.fields,
        "tags": request.tags,
        "description": request.description,
        "run_id": None if request.run_id is None else parse_uuid(request.run_id),
    }


def to_db_table_meta(request: DatasetRequest) -> DbTableMeta:
    return DbTableMeta(**_dataset_meta_kwargs(request))


def to_stream_meta(request: StreamRequest) -> StreamMeta:
    return StreamMeta(
        schema_location=parse_uri(request.schema_location, label="Schema location"),
        **_dataset_meta_kwargs(request),
    )


def to_dataset_meta(request: DatasetRequest) -> DatasetMeta:
    """
    Normalize a dataset request, dispatching on its variant.

    Raises:
        InvalidArgument: If the request is neither a table nor a stream
                         request, or if any of its values fail to parse.
    """
    if isinstance(request, StreamRequest):
        return to_stream_meta(request)
    if isinstance(request, DbTableRequest):
        return to_db_table_meta(request)
    raise InvalidArgument(f"Unknown dataset request type: {type(request).__name__}.")


def _qualify(
    namespace: NamespaceName, names: Iterable[str] | None
) -> tuple[DatasetId, ...]:
    if names is None:
        return ()
    return tuple(DatasetId(namespace, DatasetName.of(n)) for n in names)


def resolve_job_io(
    namespace: NamespaceName, request: JobRequest
) -> tuple[tuple[DatasetId, ...], tuple[DatasetId, ...]]:
    """
    Resolve a job's inputs and outputs into namespace-qualified dataset ids.

    The request is either versioned or legacy as a whole:

    - If `input_ids` or `output_ids` is present (even empty), both are used
      verbatim and the legacy `inputs`/`outputs` are ignored.
    - Otherwise bare names in `inputs`/`outputs` are qualified with the
      job's own namespace, order preserved.

    A direction with nothing supplied resolves to an empty tuple.

    Args:
        namespace: Namespace the job is registered in.
        request: Job request as sent by the client.

    Returns:
        A `(inputs, outputs)` pair of dataset id tuples.
    """
    if request.input_ids is not None or request.output_ids is not None:
        return tuple(request.input_ids or ()), tuple(request.output_ids or ())
    return _qualify(namespace, request.inputs), _qualify(namespace, request.outputs)


def to_job_meta(namespace: NamespaceName | str, request: JobRequest) -> JobMeta:
    inputs, outputs = resolve_job_io(NamespaceName.of(namespace), request)
    location = request.location
    return JobMeta(
        type=parse_enum(JobType, request.type),
        inputs=inputs,
        outputs=outputs,
        location=None if location is None else parse_uri(location, label="Location"),
        context=dict(request.context),
        description=request.description,
    )


def to_run_meta(request: RunRequest) -> RunMeta:
    start, end = request.nominal_start_time, request.nominal_end_time
    return RunMeta(
        nominal_start_time=None if start is None else parse_instant(start),
        nominal_end_time=None if end is None else parse_instant(end),
        args=dict(request.args),
    )
