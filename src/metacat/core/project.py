"""Response projection.

Pure functions converting canonical entities into response shapes. This is
where dataset variants are dispatched on the read path, timestamps are
rendered, and derived values (run duration, a job's latest run) are computed.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

from metacat.core.errors import InvalidArgument, NotFound
from metacat.core.models import (
    Dataset,
    DbTable,
    Field,
    Job,
    Namespace,
    Run,
    Source,
    Stream,
    Tag,
)
from metacat.core.names import DatasetId, JobId
from metacat.core.parsing import format_instant, format_optional_instant, millis_between
from metacat.core.responses import (
    DatasetResponse,
    DatasetsResponse,
    DbTableResponse,
    FieldResponse,
    IdResponse,
    JobResponse,
    JobsResponse,
    NamespaceResponse,
    NamespacesResponse,
    RunResponse,
    RunsResponse,
    SourceResponse,
    SourcesResponse,
    StreamResponse,
    TagResponse,
    TagsResponse,
)

T = TypeVar("T")


def require(entity: T | None, kind: str, key: object) -> T:
    """Return `entity`, or raise NotFound if the lookup came back empty."""
    if entity is None:
        raise NotFound(kind, key)
    return entity


def _id(ref: DatasetId | JobId) -> IdResponse:
    return IdResponse(namespace=ref.namespace.value, name=ref.name.value)


def _tags(tags: Iterable) -> tuple[str, ...]:
    return tuple(sorted(t.value for t in tags))


def to_namespace_response(namespace: Namespace) -> NamespaceResponse:
    return NamespaceResponse(
        name=namespace.name.value,
        created_at=format_instant(namespace.created_at),
        updated_at=format_instant(namespace.updated_at),
        owner_name=namespace.owner_name.value,
        description=namespace.description,
    )


def to_namespaces_response(namespaces: Iterable[Namespace]) -> NamespacesResponse:
    return NamespacesResponse(tuple(to_namespace_response(n) for n in namespaces))


def to_source_response(source: Source) -> SourceResponse:
    return SourceResponse(
        type=source.type.value,
        name=source.name.value,
        created_at=format_instant(source.created_at),
        updated_at=format_instant(source.updated_at),
        connection_url=source.connection_url,
        description=source.description,
    )


def to_sources_response(sources: Iterable[Source]) -> SourcesResponse:
    return SourcesResponse(tuple(to_source_response(s) for s in sources))


def to_field_response(field: Field) -> FieldResponse:
    return FieldResponse(
        name=field.name.value,
        type=field.type,
        tags=_tags(field.tags),
        description=field.description,
    )


def _dataset_response_kwargs(dataset: Dataset) -> dict:
    return {
        "id": _id(dataset.id),
        "name": dataset.name.value,
        "physical_name": dataset.physical_name.value,
        "created_at": format_instant(dataset.created_at),
        "updated_at": format_instant(dataset.updated_at),
        "namespace": dataset.namespace.value,
        "source_name": dataset.source_name.value,
        "fields": tuple(to_field_response(f) for f in dataset.fields),
        "tags": _tags(dataset.tags),
        "last_modified_at": format_optional_instant(dataset.last_modified_at),
        "description": dataset.description,
    }


def to_dataset_response(dataset: Dataset) -> DatasetResponse:
    """
    Render a dataset, dispatching on its variant.

    Tables never carry a schema location; streams always do.

    Raises:
        InvalidArgument: If the dataset is neither a DbTable nor a Stream.
    """
    if isinstance(dataset, Stream):
        return StreamResponse(
            schema_location=dataset.schema_location,
            **_dataset_response_kwargs(dataset),
        )
    if isinstance(dataset, DbTable):
        return DbTableResponse(**_dataset_response_kwargs(dataset))
    raise InvalidArgument(f"Unknown dataset type: {type(dataset).__name__}.")


def to_datasets_response(datasets: Iterable[Dataset]) -> DatasetsResponse:
    return DatasetsResponse(tuple(to_dataset_response(d) for d in datasets))


def run_duration_ms(run: Run) -> int | None:
    """Milliseconds between start and end, or None unless both are known."""
    if run.started_at is None or run.ended_at is None:
        return None
    return millis_between(run.started_at, run.ended_at)


def to_run_response(run: Run) -> RunResponse:
    return RunResponse(
        id=str(run.id),
        created_at=format_instant(run.created_at),
        updated_at=format_instant(run.updated_at),
        nominal_start_time=format_optional_instant(run.nominal_start_time),
        nominal_end_time=format_optional_instant(run.nominal_end_time),
        started_at=format_optional_instant(run.started_at),
        ended_at=format_optional_instant(run.ended_at),
        duration_ms=run_duration_ms(run),
        state=run.state.value,
        args=dict(run.args),
    )


def to_runs_response(runs: Iterable[Run]) -> RunsResponse:
    return RunsResponse(tuple(to_run_response(r) for r in runs))


def to_job_response(job: Job) -> JobResponse:
    return JobResponse(
        id=_id(job.id),
        type=job.type.value,
        name=job.name.value,
        created_at=format_instant(job.created_at),
        updated_at=format_instant(job.updated_at),
        namespace=job.namespace.value,
        inputs=tuple(_id(i) for i in job.inputs),
        outputs=tuple(_id(o) for o in job.outputs),
        location=job.location,
        context=dict(job.context),
        description=job.description,
        latest_run=None if job.latest_run is None else to_run_response(job.latest_run),
    )


def to_jobs_response(jobs: Iterable[Job]) -> JobsResponse:
    return JobsResponse(tuple(to_job_response(j) for j in jobs))


def to_tag_response(tag: Tag) -> TagResponse:
    return TagResponse(name=tag.name.value, description=tag.description)


def to_tags_response(tags: Iterable[Tag]) -> TagsResponse:
    return TagsResponse(tuple(to_tag_response(t) for t in tags))
