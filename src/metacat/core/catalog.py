"""Catalog operations.

This module sits between an outer surface (CLI, HTTP handlers) and the
persistence collaborators. Each operation normalizes its request, checks the
entities it depends on exist, calls the store, and projects the result into a
response. It is intentionally free of presentation concerns so the same
functions back the CLI and the tests.
"""

from __future__ import annotations

from typing import Any, Iterable
from uuid import UUID

from metacat.core import tagging
from metacat.core.errors import InvalidArgument, NotFound
from metacat.core.models import Dataset, RunState
from metacat.core.names import (
    DatasetName,
    JobName,
    NamespaceName,
    SourceName,
    TagName,
)
from metacat.core.normalize import (
    to_dataset_meta,
    to_job_meta,
    to_namespace_meta,
    to_run_meta,
    to_source_meta,
)
from metacat.core.parsing import parse_enum, parse_uuid
from metacat.core.project import (
    require,
    to_dataset_response,
    to_datasets_response,
    to_job_response,
    to_jobs_response,
    to_namespace_response,
    to_namespaces_response,
    to_run_response,
    to_runs_response,
    to_source_response,
    to_sources_response,
    to_tag_response,
    to_tags_response,
)
from metacat.core.requests import (
    DatasetRequest,
    JobRequest,
    NamespaceRequest,
    RunRequest,
    SourceRequest,
)
from metacat.core.responses import (
    DatasetResponse,
    DatasetsResponse,
    JobResponse,
    JobsResponse,
    NamespaceResponse,
    NamespacesResponse,
    RunResponse,
    RunsResponse,
    SourceResponse,
    SourcesResponse,
    TagResponse,
    TagsResponse,
)
from metacat.core.stores import CatalogStore


def _check_page(limit: int, offset: int) -> None:
    if limit < 0:
        raise InvalidArgument("limit must be >= 0")
    if offset < 0:
        raise InvalidArgument("offset must be >= 0")


def _require_namespace(store: CatalogStore, namespace: NamespaceName) -> None:
    if not store.namespaces.exists(namespace):
        raise NotFound("Namespace", namespace)


def _require_job(store: CatalogStore, namespace: NamespaceName, job: JobName) -> None:
    _require_namespace(store, namespace)
    if not store.jobs.exists(namespace, job):
        raise NotFound("Job", f"{namespace}.{job}")


def create_or_update_namespace(
    store: CatalogStore, name: Any, request: NamespaceRequest
) -> NamespaceResponse:
    """Register a namespace, or update the owner/description of an existing one."""
    name = NamespaceName.of(name)
    meta = to_namespace_meta(request)
    return to_namespace_response(store.namespaces.create_or_update(name, meta))


def get_namespace(store: CatalogStore, name: Any) -> NamespaceResponse:
    name = NamespaceName.of(name)
    return to_namespace_response(require(store.namespaces.get(name), "Namespace", name))


def list_namespaces(
    store: CatalogStore, *, limit: int, offset: int = 0
) -> NamespacesResponse:
    _check_page(limit, offset)
    return to_namespaces_response(store.namespaces.get_all(limit, offset))


def create_or_update_source(
    store: CatalogStore, name: Any, request: SourceRequest
) -> SourceResponse:
    name = SourceName.of(name)
    meta = to_source_meta(request)
    return to_source_response(store.sources.create_or_update(name, meta))


def get_source(store: CatalogStore, name: Any) -> SourceResponse:
    name = SourceName.of(name)
    return to_source_response(require(store.sources.get(name), "Source", name))


def list_sources(
    store: CatalogStore, *, limit: int, offset: int = 0
) -> SourcesResponse:
    _check_page(limit, offset)
    return to_sources_response(store.sources.get_all(limit, offset))


def create_or_update_dataset(
    store: CatalogStore, namespace: Any, name: Any, request: DatasetRequest
) -> DatasetResponse:
    """
    Register or update a dataset.

    The request is normalized before any lookup, so a malformed request never
    reaches the store.

    Raises:
        InvalidArgument: If the request is malformed or of an unknown variant.
        NotFound: If the namespace, the source, or the run named by `runId`
                  does not exist.
    """
    namespace, name = NamespaceName.of(namespace), DatasetName.of(name)
    meta = to_dataset_meta(request)

    _require_namespace(store, namespace)
    if not store.sources.exists(meta.source_name):
        raise NotFound("Source", meta.source_name)
    if meta.run_id is not None and not store.runs.exists(meta.run_id):
        raise NotFound("Run", meta.run_id)

    return to_dataset_response(store.datasets.create_or_update(namespace, name, meta))


def _fetch_dataset(
    store: CatalogStore, namespace: NamespaceName, name: DatasetName
) -> Dataset:
    _require_namespace(store, namespace)
    dataset = store.datasets.get(namespace, name)
    return require(dataset, "Dataset", f"{namespace}.{name}")


def get_dataset(store: CatalogStore, namespace: Any, name: Any) -> DatasetResponse:
    namespace, name = NamespaceName.of(namespace), DatasetName.of(name)
    return to_dataset_response(_fetch_dataset(store, namespace, name))


def list_datasets(
    store: CatalogStore, namespace: Any, *, limit: int, offset: int = 0
) -> DatasetsResponse:
    namespace = NamespaceName.of(namespace)
    _check_page(limit, offset)
    _require_namespace(store, namespace)
    return to_datasets_response(store.datasets.get_all(namespace, limit, offset))


def tag_dataset(
    store: CatalogStore,
    namespace: Any,
    name: Any,
    tag: Any,
    *,
    all_fields: bool = False,
    field_names: Iterable[str] = (),
) -> DatasetResponse:
    """
    Attach a tag to a dataset, to some of its fields, or to all of them.

    Args:
        store: Catalog store.
        namespace: Namespace of the dataset.
        name: Dataset name.
        tag: Tag to attach; it must already be registered.
        all_fields: Tag every field instead of the dataset itself.
        field_names: Tag only these fields. Takes precedence over
                     `all_fields`. All names are checked before the single
                     write, so an unknown field leaves the dataset unchanged.

    Returns:
        The dataset as persisted after tagging.

    Raises:
        NotFound: If the namespace, dataset, tag or field does not exist.
    """
    namespace, name = NamespaceName.of(namespace), DatasetName.of(name)
    tag = TagName.of(tag)

    dataset = _fetch_dataset(store, namespace, name)
    if not store.tags.exists(tag):
        raise NotFound("Tag", tag)

    field_names = tuple(field_names)
    if field_names:
        tagged = tagging.tag_fields(dataset, field_names, tag)
    elif all_fields:
        tagged = tagging.tag_all_fields(dataset, tag)
    else:
        tagged = tagging.tag_dataset(dataset, tag)

    return to_dataset_response(store.datasets.replace(tagged))


def create_or_update_job(
    store: CatalogStore, namespace: Any, name: Any, request: JobRequest
) -> JobResponse:
    """Register or update a job; legacy input/output names use `namespace`."""
    namespace, name = NamespaceName.of(namespace), JobName.of(name)
    meta = to_job_meta(namespace, request)
    _require_namespace(store, namespace)
    return to_job_response(store.jobs.create_or_update(namespace, name, meta))


def get_job(store: CatalogStore, namespace: Any, name: Any) -> JobResponse:
    namespace, name = NamespaceName.of(namespace), JobName.of(name)
    _require_namespace(store, namespace)
    job = require(store.jobs.get(namespace, name), "Job", f"{namespace}.{name}")
    return to_job_response(job)


def list_jobs(
    store: CatalogStore, namespace: Any, *, limit: int, offset: int = 0
) -> JobsResponse:
    namespace = NamespaceName.of(namespace)
    _check_page(limit, offset)
    _require_namespace(store, namespace)
    return to_jobs_response(store.jobs.get_all(namespace, limit, offset))


def create_run(
    store: CatalogStore, namespace: Any, job: Any, request: RunRequest
) -> RunResponse:
    namespace, job = NamespaceName.of(namespace), JobName.of(job)
    meta = to_run_meta(request)
    _require_job(store, namespace, job)
    return to_run_response(store.runs.create(namespace, job, meta))


def get_run(store: CatalogStore, run_id: str | UUID) -> RunResponse:
    run_id = parse_uuid(run_id)
    return to_run_response(require(store.runs.get(run_id), "Run", run_id))


def list_runs(
    store: CatalogStore, namespace: Any, job: Any, *, limit: int, offset: int = 0
) -> RunsResponse:
    namespace, job = NamespaceName.of(namespace), JobName.of(job)
    _check_page(limit, offset)
    _require_job(store, namespace, job)
    return to_runs_response(store.runs.get_all(namespace, job, limit, offset))


def mark_run(
    store: CatalogStore, run_id: str | UUID, state: str | RunState
) -> RunResponse:
    """
    Move a run to a new state.

    Raises:
        InvalidArgument: If the id or state is malformed, or the transition
                         is not allowed.
        NotFound: If the run does not exist.
    """
    run_id = parse_uuid(run_id)
    state = parse_enum(RunState, state)
    if not store.runs.exists(run_id):
        raise NotFound("Run", run_id)
    return to_run_response(store.runs.mark_as(run_id, state))


def create_or_update_tag(
    store: CatalogStore, name: Any, description: str | None = None
) -> TagResponse:
    name = TagName.of(name)
    return to_tag_response(store.tags.create_or_update(name, description))


def list_tags(store: CatalogStore, *, limit: int, offset: int = 0) -> TagsResponse:
    _check_page(limit, offset)
    return to_tags_response(store.tags.get_all(limit, offset))
