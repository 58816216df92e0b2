"""In-memory implementation of the catalog persistence contracts.

Each entity lives in a plain dict keyed by its identity. Timestamps come from
an injectable clock so tests can pin them. Lists are returned sorted by name
(runs in creation order) and paged with `limit`/`offset`.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from typing import Callable, Iterable, TypeVar
from uuid import UUID, uuid4

from metacat.core.errors import InvalidArgument, NotFound
from metacat.core.models import (
    Dataset,
    DatasetMeta,
    DbTable,
    Job,
    JobMeta,
    Namespace,
    NamespaceMeta,
    Run,
    RunMeta,
    RunState,
    Source,
    SourceMeta,
    Stream,
    StreamMeta,
    Tag,
)
from metacat.core.names import (
    DatasetId,
    DatasetName,
    JobId,
    JobName,
    NamespaceName,
    SourceName,
    TagName,
)

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _page(items: Iterable[T], limit: int, offset: int) -> list[T]:
    return list(items)[offset : offset + limit]


class _Namespaces:
    def __init__(self, store: MemoryCatalogStore):
        self._store = store
        self.items: dict[NamespaceName, Namespace] = {}

    def exists(self, name: NamespaceName) -> bool:
        return name in self.items

    def get(self, name: NamespaceName) -> Namespace | None:
        return self.items.get(name)

    def get_all(self, limit: int, offset: int) -> list[Namespace]:
        return _page((self.items[k] for k in sorted(self.items)), limit, offset)

    def create_or_update(self, name: NamespaceName, meta: NamespaceMeta) -> Namespace:
        now = self._store.now()
        current = self.items.get(name)
        namespace = Namespace(
            name=name,
            created_at=current.created_at if current else now,
            updated_at=now,
            owner_name=meta.owner_name,
            description=meta.description,
        )
        self.items[name] = namespace
        self._store.changed()
        return namespace


class _Sources:
    def __init__(self, store: MemoryCatalogStore):
        self._store = store
        self.items: dict[SourceName, Source] = {}

    def exists(self, name: SourceName) -> bool:
        return name in self.items

    def get(self, name: SourceName) -> Source | None:
        return self.items.get(name)

    def get_all(self, limit: int, offset: int) -> list[Source]:
        return _page((self.items[k] for k in sorted(self.items)), limit, offset)

    def create_or_update(self, name: SourceName, meta: SourceMeta) -> Source:
        now = self._store.now()
        current = self.items.get(name)
        source = Source(
            name=name,
            type=meta.type,
            connection_url=meta.connection_url,
            created_at=current.created_at if current else now,
            updated_at=now,
            description=meta.description,
        )
        self.items[name] = source
        self._store.changed()
        return source


class _Datasets:
    def __init__(self, store: MemoryCatalogStore):
        self._store = store
        self.items: dict[DatasetId, Dataset] = {}

    def exists(self, namespace: NamespaceName, name: DatasetName) -> bool:
        return DatasetId(namespace, name) in self.items

    def get(self, namespace: NamespaceName, name: DatasetName) -> Dataset | None:
        return self.items.get(DatasetId(namespace, name))

    def get_all(
        self, namespace: NamespaceName, limit: int, offset: int
    ) -> list[Dataset]:
        keys = sorted(k for k in self.items if k.namespace == namespace)
        return _page((self.items[k] for k in keys), limit, offset)

    def create_or_update(
        self, namespace: NamespaceName, name: DatasetName, meta: DatasetMeta
    ) -> Dataset:
        key = DatasetId(namespace, name)
        current = self.items.get(key)
        if current is not None and current.type is not meta.type:
            raise InvalidArgument(
                f"Dataset '{key}' is a {current.type.value}, not a {meta.type.value}."
            )

        now = self._store.now()
        if meta.run_id is not None:
            last_modified_at = now
        else:
            last_modified_at = current.last_modified_at if current else None

        common = {
            "id": key,
            "name": name,
            "physical_name": meta.physical_name,
            "created_at": current.created_at if current else now,
            "updated_at": now,
            "source_name": meta.source_name,
            "fields": meta.fields,
            "tags": meta.tags,
            "last_modified_at": last_modified_at,
            "description": meta.description,
        }
        if isinstance(meta, StreamMeta):
            dataset: Dataset = Stream(schema_location=meta.schema_location, **common)
        else:
            dataset = DbTable(**common)

        self.items[key] = dataset
        self._store.changed()
        return dataset

    def replace(self, dataset: Dataset) -> Dataset:
        current = self.items.get(dataset.id)
        if current is None:
            raise NotFound("Dataset", dataset.id)
        if current.type is not dataset.type:
            raise InvalidArgument(f"Dataset '{dataset.id}' cannot change its type.")
        updated = dataclasses.replace(dataset, updated_at=self._store.now())
        self.items[dataset.id] = updated
        self._store.changed()
        return updated


class _Jobs:
    def __init__(self, store: MemoryCatalogStore):
        self._store = store
        self.items: dict[JobId, Job] = {}

    def _with_latest_run(self, job: Job) -> Job:
        return dataclasses.replace(job, latest_run=self._store.runs.latest_for(job.id))

    def exists(self, namespace: NamespaceName, name: JobName) -> bool:
        return JobId(namespace, name) in self.items

    def get(self, namespace: NamespaceName, name: JobName) -> Job | None:
        job = self.items.get(JobId(namespace, name))
        return None if job is None else self._with_latest_run(job)

    def get_all(self, namespace: NamespaceName, limit: int, offset: int) -> list[Job]:
        keys = sorted(k for k in self.items if k.namespace == namespace)
        page = _page((self.items[k] for k in keys), limit, offset)
        return [self._with_latest_run(j) for j in page]

    def create_or_update(
        self, namespace: NamespaceName, name: JobName, meta: JobMeta
    ) -> Job:
        key = JobId(namespace, name)
        now = self._store.now()
        current = self.items.get(key)
        job = Job(
            id=key,
            type=meta.type,
            created_at=current.created_at if current else now,
            updated_at=now,
            inputs=meta.inputs,
            outputs=meta.outputs,
            location=meta.location,
            context=dict(meta.context),
            description=meta.description,
        )
        self.items[key] = job
        self._store.changed()
        return self._with_latest_run(job)


class _Runs:
    def __init__(self, store: MemoryCatalogStore):
        self._store = store
        self.items: dict[UUID, Run] = {}
        self.job_of: dict[UUID, JobId] = {}

    def exists(self, run_id: UUID) -> bool:
        return run_id in self.items

    def get(self, run_id: UUID) -> Run | None:
        return self.items.get(run_id)

    def _for_job(self, job: JobId) -> list[Run]:
        return [run for run_id, run in self.items.items() if self.job_of[run_id] == job]

    def get_all(
        self, namespace: NamespaceName, job: JobName, limit: int, offset: int
    ) -> list[Run]:
        return _page(self._for_job(JobId(namespace, job)), limit, offset)

    def latest_for(self, job: JobId) -> Run | None:
        runs = self._for_job(job)
        return runs[-1] if runs else None

    def add(self, job: JobId, run: Run) -> None:
        self.items[run.id] = run
        self.job_of[run.id] = job

    def create(self, namespace: NamespaceName, job: JobName, meta: RunMeta) -> Run:
        now = self._store.now()
        run = Run(
            id=uuid4(),
            created_at=now,
            updated_at=now,
            nominal_start_time=meta.nominal_start_time,
            nominal_end_time=meta.nominal_end_time,
            args=dict(meta.args),
        )
        self.add(JobId(namespace, job), run)
        self._store.changed()
        return run

    def mark_as(self, run_id: UUID, state: RunState, at: datetime | None = None) -> Run:
        run = self.items.get(run_id)
        if run is None:
            raise NotFound("Run", run_id)
        if not run.state.can_transition_to(state):
            raise InvalidArgument(
                f"Run '{run_id}' cannot move from {run.state.value} to {state.value}."
            )
        at = at or self._store.now()
        updated = dataclasses.replace(
            run,
            state=state,
            updated_at=at,
            started_at=at if state is RunState.RUNNING else run.started_at,
            ended_at=at if state.is_terminal else run.ended_at,
        )
        self.items[run_id] = updated
        self._store.changed()
        return updated


class _Tags:
    def __init__(self, store: MemoryCatalogStore):
        self._store = store
        self.items: dict[TagName, Tag] = {}

    def exists(self, name: TagName) -> bool:
        return name in self.items

    def get(self, name: TagName) -> Tag | None:
        return self.items.get(name)

    def get_all(self, limit: int, offset: int) -> list[Tag]:
        return _page((self.items[k] for k in sorted(self.items)), limit, offset)

    def create_or_update(self, name: TagName, description: str | None) -> Tag:
        tag = Tag(name=name, description=description)
        self.items[name] = tag
        self._store.changed()
        return tag


class MemoryCatalogStore:
    """Catalog store keeping every entity in process memory."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or _utc_now
        self.namespaces = _Namespaces(self)
        self.sources = _Sources(self)
        self.datasets = _Datasets(self)
        self.jobs = _Jobs(self)
        self.runs = _Runs(self)
        self.tags = _Tags(self)

    def now(self) -> datetime:
        return self.clock()

    def changed(self) -> None:
        """Called after every mutation; subclasses persist state here."""

    def seed_tags(self, tags: Iterable[Tag]) -> None:
        """Register tags that are not known yet, leaving existing ones alone."""
        for tag in tags:
            if not self.tags.exists(tag.name):
                self.tags.create_or_update(tag.name, tag.description)
