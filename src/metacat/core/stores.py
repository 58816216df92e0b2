"""Persistence contracts consumed by the catalog operations.

The core never talks to storage itself; catalog operations receive an object
implementing `CatalogStore` and go through the per-entity stores below.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from metacat.core.models import (
    Dataset,
    DatasetMeta,
    Job,
    JobMeta,
    Namespace,
    NamespaceMeta,
    Run,
    RunMeta,
    RunState,
    Source,
    SourceMeta,
    Tag,
)
from metacat.core.names import DatasetName, JobName, NamespaceName, SourceName, TagName


class NamespaceStore(Protocol):
    """Interface for namespace persistence."""

    def exists(self, name: NamespaceName) -> bool: ...

    def get(self, name: NamespaceName) -> Namespace | None: ...

    def get_all(self, limit: int, offset: int) -> list[Namespace]: ...

    def create_or_update(
        self, name: NamespaceName, meta: NamespaceMeta
    ) -> Namespace: ...


class SourceStore(Protocol):
    """Interface for source persistence."""

    def exists(self, name: SourceName) -> bool: ...

    def get(self, name: SourceName) -> Source | None: ...

    def get_all(self, limit: int, offset: int) -> list[Source]: ...

    def create_or_update(self, name: SourceName, meta: SourceMeta) -> Source: ...


class DatasetStore(Protocol):
    """Interface for dataset persistence."""

    def exists(self, namespace: NamespaceName, name: DatasetName) -> bool: ...

    def get(self, namespace: NamespaceName, name: DatasetName) -> Dataset | None: ...

    def get_all(
        self, namespace: NamespaceName, limit: int, offset: int
    ) -> list[Dataset]: ...

    def create_or_update(
        self, namespace: NamespaceName, name: DatasetName, meta: DatasetMeta
    ) -> Dataset: ...

    def replace(self, dataset: Dataset) -> Dataset:
        """Persist a modified copy of an existing dataset (e.g. after tagging)."""
        ...


class JobStore(Protocol):
    """Interface for job persistence. Returned jobs carry their latest run."""

    def exists(self, namespace: NamespaceName, name: JobName) -> bool: ...

    def get(self, namespace: NamespaceName, name: JobName) -> Job | None: ...

    def get_all(
        self, namespace: NamespaceName, limit: int, offset: int
    ) -> list[Job]: ...

    def create_or_update(
        self, namespace: NamespaceName, name: JobName, meta: JobMeta
    ) -> Job: ...


class RunStore(Protocol):
    """Interface for run persistence and state transitions."""

    def exists(self, run_id: UUID) -> bool: ...

    def get(self, run_id: UUID) -> Run | None: ...

    def get_all(
        self, namespace: NamespaceName, job: JobName, limit: int, offset: int
    ) -> list[Run]: ...

    def create(self, namespace: NamespaceName, job: JobName, meta: RunMeta) -> Run: ...

    def mark_as(self, run_id: UUID, state: RunState, at: datetime | None = None) -> Run:
        """Move a run to `state`, recording start/end times."""
        ...


class TagStore(Protocol):
    """Interface for tag persistence."""

    def exists(self, name: TagName) -> bool: ...

    def get(self, name: TagName) -> Tag | None: ...

    def get_all(self, limit: int, offset: int) -> list[Tag]: ...

    def create_or_update(self, name: TagName, description: str | None) -> Tag: ...


class CatalogStore(Protocol):
    """Bundle of per-entity stores handed to catalog operations."""

    namespaces: NamespaceStore
    sources: SourceStore
    datasets: DatasetStore
    jobs: JobStore
    runs: RunStore
    tags: TagStore
