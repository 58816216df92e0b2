"""Core domain models for the metadata catalog.

This module defines the canonical entities (Namespace, Source, Dataset and its
variants, Field, Job, Run, Tag) and the "Meta" values produced by request
normalization. These models are intentionally simple, immutable, and free of
any persistence or presentation concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Iterable, Mapping
from uuid import UUID

from metacat.core.names import (
    DatasetId,
    DatasetName,
    FieldName,
    JobId,
    NamespaceName,
    OwnerName,
    SourceName,
    TagName,
)


class SourceType(str, Enum):
    """Kinds of external systems a source can point to."""

    MYSQL = "MYSQL"
    POSTGRESQL = "POSTGRESQL"
    REDSHIFT = "REDSHIFT"
    SNOWFLAKE = "SNOWFLAKE"
    KAFKA = "KAFKA"


class DatasetType(str, Enum):
    """Closed set of dataset variants."""

    DB_TABLE = "DB_TABLE"
    STREAM = "STREAM"


class JobType(str, Enum):
    """Kinds of jobs recorded in the catalog."""

    BATCH = "BATCH"
    STREAM = "STREAM"
    SERVICE = "SERVICE"


class RunState(str, Enum):
    """
    Lifecycle states of a job run.

    Values:
        NEW: The run has been recorded but has not started yet.
        RUNNING: The run is executing.
        COMPLETED: The run finished successfully.
        ABORTED: The run was stopped before completion.
        FAILED: The run finished with an error.
    """

    NEW = "NEW"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    ABORTED = "ABORTED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES

    def can_transition_to(self, target: RunState) -> bool:
        """Return True if `target` is a legal next state."""
        return target in _TRANSITIONS[self]


_TERMINAL_STATES = frozenset({RunState.COMPLETED, RunState.ABORTED, RunState.FAILED})

_TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.NEW: frozenset({RunState.RUNNING}),
    RunState.RUNNING: _TERMINAL_STATES,
    RunState.COMPLETED: frozenset(),
    RunState.ABORTED: frozenset(),
    RunState.FAILED: frozenset(),
}


def _tag_set(tags: Iterable[TagName | str]) -> frozenset[TagName]:
    return frozenset(TagName.of(t) for t in tags)


def _frozen_map(values: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class Namespace:
    """Top-level grouping for sources, datasets and jobs."""

    name: NamespaceName
    created_at: datetime
    updated_at: datetime
    owner_name: OwnerName
    description: str | None = None


@dataclass(frozen=True)
class Source:
    """External system of record for one or more datasets."""

    name: SourceName
    type: SourceType
    connection_url: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None


@dataclass(frozen=True)
class Field:
    """
    A named column or attribute of a dataset.

    Attributes:
        name: Field name, case-sensitive.
        type: Declared type of the field (e.g. `VARCHAR`, `INTEGER`).
        tags: Tags attached to the field. Stored as a set; adding a tag
              twice has no effect.
        description: Optional free-text description.
    """

    name: FieldName
    type: str
    tags: frozenset[TagName] = frozenset()
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", FieldName.of(self.name))
        object.__setattr__(self, "tags", _tag_set(self.tags))


@dataclass(frozen=True, kw_only=True)
class Dataset:
    """
    Attributes shared by every dataset variant.

    Never instantiated directly: a dataset is always a DbTable or a Stream,
    and its variant is fixed at creation.
    """

    type: ClassVar[DatasetType]

    id: DatasetId
    name: DatasetName
    physical_name: DatasetName
    created_at: datetime
    updated_at: datetime
    source_name: SourceName
    fields: tuple[Field, ...] = ()
    tags: frozenset[TagName] = frozenset()
    last_modified_at: datetime | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "tags", _tag_set(self.tags))

    @property
    def namespace(self) -> NamespaceName:
        return self.id.namespace


@dataclass(frozen=True, kw_only=True)
class DbTable(Dataset):
    """A relational table."""

    type: ClassVar[DatasetType] = DatasetType.DB_TABLE


@dataclass(frozen=True, kw_only=True)
class Stream(Dataset):
    """An append-only event stream described by a schema location."""

    type: ClassVar[DatasetType] = DatasetType.STREAM

    schema_location: str


@dataclass(frozen=True)
class Run:
    """
    One execution of a job.

    `nominal_*` is the scheduled window, `started_at`/`ended_at` the observed
    one. Duration is never stored; it is derived when a run is rendered.
    """

    id: UUID
    created_at: datetime
    updated_at: datetime
    state: RunState = RunState.NEW
    nominal_start_time: datetime | None = None
    nominal_end_time: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    args: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _frozen_map(self.args))


@dataclass(frozen=True)
class Job:
    """
    A named unit of data processing.

    Inputs and outputs may reference datasets in namespaces other than the
    job's own. `latest_run` is a display-only back-reference.
    """

    id: JobId
    type: JobType
    created_at: datetime
    updated_at: datetime
    inputs: tuple[DatasetId, ...] = ()
    outputs: tuple[DatasetId, ...] = ()
    location: str | None = None
    context: Mapping[str, str] = field(default_factory=dict, hash=False)
    description: str | None = None
    latest_run: Run | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", _frozen_map(self.context))
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))

    @property
    def namespace(self) -> NamespaceName:
        return self.id.namespace

    @property
    def name(self):
        return self.id.name


@dataclass(frozen=True)
class Tag:
    """A label attachable to datasets and fields."""

    name: TagName
    description: str | None = None


@dataclass(frozen=True)
class NamespaceMeta:
    owner_name: OwnerName
    description: str | None = None


@dataclass(frozen=True)
class SourceMeta:
    type: SourceType
    connection_url: str
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class DatasetMeta:
    """Write-side attributes shared by every dataset variant."""

    type: ClassVar[DatasetType]

    physical_name: DatasetName
    source_name: SourceName
    fields: tuple[Field, ...] = ()
    tags: frozenset[TagName] = frozenset()
    description: str | None = None
    run_id: UUID | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "tags", _tag_set(self.tags))


@dataclass(frozen=True, kw_only=True)
class DbTableMeta(DatasetMeta):
    type: ClassVar[DatasetType] = DatasetType.DB_TABLE


@dataclass(frozen=True, kw_only=True)
class StreamMeta(DatasetMeta):
    type: ClassVar[DatasetType] = DatasetType.STREAM

    schema_location: str


@dataclass(frozen=True)
class JobMeta:
    type: JobType
    inputs: tuple[DatasetId, ...] = ()
    outputs: tuple[DatasetId, ...] = ()
    location: str | None = None
    context: Mapping[str, str] = field(default_factory=dict, hash=False)
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", _frozen_map(self.context))
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))


@dataclass(frozen=True)
class RunMeta:
    nominal_start_time: datetime | None = None
    nominal_end_time: datetime | None = None
    args: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _frozen_map(self.args))
