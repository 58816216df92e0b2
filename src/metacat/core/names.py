"""Validated identifiers used throughout the catalog.

Every name is a small frozen value object wrapping a normalized string.
Construction validates the raw value and raises InvalidArgument on failure,
so once a name exists it can be trusted everywhere else in the core.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, ClassVar

from metacat.core.errors import InvalidArgument

_MAX_NAME_LENGTH = 1024


@dataclass(frozen=True, order=True)
class _Name:
    """Base class for string-backed identifiers."""

    label: ClassVar[str] = "name"
    pattern: ClassVar[re.Pattern[str] | None] = None

    value: str

    def __post_init__(self) -> None:
        raw = self.value
        if raw is None or not isinstance(raw, str):
            raise InvalidArgument(f"{self.label} must be a string, got {raw!r}.")
        value = raw.strip()
        if not value:
            raise InvalidArgument(f"{self.label} must not be blank.")
        if len(value) > _MAX_NAME_LENGTH:
            raise InvalidArgument(
                f"{self.label} must be at most {_MAX_NAME_LENGTH} characters."
            )
        if self.pattern is not None and not self.pattern.fullmatch(value):
            raise InvalidArgument(
                f"{self.label} '{value}' must match {self.pattern.pattern}."
            )
        object.__setattr__(self, "value", value)

    @classmethod
    def of(cls, value: Any):
        """Build the identifier from a raw value (or return it unchanged)."""
        if isinstance(value, cls):
            return value
        return cls(value)

    def __str__(self) -> str:
        return self.value


class NamespaceName(_Name):
    label = "Namespace name"
    pattern = re.compile(r"[a-zA-Z0-9_\-.:;=/]{1,1024}")


class DatasetName(_Name):
    label = "Dataset name"


class SourceName(_Name):
    label = "Source name"


class JobName(_Name):
    label = "Job name"


class TagName(_Name):
    label = "Tag name"


class OwnerName(_Name):
    label = "Owner name"


class FieldName(_Name):
    label = "Field name"


@dataclass(frozen=True, order=True)
class DatasetId:
    """Namespace-qualified reference to a dataset."""

    namespace: NamespaceName
    name: DatasetName

    @classmethod
    def of(cls, namespace: Any, name: Any) -> DatasetId:
        return cls(NamespaceName.of(namespace), DatasetName.of(name))

    def __str__(self) -> str:
        return f"{self.namespace}.{self.name}"


@dataclass(frozen=True, order=True)
class JobId:
    """Namespace-qualified reference to a job."""

    namespace: NamespaceName
    name: JobName

    @classmethod
    def of(cls, namespace: Any, name: Any) -> JobId:
        return cls(NamespaceName.of(namespace), JobName.of(name))

    def __str__(self) -> str:
        return f"{self.namespace}.{self.name}"
