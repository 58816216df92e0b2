"""Tag propagation over datasets and their fields.

Every operation returns a new dataset and leaves its input untouched; adding
a tag is a set union, so applying the same tag again changes nothing.
Persisting the result (and guarding against concurrent taggers) is the
dataset store's job.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, TypeVar

from metacat.core.errors import NotFound
from metacat.core.models import Dataset, Field
from metacat.core.names import FieldName, TagName

D = TypeVar("D", bound=Dataset)


def _with_tag(field: Field, tag: TagName) -> Field:
    return replace(field, tags=field.tags | {tag})


def tag_dataset(dataset: D, tag: TagName | str) -> D:
    """Return a copy of `dataset` with `tag` added to its own tag set."""
    return replace(dataset, tags=dataset.tags | {TagName.of(tag)})


def tag_all_fields(dataset: D, tag: TagName | str) -> D:
    """
    Return a copy of `dataset` with `tag` added to every field.

    The dataset's own tags are not changed and field order is preserved.
    """
    tag = TagName.of(tag)
    return replace(dataset, fields=tuple(_with_tag(f, tag) for f in dataset.fields))


def tag_fields(
    dataset: D, field_names: Iterable[FieldName | str], tag: TagName | str
) -> D:
    """
    Return a copy of `dataset` with `tag` added to each field in `field_names`.

    Every name is checked before anything is tagged.

    Raises:
        NotFound: If the dataset has no field with one of the names.
    """
    names = {FieldName.of(n) for n in field_names}
    tag = TagName.of(tag)
    known = {f.name for f in dataset.fields}
    missing = sorted(names - known)
    if missing:
        raise NotFound("Field", f"{dataset.id}.{missing[0]}")
    return replace(
        dataset,
        fields=tuple(
            _with_tag(f, tag) if f.name in names else f for f in dataset.fields
        ),
    )


def tag_field(dataset: D, field_name: FieldName | str, tag: TagName | str) -> D:
    """Return a copy of `dataset` with `tag` added to the field `field_name`."""
    return tag_fields(dataset, [field_name], tag)
