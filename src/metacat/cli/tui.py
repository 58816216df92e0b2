"""Terminal UI utilities for metacat."""

from __future__ import annotations

import questionary

from metacat.cli.common.output import PICK_STYLE
from metacat.core.responses import FieldResponse

_MAX_FIELD_NAME_WIDTH = 64


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _field_choice_title(field: FieldResponse, *, name_width: int) -> str:
    """Format one field choice as `<name>  <type>  [tags]` with aligned columns."""
    short_name = _truncate(field.name, _MAX_FIELD_NAME_WIDTH)
    title = f"{short_name.ljust(name_width)}  {field.type}"
    if field.tags:
        title += f"  [{', '.join(field.tags)}]"
    return title


def select_fields(fields: list[FieldResponse]) -> list[str]:
    """Display a checkbox prompt to pick dataset fields.

    Args:
        fields: Fields of the dataset, in dataset order.

    Returns:
        Names of the selected fields, or an empty list if none selected.
    """
    shown_names = [_truncate(f.name, _MAX_FIELD_NAME_WIDTH) for f in fields]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(
            title=_field_choice_title(f, name_width=name_width),
            value=f.name,
        )
        for f in fields
    ]

    return (
        questionary.checkbox(
            "Select fields:",
            choices=choices,
            style=PICK_STYLE,
        ).ask()
        or []
    )
