"""Output formatting utilities for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from metacat.core.responses import as_payload

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def prompt_style(accent: str) -> Style:
    """Questionary style with pointer, answer and selection in `accent`."""
    return Style.from_dict(
        {
            "qmark": f"bold {accent}",
            "question": "bold",
            "answer": f"bold {accent}",
            "pointer": f"bold {accent}",
            "highlighted": f"bold {accent}",
            "selected": accent,
            "checkbox-selected": f"bold {accent}",
            "separator": "ansibrightblack",
            "instruction": "ansibrightblack",
            "disabled": "ansibrightblack",
            "error": "bold ansired",
        }
    )


# Same accents as the console theme: "title" for picking, "warn" for confirming.
PICK_STYLE = prompt_style("ansicyan")
CONFIRM_STYLE = prompt_style("ansiyellow")

_STATE_STYLES = {
    "COMPLETED": "ok",
    "RUNNING": "warn",
    "NEW": "meta",
    "FAILED": "err",
    "ABORTED": "err",
}


def _joined(values: Iterable[str]) -> str:
    return ", ".join(values)


def _ref(ref: Any) -> str:
    return f"{ref.namespace}.{ref.name}"


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages, tables and payloads."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "checked_icon", "unchecked_icon", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be metacat consistent."""
        return f"[metacat] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def json(self, response: Any) -> None:
        """Print a response object as JSON."""
        console.print_json(data=as_payload(response))

    def select_one(self, message: str, choices: list[str]) -> str | None:
        """
        Prompt the user to select a single item from a list (radio list).

        Returns:
            The selected value, or None if cancelled.
        """
        if not choices:
            return None

        prompt = self._q_try(
            questionary.select,
            self._q(message),
            choices=choices,
            style=PICK_STYLE,
            qmark="✦",
            instruction="Use ↑/↓ then Enter",
            pointer="❯",
        )
        return prompt.ask()

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        # Questionary renders `instruction=...` inline next to the echoed answer.
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=CONFIRM_STYLE,
            qmark="✦",
            auto_enter=False,
            pointer="❯",
        )
        return bool(prompt.ask())

    def namespaces_table(
        self, namespaces: Iterable[Any], title: str = "Namespaces"
    ) -> None:
        """Expects NamespaceResponse objects."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Owner")
        t.add_column("Updated", style="meta")
        t.add_column("Description", style="meta")

        for n in namespaces:
            t.add_row(n.name, n.owner_name, n.updated_at, n.description or "")

        console.print(t)

    def sources_table(self, sources: Iterable[Any], title: str = "Sources") -> None:
        """Expects SourceResponse objects."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Type")
        t.add_column("Connection URL", style="meta")

        for s in sources:
            t.add_row(s.name, s.type, s.connection_url)

        console.print(t)

    def datasets_table(self, datasets: Iterable[Any], title: str = "Datasets") -> None:
        """
        Expects DatasetResponse objects; streams also show their schema location.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Type")
        t.add_column("Source")
        t.add_column("Fields", justify="right")
        t.add_column("Tags", style="meta")
        t.add_column("Schema", style="meta")

        for d in datasets:
            t.add_row(
                d.name,
                d.type,
                d.source_name,
                str(len(d.fields)),
                _joined(d.tags),
                getattr(d, "schema_location", "") or "",
            )

        console.print(t)

    def fields_table(self, fields: Iterable[Any], title: str = "Fields") -> None:
        """Expects FieldResponse objects."""
        t = Table(title=title, show_lines=False)
        t.add_column("Field", style="ok", no_wrap=True)
        t.add_column("Type")
        t.add_column("Tags", style="meta")

        for f in fields:
            t.add_row(f.name, f.type, _joined(f.tags))

        console.print(t)

    def jobs_table(self, jobs: Iterable[Any], title: str = "Jobs") -> None:
        """Expects JobResponse objects."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Type")
        t.add_column("Inputs", style="meta")
        t.add_column("Outputs", style="meta")
        t.add_column("Latest run")

        for j in jobs:
            latest = j.latest_run
            run_label = "" if latest is None else self._state(latest.state)
            t.add_row(
                j.name,
                j.type,
                _joined(_ref(i) for i in j.inputs),
                _joined(_ref(o) for o in j.outputs),
                run_label,
            )

        console.print(t)

    def _state(self, state: str) -> str:
        style = _STATE_STYLES.get(state, "meta")
        return f"[{style}]{state}[/{style}]"

    def runs_table(self, runs: Iterable[Any], title: str = "Runs") -> None:
        """Expects RunResponse objects."""
        t = Table(title=title, show_lines=False)
        t.add_column("Run ID", style="ok", no_wrap=True)
        t.add_column("State")
        t.add_column("Started", style="meta")
        t.add_column("Ended", style="meta")
        t.add_column("Duration (ms)", justify="right")

        for r in runs:
            t.add_row(
                r.id,
                self._state(r.state),
                r.started_at or "",
                r.ended_at or "",
                "" if r.duration_ms is None else str(r.duration_ms),
            )

        console.print(t)

    def tags_table(self, tags: Iterable[Any], title: str = "Tags") -> None:
        """Expects TagResponse objects."""
        t = Table(title=title, show_lines=False)
        t.add_column("Tag", style="ok", no_wrap=True)
        t.add_column("Description", style="meta")

        for tag in tags:
            t.add_row(tag.name, tag.description or "")

        console.print(t)


out = Out()
