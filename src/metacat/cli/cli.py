"""CLI application for the metacat metadata catalog."""

from pathlib import Path

import typer

from metacat.cli.commands.datasets import app as datasets_app
from metacat.cli.commands.jobs import app as jobs_app
from metacat.cli.commands.namespaces import app as namespaces_app
from metacat.cli.commands.runs import app as runs_app
from metacat.cli.commands.sources import app as sources_app
from metacat.cli.commands.tags import app as tags_app
from metacat.cli.common.context import build_catalog_context
from metacat.cli.common.options import StoreOpt

app = typer.Typer(
    help="metacat - metadata catalog for namespaces, datasets, jobs and runs",
    no_args_is_help=True,
)


@app.callback()
def _init(ctx: typer.Context, store: Path | None = StoreOpt):
    """Open the catalog store shared by every command."""
    ctx.obj = build_catalog_context(store)


app.add_typer(namespaces_app, name="namespaces")
app.add_typer(sources_app, name="sources")
app.add_typer(datasets_app, name="datasets")
app.add_typer(jobs_app, name="jobs")
app.add_typer(runs_app, name="runs")
app.add_typer(tags_app, name="tags")


if __name__ == "__main__":
    app()
