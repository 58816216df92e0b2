"""Commands for recording job runs and moving them through their states."""

import typer

from metacat.cli.common.context import CatalogAppContext, read_payload
from metacat.cli.common.exits import catalog_errors, ok_exit, warn_exit
from metacat.cli.common.options import (
    JsonOpt,
    LimitOpt,
    OffsetOpt,
    OptionalRequestFileOpt,
)
from metacat.cli.common.output import out
from metacat.core import catalog
from metacat.core.models import RunState
from metacat.core.requests import run_request_from_payload

app = typer.Typer(help="Record and inspect job runs.", no_args_is_help=True)


@app.command()
def create(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    job: str = typer.Argument(..., help="Job name"),
    request_file: str | None = OptionalRequestFileOpt,
):
    """
    Record a new run (state NEW) for a job.
    """
    appctx: CatalogAppContext = ctx.obj
    payload = read_payload(request_file) if request_file else {}

    with catalog_errors():
        request = run_request_from_payload(payload)
        run = catalog.create_run(appctx.store, namespace, job, request)

    out.success(f"Run {run.id} created")
    out.json(run)


@app.command()
def get(ctx: typer.Context, run_id: str = typer.Argument(..., help="Run id")):
    """
    Show a run.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        run = catalog.get_run(appctx.store, run_id)

    out.json(run)


@app.command("list")
def list_(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    job: str = typer.Argument(..., help="Job name"),
    limit: int | None = LimitOpt,
    offset: int = OffsetOpt,
    as_json: bool = JsonOpt,
):
    """
    List the runs of a job, oldest first.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        resp = catalog.list_runs(
            appctx.store, namespace, job, limit=appctx.limit(limit), offset=offset
        )

    if as_json:
        out.json(resp)
        return
    if not resp.runs:
        warn_exit("No runs found", code=0)
    out.runs_table(resp.runs, title=f"Runs of {namespace}.{job}")


@app.command()
def mark(
    ctx: typer.Context,
    run_id: str = typer.Argument(..., help="Run id"),
    state: str | None = typer.Argument(
        None, help="New state (RUNNING, COMPLETED, FAILED, ABORTED)"
    ),
):
    """
    Move a run to a new state. Prompts for the state when it is omitted.
    """
    appctx: CatalogAppContext = ctx.obj

    if state is None:
        with catalog_errors():
            current = RunState(catalog.get_run(appctx.store, run_id).state)
        choices = [s.value for s in RunState if current.can_transition_to(s)]
        if not choices:
            warn_exit(f"Run is already {current.value}", code=0)
        state = out.select_one(f"Move run from {current.value} to:", choices)
        if state is None:
            ok_exit("Cancelled")

    with catalog_errors():
        run = catalog.mark_run(appctx.store, run_id, state)

    out.success(f"Run {run.id} is now {run.state}")
    out.runs_table([run], title="Run")
