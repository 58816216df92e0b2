"""Commands for managing jobs."""

import typer

from metacat.cli.common.context import CatalogAppContext, read_payload
from metacat.cli.common.exits import catalog_errors, warn_exit
from metacat.cli.common.options import JsonOpt, LimitOpt, OffsetOpt, RequestFileOpt
from metacat.cli.common.output import out
from metacat.core import catalog
from metacat.core.requests import job_request_from_payload

app = typer.Typer(help="Register and inspect jobs.", no_args_is_help=True)


@app.command()
def create(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    name: str = typer.Argument(..., help="Job name"),
    request_file: str = RequestFileOpt,
):
    """
    Create or update a job.

    Inputs/outputs may be given as bare dataset names (`inputs`, `outputs`),
    which belong to the job's namespace, or as `{namespace, name}` objects
    (`inputIds`, `outputIds`).
    """
    appctx: CatalogAppContext = ctx.obj
    payload = read_payload(request_file)

    with catalog_errors():
        request = job_request_from_payload(payload)
        job = catalog.create_or_update_job(appctx.store, namespace, name, request)

    out.success(f"Job {namespace}.{job.name} saved")
    out.json(job)


@app.command()
def get(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    name: str = typer.Argument(..., help="Job name"),
):
    """
    Show a job with its latest run.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        job = catalog.get_job(appctx.store, namespace, name)

    out.json(job)


@app.command("list")
def list_(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    limit: int | None = LimitOpt,
    offset: int = OffsetOpt,
    as_json: bool = JsonOpt,
):
    """
    List jobs in a namespace.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        resp = catalog.list_jobs(
            appctx.store, namespace, limit=appctx.limit(limit), offset=offset
        )

    if as_json:
        out.json(resp)
        return
    if not resp.jobs:
        warn_exit("No jobs found", code=0)
    out.jobs_table(resp.jobs, title=f"Jobs in {namespace}")
