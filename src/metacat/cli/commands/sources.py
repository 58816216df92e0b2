"""Commands for managing data sources."""

import typer

from metacat.cli.common.context import CatalogAppContext
from metacat.cli.common.exits import catalog_errors, warn_exit
from metacat.cli.common.options import DescriptionOpt, JsonOpt, LimitOpt, OffsetOpt
from metacat.cli.common.output import out
from metacat.core import catalog
from metacat.core.requests import SourceRequest

app = typer.Typer(help="Register and inspect data sources.", no_args_is_help=True)


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Source name"),
    source_type: str = typer.Option(
        ..., "--type", "-t", help="Source type (e.g. POSTGRESQL, KAFKA)"
    ),
    url: str = typer.Option(..., "--url", "-u", help="Connection URL"),
    description: str | None = DescriptionOpt,
):
    """
    Create a source, or update its type, connection URL and description.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        source = catalog.create_or_update_source(
            appctx.store,
            name,
            SourceRequest(
                type=source_type, connection_url=url, description=description
            ),
        )

    out.success(f"Source {source.name} saved")
    out.json(source)


@app.command()
def get(ctx: typer.Context, name: str = typer.Argument(..., help="Source name")):
    """
    Show a source.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        source = catalog.get_source(appctx.store, name)

    out.json(source)


@app.command("list")
def list_(
    ctx: typer.Context,
    limit: int | None = LimitOpt,
    offset: int = OffsetOpt,
    as_json: bool = JsonOpt,
):
    """
    List sources.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        resp = catalog.list_sources(
            appctx.store, limit=appctx.limit(limit), offset=offset
        )

    if as_json:
        out.json(resp)
        return
    if not resp.sources:
        warn_exit("No sources found", code=0)
    out.sources_table(resp.sources)
