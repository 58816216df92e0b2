"""Commands for managing namespaces."""

import typer

from metacat.cli.common.context import CatalogAppContext
from metacat.cli.common.exits import catalog_errors, warn_exit
from metacat.cli.common.options import DescriptionOpt, JsonOpt, LimitOpt, OffsetOpt
from metacat.cli.common.output import out
from metacat.core import catalog
from metacat.core.requests import NamespaceRequest

app = typer.Typer(help="Register and inspect namespaces.", no_args_is_help=True)


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Namespace name"),
    owner: str = typer.Option(..., "--owner", "-o", help="Owner of the namespace"),
    description: str | None = DescriptionOpt,
):
    """
    Create a namespace, or update its owner and description.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        namespace = catalog.create_or_update_namespace(
            appctx.store,
            name,
            NamespaceRequest(owner_name=owner, description=description),
        )

    out.success(f"Namespace {namespace.name} saved")
    out.json(namespace)


@app.command()
def get(ctx: typer.Context, name: str = typer.Argument(..., help="Namespace name")):
    """
    Show a namespace.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        namespace = catalog.get_namespace(appctx.store, name)

    out.json(namespace)


@app.command("list")
def list_(
    ctx: typer.Context,
    limit: int | None = LimitOpt,
    offset: int = OffsetOpt,
    as_json: bool = JsonOpt,
):
    """
    List namespaces.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        resp = catalog.list_namespaces(
            appctx.store, limit=appctx.limit(limit), offset=offset
        )

    if as_json:
        out.json(resp)
        return
    if not resp.namespaces:
        warn_exit("No namespaces found", code=0)
    out.namespaces_table(resp.namespaces)
