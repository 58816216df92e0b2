"""Commands for managing tags."""

import typer

from metacat.cli.common.context import CatalogAppContext
from metacat.cli.common.exits import catalog_errors, warn_exit
from metacat.cli.common.options import DescriptionOpt, JsonOpt, LimitOpt, OffsetOpt
from metacat.cli.common.output import out
from metacat.core import catalog

app = typer.Typer(help="Register and list tags.", no_args_is_help=True)


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tag name"),
    description: str | None = DescriptionOpt,
):
    """
    Create a tag, or update its description.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        tag = catalog.create_or_update_tag(appctx.store, name, description)

    out.success(f"Tag {tag.name} saved")


@app.command("list")
def list_(
    ctx: typer.Context,
    limit: int | None = LimitOpt,
    offset: int = OffsetOpt,
    as_json: bool = JsonOpt,
):
    """
    List tags.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        resp = catalog.list_tags(appctx.store, limit=appctx.limit(limit), offset=offset)

    if as_json:
        out.json(resp)
        return
    if not resp.tags:
        warn_exit("No tags found", code=0)
    out.tags_table(resp.tags)
