"""Commands for managing datasets and their tags."""

import typer

from metacat.cli.common.context import CatalogAppContext, read_payload
from metacat.cli.common.exits import catalog_errors, ok_exit, warn_exit
from metacat.cli.common.options import (
    JsonOpt,
    LimitOpt,
    OffsetOpt,
    RequestFileOpt,
    YesOpt,
)
from metacat.cli.common.output import out
from metacat.cli.tui import select_fields
from metacat.core import catalog
from metacat.core.requests import dataset_request_from_payload

app = typer.Typer(help="Register, inspect and tag datasets.", no_args_is_help=True)


@app.command()
def create(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    name: str = typer.Argument(..., help="Dataset name"),
    request_file: str = RequestFileOpt,
):
    """
    Create or update a dataset from a DB_TABLE or STREAM request payload.
    """
    appctx: CatalogAppContext = ctx.obj
    payload = read_payload(request_file)

    with catalog_errors():
        request = dataset_request_from_payload(payload)
        dataset = catalog.create_or_update_dataset(
            appctx.store, namespace, name, request
        )

    out.success(f"Dataset {namespace}.{dataset.name} saved ({dataset.type})")
    out.json(dataset)


@app.command()
def get(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    name: str = typer.Argument(..., help="Dataset name"),
    as_json: bool = JsonOpt,
):
    """
    Show a dataset and its fields.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        dataset = catalog.get_dataset(appctx.store, namespace, name)

    if as_json:
        out.json(dataset)
        return

    out.datasets_table([dataset], title=f"Dataset {namespace}.{dataset.name}")
    if dataset.fields:
        out.fields_table(dataset.fields)


@app.command("list")
def list_(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    limit: int | None = LimitOpt,
    offset: int = OffsetOpt,
    as_json: bool = JsonOpt,
):
    """
    List datasets in a namespace.
    """
    appctx: CatalogAppContext = ctx.obj

    with catalog_errors():
        resp = catalog.list_datasets(
            appctx.store, namespace, limit=appctx.limit(limit), offset=offset
        )

    if as_json:
        out.json(resp)
        return
    if not resp.datasets:
        warn_exit("No datasets found", code=0)
    out.datasets_table(resp.datasets, title=f"Datasets in {namespace}")


@app.command()
def tag(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace name"),
    name: str = typer.Argument(..., help="Dataset name"),
    tag_name: str = typer.Argument(..., metavar="TAG", help="Tag to attach"),
    all_fields: bool = typer.Option(
        False, "--fields", help="Tag every field instead of the dataset"
    ),
    field: list[str] = typer.Option(
        [], "--field", help="Tag this field (repeatable)", show_default=False
    ),
    pick: bool = typer.Option(
        False, "--pick", help="Choose the fields to tag interactively"
    ),
    yes: bool = YesOpt,
):
    """
    Attach a tag to a dataset or to its fields.
    """
    appctx: CatalogAppContext = ctx.obj
    store = appctx.store

    if pick:
        with catalog_errors():
            current = catalog.get_dataset(store, namespace, name)
        if not current.fields:
            warn_exit("Dataset has no fields", code=0)
        field = select_fields(list(current.fields))
        if not field:
            warn_exit("No fields selected", code=0)

    if field:
        with catalog_errors():
            dataset = catalog.tag_dataset(
                store, namespace, name, tag_name, field_names=field
            )
        out.success(f"Tagged {len(field)} field(s) with {tag_name}")
        out.fields_table(dataset.fields)
        return

    if all_fields:
        if not yes and not out.confirm(f"Tag every field of {namespace}.{name}?"):
            ok_exit("Cancelled")
        with catalog_errors():
            dataset = catalog.tag_dataset(
                store, namespace, name, tag_name, all_fields=True
            )
        out.success(f"Tagged all fields of {namespace}.{name} with {tag_name}")
        out.fields_table(dataset.fields)
        return

    with catalog_errors():
        dataset = catalog.tag_dataset(store, namespace, name, tag_name)
    out.success(f"Tagged {namespace}.{name} with {tag_name}")
    out.kv({"tags": ", ".join(dataset.tags)})
