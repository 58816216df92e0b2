"""Common CLI options for the CLI."""

import typer

StoreOpt = typer.Option(
    None,
    "--store",
    "-s",
    help="Catalog store file (defaults to $METACAT_STORE_PATH)",
)

LimitOpt = typer.Option(
    None,
    "--limit",
    "-l",
    help="Maximum number of items to list (defaults to $METACAT_PAGE_LIMIT)",
)

OffsetOpt = typer.Option(
    0,
    "--offset",
    help="Number of items to skip",
    min=0,
)

JsonOpt = typer.Option(
    False,
    "--json",
    help="Print JSON instead of a table",
)

DescriptionOpt = typer.Option(
    None,
    "--description",
    "-d",
    help="Free-text description",
)

RequestFileOpt = typer.Option(
    ...,
    "--file",
    "-f",
    help="JSON request payload (use - for stdin)",
)

OptionalRequestFileOpt = typer.Option(
    None,
    "--file",
    "-f",
    help="JSON request payload (use - for stdin)",
)

YesOpt = typer.Option(
    False,
    "--yes",
    "-y",
    help="Do not ask for confirmation",
)

