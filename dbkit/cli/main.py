"""dbkit Command Line Interface."""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dbkit import __version__
from dbkit.api.client import SchemaKit
from dbkit.core.exceptions import DbKitError
from dbkit.core.models import NormalizedSchema
from dbkit.schema.pipeline import dependency_order

console = Console()


def _load(ctx: click.Context, path: str) -> NormalizedSchema:
    """Load a schema, exiting with status 1 on any dbkit error."""
    kit: SchemaKit = ctx.obj["kit"]
    try:
        return kit.load(path)
    except DbKitError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="dbkit")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str]) -> None:
    """
    dbkit schema CLI.

    Normalizes YAML schema documents and shows the resulting collections,
    fields and connections.
    """
    ctx.ensure_object(dict)
    kit = SchemaKit.from_config(config) if config else SchemaKit()
    logging.basicConfig(level=kit.config.log_level.value)
    ctx.obj["kit"] = kit


@cli.command()
@click.argument("path", type=click.Path())
@click.pass_context
def inspect(ctx: click.Context, path: str) -> None:
    """Show the normalized collections of a schema document."""
    schema = _load(ctx, path)

    if not schema.collections:
        console.print("[yellow]No collections found[/yellow]")
        return

    for name, collection in schema.collections.items():
        options = collection.options
        table = Table(title=f"{name} (table: {options.table_name})")
        table.add_column("Field")
        table.add_column("Type")
        table.add_column("Length", justify="right")
        table.add_column("Flags", style="dim")
        table.add_column("Reference")

        for field_name, field in collection.fields.items():
            flags = [
                flag
                for flag, enabled in (
                    ("primary", field.primary),
                    ("auto", field.auto_increment),
                    ("optional", field.optional),
                    ("read-only", field.read_only),
                    ("hidden", field.hidden),
                    ("service", field.service),
                    ("multilang", field.multilang),
                )
                if enabled
            ]
            reference = (
                f"{field.reference.collection}.{field.reference.field}" if field.reference else ""
            )
            table.add_row(
                field_name,
                field.type,
                "" if field.length is None else str(field.length),
                ", ".join(flags),
                reference,
            )

        console.print(table)

        if options.accessors:
            console.print("[cyan]Accessors:[/cyan]")
            for accessor, target in options.accessors.items():
                console.print(
                    f"  {accessor} -> {target.child} (via {target.connection.table_name})"
                )
        if collection.dependencies:
            console.print(f"[cyan]Depends on:[/cyan] {', '.join(collection.dependencies)}")
        console.print()


@cli.command()
@click.argument("path", type=click.Path())
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    help="Output format",
)
@click.pass_context
def dump(ctx: click.Context, path: str, output_format: str) -> None:
    """Print the normalized schema."""
    data = _load(ctx, path).to_dict()

    if output_format == "yaml":
        click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    else:
        click.echo(json.dumps(data, indent=2, default=str))


@cli.command()
@click.argument("path", type=click.Path())
@click.pass_context
def order(ctx: click.Context, path: str) -> None:
    """List collections with referenced collections first."""
    schema = _load(ctx, path)
    try:
        names = dependency_order(schema)
    except DbKitError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    for index, name in enumerate(names, start=1):
        console.print(f"{index}. {name}")


@cli.command()
@click.pass_context
def types(ctx: click.Context) -> None:
    """List the registered field types."""
    registry = ctx.obj["kit"].registry

    table = Table(title="Field types")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Default length", justify="right")

    for type_name in registry:
        data_type = registry.lookup(type_name)
        table.add_row(
            type_name,
            data_type.name,
            "" if data_type.length is None else str(data_type.length),
        )

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
