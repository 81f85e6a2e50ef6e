"""CLI `schema-entities`.

Permite validar archivos JSON contra tipos registrados sin escribir código:

    schema-entities validate myapp.models:ProductEntityCollection products.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.json_exporter import export_json
from adapters.json_loader import load_collection
from adapters.type_loader import load_type
from cli import doctor
from cli.logging_setup import configure_logging
from cli.ui_components import build_errors_table, build_schema_table, print_summary
from core.config import get_settings
from core.domain.collection import EntityCollection, define_collection
from core.domain.schema import EntitySchema, registry
from core.errors import SchemaEntitiesError

app = typer.Typer(no_args_is_help=True, help="Validate records against registered entity schemas.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _collection_type(type_path: str) -> type[EntityCollection]:
    try:
        loaded = load_type(type_path)
    except SchemaEntitiesError as exc:
        raise typer.BadParameter(str(exc), param_hint="TYPE_PATH") from exc
    if issubclass(loaded, EntityCollection):
        return loaded
    return define_collection(f"{loaded.__name__}Collection", loaded)


def _entity_type(type_path: str) -> tuple[str, EntitySchema]:
    try:
        loaded = load_type(type_path)
        if issubclass(loaded, EntityCollection):
            loaded = registry.item_type_for(loaded)
        return registry.entity_name(loaded), registry.schema_for(loaded)
    except SchemaEntitiesError as exc:
        raise typer.BadParameter(str(exc), param_hint="TYPE_PATH") from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging("DEBUG" if verbose else get_settings().log_level)


@app.command()
def validate(
    type_path: str = typer.Argument(..., help="Entity or collection type, e.g. 'pkg.models:ProductEntity'."),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file with records."),
    records_key: Optional[str] = typer.Option(None, "--records-key", help="List key when the JSON is an object."),
    export: Optional[Path] = typer.Option(None, "--export", help="Write the normalized records as JSON."),
) -> None:
    """Validate every record in PATH; exits with code 1 if any record is invalid."""

    collection_cls = _collection_type(type_path)
    try:
        collection = load_collection(path, collection_cls, records_key=records_key)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON: {exc}", param_hint="PATH") from exc
    except SchemaEntitiesError as exc:
        raise typer.BadParameter(str(exc), param_hint="PATH") from exc

    if not collection.valid:
        _console.print(build_errors_table(collection))
    print_summary(_console, collection)

    if export is not None:
        written = export_json(value=collection, output_path=export)
        _console.print(f"[green]Exported to:[/green] {written}")

    raise typer.Exit(code=0 if collection.valid else 1)


@app.command()
def schema(
    type_path: str = typer.Argument(..., help="Entity or collection type, e.g. 'pkg.models:ProductEntity'."),
) -> None:
    """Show the declared fields of an entity type."""

    entity_name, entity_schema = _entity_type(type_path)
    _console.print(build_schema_table(entity_name, entity_schema))


def run() -> None:
    app()
