"""Doctor command for environment diagnostics."""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adapters.type_loader import load_type
from core.config import AppSettings, get_settings, get_user_env_file, write_user_env_vars
from core.errors import SchemaEntitiesError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_ENV_PREFIX = "SCHEMA_ENTITIES_"


@app.command()
def run(
    type_path: Optional[str] = typer.Option(None, "--type", help="Also check that this type path resolves."),
) -> None:
    """Show the effective settings and run baseline checks."""

    settings = get_settings()
    env_file = get_user_env_file()

    table = Table(title="schema-entities Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    for field_name in AppSettings.model_fields:
        table.add_row(field_name, "OK", repr(getattr(settings, field_name)))
    table.add_row("User .env", "OK" if env_file.exists() else "ABSENT", str(env_file))

    ok = True
    if type_path:
        try:
            loaded = load_type(type_path)
            table.add_row("Type", "OK", f"{loaded.__module__}.{loaded.__qualname__}")
        except SchemaEntitiesError as exc:
            ok = False
            table.add_row("Type", "FAIL", str(exc))

    _console.print(table)
    if not ok:
        raise typer.Exit(code=1)


@app.command(name="set")
def set_value(
    key: str = typer.Argument(..., help="Setting name, e.g. 'log_level'."),
    value: str = typer.Argument(..., help="New value."),
) -> None:
    """Store a setting in the user config .env."""

    field_name = key.lower().removeprefix(_ENV_PREFIX.lower())
    if field_name not in AppSettings.model_fields:
        raise typer.BadParameter(f"Unknown setting {key!r}", param_hint="KEY")
    try:
        AppSettings.model_validate({field_name: value})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="VALUE") from exc

    env_path = write_user_env_vars({f"{_ENV_PREFIX}{field_name.upper()}": value})
    _console.print(f"[green]Saved {field_name} to:[/green] {env_path}")
