"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.collection import EntityCollection
from core.domain.schema import EntitySchema


def flatten_errors(tree: Mapping[Any, Any], prefix: str = "") -> list[tuple[str, str]]:
    """Aplana un árbol de `get_errors()` en pares (ruta, mensaje).

    `{"children": {1: {"foo": {"errors": ["x"]}}}}` -> `[("children[1].foo", "x")]`
    """

    rows: list[tuple[str, str]] = []
    for key, node in tree.items():
        if key == "errors" and isinstance(node, list):
            rows.extend((prefix, str(message)) for message in node)
            continue
        if isinstance(key, int):
            path = f"{prefix}[{key}]"
        else:
            path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(node, Mapping):
            rows.extend(flatten_errors(node, path))
    return rows


def build_errors_table(collection: EntityCollection) -> Table:
    table = Table(title=f"{type(collection).__name__} errors")
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Field", style="magenta")
    table.add_column("Error", style="red")

    for index, item_errors in collection.get_errors().items():
        for path, message in flatten_errors(item_errors):
            table.add_row(str(index), path, message)
    return table


def build_schema_table(entity_name: str, schema: EntitySchema) -> Table:
    table = Table(title=entity_name)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Validator", style="white")
    table.add_column("Default", style="green")
    table.add_column("Type", style="magenta")

    for field_name, spec in schema.fields.items():
        validator_name = getattr(spec.validator, "__qualname__", None) or repr(spec.validator)
        if spec.default_factory is not None:
            default = f"{getattr(spec.default_factory, '__qualname__', 'factory')}()"
        else:
            default = "-" if spec.default_value is None else repr(spec.default_value)
        nested = spec.type.__name__ if spec.type is not None else "-"
        table.add_row(field_name, validator_name, default, nested)
    return table


def print_summary(console: Console, collection: EntityCollection) -> None:
    invalid = len(collection.get_errors())
    total = len(collection)
    style = "green" if invalid == 0 else "red"
    body = Text(f"{total} items, {invalid} invalid", style=f"bold {style}")
    console.print(Panel(body, border_style=style))
