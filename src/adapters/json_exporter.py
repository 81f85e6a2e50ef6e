"""Exportación JSON de entidades y colecciones.

Por qué JSON:
- Interoperabilidad con la capa de UI y otras herramientas.
- `dump()` ya materializa hijos, así que el archivo es plano y estable.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.config import get_settings
from core.domain.collection import EntityCollection
from core.domain.entity import Entity


def to_json(value: Entity | EntityCollection, *, indent: int | None = None) -> str:
    payload: Any = value.dump()
    return json.dumps(
        payload,
        ensure_ascii=False,
        indent=get_settings().json_indent if indent is None else indent,
        sort_keys=True,
        default=str,
    )


def export_json(*, value: Entity | EntityCollection, output_path: Path) -> Path:
    """Exporta `value` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(to_json(value) + "\n", encoding="utf-8")
    return output_path
