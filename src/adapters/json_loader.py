"""Carga de registros JSON en colecciones.

Soporta formatos tipo:
- Lista:  [{...}, {...}]
- Objeto: {"items": [...]} (la clave es configurable: `records_key`)

Los registros se convierten con el mismo camino que `EntityCollection(...)`:
los datos inválidos quedan como errores de validación, no como excepciones.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from core.config import get_settings
from core.domain.collection import EntityCollection
from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def extract_records(payload: Any, *, records_key: str | None = None) -> list[Any]:
    if isinstance(payload, list):
        return payload
    key = records_key or get_settings().records_key
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    raise ConfigurationError(f"Expected a JSON list or an object with a {key!r} list")


def load_collection(
    path: Path,
    collection_cls: type[EntityCollection],
    *,
    records_key: str | None = None,
) -> EntityCollection:
    raw = path.read_text(encoding="utf-8")
    records = extract_records(json.loads(raw), records_key=records_key)
    logger.debug("Loaded %d records from %s", len(records), path)
    return collection_cls(records)
