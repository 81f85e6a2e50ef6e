"""Motor de validación por campo.

Por qué un módulo aparte:
- Normaliza lo que devuelve un validador (str, Exception, None, ...) en un único
  resultado, independiente de la entidad que lo invoque.
- La entidad solo decide *cuándo* validar; aquí se decide *qué* significa.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from core.domain.schema import FieldSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldFailure:
    """Resultado no válido de un validador.

    `error` conserva la excepción original cuando el validador devolvió una.
    """

    message: str
    error: BaseException | None = None

    def as_dict(self) -> dict[str, list[str]]:
        return {"errors": [self.message]}


def normalize_outcome(outcome: Any) -> FieldFailure | None:
    """Convierte el retorno de un validador en `FieldFailure` o `None` (válido).

    - falsy -> válido
    - str -> mensaje
    - excepción -> `str(exc)`
    - objeto con atributo `message` de tipo str -> ese mensaje
    - cualquier otra cosa (p.ej. `True`) -> válido
    """

    if not outcome:
        return None
    if isinstance(outcome, str):
        return FieldFailure(message=outcome)
    if isinstance(outcome, BaseException):
        return FieldFailure(message=str(outcome), error=outcome)
    message = getattr(outcome, "message", None)
    if isinstance(message, str) and message:
        return FieldFailure(message=message)
    return None


def validate_field(
    spec: FieldSpec,
    field_name: str,
    snapshot: Mapping[str, Any],
    entity_name: str,
) -> FieldFailure | None:
    """Ejecuta el validador de `field_name` contra el snapshot completo.

    Las excepciones lanzadas por el validador no se capturan: son un fallo
    de implementación del validador, no un dato inválido.
    """

    failure = normalize_outcome(spec.validator(snapshot, field_name, entity_name))
    if failure is not None:
        logger.debug("%s.%s invalid: %s", entity_name, field_name, failure.message)
    return failure


def collect_nested_errors(value: Any, seen: set[int]) -> dict[Any, Any]:
    """Errores agregados de un valor anidado.

    - objeto con `error_tree` (entidad o colección) -> su árbol
    - lista/tupla -> `{índice: árbol}` omitiendo hijos sin errores
    - cualquier otra cosa -> `{}`

    `seen` guarda `id()` de lo ya visitado para cortar ciclos accidentales.
    """

    error_tree = getattr(value, "error_tree", None)
    if callable(error_tree):
        return error_tree(seen)
    if not isinstance(value, (list, tuple)):
        return {}

    errors: dict[int, Any] = {}
    for index, item in enumerate(value):
        item_tree = getattr(item, "error_tree", None)
        if not callable(item_tree):
            continue
        item_errors = item_tree(seen)
        if item_errors:
            errors[index] = item_errors
    return errors
