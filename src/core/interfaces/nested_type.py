"""Contrato de tipos anidados.

Por qué Protocol:
- Un campo con `type` puede apuntar a una entidad o a una colección; el esquema
  solo necesita saber construir el valor y recorrer sus errores.
- Evita que `schema` importe `entity`/`collection` (dependencias circulares).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NestedType(Protocol):
    """Capacidad mínima de un tipo usable como `FieldSpec.type`.

    Reglas de diseño:
    - Se comprueba sobre la *clase* (classmethods), no sobre instancias.
    - `build_nested` recibe el valor crudo del campo y devuelve el valor a guardar.
    - `collect_errors` devuelve los errores agregados de ese valor ({} si no hay).
    """

    def build_nested(self, value: Any) -> Any:
        ...

    def collect_errors(self, value: Any, seen: set[int]) -> dict[Any, Any]:
        ...
