"""Entidad validada y observable.

Una entidad envuelve un mapping plano:
- mezcla el input con los defaults del esquema (y descarta campos no declarados)
- construye recursivamente los hijos de los campos con `type`
- valida todos los campos al construirse y cada campo en cada escritura

`get`/`set` son el único camino de lectura/escritura; el acceso por atributo
(`product.name = "A"`) delega en ellos.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from core.domain.schema import EntitySchema, FieldSpec, registry
from core.domain.validation import FieldFailure, collect_nested_errors, validate_field
from core.errors import ConfigurationError, NestedValueError, UnknownFieldError

logger = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool, bytes, type(None))


def dump_value(value: Any) -> Any:
    """Materializa entidades/colecciones anidadas en estructuras planas."""

    dump = getattr(value, "dump", None)
    if callable(dump):
        return dump()
    if isinstance(value, (list, tuple)):
        return [dump_value(item) for item in value]
    return value


class Entity:
    """Base de los tipos de entidad; el esquema se registra aparte (ver `schema`)."""

    # Estado interno (nombres reservados: no pueden declararse como campos).
    _schema: EntitySchema | None = None
    _entity_name: str = ""
    _data: dict[str, Any] | None = None
    _errors: dict[str, FieldFailure] | None = None

    def __init__(self, raw: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        cls = type(self)
        schema = registry.schema_for(cls)
        if raw is not None and not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"{cls.__name__} must be built from a mapping, got {type(raw).__name__}"
            )

        supplied: dict[str, Any] = dict(raw or {})
        supplied.update(fields)

        data: dict[str, Any] = {}
        for key, spec in schema.fields.items():
            value = supplied[key] if key in supplied else spec.resolve_default()
            if spec.type is not None:
                value = spec.type.build_nested(value)
            data[key] = value

        dropped = [key for key in supplied if key not in schema.fields]
        if dropped:
            logger.debug("%s dropped undeclared fields: %s", cls.__name__, ", ".join(map(str, dropped)))

        object.__setattr__(self, "_schema", schema)
        object.__setattr__(self, "_entity_name", registry.entity_name(cls))
        object.__setattr__(self, "_data", data)
        object.__setattr__(self, "_errors", {})
        self.revalidate()

    # -- nested type capability -------------------------------------------

    @classmethod
    def build_nested(cls, value: Any) -> Any:
        """Valor de un campo `type=cls`: lista de hijos, un hijo, o `None`.

        - `None` -> `None` (sin hijos)
        - instancia de `cls` o mapping -> un único hijo
        - colección registrada cuyo item es `cls` -> se conserva tal cual
        - cualquier otro iterable (no str/bytes) -> lista de hijos
        """

        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(value)
        if registry.is_collection(type(value)) and registry.item_type_for(type(value)) is cls:
            return value
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise NestedValueError(
                f"{cls.__name__} children must be a sequence of mappings, got {type(value).__name__}"
            )
        return [cls._coerce_child(item) for item in value]

    @classmethod
    def _coerce_child(cls, item: Any) -> Entity:
        if isinstance(item, cls):
            return item
        if isinstance(item, Mapping):
            return cls(item)
        raise NestedValueError(f"{cls.__name__} cannot be built from {type(item).__name__}")

    @classmethod
    def collect_errors(cls, value: Any, seen: set[int]) -> dict[Any, Any]:
        return collect_nested_errors(value, seen)

    # -- field access ------------------------------------------------------

    @property
    def schema(self) -> EntitySchema:
        return self._schema

    @property
    def entity_name(self) -> str:
        return self._entity_name

    def _spec(self, field_name: str) -> FieldSpec:
        try:
            return self._schema.fields[field_name]
        except KeyError:
            raise UnknownFieldError(type(self).__name__, field_name) from None

    def get(self, field_name: str) -> Any:
        self._spec(field_name)
        return self._data[field_name]

    def set(self, field_name: str, value: Any) -> None:
        """Asigna el campo y lo revalida contra el snapshot completo.

        Reasignar el mismo objeto (o un escalar inmutable igual) no revalida;
        listas, hijos y demás objetos mutables siempre se guardan.
        """

        spec = self._spec(field_name)
        if spec.type is not None:
            value = spec.type.build_nested(value)
        current = self._data[field_name]
        if value is current:
            return
        if isinstance(value, _SCALARS) and type(value) is type(current) and value == current:
            return
        self._data[field_name] = value
        self._validate(field_name)

    def __getattr__(self, name: str) -> Any:
        # Solo se llama cuando la búsqueda normal falla.
        if self._schema is None or name.startswith("__"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if self._schema is not None and name in self._schema.fields:
            self.set(name, value)
        elif name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    # -- validation --------------------------------------------------------

    def _validate(self, field_name: str) -> None:
        failure = validate_field(self._spec(field_name), field_name, self.fetch(), self._entity_name)
        if failure is None:
            self._errors.pop(field_name, None)
        else:
            self._errors[field_name] = failure

    def revalidate(self) -> None:
        """Re-ejecuta todos los validadores (útil tras cambios entre campos)."""

        for field_name in self._schema.fields:
            self._validate(field_name)

    @property
    def errors(self) -> dict[str, FieldFailure]:
        """Errores propios (sin hijos) del último resultado de cada validador."""

        return dict(self._errors)

    def error_tree(self, seen: set[int]) -> dict[str, Any]:
        if id(self) in seen:
            return {}
        seen.add(id(self))

        tree: dict[str, Any] = {}
        for field_name, spec in self._schema.fields.items():
            node: dict[Any, Any] = {}
            own = self._errors.get(field_name)
            if own is not None:
                node.update(own.as_dict())
            if spec.type is not None:
                node.update(spec.type.collect_errors(self._data[field_name], seen))
            if node:
                tree[field_name] = node
        return tree

    def get_errors(self) -> dict[str, Any]:
        """Errores propios y de descendientes, por campo y por índice de hijo."""

        return self.error_tree(set())

    @property
    def valid(self) -> bool:
        return not self.get_errors()

    # -- materialization ---------------------------------------------------

    def fetch(self) -> dict[str, Any]:
        """Campos declarados con su valor actual (los hijos siguen siendo entidades)."""

        return dict(self._data)

    @property
    def data(self) -> dict[str, Any]:
        return self.fetch()

    def dump(self) -> dict[str, Any]:
        """Como `fetch`, pero materializando hijos en dicts/listas planas."""

        return {key: dump_value(value) for key, value in self._data.items()}

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


def define_entity(
    class_name: str,
    fields: Mapping[str, Any],
    *,
    name: str | None = None,
    base: type[Entity] = Entity,
) -> type[Entity]:
    """Crea y registra un tipo de entidad en runtime (sin declarar una clase)."""

    entity_cls = type(class_name, (base,), {"__module__": __name__})
    registry.register_entity(entity_cls, fields, name=name)
    return entity_cls
