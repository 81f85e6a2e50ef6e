"""Colección tipada de entidades con operaciones de consulta.

Por qué una clase propia (y no una lista):
- Garantiza que todos los elementos son del tipo de item declarado.
- Las consultas devuelven colecciones nuevas (encadenables) o resultados
  materializados (`result`, `key_by`, `group_by`), sin mutar la original.

Nota: las colecciones derivadas comparten las instancias de entidad con la
colección de origen; no se copian.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from core.domain.entity import Entity, dump_value
from core.domain.schema import registry
from core.domain.validation import collect_nested_errors
from core.errors import CollectionItemTypeError, ConfigurationError, NestedValueError, UnregisteredTypeError

logger = logging.getLogger(__name__)

Predicate = Mapping[str, Any] | Callable[[Entity], bool]

_MISSING = object()


def _field_value(item: Entity, field_name: str) -> Any:
    # Campos no declarados se comportan como ausentes (None), nunca lanzan.
    return item.fetch().get(field_name)


def _sort_key(value: Any) -> tuple[int, Any]:
    # Orden total entre tipos: números, luego texto, luego el resto por `repr`.
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, repr(value))


def _group_key(value: Any) -> Any:
    # Valores no hashables (listas de hijos, dicts) se agrupan por su `repr`.
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


def _matcher(predicate: Predicate) -> Callable[[Entity], bool]:
    if isinstance(predicate, Mapping):
        expected = dict(predicate)

        def matches(item: Entity) -> bool:
            data = item.fetch()
            return all(data.get(key, _MISSING) == value for key, value in expected.items())

        return matches
    if callable(predicate):
        return predicate
    raise ConfigurationError(f"Predicate must be a mapping or a callable, got {type(predicate).__name__}")


class EntityCollection:
    """Base de los tipos de colección; el tipo de item se registra con `collection_of`."""

    def __init__(self, items: Iterable[Any] | None = None) -> None:
        item_type = registry.item_type_for(type(self))
        if not registry.is_entity(item_type):
            raise UnregisteredTypeError(
                f"{type(self).__name__} item type {item_type.__name__} has no registered schema"
            )
        if isinstance(items, (str, bytes, Mapping)):
            raise ConfigurationError(
                f"{type(self).__name__} must be built from a sequence, got {type(items).__name__}"
            )
        self._item_type = item_type
        self._items: list[Entity] = [self._coerce(item) for item in (items or ())]

    def _coerce(self, item: Any) -> Entity:
        if isinstance(item, self._item_type):
            return item
        if isinstance(item, Mapping):
            return self._item_type(item)
        raise CollectionItemTypeError(
            f"{type(self).__name__} accepts {self._item_type.__name__} items, got {type(item).__name__}"
        )

    def _derive(self, items: Iterable[Entity]) -> EntityCollection:
        return type(self)(items)

    @property
    def item_type(self) -> type[Entity]:
        return self._item_type

    # -- nested type capability -------------------------------------------

    @classmethod
    def build_nested(cls, value: Any) -> Any:
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise NestedValueError(f"{cls.__name__} must be built from a sequence, got {type(value).__name__}")
        return cls(value)

    @classmethod
    def collect_errors(cls, value: Any, seen: set[int]) -> dict[Any, Any]:
        return collect_nested_errors(value, seen)

    # -- chainable queries -------------------------------------------------

    def filter(self, predicate: Predicate) -> EntityCollection:
        """Items cuyo `fetch()` coincide con todos los pares del predicado.

        También acepta un callable `item -> bool`.
        """

        matches = _matcher(predicate)
        return self._derive(item for item in self._items if matches(item))

    def sort_by(self, field_name: str, *, reverse: bool = False) -> EntityCollection:
        """Orden estable por el valor actual del campo; los `None` siempre al final."""

        present = [item for item in self._items if _field_value(item, field_name) is not None]
        missing = [item for item in self._items if _field_value(item, field_name) is None]
        ordered = sorted(present, key=lambda item: _sort_key(_field_value(item, field_name)), reverse=reverse)
        return self._derive(ordered + missing)

    def concat(self, other: Iterable[Any]) -> EntityCollection:
        """Nueva colección con `other` al final; la colección original no cambia."""

        if isinstance(other, (str, bytes, Mapping)):
            raise ConfigurationError(f"Cannot concat {type(other).__name__} to {type(self).__name__}")
        return self._derive([*self._items, *(self._coerce(item) for item in other)])

    # -- terminal queries --------------------------------------------------

    def result(self) -> list[Entity]:
        return list(self._items)

    def key_by(self, field_name: str) -> dict[Any, Entity]:
        """Mapping valor-del-campo -> item. Con claves repetidas gana el último.

        Valores no hashables se usan como clave por su `repr`.
        """

        keyed: dict[Any, Entity] = {}
        for item in self._items:
            keyed[_group_key(_field_value(item, field_name))] = item
        return keyed

    def group_by(self, field_name: str) -> dict[Any, list[Entity]]:
        groups: dict[Any, list[Entity]] = {}
        for item in self._items:
            groups.setdefault(_group_key(_field_value(item, field_name)), []).append(item)
        return groups

    def find(self, predicate: Predicate) -> Entity | None:
        matches = _matcher(predicate)
        for item in self._items:
            if matches(item):
                return item
        return None

    def first(self) -> Entity | None:
        return self._items[0] if self._items else None

    def pluck(self, field_name: str) -> list[Any]:
        return [_field_value(item, field_name) for item in self._items]

    # -- mutation ----------------------------------------------------------

    def append(self, item: Any) -> Entity:
        entity = self._coerce(item)
        self._items.append(entity)
        return entity

    # -- validation --------------------------------------------------------

    def error_tree(self, seen: set[int]) -> dict[int, Any]:
        if id(self) in seen:
            return {}
        seen.add(id(self))
        return collect_nested_errors(self._items, seen)

    def get_errors(self) -> dict[int, Any]:
        """Errores por índice de item (solo items con errores)."""

        return self.error_tree(set())

    @property
    def valid(self) -> bool:
        return not self.get_errors()

    def dump(self) -> list[Any]:
        return [dump_value(item) for item in self._items]

    # -- container protocol ------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._items)

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return self._derive(self._items[index])
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._items == other._items

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"


def define_collection(
    class_name: str,
    item_type: type[Entity],
    *,
    base: type[EntityCollection] = EntityCollection,
) -> type[EntityCollection]:
    """Crea y registra un tipo de colección en runtime."""

    collection_cls = type(class_name, (base,), {"__module__": __name__})
    registry.register_collection(collection_cls, item_type)
    return collection_cls
