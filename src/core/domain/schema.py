"""Descriptores de esquema y registro de tipos.

Por qué un registro en vez de atributos de clase:
- El esquema es configuración explícita asociada a la *identidad* del tipo; no
  se hereda por MRO ni se busca en la clase en tiempo de ejecución.
- Permite declarar tipos con decoradores o construirlos dinámicamente
  (`define_entity`) con el mismo camino de resolución.

Formas aceptadas para un campo:
- una función `validator(snapshot, field_name, entity_name)`
- un mapping `{"validator": fn, "default_value"/"defaultValue": x, "type": T}`
- un `FieldSpec` ya construido
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.config import ConfigDict

from core.config import get_settings
from core.errors import SchemaDefinitionError, UnregisteredTypeError
from core.interfaces.nested_type import NestedType

logger = logging.getLogger(__name__)


class FieldSpec(BaseModel):
    """Configuración de un campo: validador, default opcional y tipo anidado opcional."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    validator: Callable[..., Any] = Field(
        ...,
        description="Callable (snapshot, field_name, entity_name) -> resultado de validación.",
    )
    default_value: Any = Field(
        default=None,
        alias="defaultValue",
        description="Valor usado cuando el input no trae el campo (se copia en cada uso).",
    )
    default_factory: Callable[[], Any] | None = Field(
        default=None,
        alias="defaultFactory",
        description="Alternativa a `default_value` para defaults calculados.",
    )
    type: Any = Field(
        default=None,
        description="Tipo anidado (entidad o colección) que cumple `NestedType`.",
    )

    @field_validator("type")
    @classmethod
    def _check_nested_type(cls, value: Any) -> Any:
        if value is None:
            return value
        if not isinstance(value, type) or not isinstance(value, NestedType):
            raise ValueError(f"{value!r} is not an entity or collection type")
        return value

    def resolve_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return copy.deepcopy(self.default_value)


class EntitySchema(BaseModel):
    """Esquema completo de un tipo de entidad (orden de campos preservado)."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    fields: dict[str, FieldSpec] = Field(default_factory=dict)
    name: str | None = Field(
        default=None,
        description="Nombre explícito que reciben los validadores (si no, se deriva de la clase).",
    )

    def field_names(self) -> list[str]:
        return list(self.fields)

    def nested_fields(self) -> dict[str, FieldSpec]:
        return {key: spec for key, spec in self.fields.items() if spec.type is not None}


def normalize_field(field_name: str, raw: Any) -> FieldSpec:
    """Normaliza una declaración de campo a `FieldSpec` o lanza `SchemaDefinitionError`."""

    if not isinstance(field_name, str) or not field_name:
        raise SchemaDefinitionError(f"Field name {field_name!r} must be a non-empty string")
    if isinstance(raw, FieldSpec):
        return raw
    if isinstance(raw, Mapping):
        try:
            return FieldSpec.model_validate(dict(raw))
        except ValidationError as exc:
            raise SchemaDefinitionError(f"Invalid spec for field {field_name!r}: {exc}") from exc
    if callable(raw):
        return FieldSpec(validator=raw)
    raise SchemaDefinitionError(
        f"Field {field_name!r} must be a validator or a mapping, got {type(raw).__name__}"
    )


def build_schema(fields: Mapping[str, Any], *, name: str | None = None) -> EntitySchema:
    if not isinstance(fields, Mapping):
        raise SchemaDefinitionError(f"Schema must be a mapping, got {type(fields).__name__}")
    return EntitySchema(
        fields={key: normalize_field(key, raw) for key, raw in fields.items()},
        name=name,
    )


class SchemaRegistry:
    """Asocia tipos de entidad con su esquema y tipos de colección con su item.

    La búsqueda es por identidad exacta del tipo: una subclase no registrada no
    hereda el esquema de su padre.
    """

    def __init__(self) -> None:
        self._entities: dict[type, EntitySchema] = {}
        self._collections: dict[type, type] = {}

    def register_entity(
        self,
        entity_cls: type,
        fields: Mapping[str, Any] | EntitySchema,
        *,
        name: str | None = None,
    ) -> EntitySchema:
        schema = fields if isinstance(fields, EntitySchema) else build_schema(fields, name=name)
        if name is not None and schema.name != name:
            schema = schema.model_copy(update={"name": name})
        clashes = [key for key in schema.fields if hasattr(entity_cls, key)]
        if clashes:
            raise SchemaDefinitionError(
                f"{entity_cls.__name__} fields shadow entity attributes: {', '.join(clashes)}"
            )
        if entity_cls in self._entities:
            logger.debug("Replacing schema of %s", entity_cls.__name__)
        self._entities[entity_cls] = schema
        logger.debug("Registered entity %s (%d fields)", entity_cls.__name__, len(schema.fields))
        return schema

    def register_collection(self, collection_cls: type, item_type: type) -> type:
        if not isinstance(item_type, type) or not isinstance(item_type, NestedType):
            raise SchemaDefinitionError(
                f"{collection_cls.__name__} item type {item_type!r} is not an entity type"
            )
        self._collections[collection_cls] = item_type
        logger.debug("Registered collection %s of %s", collection_cls.__name__, item_type.__name__)
        return item_type

    def schema_for(self, entity_cls: type) -> EntitySchema:
        try:
            return self._entities[entity_cls]
        except KeyError:
            raise UnregisteredTypeError(f"{entity_cls.__name__} has no registered schema") from None

    def item_type_for(self, collection_cls: type) -> type:
        try:
            return self._collections[collection_cls]
        except KeyError:
            raise UnregisteredTypeError(
                f"{collection_cls.__name__} has no registered item type"
            ) from None

    def entity_name(self, entity_cls: type) -> str:
        """Nombre contextual que reciben los validadores (p.ej. 'ProductEntity')."""

        schema = self.schema_for(entity_cls)
        if schema.name:
            return schema.name
        suffix = get_settings().entity_name_suffix
        base = entity_cls.__name__
        if suffix and base.endswith(suffix):
            return base
        return f"{base}{suffix}"

    def is_entity(self, cls: type) -> bool:
        return cls in self._entities

    def is_collection(self, cls: type) -> bool:
        return cls in self._collections

    def unregister(self, cls: type) -> None:
        self._entities.pop(cls, None)
        self._collections.pop(cls, None)


registry = SchemaRegistry()


def register_entity(
    entity_cls: type,
    fields: Mapping[str, Any] | EntitySchema,
    *,
    name: str | None = None,
) -> EntitySchema:
    return registry.register_entity(entity_cls, fields, name=name)


def register_collection(collection_cls: type, item_type: type) -> type:
    return registry.register_collection(collection_cls, item_type)


def entity_schema(
    fields: Mapping[str, Any] | EntitySchema,
    *,
    name: str | None = None,
) -> Callable[[type], type]:
    """Decorador que registra el esquema de una clase de entidad.

        @entity_schema({"name": not_empty, "price": {"validator": positive, "default_value": 0}})
        class ProductEntity(Entity):
            ...
    """

    def decorator(entity_cls: type) -> type:
        registry.register_entity(entity_cls, fields, name=name)
        return entity_cls

    return decorator


def collection_of(item_type: type) -> Callable[[type], type]:
    """Decorador que registra el tipo de item de una clase de colección."""

    def decorator(collection_cls: type) -> type:
        registry.register_collection(collection_cls, item_type)
        return collection_cls

    return decorator
