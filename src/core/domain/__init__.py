"""Entidades, colecciones y esquemas del dominio.

Por qué:
- Aquí vive el motor puro (sin I/O): esquema, validación, entidad y colección.
- CLI y adaptadores solo consumen esta API pública.
"""

from core.domain.collection import EntityCollection, define_collection
from core.domain.entity import Entity, define_entity
from core.domain.schema import (
    EntitySchema,
    FieldSpec,
    SchemaRegistry,
    collection_of,
    entity_schema,
    register_collection,
    register_entity,
    registry,
)
from core.domain.validation import FieldFailure, normalize_outcome, validate_field

__all__ = [
    "Entity",
    "EntityCollection",
    "EntitySchema",
    "FieldFailure",
    "FieldSpec",
    "SchemaRegistry",
    "collection_of",
    "define_collection",
    "define_entity",
    "entity_schema",
    "normalize_outcome",
    "register_collection",
    "register_entity",
    "registry",
    "validate_field",
]
