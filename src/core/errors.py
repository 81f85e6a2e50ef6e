"""Excepciones del Core.

Solo los errores estructurales (programación/configuración) se lanzan.
Los errores de validación de campos son estado de la entidad, nunca excepciones.
"""

from __future__ import annotations


class SchemaEntitiesError(Exception):
    """Base exception for schema-entities related errors."""


class ConfigurationError(SchemaEntitiesError):
    """A type or schema was declared or used incorrectly."""


class SchemaDefinitionError(ConfigurationError):
    """A schema or one of its field specs is malformed."""


class UnregisteredTypeError(ConfigurationError):
    """An entity or collection type has no registered schema / item type."""


class CollectionItemTypeError(ConfigurationError):
    """An item handed to a collection is not of its declared item type."""


class NestedValueError(ConfigurationError):
    """A nested field received a value that cannot become child entities."""


class UnknownFieldError(ConfigurationError, AttributeError):
    """Access to a field the entity schema does not declare."""

    def __init__(self, entity_name: str, field_name: str) -> None:
        super().__init__(f"{entity_name} has no field {field_name!r}")
        self.entity_name = entity_name
        self.field_name = field_name


class TypeLoadError(ConfigurationError):
    """An import path could not be resolved to an entity or collection type."""
