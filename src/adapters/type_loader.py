"""Resolución de tipos por ruta de import ("paquete.modulo:Clase")."""

from __future__ import annotations

import importlib

from core.domain.collection import EntityCollection
from core.domain.entity import Entity
from core.errors import TypeLoadError


def load_type(path: str) -> type:
    """Importa `module:attr` (o `module.attr`) y devuelve la clase."""

    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise TypeLoadError(f"Invalid type path {path!r}; expected 'package.module:ClassName'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise TypeLoadError(f"Cannot import {module_name!r}: {exc}") from exc

    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise TypeLoadError(f"{module_name!r} has no attribute {attr!r}") from None

    if not isinstance(obj, type) or not issubclass(obj, (Entity, EntityCollection)):
        raise TypeLoadError(f"{path!r} is not an entity or collection type")
    return obj
