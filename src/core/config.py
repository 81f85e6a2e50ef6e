"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar el dominio.
- Permite que la CLI y los adaptadores lean la misma configuración.
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio donde `schema-entities doctor set` guarda el `.env` del usuario.

    Respeta `APPDATA` en Windows y `XDG_CONFIG_HOME` en Linux.
    """

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "schema-entities"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "schema-entities"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "schema-entities"
    return Path.home() / ".config" / "schema-entities"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    """Pares `CLAVE=valor` de un `.env`; ignora comentarios y comillas."""

    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Fusiona `values` en el `.env` de usuario de schema-entities.

    Las claves quedan ordenadas y los settings cacheados se invalidan, así la
    siguiente llamada a `get_settings()` ya ve los valores nuevos.
    """

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# schema-entities user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    get_settings.cache_clear()
    return env_path


class AppSettings(BaseSettings):
    """Configuración central.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el dominio.
    - Un único contrato de configuración para Core/CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEMA_ENTITIES_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    entity_name_suffix: str = Field(
        default="Entity",
        description="Sufijo añadido al nombre de clase para el nombre que reciben los validadores.",
    )
    log_level: str = Field(
        default="WARNING",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Nivel de logging que instala la CLI.",
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentación del JSON exportado.",
    )
    records_key: str = Field(
        default="items",
        min_length=1,
        description="Clave de la lista de registros cuando el JSON de entrada es un objeto.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Settings cacheados; `get_settings.cache_clear()` fuerza la relectura."""

    return AppSettings()
