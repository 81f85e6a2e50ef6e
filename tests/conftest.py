"""Pytest configuration and shared fixtures."""

import pytest

from core.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep user config and SCHEMA_ENTITIES_* env vars out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SCHEMA_ENTITIES_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def products():
    return [
        {"name": "A", "price": 10},
        {"name": "B", "price": 2},
    ]


@pytest.fixture
def records_file(tmp_path):
    def write(payload):
        import json

        path = tmp_path / "records.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return write
