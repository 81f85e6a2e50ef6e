"""CLI tests using typer's CliRunner."""

import json

import pytest
from typer.testing import CliRunner

from cli.main import app


@pytest.fixture
def runner():
    return CliRunner()


class TestValidateCommand:
    def test_valid_records_exit_zero(self, runner, records_file, products):
        result = runner.invoke(app, ["validate", "fake_domain:ProductEntityCollection", str(records_file(products))])

        assert result.exit_code == 0
        assert "2 items, 0 invalid" in result.output

    def test_invalid_records_exit_one(self, runner, records_file):
        path = records_file([{"sku": "a", "qty": 1}, {"sku": "", "qty": 1}])

        result = runner.invoke(app, ["validate", "fake_domain:OrderLine", str(path)])

        assert result.exit_code == 1
        assert "2 items, 1 invalid" in result.output
        assert "sku is required" in result.output

    def test_export(self, runner, records_file, tmp_path, products):
        output = tmp_path / "normalized.json"

        result = runner.invoke(
            app,
            ["validate", "fake_domain:ProductEntity", str(records_file({"items": products})), "--export", str(output)],
        )

        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8")) == products

    def test_bad_type_path(self, runner, records_file, products):
        result = runner.invoke(app, ["validate", "fake_domain:Nope", str(records_file(products))])

        assert result.exit_code == 2

    def test_bad_json(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["validate", "fake_domain:ProductEntity", str(path)])

        assert result.exit_code == 2


class TestSchemaCommand:
    def test_lists_fields(self, runner):
        result = runner.invoke(app, ["schema", "fake_domain:FatherEntity"])

        assert result.exit_code == 0
        assert "FatherEntity" in result.output
        assert "children" in result.output
        assert "ChildrenEntity" in result.output

    def test_accepts_collection_types(self, runner):
        result = runner.invoke(app, ["schema", "fake_domain:OrderLines"])

        assert result.exit_code == 0
        assert "OrderLineEntity" in result.output

    def test_unregistered_entity_is_a_usage_error(self, runner):
        result = runner.invoke(app, ["schema", "core.domain:Entity"])

        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)


class TestDoctorCommand:
    def test_run_shows_settings(self, runner):
        result = runner.invoke(app, ["doctor", "run"])

        assert result.exit_code == 0
        assert "entity_name_suffix" in result.output

    def test_run_reports_bad_type(self, runner):
        result = runner.invoke(app, ["doctor", "run", "--type", "fake_domain:Nope"])

        assert result.exit_code == 1

    def test_set_writes_user_env(self, runner, tmp_path):
        result = runner.invoke(app, ["doctor", "set", "log_level", "debug"])

        env_file = tmp_path / "config" / "schema-entities" / ".env"
        assert result.exit_code == 0
        assert "SCHEMA_ENTITIES_LOG_LEVEL=debug" in env_file.read_text(encoding="utf-8")

    def test_set_rejects_unknown_keys(self, runner):
        result = runner.invoke(app, ["doctor", "set", "nope", "1"])

        assert result.exit_code == 2

    def test_set_rejects_invalid_values(self, runner):
        result = runner.invoke(app, ["doctor", "set", "json_indent", "99"])

        assert result.exit_code == 2
