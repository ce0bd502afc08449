"""Tests for the config subcommands."""

import yaml
from typer.testing import CliRunner

from promptkit.cli.main import app

runner = CliRunner()


def run(workspace, *args):
    return runner.invoke(app, ["--workspace", str(workspace), "config", *args])


def test_get_default(tmp_path):
    result = run(tmp_path, "get", "plugin_name")

    assert result.exit_code == 0
    assert result.stdout.strip() == "promptkit"


def test_get_unknown_key(tmp_path):
    result = run(tmp_path, "get", "nope")

    assert result.exit_code == 1
    assert "Unknown config key" in result.output


def test_set_parses_yaml_value(tmp_path):
    result = run(tmp_path, "set", "validation.strict", "true")

    assert result.exit_code == 0
    data = yaml.safe_load((tmp_path / "promptkit.user.yaml").read_text())
    assert data == {"validation": {"strict": True}}
    assert run(tmp_path, "get", "validation.strict").stdout.strip() == "True"


def test_set_runtime(tmp_path):
    result = run(tmp_path, "set", "--runtime", "variables.team", "infra")

    assert result.exit_code == 0
    assert not (tmp_path / "promptkit.user.yaml").exists()
    data = yaml.safe_load((tmp_path / "promptkit.runtime.yaml").read_text())
    assert data == {"variables": {"team": "infra"}}


def test_set_invalid_value(tmp_path):
    result = run(tmp_path, "set", "plugin_path", "/absolute")

    assert result.exit_code == 1
    assert "Invalid value" in result.output
    assert not (tmp_path / "promptkit.user.yaml").exists()


def test_set_unknown_key(tmp_path):
    result = run(tmp_path, "set", "workspace", "/elsewhere")

    assert result.exit_code == 1
    assert "Unknown config key" in result.output


def test_list(tmp_path):
    (tmp_path / "promptkit.user.yaml").write_text("variables:\n  team: core\n")

    result = run(tmp_path, "list")

    assert result.exit_code == 0
    data = yaml.safe_load(result.stdout)
    assert data["variables"] == {"team": "core"}
    assert data["plugin_name"] == "promptkit"


def test_set_numeric_variable_is_stored_as_text(tmp_path):
    result = run(tmp_path, "set", "variables.version", "1.2")

    assert result.exit_code == 0
    assert run(tmp_path, "get", "variables.version").stdout.strip() == "1.2"
    assert run(tmp_path, "list").exit_code == 0


def test_reset_restores_default(tmp_path):
    run(tmp_path, "set", "validation.strict", "true")

    result = run(tmp_path, "reset", "validation.strict")

    assert result.exit_code == 0
    assert "reset to False" in result.output
    assert yaml.safe_load((tmp_path / "promptkit.user.yaml").read_text()) == {}
    assert run(tmp_path, "get", "validation.strict").stdout.strip() == "False"


def test_reset_runtime_falls_back_to_user(tmp_path):
    (tmp_path / "promptkit.user.yaml").write_text("variables:\n  team: core\n")
    (tmp_path / "promptkit.runtime.yaml").write_text("variables:\n  team: infra\n")

    result = run(tmp_path, "reset", "--runtime", "variables.team")

    assert result.exit_code == 0
    assert run(tmp_path, "get", "variables.team").stdout.strip() == "core"


def test_reset_key_not_set(tmp_path):
    result = run(tmp_path, "reset", "plugin_name")

    assert result.exit_code == 0
    assert "is not set" in result.output
    assert not (tmp_path / "promptkit.user.yaml").exists()


def test_reset_unknown_key(tmp_path):
    result = run(tmp_path, "reset", "workspace")

    assert result.exit_code == 1
    assert "Unknown config key" in result.output
