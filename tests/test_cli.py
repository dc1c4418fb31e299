"""Tests for CLI commands."""

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from strictschema.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def config_path(tmp_path: Path) -> Iterator[Path]:
    """Point the user config at a temporary location."""
    path = tmp_path / "config" / "config.yaml"
    with patch("strictschema.user_config.CONFIG_FILE", path):
        yield path


class TestSchemaCommand:
    """Tests for the schema command."""

    def test_model_schema(self) -> None:
        """Test printing the envelope of a model."""
        result = runner.invoke(app, ["schema", "sample_models:Person"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["name"] == "person"
        assert data["strict"] is False
        assert data["schema"]["required"] == ["name", "age"]

    def test_default_indent(self) -> None:
        """Test output is indented with two spaces by default."""
        result = runner.invoke(app, ["schema", "sample_models:Skill"])
        assert result.stdout.startswith('{\n  "name": "skill"')

    def test_indent_from_config(self, config_path: Path) -> None:
        """Test the indent setting is read from the user config."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text(yaml.safe_dump({"indent": 4}))

        result = runner.invoke(app, ["schema", "sample_models:Skill"])
        assert result.stdout.startswith('{\n    "name": "skill"')

    def test_bare_schema(self) -> None:
        """Test --bare prints only the schema object."""
        result = runner.invoke(app, ["schema", "sample_models:Skill", "--bare"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["type"] == "object"
        assert "name" in data["properties"]

    def test_enum_schema(self) -> None:
        """Test printing the schema of an enum."""
        result = runner.invoke(app, ["schema", "sample_models:Priority"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["enum"] == ["low", "medium", "high"]

    def test_not_a_model(self) -> None:
        """Test targets that are neither models nor enums are rejected."""
        result = runner.invoke(app, ["schema", "sample_models:registry"])
        assert result.exit_code != 0

    def test_bad_target_format(self) -> None:
        """Test a target without a colon is rejected."""
        result = runner.invoke(app, ["schema", "sample_models"])
        assert result.exit_code != 0

    def test_missing_module(self) -> None:
        """Test a module that cannot be imported is rejected."""
        result = runner.invoke(app, ["schema", "no_such_module_here:Model"])
        assert result.exit_code != 0


class TestInvalidSchemaModule:
    """Tests for targets whose module fails to declare a valid schema."""

    @pytest.mark.parametrize(
        "args",
        [
            ["schema", "invalid_models:Contact"],
            ["decode", "invalid_models:Contact", "-"],
            ["request", "invalid_models:Contact", "-p", "hi"],
        ],
    )
    def test_reports_definition_error(self, args: list[str]) -> None:
        """Test schema definition errors at import exit cleanly with a message."""
        result = runner.invoke(app, args, input="{}")
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "nickname" in result.stdout


class TestDecodeCommand:
    """Tests for the decode command."""

    def test_decode_file(self, tmp_path: Path) -> None:
        """Test decoding a JSON file prints the normalized document."""
        source = tmp_path / "person.json"
        source.write_text('{"age": 36, "name": "Ada"}')

        result = runner.invoke(app, ["decode", "sample_models:Person", str(source)])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"name": "Ada", "age": 36}

    def test_decode_stdin(self) -> None:
        """Test '-' reads the document from stdin."""
        result = runner.invoke(
            app,
            ["decode", "sample_models:Skill", "-"],
            input='{"name": "math", "level": 3}',
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"name": "math", "level": 3}

    def test_decode_error(self, tmp_path: Path) -> None:
        """Test decoding failures exit with an error message."""
        source = tmp_path / "person.json"
        source.write_text('{"name": "Ada"}')

        result = runner.invoke(app, ["decode", "sample_models:Person", str(source)])
        assert result.exit_code == 1
        assert "Missing required field 'age'" in result.stdout

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing source file exits with an error."""
        result = runner.invoke(
            app, ["decode", "sample_models:Person", str(tmp_path / "nope.json")]
        )
        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestRequestCommand:
    """Tests for the request command."""

    def test_responses_request(self) -> None:
        """Test the default request layout and model."""
        result = runner.invoke(app, ["request", "sample_models:Skill", "-p", "Rate me"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["model"] == "gpt-4o-mini"
        assert payload["input"] == [{"role": "user", "content": "Rate me"}]
        assert payload["text"]["format"]["name"] == "skill"

    def test_chat_request(self) -> None:
        """Test --api chat with a system message and model override."""
        result = runner.invoke(
            app,
            [
                "request",
                "sample_models:Skill",
                "-p",
                "Rate me",
                "--api",
                "chat",
                "-m",
                "gpt-4o",
                "-s",
                "Be terse",
            ],
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["model"] == "gpt-4o"
        assert [m["role"] for m in payload["messages"]] == ["system", "user"]
        assert payload["response_format"]["json_schema"]["name"] == "skill"

    def test_api_from_config(self, config_path: Path) -> None:
        """Test the request layout is read from the user config."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text(yaml.safe_dump({"api": "chat"}))

        result = runner.invoke(app, ["request", "sample_models:Skill", "-p", "Rate me"])
        assert "response_format" in json.loads(result.stdout)


class TestListCommand:
    """Tests for the list command."""

    def test_list_registered(self) -> None:
        """Test schemas registered by a module are listed."""
        result = runner.invoke(app, ["list", "registered_models"])
        assert result.exit_code == 0
        assert "invoice" in result.stdout
        assert "Invoice" in result.stdout

    def test_list_missing_module(self) -> None:
        """Test an unknown module exits with an error."""
        result = runner.invoke(app, ["list", "no_such_module_here"])
        assert result.exit_code == 1


class TestConfigCommands:
    """Tests for the config sub-commands."""

    def test_show_without_config(self) -> None:
        """Test show explains how to create a config."""
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "No user config found" in result.stdout

    def test_init_then_show(self, config_path: Path) -> None:
        """Test init writes the defaults and show lists them."""
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert yaml.safe_load(config_path.read_text())["api"] == "responses"

        result = runner.invoke(app, ["config", "show"])
        assert "default_model" in result.stdout

    def test_init_refuses_overwrite(self, config_path: Path) -> None:
        """Test init keeps an existing config unless --force is given."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text(yaml.safe_dump({"indent": 4}))

        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert yaml.safe_load(config_path.read_text()) == {"indent": 4}

        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert yaml.safe_load(config_path.read_text())["indent"] == 2

    def test_path(self, config_path: Path) -> None:
        """Test path prints the config file location."""
        result = runner.invoke(app, ["config", "path"])
        assert result.stdout.strip() == str(config_path)
