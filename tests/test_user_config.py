"""Tests for user configuration system."""

from pathlib import Path
from unittest.mock import patch

import yaml

from strictschema.user_config import (
    DEFAULTS,
    get_default_config_template,
    get_setting,
    load_user_config,
    save_user_config,
)


class TestLoadUserConfig:
    """Tests for load_user_config."""

    def test_returns_empty_when_no_file(self, tmp_path: Path) -> None:
        """Missing config file returns empty dict."""
        with patch("strictschema.user_config.get_config_path", return_value=tmp_path / "no.yaml"):
            assert load_user_config() == {}

    def test_loads_valid_config(self, tmp_path: Path) -> None:
        """Valid YAML config is loaded correctly."""
        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text(yaml.safe_dump({"indent": 4, "api": "chat"}))

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            result = load_user_config()

        assert result == {"indent": 4, "api": "chat"}

    def test_skips_invalid_enum_values(self, tmp_path: Path) -> None:
        """Invalid enum values are dropped with a warning."""
        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text(yaml.safe_dump({"api": "graphql", "default_model": "gpt-4o"}))

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            result = load_user_config()

        assert "api" not in result
        assert result["default_model"] == "gpt-4o"

    def test_skips_unknown_keys_and_bad_indent(self, tmp_path: Path) -> None:
        """Unknown keys and negative indents are ignored."""
        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text(yaml.safe_dump({"colour": "blue", "indent": -1}))

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            assert load_user_config() == {}

    def test_handles_corrupt_yaml(self, tmp_path: Path) -> None:
        """Corrupt YAML returns empty dict."""
        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text("this: is: not: valid: yaml: [")

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            assert load_user_config() == {}

    def test_non_mapping_returns_empty(self, tmp_path: Path) -> None:
        """A YAML list instead of a mapping returns empty dict."""
        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text("- a\n- b\n")

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            assert load_user_config() == {}


class TestGetSetting:
    """Tests for get_setting."""

    def test_falls_back_to_default(self, tmp_path: Path) -> None:
        """Unset keys return the built-in default."""
        with patch("strictschema.user_config.get_config_path", return_value=tmp_path / "no.yaml"):
            assert get_setting("indent") == DEFAULTS["indent"]
            assert get_setting("api") == "responses"

    def test_user_value_wins(self, tmp_path: Path) -> None:
        """User values override the defaults."""
        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text(yaml.safe_dump({"default_model": "gpt-4.1"}))

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            assert get_setting("default_model") == "gpt-4.1"


class TestSaveUserConfig:
    """Tests for save_user_config."""

    def test_creates_file(self, tmp_path: Path) -> None:
        """Saving creates the file and parent dirs."""
        cfg_path = tmp_path / "sub" / "config.yaml"

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            result_path = save_user_config({"indent": 4})

        assert result_path == cfg_path
        assert cfg_path.exists()
        assert yaml.safe_load(cfg_path.read_text()) == {"indent": 4}

    def test_template_round_trips(self, tmp_path: Path) -> None:
        """The default template saves and loads back unchanged."""
        cfg_path = tmp_path / "config.yaml"

        with patch("strictschema.user_config.get_config_path", return_value=cfg_path):
            save_user_config(get_default_config_template())
            assert load_user_config() == DEFAULTS
