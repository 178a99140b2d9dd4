from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from legacyfit.config import (
    LegacyFitConfig,
    discover_config_file,
    load_config,
    _parse_section,
    _pyproject_has_legacyfit_section,
    _read_toml,
)
from legacyfit.exceptions import ConfigError


@pytest.mark.unit
class TestLegacyFitConfig:
    """Tests for LegacyFitConfig dataclass."""

    def test_default_initialization(self) -> None:
        config = LegacyFitConfig()

        assert config.search_root == "/Applications"
        assert config.catalog_url == ""
        assert config.refresh_catalog is False
        assert config.source_path is None

    def test_to_log_dict(self) -> None:
        """Test to_log_dict returns configuration without metadata."""
        config = LegacyFitConfig(
            search_root="/Volumes/Legacy/Applications",
            catalog_url="https://example.org/catalog.plist",
            refresh_catalog=True,
            source_path=Path("/test/legacyfit.toml"),
        )

        assert config.to_log_dict() == {
            "search_root": "/Volumes/Legacy/Applications",
            "catalog_url": "https://example.org/catalog.plist",
            "refresh_catalog": True,
        }


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file function."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[legacyfit]\n", encoding="utf-8")
        (tmp_path / "legacyfit.toml").write_text("[legacyfit]\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            discover_config_file(tmp_path / "nonexistent.toml")

        assert "not found" in str(exc_info.value).lower()

    def test_discovers_legacyfit_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "legacyfit.toml"
        config_file.write_text("[legacyfit]\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == config_file

    def test_discovers_pyproject_toml_with_section(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.legacyfit]\nrefresh_catalog = true\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == config_file

    def test_ignores_pyproject_toml_without_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.other]\nkey = 'value'\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None

    def test_precedence_order(self, tmp_path: Path) -> None:
        """legacyfit.toml wins over pyproject.toml."""
        legacyfit_toml = tmp_path / "legacyfit.toml"
        legacyfit_toml.write_text("[legacyfit]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.legacyfit]\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == legacyfit_toml


@pytest.mark.unit
class TestPyprojectHasLegacyFitSection:
    def test_returns_true_when_section_exists(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.legacyfit]\nsearch_root = '/Applications'\n", encoding="utf-8")

        assert _pyproject_has_legacyfit_section(config_file) is True

    def test_returns_false_on_errors(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("invalid ][[", encoding="utf-8")

        assert _pyproject_has_legacyfit_section(config_file) is False
        assert _pyproject_has_legacyfit_section(tmp_path / "nonexistent.toml") is False


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml helper."""

    def test_raises_error_on_invalid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "invalid.toml"
        toml_file.write_text("invalid ][[ toml", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            _read_toml(toml_file)

    def test_raises_error_when_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            _read_toml(tmp_path / "nonexistent.toml")


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section configuration validator."""

    def test_parses_empty_section(self) -> None:
        assert _parse_section({}, config_path="test.toml") == LegacyFitConfig()

    def test_parses_all_options(self) -> None:
        section = {
            "search_root": "/Volumes/Legacy/Applications",
            "catalog_url": "https://example.org/catalog.json",
            "refresh_catalog": True,
        }

        result = _parse_section(section, config_path="test.toml")

        assert result.search_root == "/Volumes/Legacy/Applications"
        assert result.catalog_url == "https://example.org/catalog.json"
        assert result.refresh_catalog is True

    def test_raises_error_on_unknown_keys(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({"check_conflicts": True}, config_path="test.toml")

        assert "Unknown configuration keys: check_conflicts" in str(exc_info.value)

    @pytest.mark.parametrize(
        "section,message",
        [
            ({"refresh_catalog": "true"}, "refresh_catalog must be a boolean"),
            ({"search_root": 1}, "search_root must be a string"),
            ({"catalog_url": False}, "catalog_url must be a string"),
        ],
        ids=["refresh-string", "root-int", "url-bool"],
    )
    def test_raises_error_on_wrong_type(self, section, message: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(section, config_path="test.toml")

        assert message in str(exc_info.value)
        assert exc_info.value.option == next(iter(section))

    def test_raises_error_on_empty_search_root(self) -> None:
        with pytest.raises(ConfigError, match="must not be empty"):
            _parse_section({"search_root": ""}, config_path="test.toml")


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config main function."""

    def test_returns_defaults_when_no_config_found(self, tmp_path: Path) -> None:
        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result == LegacyFitConfig()
        assert result.source_path is None

    def test_loads_legacyfit_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "legacyfit.toml"
        config_file.write_text("[legacyfit]\nsearch_root = '/Volumes/Old'\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result.search_root == "/Volumes/Old"
        assert result.source_path == config_file

    def test_loads_pyproject_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.legacyfit]\nrefresh_catalog = true\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result.refresh_catalog is True
        assert result.source_path == config_file

    def test_loads_explicit_config_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[legacyfit]\ncatalog_url = 'https://example.org/c.json'\n", encoding="utf-8")

        result = load_config(config_file)

        assert result.catalog_url == "https://example.org/c.json"
        assert result.source_path == config_file.resolve()

    def test_raises_error_on_unknown_keys(self, tmp_path: Path) -> None:
        (tmp_path / "legacyfit.toml").write_text("[legacyfit]\nunknown_option = true\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            with pytest.raises(ConfigError, match="Unknown configuration keys"):
                load_config()

    def test_handles_empty_legacyfit_section(self, tmp_path: Path) -> None:
        config_file = tmp_path / "legacyfit.toml"
        config_file.write_text("[legacyfit]\n", encoding="utf-8")

        with patch("legacyfit.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result.search_root == "/Applications"
        assert result.source_path == config_file
