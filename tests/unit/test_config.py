"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from clipcore.config import Config, ExtractionOptions, MonitoringConfig, find_config_file, load_config
from pydantic import ValidationError


@pytest.mark.unit
class TestExtractionOptions:
    """Engine options and their validation."""

    def test_defaults(self):
        options = ExtractionOptions()

        assert options.max_elements_to_parse == 0
        assert options.candidate_count == 5
        assert options.char_threshold == 500
        assert options.preserved_classes == ["page"]
        assert options.keep_classes is False
        assert options.disable_json_ld is False
        assert options.parser == "lxml"

    def test_page_class_always_preserved(self):
        assert ExtractionOptions(preserved_classes=["caption"]).preserved_classes == ["page", "caption"]
        assert ExtractionOptions(preserved_classes=["caption", "page"]).preserved_classes == ["caption", "page"]

    @pytest.mark.parametrize(
        "field,value",
        [
            ("candidate_count", 0),
            ("char_threshold", -1),
            ("max_elements_to_parse", -5),
            ("parser", "html5lib"),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            ExtractionOptions(**{field: value})


@pytest.mark.unit
class TestMonitoringConfig:
    """Logging and metrics settings."""

    def test_log_level_normalized(self):
        assert MonitoringConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            MonitoringConfig(log_level="VERBOSE")

    def test_log_file_parent_created(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "clipcore.log"
        config = MonitoringConfig(log_file=log_file)

        assert config.log_file == str(log_file)
        assert log_file.parent.is_dir()


@pytest.mark.unit
class TestConfigLoading:
    """YAML files, discovery and environment overrides."""

    def test_from_yaml(self, tmp_path: Path):
        path = tmp_path / "clipcore.yaml"
        path.write_text("extraction:\n  char_threshold: 200\n  keep_classes: true\nmonitoring:\n  log_level: warning\n")

        config = Config.from_yaml(path)

        assert config.extraction.char_threshold == 200
        assert config.extraction.keep_classes is True
        assert config.monitoring.log_level == "WARNING"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.from_yaml(path).extraction.char_threshold == 500

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml_values(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("extraction:\n  candidate_count: 0\n")
        with pytest.raises(ValidationError):
            Config.from_yaml(path)

    def test_discovery(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None
        assert load_config().extraction.char_threshold == 500

        (tmp_path / "clipcore.yml").write_text("extraction:\n  candidate_count: 3\n")
        assert find_config_file() == tmp_path / "clipcore.yml"
        assert load_config().extraction.candidate_count == 3

    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "clipcore.yaml").write_text("extraction:\n  candidate_count: 3\n")
        explicit = tmp_path / "other.yaml"
        explicit.write_text("extraction:\n  candidate_count: 7\n")

        assert load_config(explicit).extraction.candidate_count == 7

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CLIPCORE_EXTRACTION__CHAR_THRESHOLD", "250")
        monkeypatch.setenv("CLIPCORE_MONITORING__METRICS_ENABLED", "false")

        config = Config()

        assert config.extraction.char_threshold == 250
        assert config.monitoring.metrics_enabled is False
