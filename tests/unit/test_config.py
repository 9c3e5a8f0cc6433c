"""
Tests for output configuration schemas and the YAML loader.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestOutputMode:
    def test_case_insensitive(self):
        from simulation_output.config import OutputMode

        assert OutputMode("simpleandtabular") is OutputMode.SIMPLE_AND_TABULAR
        assert OutputMode("SIMPLE") is OutputMode.SIMPLE
        assert OutputMode("Disabled") is OutputMode.DISABLED

    def test_unknown_mode(self):
        from simulation_output.config import OutputMode

        with pytest.raises(ValueError):
            OutputMode("verbose")


class TestOutputConfig:
    def test_defaults(self):
        from simulation_output.config import DEFAULT_STORE_SETTINGS, OutputConfig, OutputMode

        config = OutputConfig()

        assert config.mode is OutputMode.DISABLED
        assert not config.writes_output
        assert not config.writes_tabular
        assert config.database_path == Path("simulation_output.db")
        assert config.store_settings == DEFAULT_STORE_SETTINGS

    def test_store_settings_default_is_a_copy(self):
        from simulation_output.config import DEFAULT_STORE_SETTINGS, OutputConfig

        config = OutputConfig()
        config.store_settings["threads"] = 8

        assert DEFAULT_STORE_SETTINGS["threads"] == 1

    def test_mode_flags(self):
        from simulation_output.config import OutputConfig

        simple = OutputConfig(mode="Simple")
        tabular = OutputConfig(mode="SimpleAndTabular")

        assert simple.writes_output and not simple.writes_tabular
        assert tabular.writes_output and tabular.writes_tabular

    def test_invalid_setting_name(self):
        from simulation_output.config import OutputConfig

        with pytest.raises(ValidationError, match="Invalid store setting name"):
            OutputConfig(store_settings={"threads; DROP TABLE x": 1})

    def test_from_dict(self):
        from simulation_output.config import OutputConfig

        config = OutputConfig.from_dict(
            {"mode": "simple", "database_path": "out/run.db", "store_settings": {"threads": 2}}
        )

        assert config.writes_output
        assert config.database_path == Path("out/run.db")
        assert config.store_settings == {"threads": 2}


class TestLoadConfig:
    """Test YAML loading."""

    def test_load_top_level(self, tmp_path):
        from simulation_output.config import OutputMode, load_config

        config_file = tmp_path / "output.yaml"
        config_file.write_text(
            "mode: SimpleAndTabular\n"
            "database_path: results/eplusout.db\n"
            "diagnostic_log_path: results/eplusout.err\n"
        )

        config = load_config(config_file)

        assert config.mode is OutputMode.SIMPLE_AND_TABULAR
        assert config.diagnostic_log_path == Path("results/eplusout.err")

    def test_load_nested_output_section(self, tmp_path):
        from simulation_output.config import load_config

        config_file = tmp_path / "run.yaml"
        config_file.write_text("output:\n  mode: Simple\n  store_settings:\n    threads: 4\n")

        config = load_config(config_file)

        assert config.writes_output
        assert config.store_settings == {"threads": 4}

    def test_missing_file(self, tmp_path):
        from simulation_output.config import load_config

        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        from simulation_output.config import load_config

        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="Empty configuration"):
            load_config(config_file)

    def test_invalid_mode(self, tmp_path):
        from simulation_output.config import load_config

        config_file = tmp_path / "bad.yaml"
        config_file.write_text("mode: Verbose\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(config_file)

    def test_non_mapping_rejected(self, tmp_path):
        from simulation_output.config import load_config

        config_file = tmp_path / "list.yaml"
        config_file.write_text("- Simple\n- SimpleAndTabular\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(config_file)
