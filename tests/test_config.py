"""
Configuration Tests
===================
"""

import os

import pytest

from traffic_census.config import ConfigurationError, Settings, load_config


class TestLoadConfig:
    """Tests for YAML + environment configuration loading."""

    def test_defaults(self, clean_env, tmp_path):
        """Verify defaults when the file is empty."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        settings = load_config(str(path))
        assert settings.pipeline.backend == "process"
        assert settings.pipeline.schema_mode == "auto"
        assert settings.report.top_n == 3
        assert settings.pipeline.resolved_workers == (os.cpu_count() or 1)

    def test_yaml_values(self, clean_env, tmp_path):
        """Verify values are read from YAML."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "pipeline:\n"
            "  workers: 4\n"
            "  backend: thread\n"
            "  schema: daily\n"
            "report:\n"
            "  top_n: 5\n"
            "  format: json\n"
        )
        settings = load_config(str(path))
        assert settings.pipeline.resolved_workers == 4
        assert settings.pipeline.backend == "thread"
        assert settings.pipeline.schema_mode == "daily"
        assert settings.report.top_n == 5
        assert settings.report.format == "json"

    def test_env_overrides_yaml(self, clean_env, tmp_path):
        """Verify environment variables take precedence."""
        path = tmp_path / "config.yaml"
        path.write_text("pipeline:\n  workers: 4\n")
        clean_env.setenv("TRAFFIC_CENSUS_WORKERS", "7")
        clean_env.setenv("TRAFFIC_CENSUS_TOP_N", "2")
        clean_env.setenv("TRAFFIC_CENSUS_LOG_LEVEL", "DEBUG")
        settings = load_config(str(path))
        assert settings.pipeline.workers == 7
        assert settings.report.top_n == 2
        assert settings.logging.level == "DEBUG"

    def test_zero_workers_allowed_at_load(self, clean_env, tmp_path):
        """Verify zero workers loads; topology is rejected by the coordinator."""
        path = tmp_path / "config.yaml"
        path.write_text("pipeline:\n  workers: 0\n")
        assert load_config(str(path)).pipeline.resolved_workers == 0

    def test_missing_explicit_file(self, clean_env, tmp_path):
        """Verify a named config file must exist."""
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "missing.yaml"))

    @pytest.mark.parametrize(
        "content",
        [
            "pipeline: [unclosed\n",
            "- just\n- a list\n",
            "pipeline:\n  backend: mpi\n",
            "report:\n  top_n: 0\n",
        ],
    )
    def test_invalid_config(self, clean_env, tmp_path, content):
        """Verify bad YAML or values raise ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_config_path_is_directory(self, clean_env, tmp_path):
        """Verify an unreadable config path raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(str(tmp_path))

    def test_invalid_env_value(self, clean_env, tmp_path):
        """Verify a non-numeric env override is a configuration error."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        clean_env.setenv("TRAFFIC_CENSUS_WORKERS", "many")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_schema_alias_round_trip(self):
        """Verify the 'schema' key survives dump and re-validation."""
        settings = Settings.model_validate({"pipeline": {"schema": "hourly"}})
        dumped = settings.model_dump(by_alias=True)
        assert dumped["pipeline"]["schema"] == "hourly"
        assert Settings.model_validate(dumped).pipeline.schema_mode == "hourly"
