"""
Traffic Census Configuration
============================

This module handles configuration loading for the aggregation pipeline.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    TRAFFIC_CENSUS_WORKERS        -> pipeline.workers
    TRAFFIC_CENSUS_BACKEND        -> pipeline.backend
    TRAFFIC_CENSUS_WORKER_TIMEOUT -> pipeline.worker_timeout_seconds
    TRAFFIC_CENSUS_SCHEMA         -> pipeline.schema
    TRAFFIC_CENSUS_TOP_N          -> report.top_n
    TRAFFIC_CENSUS_REPORT_FORMAT  -> report.format
    TRAFFIC_CENSUS_LOG_LEVEL      -> logging.level

Example:
    from traffic_census.config import load_config, setup_logging

    settings = load_config("config.yaml")
    setup_logging(settings)
    print(settings.pipeline.resolved_workers)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Invalid worker topology or unusable configuration. Fatal before any work starts."""


# =============================================================================
# Configuration Models
# =============================================================================

class PipelineConfig(BaseModel):
    """Worker fleet and parsing configuration."""

    workers: Optional[int] = Field(
        default=None,
        ge=0,
        description="Number of worker units (None = CPU count of the host)",
    )
    backend: Literal["process", "thread"] = Field(
        default="process",
        description="Worker execution backend: 'process' or 'thread'",
    )
    worker_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Maximum time to wait for all workers before aborting",
    )
    schema_mode: Literal["auto", "hourly", "daily"] = Field(
        default="auto",
        alias="schema",
        description="Record layout: 'hourly', 'daily' or 'auto' detection",
    )
    encoding: str = Field(default="utf-8", description="Text encoding of the input log")

    model_config = {"populate_by_name": True}

    @property
    def resolved_workers(self) -> int:
        """Worker count, falling back to the host's CPU count."""
        if self.workers is None:
            return os.cpu_count() or 1
        return self.workers


class ReportConfig(BaseModel):
    """Ranking and report output configuration."""

    top_n: int = Field(default=3, ge=1, description="Lights reported per time bucket")
    format: Literal["text", "json"] = Field(default="text", description="Report format: text or json")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for traffic-census.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        ConfigurationError: Explicit path missing, unreadable YAML or invalid values
    """
    if config_path is not None and not Path(config_path).exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path:
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {config_path}: {e.strerror or e}") from e
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    else:
        logger.debug("No config file found, using defaults and environment variables")

    try:
        _apply_env_overrides(config_data)
        return Settings.model_validate(config_data)
    except (ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Pipeline settings
    if env_workers := os.environ.get("TRAFFIC_CENSUS_WORKERS"):
        config_data.setdefault("pipeline", {})["workers"] = int(env_workers)
    if env_backend := os.environ.get("TRAFFIC_CENSUS_BACKEND"):
        config_data.setdefault("pipeline", {})["backend"] = env_backend
    if env_timeout := os.environ.get("TRAFFIC_CENSUS_WORKER_TIMEOUT"):
        config_data.setdefault("pipeline", {})["worker_timeout_seconds"] = float(env_timeout)
    if env_schema := os.environ.get("TRAFFIC_CENSUS_SCHEMA"):
        config_data.setdefault("pipeline", {})["schema"] = env_schema

    # Report settings
    if env_top_n := os.environ.get("TRAFFIC_CENSUS_TOP_N"):
        config_data.setdefault("report", {})["top_n"] = int(env_top_n)
    if env_format := os.environ.get("TRAFFIC_CENSUS_REPORT_FORMAT"):
        config_data.setdefault("report", {})["format"] = env_format

    # Logging settings
    if env_log := os.environ.get("TRAFFIC_CENSUS_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
