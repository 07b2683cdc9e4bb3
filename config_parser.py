"""
Configuration parser for junit-dashboard.

This module provides functionality to load the dashboard configuration:
- Parse an optional junit-dashboard.yaml file
- Validate it against the configuration JSON schema
- Apply environment variable overrides
"""

import json
import logging
import os
import yaml
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional
from jsonschema import validate

from command_runner import DEFAULT_COMMAND

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "junit-dashboard.yaml"
COMMAND_ENV = "JUNIT_DASHBOARD_COMMAND"
TICK_RATE_ENV = "JUNIT_DASHBOARD_TICK_RATE_MS"

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "junit-dashboard configuration",
    "type": "object",
    "properties": {
        "command": {"type": "string", "minLength": 1},
        "tick_rate_ms": {"type": "integer", "minimum": 10},
        "run_on_start": {"type": "boolean"},
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class DashboardConfig:
    """Complete dashboard configuration."""
    command: Optional[str] = None
    tick_rate_ms: int = 250
    run_on_start: bool = False

    def resolved_command(self) -> str:
        """The configured command, or the passthrough default."""
        return self.command or DEFAULT_COMMAND


class ConfigParser:
    """Parser for junit-dashboard configuration files."""

    def __init__(self, schema_path: Optional[str] = None):
        """
        Initialize the configuration parser.

        Args:
            schema_path: Optional path to a JSON schema file replacing the built-in schema
        """
        self.schema_path = schema_path
        self.schema = self._load_schema()

    def _load_schema(self) -> dict:
        """Load the JSON schema from file, or use the built-in one."""
        if self.schema_path is None:
            return CONFIG_SCHEMA

        schema_file = Path(self.schema_path)
        if not schema_file.exists():
            raise FileNotFoundError(f"Schema file not found: {self.schema_path}")

        with open(schema_file, 'r') as f:
            return json.load(f)

    def parse(self, config_path: str) -> DashboardConfig:
        """
        Parse and validate a configuration file.

        Args:
            config_path: Path to the junit-dashboard.yaml file

        Returns:
            Parsed and validated DashboardConfig object

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config doesn't match schema
            yaml.YAMLError: If YAML is malformed
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            config_data = yaml.safe_load(f)

        # An empty document is an empty mapping
        if config_data is None:
            config_data = {}

        validate(instance=config_data, schema=self.schema)

        return self._parse_config(config_data)

    def _parse_config(self, config_data: dict) -> DashboardConfig:
        """Convert raw config data into a DashboardConfig object."""
        defaults = DashboardConfig()
        return DashboardConfig(
            command=config_data.get('command', defaults.command),
            tick_rate_ms=config_data.get('tick_rate_ms', defaults.tick_rate_ms),
            run_on_start=config_data.get('run_on_start', defaults.run_on_start),
        )


def apply_overrides(
    config: DashboardConfig,
    command: Optional[str] = None,
    tick_rate_ms: Optional[int] = None
) -> DashboardConfig:
    """
    Apply override values, validating them against the configuration schema.

    Args:
        config: Configuration to override
        command: Replacement command, ignored when None or empty
        tick_rate_ms: Replacement tick rate, ignored when None

    Returns:
        Configuration with overrides applied

    Raises:
        ValidationError: If an override doesn't match the schema
    """
    overrides = {}
    if command:
        overrides['command'] = command
    if tick_rate_ms is not None:
        overrides['tick_rate_ms'] = tick_rate_ms

    validate(instance=overrides, schema=CONFIG_SCHEMA)

    return replace(config, **overrides)


def apply_environment(config: DashboardConfig, env: Mapping[str, str]) -> DashboardConfig:
    """
    Apply environment variable overrides.

    Args:
        config: Configuration loaded from defaults or file
        env: Environment mapping, usually os.environ

    Returns:
        Configuration with overrides applied

    Raises:
        ValueError: If the tick rate override is not an integer
        ValidationError: If an override doesn't match the schema
    """
    tick_rate = env.get(TICK_RATE_ENV)
    tick_rate_ms = None
    if tick_rate:
        try:
            tick_rate_ms = int(tick_rate)
        except ValueError:
            raise ValueError(f"Invalid {TICK_RATE_ENV} value: {tick_rate!r}")

    return apply_overrides(config, command=env.get(COMMAND_ENV), tick_rate_ms=tick_rate_ms)


def load_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None
) -> DashboardConfig:
    """
    Load the configuration from defaults, file and environment.

    Args:
        config_path: Explicit configuration file; when None the default
            file is used if it exists
        env: Environment mapping; defaults to os.environ

    Returns:
        Resolved DashboardConfig
    """
    if env is None:
        env = os.environ

    config = DashboardConfig()
    if config_path is not None:
        config = ConfigParser().parse(config_path)
        logger.debug("Loaded configuration from %s", config_path)
    elif Path(DEFAULT_CONFIG_FILE).exists():
        config = ConfigParser().parse(DEFAULT_CONFIG_FILE)
        logger.debug("Loaded configuration from %s", DEFAULT_CONFIG_FILE)

    return apply_environment(config, env)
