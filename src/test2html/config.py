"""Configuration system for test2html.

Provides hierarchical configuration with precedence:
1. CLI flags (highest)
2. Environment variables
3. Project config (./.test2html.json or --config)
4. Global config (~/.test2html_config.json)
5. Hardcoded defaults (lowest)
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from test2html.aggregation.aggregator import DEFAULT_TITLE
from test2html.errors import ConfigLoadError, ConfigValidationError
from test2html.renderers.base import OutputFormat

logger = logging.getLogger(__name__)

# Valid values for enums
VALID_FORMATS = OutputFormat.values()

# Hardcoded defaults
DEFAULT_OUTPUT = "test-report.html"
DEFAULT_FORMAT = "html"

# Environment variable names
ENV_TITLE = "TEST2HTML_TITLE"
ENV_OUTPUT = "TEST2HTML_OUTPUT"
ENV_FORMAT = "TEST2HTML_FORMAT"
ENV_QUIET = "TEST2HTML_QUIET"

PROJECT_CONFIG_NAME = ".test2html.json"
GLOBAL_CONFIG_NAME = ".test2html_config.json"


@dataclass
class ReportDefaults:
    """Default values for report generation."""

    title: str = DEFAULT_TITLE
    output: str = DEFAULT_OUTPUT
    format: str = DEFAULT_FORMAT
    quiet: bool = False

    def validate(self) -> None:
        """Validate configuration values."""
        if self.format not in VALID_FORMATS:
            raise ConfigValidationError(
                f"Invalid format '{self.format}'. "
                f"Valid values: {', '.join(VALID_FORMATS)}"
            )
        if not self.output:
            raise ConfigValidationError("output must not be empty")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "output": self.output,
            "format": self.format,
            "quiet": self.quiet,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "ReportDefaults":
        """Create from dictionary."""
        if strict:
            known_fields = {f.name for f in fields(cls)}
            unknown = set(data.keys()) - known_fields
            if unknown:
                raise ConfigValidationError(
                    f"Unknown fields in defaults config: {', '.join(sorted(unknown))}"
                )

        return cls(
            title=data.get("title", DEFAULT_TITLE),
            output=data.get("output", DEFAULT_OUTPUT),
            format=data.get("format", DEFAULT_FORMAT),
            quiet=data.get("quiet", False),
        )


@dataclass
class Test2HtmlConfig:
    """Main configuration container."""

    __test__ = False

    version: str = "1"
    defaults: ReportDefaults = field(default_factory=ReportDefaults)

    def validate(self) -> None:
        """Validate entire configuration."""
        self.defaults.validate()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "version": self.version,
            "defaults": self.defaults.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "Test2HtmlConfig":
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Config must be a JSON object")

        if strict:
            unknown = set(data.keys()) - {"version", "defaults"}
            if unknown:
                raise ConfigValidationError(
                    f"Unknown fields in config: {', '.join(sorted(unknown))}"
                )

        defaults = data.get("defaults", {})
        if not isinstance(defaults, dict):
            raise ConfigValidationError("'defaults' must be a JSON object")

        return cls(
            version=str(data.get("version", "1")),
            defaults=ReportDefaults.from_dict(defaults, strict),
        )


def get_global_config_path() -> Path:
    """Get path to global config file."""
    return Path.home() / GLOBAL_CONFIG_NAME


def get_project_config_path(directory: Path | None = None) -> Path:
    """Get path to project config file."""
    return (directory or Path.cwd()) / PROJECT_CONFIG_NAME


def load_config_file(path: Path, strict: bool = False) -> Test2HtmlConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the config file
        strict: If True, fail on unknown fields

    Returns:
        Test2HtmlConfig instance (defaults if the file does not exist)

    Raises:
        ConfigLoadError: If file cannot be read or parsed
        ConfigValidationError: If strict=True and unknown fields found
    """
    if not path.exists():
        return Test2HtmlConfig()

    try:
        content = path.read_text()
    except PermissionError as e:
        raise ConfigLoadError(f"Permission denied reading {path}: {e}")
    except OSError as e:
        raise ConfigLoadError(f"Error reading {path}: {e}")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON in {path}: {e}")

    logger.debug("Loaded config from %s", path)
    return Test2HtmlConfig.from_dict(data, strict=strict)


def merge_configs(*configs: Test2HtmlConfig) -> Test2HtmlConfig:
    """Merge multiple configs with later configs taking precedence.

    Values equal to the hardcoded defaults in later configs do NOT override
    earlier values, so partial configs layer properly.

    Args:
        *configs: Configs to merge (first is base, last has highest priority)

    Returns:
        Merged Test2HtmlConfig
    """
    if not configs:
        return Test2HtmlConfig()

    result = copy.deepcopy(configs[0])

    for config in configs[1:]:
        if config.defaults.title != DEFAULT_TITLE:
            result.defaults.title = config.defaults.title
        if config.defaults.output != DEFAULT_OUTPUT:
            result.defaults.output = config.defaults.output
        if config.defaults.format != DEFAULT_FORMAT:
            result.defaults.format = config.defaults.format
        if config.defaults.quiet:
            result.defaults.quiet = config.defaults.quiet

    return result


def apply_env_overrides(config: Test2HtmlConfig) -> Test2HtmlConfig:
    """Apply environment variable overrides to config.

    Args:
        config: Base configuration

    Returns:
        New config with env var overrides applied
    """
    result = copy.deepcopy(config)

    if title := os.environ.get(ENV_TITLE):
        result.defaults.title = title

    if output := os.environ.get(ENV_OUTPUT):
        result.defaults.output = output

    if output_format := os.environ.get(ENV_FORMAT):
        result.defaults.format = output_format.lower()

    if quiet := os.environ.get(ENV_QUIET):
        result.defaults.quiet = quiet.lower() in ("true", "1", "yes")

    return result


def get_config(config_path: Path | None = None) -> Test2HtmlConfig:
    """Load and merge configuration from all sources.

    Loads in order (later sources override earlier):
    1. Hardcoded defaults
    2. Global config (~/.test2html_config.json)
    3. Project config (./.test2html.json, or config_path when given)
    4. Environment variables

    Args:
        config_path: Explicit project config file; must exist if given

    Returns:
        Validated configuration with all overrides applied

    Raises:
        ConfigLoadError: If a config file cannot be read or parsed
        ConfigValidationError: If the merged configuration is invalid
    """
    base_config = Test2HtmlConfig()
    global_config = load_config_file(get_global_config_path())

    if config_path is not None:
        if not config_path.exists():
            raise ConfigLoadError(f"Config file not found: {config_path}")
        project_config = load_config_file(config_path)
    else:
        project_config = load_config_file(get_project_config_path())

    merged = apply_env_overrides(merge_configs(base_config, global_config, project_config))
    merged.validate()
    return merged


def generate_config_template() -> dict[str, Any]:
    """Generate a config template dictionary.

    Returns:
        Dictionary suitable for JSON serialization
    """
    return {
        "version": "1",
        "defaults": {
            "title": DEFAULT_TITLE,
            "output": DEFAULT_OUTPUT,
            "format": DEFAULT_FORMAT,
            "quiet": False,
        },
    }


def generate_config_template_string() -> str:
    """Generate a config template as a formatted JSON string."""
    return json.dumps(generate_config_template(), indent=2)
