"""Configuration loader for forgebench."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import ForgebenchConfig

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileNotFoundError(ConfigError):
    """Raised when configuration file is not found."""

    pass


class ConfigParseError(ConfigError):
    """Raised when configuration file cannot be parsed."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dictionary.

    Args:
        path: Path to YAML file

    Returns:
        Dictionary containing parsed YAML

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Failed to parse YAML: {e}") from e
    except (UnicodeDecodeError, OSError) as e:
        raise ConfigParseError(f"Failed to read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigParseError(f"Configuration must be a mapping at the top level: {path}")
    return content


def validate_config(data: dict[str, Any]) -> ForgebenchConfig:
    """Validate a configuration dictionary.

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        return ForgebenchConfig.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        error_messages = []
        for err in errors:
            loc = ".".join(str(x) for x in err["loc"])
            error_messages.append(f"  - {loc}: {err['msg']}")

        raise ConfigValidationError(
            "Configuration validation failed:\n" + "\n".join(error_messages),
            errors=[dict(err) for err in errors],  # type: ignore[call-overload]
        ) from e


def load_config(path: str | Path | None = None) -> ForgebenchConfig:
    """Load and validate forgebench configuration.

    Args:
        path: Path to configuration YAML file.  ``None`` returns the built-in
              defaults.

    Returns:
        Validated ForgebenchConfig object

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails
        ConfigValidationError: If validation fails
    """
    if path is None:
        logger.debug("No configuration file given, using defaults")
        return ForgebenchConfig()

    path = Path(path)
    config = validate_config(load_yaml(path))
    logger.info("Loaded configuration %s from %s", config.name, path)
    return config


def save_config(config: ForgebenchConfig, path: str | Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: ForgebenchConfig object
        path: Path to save YAML file
    """
    path = Path(path)
    data = config.model_dump(mode="json", exclude_defaults=False)

    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2)


def generate_example_config_yaml() -> str:
    """Generate example configuration YAML with comments.

    Every option is shown commented-out with its default, so the file is
    valid as-is and users can enable what they want to change.
    """
    return """# forgebench configuration
# ========================
# Thresholds and color tokens used to classify and render httpforge results.
# Commented fields show their DEFAULT value; the default stays active while
# the field is commented out.

name: httpforge
# description: "performance analysis of blocking i/o http server concurrency strategies"

# Concurrency level of the comparison grid (high-load scenario)
# comparison_level: 1000

# ============================================================================
# THRESHOLDS
# ============================================================================
# good/warning cutoffs per metric. Boundaries are inclusive toward the better
# tier. lower_is_better flips the comparison (latency, memory, threads).
# Metrics left out keep their defaults.
# thresholds:
#   throughput:   {good: 2000, warning: 500}
#   p50_latency:  {good: 50, warning: 500, lower_is_better: true}
#   p99_latency:  {good: 100, warning: 2500, lower_is_better: true}
#   success_rate: {good: 99, warning: 90}
#   memory_usage: {good: 256, warning: 512, lower_is_better: true}
#   thread_count: {good: 200, warning: 500, lower_is_better: true}

# ============================================================================
# COLORS
# ============================================================================
# strategy_colors:
#   single: "#3b9ab2"
#   thread_per_request: "#e1af00"
#   thread_pool: "#f21a00"
# severity_colors:
#   good: "#10b981"
#   warning: "#f59e0b"
#   bad: "#ef4444"
#   neutral: "#6b7280"

# ============================================================================
# HEADLINE CARDS
# ============================================================================
# headline:
#   featured: thread_pool
#   gain_baseline: thread_per_request
#   reliability_baseline: single
#   degradation_strategy: thread_per_request
#   level: 1000
"""
