"""forgebench configuration module."""

from .loader import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    generate_example_config_yaml,
    load_config,
    save_config,
    validate_config,
)
from .schema import (
    ForgebenchConfig,
    HeadlineConfig,
    MetricThresholds,
    SeverityPalette,
    SeverityTier,
    StrategyColors,
)

__all__ = [
    # Config classes
    "ForgebenchConfig",
    "HeadlineConfig",
    "MetricThresholds",
    "SeverityPalette",
    "StrategyColors",
    # Enums
    "SeverityTier",
    # Loader functions
    "load_config",
    "save_config",
    "validate_config",
    "generate_example_config_yaml",
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
]
