"""Shared constants for forgebench."""

# Concurrency levels every httpforge run was measured at.
CANONICAL_LEVELS = (1, 10, 50, 100, 200, 1000)

# High-load scenario used by the comparison grid and the headline cards.
HIGH_LOAD_LEVEL = 1000

# Dataset shipped inside the package (see forgebench/data/).
BUNDLED_DATASET = "httpforge.yaml"

# Default config file name for auto-discovery
DEFAULT_CONFIG = "forgebench.yaml"

# Key carrying the independent variable in every series record.
LEVEL_KEY = "concurrency_level"

# Key carrying the percentile label in every distribution record.
PERCENTILE_KEY = "percentile"
