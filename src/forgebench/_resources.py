"""Resource path resolution for forgebench.

Handles correct path resolution whether running from:
- Source tree (development)
- pip install (site-packages)
- PyInstaller bundle (frozen binary)
"""

from __future__ import annotations

import sys
from pathlib import Path

from forgebench._constants import BUNDLED_DATASET


def _package_dir() -> Path:
    """Return the forgebench package directory.

    Works in all execution contexts:
    - Development: src/forgebench/
    - Installed: site-packages/forgebench/
    - PyInstaller: sys._MEIPASS/forgebench/
    """
    if getattr(sys, "frozen", False):
        # PyInstaller bundle -- data files extracted under _MEIPASS
        return Path(sys._MEIPASS) / "forgebench"  # type: ignore[attr-defined]
    return Path(__file__).parent


def get_data_dir() -> Path:
    """Return path to the bundled dataset directory."""
    return _package_dir() / "data"


def get_bundled_dataset() -> Path:
    """Return path to the httpforge measurements shipped with the package."""
    return get_data_dir() / BUNDLED_DATASET
