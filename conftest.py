"""Pytest configuration for forgebench."""

# Prevent collection from source tree
collect_ignore = ["src"]


def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line("markers", "unit: Unit tests (pure computations, fast)")
    config.addinivalue_line("markers", "cli: CLI surface tests through typer's CliRunner")
