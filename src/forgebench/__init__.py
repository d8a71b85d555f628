"""forgebench -- comparative analytics for httpforge concurrency strategies."""

__version__ = "0.3.0"
