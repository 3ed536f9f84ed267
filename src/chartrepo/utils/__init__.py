"""Utility helpers shared across the chartrepo codebase."""

from .clock import Clock, utc_now
from .config import IndexConfig, load_config
from .hashing import file_sha256
from .logging import configure_logging, get_logger
from .paths import chart_url, normalise_path, url_join

__all__ = [
    "Clock",
    "utc_now",
    "IndexConfig",
    "load_config",
    "file_sha256",
    "configure_logging",
    "get_logger",
    "chart_url",
    "normalise_path",
    "url_join",
]
