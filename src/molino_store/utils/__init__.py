"""Utility functions for the Molino document store."""

from .error_handling import normalize_store_errors, translate_exception

# Configuration utilities
from .config import (
    config_manager,
    ConfigManager,
    get_collection_name,
    get_find_limit,
    get_page_size,
    get_expiring_window_days,
)

__all__ = [
    # From error_handling
    "normalize_store_errors",
    "translate_exception",
    # From config
    "config_manager",
    "ConfigManager",
    "get_collection_name",
    "get_find_limit",
    "get_page_size",
    "get_expiring_window_days",
]
