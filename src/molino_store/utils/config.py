"""Configuration management for the Molino document store.

This module provides a simple configuration system. It uses Hydra's
DictConfig directly without dataclass definitions, allowing for more
flexible configuration.

It also includes utilities for accessing configuration values.
"""

from loguru import logger
from typing import Dict, Any
from omegaconf import OmegaConf
import dotenv

from ..models.core import StoreBackend
from ..models.config import (
    DEFAULT_COLLECTION,
    DEFAULT_FIND_LIMIT,
    DEFAULT_PAGE_SIZE,
)

dotenv.load_dotenv()


def _get_config() -> Dict[str, Any]:
    """Get the configuration from the cache or load it.

    Returns:
        Configuration dictionary
    """
    return config_manager.get_config()


class ConfigManager:
    """Configuration manager for the document store.

    This class provides a singleton instance for accessing the configuration.
    It expects the configuration to be set from outside, typically from the
    Hydra-decorated main function or from a test fixture.
    """

    _instance = None
    _cfg = None

    def __new__(cls):
        """Create a singleton instance."""
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the configuration manager."""
        # Only initialize once
        if ConfigManager._cfg is None:
            ConfigManager._cfg = {}

    def set_config(self, cfg: Any):
        """Set the configuration.

        Args:
            cfg: Configuration object (DictConfig or dict)
        """
        if OmegaConf.is_config(cfg):
            # Resolves ${oc.env:...} interpolations as well
            ConfigManager._cfg = OmegaConf.to_container(cfg, resolve=True)
        else:
            ConfigManager._cfg = dict(cfg or {})

        logger.info("Configuration set successfully")

    def get_config(self) -> Dict[str, Any]:
        """Get the configuration.

        Returns:
            Configuration dictionary
        """
        return ConfigManager._cfg or {}

    def reset(self) -> None:
        """Forget the current configuration. Used by tests."""
        ConfigManager._cfg = {}

    def get_database_config(self) -> Dict[str, Any]:
        """Get the ``database`` section of the configuration."""
        return self.get_config().get("database", {}) or {}

    def get_store_backend(self) -> StoreBackend:
        """Get the store backend from configuration.

        Returns:
            Store backend
        """
        backend_str = self.get_database_config().get("backend", StoreBackend.COUCHDB.value)
        try:
            return StoreBackend(backend_str)
        except ValueError:
            logger.warning(f"Unknown store backend: {backend_str}")
            logger.warning(
                f"Using default store backend: {StoreBackend.COUCHDB.value}")
            return StoreBackend.COUCHDB

    def to_dict(self):
        """Convert configuration to dictionary.

        Returns:
            Configuration dictionary
        """
        return self.get_config()


# Helper functions for accessing configuration values

def get_collection_name() -> str:
    """Get the physical collection name shared by every document type."""
    config = _get_config()
    return config.get("database", {}).get("collection", DEFAULT_COLLECTION)


def get_find_limit() -> int:
    """Get the default ``limit`` applied by find.

    Returns:
        The default find limit
    """
    config = _get_config()
    return int(config.get("database", {}).get("find_limit", DEFAULT_FIND_LIMIT))


def get_page_size() -> int:
    """Get the page size used when scanning every document of a type.

    Returns:
        The page size
    """
    config = _get_config()
    return int(config.get("statistics", {}).get("page_size", DEFAULT_PAGE_SIZE))


def get_expiring_window_days() -> int:
    """Get how many days ahead a contract counts as about to expire."""
    config = _get_config()
    return int(config.get("statistics", {}).get("expiring_within_days", 30))


# Create a singleton instance of the configuration manager
config_manager = ConfigManager()
