"""Service initializer for the Molino document store.

This module provides centralized service initialization and management.
"""

from typing import List, Optional
from omegaconf import DictConfig
from loguru import logger

from ..utils.config import config_manager
from .base_service import BaseService, ServiceRegistry
from .database_service import DatabaseService
from .logging_service import get_logging_service


class ServiceInitializer:
    """Brings up logging and the shared store, and tears them down."""

    def __init__(self):
        """Initialize the service initializer."""
        self._services: List[BaseService] = []
        self._initialized = False

    async def initialize_all_services(self, cfg: DictConfig) -> bool:
        """Initialize all services in dependency order.

        Args:
            cfg: Configuration from Hydra

        Returns:
            True if all services were initialized successfully, False otherwise
        """
        try:
            logger.info("Starting service initialization")
            config_manager.set_config(cfg)

            logging_service = get_logging_service()
            if not await logging_service.initialize(cfg):
                logger.error("Failed to initialize logging service")
                return False
            self._services.append(logging_service)
            ServiceRegistry.register(logging_service)

            store = await DatabaseService.ensure_initialized()
            logger.info(f"Document store ready ({store.backend.value})")

            self._initialized = True
            logger.info("All services initialized successfully")
            return True

        except Exception as e:
            logger.error(f"Error during service initialization: {e}")
            await self.shutdown_all_services()
            return False

    async def shutdown_all_services(self) -> bool:
        """Shutdown all services gracefully.

        Returns:
            True if all services were shutdown successfully, False otherwise
        """
        logger.info("Shutting down all services")
        ok = True

        try:
            await DatabaseService.reset_instance()
        except Exception as e:
            logger.error(f"Error closing document store: {e}")
            ok = False

        # Shutdown services in reverse order
        for service in reversed(self._services):
            try:
                await service.shutdown()
            except Exception as e:
                logger.error(f"Error shutting down service {service.name}: {e}")
                ok = False

        ServiceRegistry.clear()
        self._services.clear()
        self._initialized = False
        return ok

    def is_initialized(self) -> bool:
        return self._initialized


# Global service initializer instance
_service_initializer: Optional[ServiceInitializer] = None


def get_service_initializer() -> ServiceInitializer:
    """Get the global service initializer instance.

    Returns:
        ServiceInitializer instance
    """
    global _service_initializer
    if _service_initializer is None:
        _service_initializer = ServiceInitializer()
    return _service_initializer
