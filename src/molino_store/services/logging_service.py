"""Logging service for the document store.

This module provides centralized logging configuration with loguru.
"""

import sys
from typing import Any, Dict, Optional
from omegaconf import DictConfig, OmegaConf
from loguru import logger

from .base_service import BaseService


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level: <8} | "
    "{name}:{function}:{line} - "
    "{message}"
)


class LoggingService(BaseService):
    """Service for managing logging configuration."""

    def __init__(self):
        super().__init__("logging")
        self._configured = False
        self._handler_ids: list[int] = []

    async def initialize(self, cfg: Optional[DictConfig] = None) -> bool:
        """Initialize the logging service.

        Args:
            cfg: Configuration for the service

        Returns:
            True if initialization was successful, False otherwise
        """
        try:
            if cfg is not None:
                self.set_config(cfg)

            self._configure_logging(self._logging_section(cfg))

            self._mark_initialized()
            return True
        except Exception as e:
            logger.error(f"Failed to initialize logging service: {e}")
            return False

    async def shutdown(self) -> bool:
        """Remove the sinks added by this service.

        Returns:
            True if shutdown was successful, False otherwise
        """
        try:
            for handler_id in self._handler_ids:
                logger.remove(handler_id)
            self._handler_ids.clear()
            self._configured = False
            self._mark_shutdown()
            return True
        except Exception as e:
            logger.error(f"Failed to shutdown logging service: {e}")
            return False

    @staticmethod
    def _logging_section(cfg: Optional[Any]) -> Dict[str, Any]:
        if cfg is None:
            return {}
        if OmegaConf.is_config(cfg):
            cfg = OmegaConf.to_container(cfg, resolve=True)
        return cfg.get("logging", {}) or {}

    def _configure_logging(self, settings: Dict[str, Any]) -> None:
        """Configure console and rotating file sinks.

        Args:
            settings: The ``logging`` configuration section
        """
        log_level = str(settings.get("level", "INFO")).upper()

        # Drop loguru's default stderr sink the first time through
        if not self._configured:
            logger.remove()

        self._handler_ids.append(logger.add(
            sys.stderr,
            level=log_level,
            format=CONSOLE_FORMAT,
            colorize=True,
        ))

        log_file = settings.get("file")
        if log_file:
            self._handler_ids.append(logger.add(
                log_file,
                rotation=settings.get("rotation", "10 MB"),
                retention=settings.get("retention", "1 week"),
                level=log_level,
                format=FILE_FORMAT,
                backtrace=True,
                diagnose=False,
            ))

        self._configured = True
        logger.info(f"Logging configured at level {log_level}")


# Global logging service instance
_logging_service: Optional[LoggingService] = None


def get_logging_service() -> LoggingService:
    """Get the global logging service instance.

    Returns:
        LoggingService instance
    """
    global _logging_service
    if _logging_service is None:
        _logging_service = LoggingService()
    return _logging_service
