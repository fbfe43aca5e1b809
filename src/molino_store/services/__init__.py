"""Services for the Molino document store."""

from .base_service import BaseService, ServiceRegistry
from .logging_service import LoggingService, get_logging_service
from .database_service import DatabaseService
from .statistics_service import StatisticsService, age_distribution
from .maintenance_service import MaintenanceService
from .service_initializer import ServiceInitializer, get_service_initializer

__all__ = [
    # Base classes
    "BaseService",
    "ServiceRegistry",

    # Core services
    "LoggingService",
    "get_logging_service",
    "DatabaseService",
    "ServiceInitializer",
    "get_service_initializer",

    # Business services
    "StatisticsService",
    "age_distribution",
    "MaintenanceService",
]
