"""Administrative commands for the Molino document store."""

import asyncio
import dataclasses
import json
from typing import Any

from loguru import logger
from omegaconf import DictConfig

from .services import (
    DatabaseService,
    MaintenanceService,
    StatisticsService,
    get_service_initializer,
)

COMMANDS = ("init", "stats", "clear", "seed", "reset")


async def execute(command: str) -> Any:
    """Run one command against the shared store.

    Args:
        command: One of ``init``, ``stats``, ``clear``, ``seed`` or ``reset``

    Returns:
        The command result
    """
    if command not in COMMANDS:
        raise ValueError(f"Unknown command '{command}', expected one of {', '.join(COMMANDS)}")

    store = await DatabaseService.ensure_initialized()

    if command == "init":
        listing = await store.list()
        return {"backend": store.backend.value, "collection": store.collection, "documents": len(listing.rows)}
    if command == "stats":
        return await StatisticsService(store).summary()
    if command == "clear":
        return await MaintenanceService(store).clear_database()
    if command == "seed":
        return await MaintenanceService(store).seed_database()
    return await MaintenanceService(store).reset_database()


def _render(result: Any) -> str:
    if dataclasses.is_dataclass(result):
        result = dataclasses.asdict(result)
    return json.dumps(result, indent=2, ensure_ascii=False, default=str)


async def _run(cfg: DictConfig, command: str) -> bool:
    service_initializer = get_service_initializer()
    if not await service_initializer.initialize_all_services(cfg):
        logger.error("Failed to initialize services, aborting")
        return False

    try:
        result = await execute(command)
        print(_render(result))
        return True
    finally:
        await service_initializer.shutdown_all_services()


def run_command(cfg: DictConfig) -> bool:
    """Run the command selected by the ``command`` configuration key.

    Args:
        cfg: Configuration from Hydra (DictConfig)

    Returns:
        True if the command completed
    """
    command = cfg.get("command", "init")
    logger.info(f"Running command '{command}'")
    return asyncio.run(_run(cfg, command))
