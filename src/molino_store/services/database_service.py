"""Database service for the Molino document store."""

import asyncio
from typing import Optional
from loguru import logger

from ..store import DocumentStore, StoreFactory


class DatabaseService:
    """Shared document store handle.

    This class keeps one store per process so that every caller shares the
    same backend client. The store is built lazily from configuration and
    initialized on first use.
    """

    _instance: Optional[DocumentStore] = None
    _lock: Optional[asyncio.Lock] = None

    @classmethod
    def get_instance(cls) -> DocumentStore:
        """Get the shared store, building it from configuration if needed.

        The returned store may not be initialized yet; its operations
        initialize it on first call.

        Returns:
            DocumentStore instance
        """
        if cls._instance is None:
            logger.debug("Creating new document store instance")
            cls._instance = StoreFactory.build_document_store()
            logger.info(f"Using {cls._instance.backend.value} backend ({cls._instance.collection})")
        return cls._instance

    @classmethod
    async def ensure_initialized(cls) -> DocumentStore:
        """Get the shared store and make sure its backend is reachable.

        Returns:
            Initialized DocumentStore instance

        Raises:
            StoreUnavailableError: If the backend cannot be reached
        """
        if cls._lock is None:
            cls._lock = asyncio.Lock()

        async with cls._lock:
            store = cls.get_instance()
            await store.ensure_initialized()
            return store

    @classmethod
    def set_instance(cls, store: DocumentStore) -> None:
        """Install a pre-built store, typically from a test fixture."""
        cls._instance = store
        logger.debug(f"Document store instance set to {type(store).__name__}")

    @classmethod
    async def reset_instance(cls) -> None:
        """Close and forget the shared store.

        This method is primarily used for testing.
        """
        if cls._instance is not None:
            await cls._instance.close()
            cls._instance = None
            logger.debug("Document store instance reset")
        cls._lock = None
        await StoreFactory.clear_cache()
