"""Store factory for the Molino document store."""

from typing import Dict, Optional, Any
from loguru import logger

from ..models import StoreBackend
from ..utils.config import config_manager
from .base import DocumentStore


class StoreFactory:
    """Factory for creating document store instances."""

    # Class variable holding one instance per distinct configuration
    _document_store_instances: Dict[str, DocumentStore] = {}

    @classmethod
    def _generate_stable_key(cls, **kwargs) -> str:
        """Generate a stable cache key from the parameters that shape a store.

        Args:
            **kwargs: Parameters to include in the key

        Returns:
            A stable string key for caching
        """
        key_parts = []
        for param_name in sorted(kwargs.keys()):
            value = kwargs.get(param_name)
            if value is not None:
                key_parts.append(f"{param_name}={value}")

        # Join all parts with a separator that's unlikely to appear in the values
        return "|||".join(key_parts)

    @classmethod
    def build_document_store(
        cls,
        backend: Optional[StoreBackend] = None,
        **overrides: Any
    ) -> DocumentStore:
        """Build an uninitialized store from configuration, without caching.

        Args:
            backend: Storage backend to use (defaults to ``database.backend``)
            **overrides: Keyword arguments overriding the backend section

        Returns:
            A document store instance
        """
        db_config = config_manager.get_database_config()
        backend = StoreBackend(backend) if backend else config_manager.get_store_backend()
        collection = db_config.get("collection")
        find_limit = db_config.get("find_limit")

        if backend == StoreBackend.COUCHDB:
            from .couchdb_store import CouchDBDocumentStore
            section = dict(db_config.get("couchdb", {}) or {})
            section.update(overrides)
            return CouchDBDocumentStore(find_limit=find_limit, **section)

        if backend == StoreBackend.FIRESTORE:
            from .firestore_store import FirestoreDocumentStore
            section = dict(db_config.get("firestore", {}) or {})
            section.setdefault("collection", collection)
            section.update(overrides)
            if section.get("collection") is None:
                section.pop("collection")
            return FirestoreDocumentStore(find_limit=find_limit, **section)

        if backend == StoreBackend.MEMORY:
            from .memory_store import InMemoryDocumentStore
            section = {"collection": collection} if collection else {}
            section.update(overrides)
            return InMemoryDocumentStore(find_limit=find_limit, **section)

        raise ValueError(f"Unknown store backend: {backend}")

    @classmethod
    async def create_document_store(
        cls,
        backend: Optional[StoreBackend] = None,
        **overrides: Any
    ) -> DocumentStore:
        """Create (or reuse) and initialize a document store.

        Args:
            backend: Storage backend to use
            **overrides: Keyword arguments overriding the backend section

        Returns:
            An initialized document store instance
        """
        backend = StoreBackend(backend) if backend else config_manager.get_store_backend()
        db_config = config_manager.get_database_config()

        stable_key = cls._generate_stable_key(
            backend=backend.value,
            collection=db_config.get("collection"),
            section=sorted((db_config.get(backend.value, {}) or {}).items()),
            overrides=sorted(overrides.items()) if overrides else None,
        )

        if stable_key in cls._document_store_instances:
            logger.debug(f"Reusing existing {backend.value} document store instance")
            return cls._document_store_instances[stable_key]

        store = cls.build_document_store(backend, **overrides)
        await store.ensure_initialized()

        cls._document_store_instances[stable_key] = store
        logger.info(f"Created {backend.value} document store")
        return store

    @classmethod
    async def clear_cache(cls) -> None:
        """Close and forget every cached store. Used by tests."""
        for store in cls._document_store_instances.values():
            await store.close()
        cls._document_store_instances.clear()
