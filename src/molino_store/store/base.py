"""Base document store module.

Every backend shares the public contract implemented here: argument checks,
identifier generation, lazy initialization and error normalization. Backends
only implement the ``_get``/``_put``/``_find``/``_list``/``_bulk_delete``/
``_view`` hooks against their native client.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Union
import asyncio
import itertools
import time

from loguru import logger

from ..errors import NotFoundError, StoreUnavailableError
from ..interfaces import DocumentStoreInterface
from ..models.core import (
    Document,
    DocumentType,
    StoreBackend,
    InsertResult,
    FindResult,
    ListResult,
    BulkResult,
    ViewOptions,
    ViewResult,
)
from ..models.config import (
    DEFAULT_COLLECTION,
    DEFAULT_INACTIVE_VALUE,
    DEFAULT_STATUS_FIELD,
    FALLBACK_ID_PREFIX,
    UPDATED_AT_FIELD,
)
from ..models.schema import utc_now_iso
from ..utils.config import get_find_limit, get_page_size
from ..utils.error_handling import normalize_store_errors, translate_exception
from .views import ViewQuery, translate_view

# Backend bookkeeping fields never stored in or returned from a body
RESERVED_FIELDS = ("id", "_id", "_rev")

_id_counter = itertools.count(1)


def generate_document_id(doc_type: Optional[str] = None) -> str:
    """Generate an identifier from the type tag and the current time.

    The suffix is ``<epoch ms>_<counter>``. The counter is process wide and
    strictly increasing, so ids generated inside one process never collide.
    Two processes generating ids for the same type in the same millisecond
    can still collide; there is no cross-process coordination.
    """
    prefix = doc_type or FALLBACK_ID_PREFIX
    return f"{prefix}_{int(time.time() * 1000)}_{next(_id_counter)}"


def with_id(doc_id: str, body: Dict[str, Any]) -> Document:
    """Build the public representation of a stored body."""
    doc = {"id": doc_id}
    doc.update((k, v) for k, v in body.items() if k not in RESERVED_FIELDS)
    return doc


class DocumentStore(DocumentStoreInterface, ABC):
    """Base class for all document store implementations.

    Writes replace the whole stored body (merge depth zero). Concurrent
    writes to one id race and the last one observed by the backend wins.
    Nothing is cached: every read reaches the backend.
    """

    backend: StoreBackend

    def __init__(
        self,
        collection: str = DEFAULT_COLLECTION,
        find_limit: Optional[int] = None,
        **kwargs
    ):
        """Initialize the store.

        Args:
            collection: Name of the physical collection/database
            find_limit: Default limit applied by find
            **kwargs: Additional arguments
        """
        self.collection = collection
        self.find_limit = find_limit or get_find_limit()
        self.initialized = False
        self._lock = asyncio.Lock()

    @abstractmethod
    async def initialize(self) -> bool:
        """Initialize the store.

        Returns:
            True if successful
        """
        self.initialized = True
        return True

    async def ensure_initialized(self) -> bool:
        """Ensure the store is initialized.

        Returns:
            True if successful

        Raises:
            StoreUnavailableError: If the backend cannot be reached
        """
        if self.initialized:
            return True

        async with self._lock:
            if self.initialized:
                return True
            try:
                ok = await self.initialize()
            except Exception as e:
                error = translate_exception(e, "initialize store")
                logger.error(f"Failed to initialize {self.backend.value} store: {error}")
                raise error from e
            if not ok:
                raise StoreUnavailableError(
                    f"{self.backend.value} store failed to initialize", operation="initialize"
                )
            return True

    async def close(self) -> None:
        """Release backend resources."""
        self.initialized = False

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    @normalize_store_errors("get document")
    async def get(self, doc_id: str) -> Document:
        if not isinstance(doc_id, str) or not doc_id:
            raise ValueError("doc_id must be a non-empty string")
        await self.ensure_initialized()
        return await self._get(doc_id)

    @normalize_store_errors("insert document")
    async def insert(self, document: Document) -> InsertResult:
        if not isinstance(document, dict):
            raise TypeError(f"document must be a dict, got {type(document).__name__}")

        doc_id = document.get("id") or document.get("_id") or generate_document_id(document.get("type"))
        body = {k: v for k, v in document.items() if k not in RESERVED_FIELDS}

        await self.ensure_initialized()
        await self._put(doc_id, body)
        logger.debug(f"Stored document {doc_id} in {self.collection}")
        return InsertResult(id=doc_id)

    @normalize_store_errors("find documents")
    async def find(
        self,
        selector: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> FindResult:
        limit = self.find_limit if limit is None else limit
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        if skip < 0:
            raise ValueError(f"skip must be non-negative, got {skip}")

        clean = self._clean_selector(selector)
        if limit == 0:
            return FindResult(docs=[])

        await self.ensure_initialized()
        if "id" in clean or "_id" in clean:
            docs = await self._find_by_id(clean)
            return FindResult(docs=docs[skip:skip + limit])
        docs = await self._find(clean, limit, skip)
        return FindResult(docs=docs)

    @normalize_store_errors("list documents")
    async def list(self, include_docs: bool = False) -> ListResult:
        await self.ensure_initialized()
        return await self._list(include_docs)

    @normalize_store_errors("bulk delete documents")
    async def bulk(self, doc_ids: Iterable[str]) -> BulkResult:
        ids = list(dict.fromkeys(doc_ids))
        if not ids:
            return BulkResult(ok=True)

        await self.ensure_initialized()
        result = await self._bulk_delete(ids)
        if result.failed:
            logger.warning(
                f"Bulk delete removed {len(result.deleted)} of {len(ids)} documents; "
                f"failed: {result.failed}"
            )
        return result

    @normalize_store_errors("query view")
    async def view(
        self,
        view_name: str,
        options: Optional[Union[ViewOptions, Dict[str, Any]]] = None,
    ) -> ViewResult:
        query = translate_view(view_name, options)
        if query.limit == 0:
            return ViewResult(rows=[])

        await self.ensure_initialized()
        return await self._view(query)

    async def soft_deactivate(
        self,
        doc_id: str,
        status_field: str = DEFAULT_STATUS_FIELD,
        inactive_value: Any = DEFAULT_INACTIVE_VALUE,
    ) -> Document:
        """Mark a document as logically removed by flipping a status field.

        Args:
            doc_id: ID of the document
            status_field: Field holding the status
            inactive_value: Value meaning "removed"

        Returns:
            The updated document
        """
        doc = await self.get(doc_id)
        doc[status_field] = inactive_value
        doc[UPDATED_AT_FIELD] = utc_now_iso()
        await self.insert(doc)
        logger.info(f"Soft-deactivated {doc_id} ({status_field}={inactive_value})")
        return doc

    async def hard_delete(self, doc_ids: Iterable[str]) -> BulkResult:
        """Physically remove documents. Same contract as ``bulk``."""
        return await self.bulk(doc_ids)

    async def find_all(
        self,
        selector: Optional[Dict[str, Any]] = None,
        page_size: Optional[int] = None,
    ) -> List[Document]:
        """Collect every match of a selector, paging through find.

        Pages are fetched with skip, so concurrent writes may shift results
        between pages.
        """
        page_size = page_size or get_page_size()
        docs: List[Document] = []
        skip = 0
        while True:
            page = await self.find(selector, limit=page_size, skip=skip)
            docs.extend(page.docs)
            if len(page.docs) < page_size:
                return docs
            skip += page_size

    async def count_by_status(
        self,
        doc_type: str = DocumentType.EMPLOYEE.value,
        status_field: str = DEFAULT_STATUS_FIELD,
    ) -> Dict[str, int]:
        """Count documents of a type per value of their status field."""
        counts: Dict[str, int] = {}
        for doc in await self.find_all({"type": doc_type}):
            status = doc.get(status_field)
            if status is not None:
                counts[status] = counts.get(status, 0) + 1
        return counts

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    @staticmethod
    def _clean_selector(selector: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Drop unset entries and reject operator-style values."""
        clean: Dict[str, Any] = {}
        for field_name, value in (selector or {}).items():
            if value is None:
                continue
            if field_name == "_rev":
                raise ValueError("selector cannot filter on _rev")
            if isinstance(value, (dict, list, tuple, set)):
                raise ValueError(
                    f"selector value for '{field_name}' must be a scalar, got {type(value).__name__}"
                )
            clean[field_name] = value
        return clean

    async def _find_by_id(self, selector: Dict[str, Any]) -> List[Document]:
        """Resolve a selector naming the document id with a direct lookup.

        The id is not part of the stored body, so backends cannot filter on it.
        """
        ids = {selector.pop(field_name) for field_name in ("id", "_id") if field_name in selector}
        doc_id = ids.pop() if len(ids) == 1 else None
        if not isinstance(doc_id, str) or not doc_id:
            return []
        try:
            doc = await self._get(doc_id)
        except NotFoundError:
            return []
        if all(doc.get(field_name) == value for field_name, value in selector.items()):
            return [doc]
        return []

    @abstractmethod
    async def _get(self, doc_id: str) -> Document:
        """Fetch one document or raise NotFoundError."""
        pass

    @abstractmethod
    async def _put(self, doc_id: str, body: Dict[str, Any]) -> None:
        """Replace the stored body of ``doc_id``."""
        pass

    @abstractmethod
    async def _find(self, selector: Dict[str, Any], limit: int, skip: int) -> List[Document]:
        """Evaluate an equality selector in identifier order."""
        pass

    @abstractmethod
    async def _list(self, include_docs: bool) -> ListResult:
        """Enumerate the collection."""
        pass

    @abstractmethod
    async def _bulk_delete(self, doc_ids: List[str]) -> BulkResult:
        """Delete every identifier, reporting each failure."""
        pass

    @abstractmethod
    async def _view(self, query: ViewQuery) -> ViewResult:
        """Run a translated view query."""
        pass

    def _not_found(self, doc_id: str) -> NotFoundError:
        return NotFoundError(f"Document not found: {doc_id}", doc_id=doc_id, operation="get")
