"""Store interface for document stores."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Union

from ..models.core import (
    Document,
    InsertResult,
    FindResult,
    ListResult,
    BulkResult,
    ViewOptions,
    ViewResult,
)


class DocumentStoreInterface(ABC):
    """Base interface for every document store backend."""

    @abstractmethod
    async def initialize(self) -> bool:
        """Initialize the store.

        Returns:
            True if initialization was successful
        """
        pass

    @abstractmethod
    async def get(self, doc_id: str) -> Document:
        """Get a document by ID.

        Args:
            doc_id: ID of the document

        Returns:
            The full current document

        Raises:
            NotFoundError: If no document has that ID
        """
        pass

    @abstractmethod
    async def insert(self, document: Document) -> InsertResult:
        """Create or fully overwrite a document.

        Args:
            document: Document body, with or without an ``id``

        Returns:
            The assigned or supplied ID
        """
        pass

    @abstractmethod
    async def find(
        self,
        selector: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> FindResult:
        """Find documents matching every equality in the selector.

        Args:
            selector: Field to expected value mapping
            limit: Maximum number of documents to return
            skip: Number of matches to skip, in identifier order

        Returns:
            The matching documents
        """
        pass

    @abstractmethod
    async def list(self, include_docs: bool = False) -> ListResult:
        """Enumerate every document identifier in the store.

        Args:
            include_docs: Whether to pair identifiers with their bodies

        Returns:
            One row per document
        """
        pass

    @abstractmethod
    async def bulk(self, doc_ids: Iterable[str]) -> BulkResult:
        """Delete every document named by the given identifiers.

        Args:
            doc_ids: Identifiers to delete

        Returns:
            Per-identifier outcome of the batch
        """
        pass

    @abstractmethod
    async def view(
        self,
        view_name: str,
        options: Optional[Union[ViewOptions, Dict[str, Any]]] = None,
    ) -> ViewResult:
        """Scan a named view.

        Args:
            view_name: Canonical or legacy view name
            options: Key constraint

        Returns:
            Rows ordered by key then ID
        """
        pass
