"""In-memory document store implementation."""

import copy
from typing import Any, Dict, List

from ..models.core import (
    Document,
    StoreBackend,
    ListRow,
    ListResult,
    BulkResult,
    ViewRow,
    ViewResult,
)
from .base import DocumentStore, with_id
from .views import ViewQuery, collation_key


class InMemoryDocumentStore(DocumentStore):
    """In-memory document store implementation.

    This implementation keeps documents in a dictionary for the lifetime of
    the process. It backs the test suite and local development, and follows
    the same ordering rules as the networked backends.
    """

    backend = StoreBackend.MEMORY

    def __init__(self, collection: str = "documents", **kwargs):
        super().__init__(collection=collection, **kwargs)
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def initialize(self) -> bool:
        self.initialized = True
        return True

    async def _get(self, doc_id: str) -> Document:
        body = self._documents.get(doc_id)
        if body is None:
            raise self._not_found(doc_id)
        return with_id(doc_id, copy.deepcopy(body))

    async def _put(self, doc_id: str, body: Dict[str, Any]) -> None:
        self._documents[doc_id] = copy.deepcopy(body)

    async def _find(self, selector: Dict[str, Any], limit: int, skip: int) -> List[Document]:
        matches = (
            doc_id for doc_id in sorted(self._documents)
            if all(self._documents[doc_id].get(k) == v for k, v in selector.items())
        )
        docs = []
        for index, doc_id in enumerate(matches):
            if index < skip:
                continue
            docs.append(with_id(doc_id, copy.deepcopy(self._documents[doc_id])))
            if len(docs) >= limit:
                break
        return docs

    async def _list(self, include_docs: bool) -> ListResult:
        return ListResult(rows=[
            ListRow(
                id=doc_id,
                doc=with_id(doc_id, copy.deepcopy(self._documents[doc_id])) if include_docs else None,
            )
            for doc_id in sorted(self._documents)
        ])

    async def _bulk_delete(self, doc_ids: List[str]) -> BulkResult:
        deleted, failed = [], {}
        for doc_id in doc_ids:
            if self._documents.pop(doc_id, None) is None:
                failed[doc_id] = "not_found"
            else:
                deleted.append(doc_id)
        return BulkResult(ok=not failed, deleted=deleted, failed=failed)

    async def _view(self, query: ViewQuery) -> ViewResult:
        rows = [
            ViewRow(id=doc_id, key=query.definition.key_of(body), doc=with_id(doc_id, copy.deepcopy(body)))
            for doc_id, body in self._documents.items()
            if query.matches(body)
        ]
        rows.sort(key=lambda row: (collation_key(row.key), row.id))
        if query.limit is not None:
            rows = rows[:query.limit]
        return ViewResult(rows=rows)
