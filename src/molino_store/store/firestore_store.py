"""Firestore document store implementation."""

import inspect
import json
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath
from loguru import logger

from ..errors import StoreUnavailableError
from ..models.core import (
    Document,
    StoreBackend,
    ListRow,
    ListResult,
    BulkResult,
    ViewRow,
    ViewResult,
)
from ..models.config import DEFAULT_COLLECTION
from .base import DocumentStore, with_id
from .views import ViewQuery

# Firestore rejects batches larger than this
MAX_BATCH_WRITES = 500

DEFAULT_APP_NAME = "[DEFAULT]"


class FirestoreDocumentStore(DocumentStore):
    """Firestore document store implementation.

    Every document type lives in one collection and is told apart by its
    ``type`` field. Views have no native counterpart: each one is translated
    into ``where`` filters plus an ``order_by`` on the key field. Range views
    and exact views filtered on ``type`` need composite indexes on the
    Firestore side; those are created from the console, not from here.
    """

    backend = StoreBackend.FIRESTORE

    def __init__(
        self,
        collection: str = DEFAULT_COLLECTION,
        service_account_json: Optional[str] = None,
        project_id: Optional[str] = None,
        app_name: str = DEFAULT_APP_NAME,
        client: Any = None,
        **kwargs
    ):
        """Initialize the Firestore store.

        Args:
            collection: Name of the collection holding every document
            service_account_json: Service account credentials as a JSON string
            project_id: Google Cloud project (optional, read from credentials otherwise)
            app_name: Firebase app name to reuse or create
            client: Pre-built async Firestore client, used by tests
            **kwargs: Additional arguments
        """
        super().__init__(collection=collection, **kwargs)
        self.service_account_json = service_account_json
        self.project_id = project_id
        self.app_name = app_name
        self.client = client

    async def initialize(self) -> bool:
        """Create the Firestore client if none was injected.

        Returns:
            True if successful
        """
        if self.client is None:
            self.client = firestore_async.client(self._get_app())
        logger.info(f"Firestore store initialized on collection {self.collection}")
        self.initialized = True
        return True

    def _get_app(self) -> firebase_admin.App:
        """Reuse the named Firebase app or initialize it from the service account."""
        try:
            return firebase_admin.get_app(self.app_name)
        except ValueError:
            pass

        if not self.service_account_json:
            raise StoreUnavailableError(
                "FIREBASE_SERVICE_ACCOUNT_JSON is not set", operation="initialize", code="missing_credentials"
            )
        try:
            info = json.loads(self.service_account_json)
        except ValueError as e:
            raise StoreUnavailableError(
                "Service account JSON is malformed", operation="initialize", code="bad_credentials", cause=e
            ) from e

        # Hosting platforms often escape the newlines of the private key
        if "private_key" in info:
            info["private_key"] = info["private_key"].replace("\\n", "\n")

        options = {"projectId": self.project_id} if self.project_id else None
        return firebase_admin.initialize_app(credentials.Certificate(info), options, name=self.app_name)

    async def close(self) -> None:
        if self.client is not None and hasattr(self.client, "close"):
            result = self.client.close()
            if inspect.isawaitable(result):
                await result
        self.client = None
        await super().close()

    def _collection(self):
        return self.client.collection(self.collection)

    async def _get(self, doc_id: str) -> Document:
        snapshot = await self._collection().document(doc_id).get()
        if not snapshot.exists:
            raise self._not_found(doc_id)
        return with_id(snapshot.id, snapshot.to_dict() or {})

    async def _put(self, doc_id: str, body: Dict[str, Any]) -> None:
        await self._collection().document(doc_id).set(body)

    async def _find(self, selector: Dict[str, Any], limit: int, skip: int) -> List[Document]:
        query = self._collection()
        for field_name, value in selector.items():
            query = query.where(filter=FieldFilter(field_name, "==", value))
        query = query.order_by(FieldPath.document_id())
        if skip:
            query = query.offset(skip)
        query = query.limit(limit)

        return [with_id(snapshot.id, snapshot.to_dict() or {}) async for snapshot in query.stream()]

    async def _list(self, include_docs: bool) -> ListResult:
        rows = []
        async for snapshot in self._collection().stream():
            doc = with_id(snapshot.id, snapshot.to_dict() or {}) if include_docs else None
            rows.append(ListRow(id=snapshot.id, doc=doc))
        rows.sort(key=lambda row: row.id)
        return ListResult(rows=rows)

    async def _bulk_delete(self, doc_ids: List[str]) -> BulkResult:
        collection = self._collection()
        refs = [collection.document(doc_id) for doc_id in doc_ids]

        existing = set()
        async for snapshot in self.client.get_all(refs):
            if snapshot.exists:
                existing.add(snapshot.id)

        failed: Dict[str, str] = {doc_id: "not_found" for doc_id in doc_ids if doc_id not in existing}
        targets = [ref for ref in refs if ref.id in existing]

        removed = set()
        for start in range(0, len(targets), MAX_BATCH_WRITES):
            chunk = targets[start:start + MAX_BATCH_WRITES]
            batch = self.client.batch()
            for ref in chunk:
                batch.delete(ref)
            try:
                await batch.commit()
            except Exception as e:
                # A failed commit leaves its whole chunk in place; later chunks still run
                logger.error(f"Firestore batch delete of {len(chunk)} documents failed: {e}")
                failed.update({ref.id: f"batch_failed: {e}" for ref in chunk})
                continue
            removed.update(ref.id for ref in chunk)

        deleted = [doc_id for doc_id in doc_ids if doc_id in removed]
        return BulkResult(ok=not failed, deleted=deleted, failed=failed)

    async def _view(self, query: ViewQuery) -> ViewResult:
        definition = query.definition
        native = self._collection().where(filter=FieldFilter("type", "==", definition.doc_type))

        if query.is_exact:
            native = native.where(filter=FieldFilter(definition.key_field, "==", query.key))
        else:
            if query.start_key is not None:
                native = native.where(filter=FieldFilter(definition.key_field, ">=", query.start_key))
            if query.end_key is not None:
                native = native.where(filter=FieldFilter(definition.key_field, "<", query.end_key))
            native = native.order_by(definition.key_field)
        native = native.order_by(FieldPath.document_id())
        if query.limit is not None:
            native = native.limit(query.limit)

        rows = []
        async for snapshot in native.stream():
            doc = with_id(snapshot.id, snapshot.to_dict() or {})
            rows.append(ViewRow(id=snapshot.id, key=definition.key_of(doc), doc=doc))
        return ViewResult(rows=rows)
