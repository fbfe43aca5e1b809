"""CouchDB document store implementation."""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from ..errors import StoreUnavailableError
from ..models.core import (
    Document,
    DocumentType,
    StoreBackend,
    ListRow,
    ListResult,
    BulkResult,
    ViewRow,
    ViewResult,
)
from ..models.config import (
    DEFAULT_COUCHDB_URL,
    DEFAULT_DATABASE_NAME,
    DEFAULT_STATUS_FIELD,
    DESIGN_DOC_ID,
    DESIGN_DOC_NAME,
    DESIGN_DOC_PREFIX,
    STATUS_COUNT_VIEW,
)
from ..utils.error_handling import normalize_store_errors
from .base import DocumentStore, with_id
from .views import ViewQuery, build_design_document


class CouchDBDocumentStore(DocumentStore):
    """CouchDB document store implementation.

    This implementation talks to the CouchDB HTTP API. Selectors run as Mango
    ``_find`` queries and views are real map functions published in the
    ``_design/views`` document. Revisions are handled internally: a write
    looks up the current ``_rev`` first, so callers never see version tokens.
    A writer racing between that lookup and the PUT gets a ConflictError.
    """

    backend = StoreBackend.COUCHDB

    def __init__(
        self,
        url: str = DEFAULT_COUCHDB_URL,
        database: str = DEFAULT_DATABASE_NAME,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
        publish_views: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """Initialize the CouchDB store.

        Args:
            url: Base URL of the CouchDB server
            database: Database name
            username: CouchDB user (optional)
            password: CouchDB password (optional)
            timeout: Request timeout in seconds
            publish_views: Whether to create/update the design document on initialize
            transport: Custom httpx transport, used by tests
            **kwargs: Additional arguments
        """
        super().__init__(collection=database, **kwargs)
        self.url = url.rstrip("/")
        self.database = database
        self.auth = (username, password or "") if username else None
        self.timeout = timeout
        self.publish_views = publish_views
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    @property
    def _db_path(self) -> str:
        return f"/{quote(self.database, safe='')}"

    def _doc_path(self, doc_id: str) -> str:
        return f"{self._db_path}/{quote(doc_id, safe='')}"

    async def initialize(self) -> bool:
        """Verify the database is reachable and publish the views.

        Returns:
            True if successful
        """
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.url,
                auth=self.auth,
                timeout=self.timeout,
                transport=self._transport,
            )

        logger.info(f"Connecting to CouchDB at {self.url}, database {self.database}")
        response = await self.client.get(self._db_path)
        if response.status_code == 404:
            raise StoreUnavailableError(
                f"Database '{self.database}' does not exist or is not accessible",
                operation="initialize",
                code="db_not_found",
            )
        response.raise_for_status()

        info = response.json()
        logger.info(
            f"CouchDB database {info.get('db_name', self.database)} ready "
            f"({info.get('doc_count', 0)} documents)"
        )

        if self.publish_views:
            await self._publish_design_document()

        self.initialized = True
        return True

    async def _publish_design_document(self) -> None:
        """Create or update ``_design/views`` when its views changed."""
        design = build_design_document()
        path = f"{self._db_path}/{DESIGN_DOC_ID}"

        existing = await self.client.get(path)
        if existing.status_code == 200:
            current = existing.json()
            if current.get("views") == design["views"]:
                logger.debug("Design document is up to date")
                return
            design["_rev"] = current["_rev"]
        elif existing.status_code != 404:
            existing.raise_for_status()

        response = await self.client.put(path, json=design)
        response.raise_for_status()
        logger.info(f"Published design document {DESIGN_DOC_ID} with views {sorted(design['views'])}")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
        await super().close()

    async def _get(self, doc_id: str) -> Document:
        response = await self.client.get(self._doc_path(doc_id))
        if response.status_code == 404:
            raise self._not_found(doc_id)
        response.raise_for_status()
        body = response.json()
        return with_id(body.get("_id", doc_id), body)

    async def _current_rev(self, doc_id: str) -> Optional[str]:
        response = await self.client.head(self._doc_path(doc_id))
        if response.status_code == 404:
            return None
        response.raise_for_status()
        etag = response.headers.get("etag", "")
        return etag.strip('"') or None

    async def _put(self, doc_id: str, body: Dict[str, Any]) -> None:
        payload = dict(body)
        rev = await self._current_rev(doc_id)
        if rev:
            payload["_rev"] = rev
        response = await self.client.put(self._doc_path(doc_id), json=payload)
        response.raise_for_status()

    async def _find(self, selector: Dict[str, Any], limit: int, skip: int) -> List[Document]:
        mango = dict(selector)
        if "type" not in mango:
            # Design documents carry no type tag
            mango["type"] = {"$exists": True}

        response = await self.client.post(
            f"{self._db_path}/_find",
            json={"selector": mango, "limit": limit, "skip": skip, "sort": [{"_id": "asc"}]},
        )
        response.raise_for_status()
        data = response.json()
        if data.get("warning"):
            logger.debug(f"CouchDB _find warning: {data['warning']}")
        return [with_id(doc["_id"], doc) for doc in data.get("docs", [])]

    async def _list(self, include_docs: bool) -> ListResult:
        response = await self.client.get(
            f"{self._db_path}/_all_docs",
            params={"include_docs": "true" if include_docs else "false"},
        )
        response.raise_for_status()
        rows = []
        for row in response.json().get("rows", []):
            if row["id"].startswith(DESIGN_DOC_PREFIX):
                continue
            doc = row.get("doc") if include_docs else None
            rows.append(ListRow(id=row["id"], doc=with_id(row["id"], doc) if doc else None))
        return ListResult(rows=rows)

    async def _bulk_delete(self, doc_ids: List[str]) -> BulkResult:
        response = await self.client.post(f"{self._db_path}/_all_docs", json={"keys": doc_ids})
        response.raise_for_status()

        failed: Dict[str, str] = {}
        tombstones = []
        for row in response.json().get("rows", []):
            if "error" in row:
                failed[row["key"]] = row["error"]
            elif row.get("value", {}).get("deleted"):
                failed[row["id"]] = "not_found"
            else:
                tombstones.append({"_id": row["id"], "_rev": row["value"]["rev"], "_deleted": True})

        removed = set()
        if tombstones:
            response = await self.client.post(f"{self._db_path}/_bulk_docs", json={"docs": tombstones})
            response.raise_for_status()
            for result in response.json():
                if result.get("ok"):
                    removed.add(result["id"])
                else:
                    failed[result["id"]] = result.get("error", "unknown_error")

        deleted = [doc_id for doc_id in doc_ids if doc_id in removed]
        return BulkResult(ok=not failed, deleted=deleted, failed=failed)

    async def _view(self, query: ViewQuery) -> ViewResult:
        params: Dict[str, str] = {"include_docs": "true"}
        if query.is_exact:
            params["key"] = json.dumps(query.key)
        else:
            if query.start_key is not None:
                params["startkey"] = json.dumps(query.start_key)
            if query.end_key is not None:
                params["endkey"] = json.dumps(query.end_key)
                params["inclusive_end"] = "false"
        if query.limit is not None:
            params["limit"] = str(query.limit)

        response = await self.client.get(
            f"{self._db_path}/_design/{DESIGN_DOC_NAME}/_view/{query.definition.name.value}",
            params=params,
        )
        response.raise_for_status()
        return ViewResult(rows=[
            ViewRow(id=row["id"], key=row["key"], doc=with_id(row["id"], row["doc"]))
            for row in response.json().get("rows", [])
            if row.get("doc")
        ])

    @normalize_store_errors("count documents by status")
    async def count_by_status(
        self,
        doc_type: str = DocumentType.EMPLOYEE.value,
        status_field: str = DEFAULT_STATUS_FIELD,
    ) -> Dict[str, int]:
        """Count documents per status.

        Employee statuses come from the ``estadisticas_empleados`` map/reduce
        view. Any other combination falls back to a paged scan.
        """
        if doc_type != DocumentType.EMPLOYEE.value or status_field != DEFAULT_STATUS_FIELD:
            return await super().count_by_status(doc_type, status_field)

        await self.ensure_initialized()
        response = await self.client.get(
            f"{self._db_path}/_design/{DESIGN_DOC_NAME}/_view/{STATUS_COUNT_VIEW}",
            params={"group": "true"},
        )
        response.raise_for_status()
        return {
            row["key"]: int(row["value"])
            for row in response.json().get("rows", [])
            if row["key"] is not None
        }
