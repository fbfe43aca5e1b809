"""Core model classes and types for the Molino document store.

This module contains the result containers and type definitions shared by
every store backend. Documents themselves stay plain dictionaries: the store
layer is schemaless.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


Document = Dict[str, Any]


# Type definitions
class StoreBackend(str, Enum):
    """Store backend types."""

    COUCHDB = "couchdb"
    FIRESTORE = "firestore"
    MEMORY = "memory"


class DocumentType(str, Enum):
    """Logical entity kinds sharing the single physical collection."""

    EMPLOYEE = "empleado"
    CONTRACT = "contrato"
    ACCOUNT = "usuario"


# Result containers
@dataclass
class InsertResult:
    """Result of an insert (upsert) operation."""
    id: str


@dataclass
class FindResult:
    """Documents matched by a selector."""
    docs: List[Document] = field(default_factory=list)


@dataclass
class ListRow:
    """Entry of a full collection enumeration."""
    id: str
    doc: Optional[Document] = None


@dataclass
class ListResult:
    """Full enumeration of the collection."""
    rows: List[ListRow] = field(default_factory=list)


@dataclass
class BulkResult:
    """Outcome of a bulk delete.

    ``ok`` is True only when every requested identifier was deleted.
    """
    ok: bool
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


@dataclass
class ViewOptions:
    """Key constraint applied when scanning a view."""
    key: Optional[Any] = None
    start_key: Optional[Any] = None
    end_key: Optional[Any] = None
    limit: Optional[int] = None

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> "ViewOptions":
        """Build options from a mapping, accepting CouchDB spellings too."""
        if options is None:
            return cls()
        if isinstance(options, ViewOptions):
            return options
        return cls(
            key=options.get("key"),
            start_key=options.get("start_key", options.get("startkey")),
            end_key=options.get("end_key", options.get("endkey")),
            limit=options.get("limit"),
        )


@dataclass
class ViewRow:
    """Row produced by a view scan."""
    id: str
    key: Any
    doc: Document


@dataclass
class ViewResult:
    """Rows produced by a view scan, ordered by (key, id)."""
    rows: List[ViewRow] = field(default_factory=list)

    @property
    def docs(self) -> List[Document]:
        return [row.doc for row in self.rows]
