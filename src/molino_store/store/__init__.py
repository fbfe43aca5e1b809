"""Document store implementations."""

# Export main classes
from .base import DocumentStore, generate_document_id
from .factory import StoreFactory
from .views import (
    ViewName,
    ViewDefinition,
    ViewQuery,
    VIEW_DEFINITIONS,
    collation_key,
    resolve_view,
    translate_view,
    build_design_document,
)

# Export specific implementations
from .memory_store import InMemoryDocumentStore
from .couchdb_store import CouchDBDocumentStore
from .firestore_store import FirestoreDocumentStore

__all__ = [
    # Base classes
    'DocumentStore',
    'StoreFactory',
    'generate_document_id',

    # View vocabulary
    'ViewName',
    'ViewDefinition',
    'ViewQuery',
    'VIEW_DEFINITIONS',
    'collation_key',
    'resolve_view',
    'translate_view',
    'build_design_document',

    # Store implementations
    'InMemoryDocumentStore',
    'CouchDBDocumentStore',
    'FirestoreDocumentStore',
]
