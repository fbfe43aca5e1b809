"""Models package for the Molino document store.

This module provides a unified interface to the data models used across the
package. It re-exports classes from the core, schema and config modules.
"""

# Core models and types
from .core import (
    Document,
    InsertResult,
    FindResult,
    ListRow,
    ListResult,
    BulkResult,
    ViewOptions,
    ViewRow,
    ViewResult,

    # Type definitions
    StoreBackend,
    DocumentType,
)

# Entity schemas
from .schema import (
    BaseRecord,
    Observation,
    Employee,
    Contract,
    Account,
    full_name,
    utc_now_iso,
)

# Configuration constants
from .config import (
    DEFAULT_COLLECTION,
    DEFAULT_DATABASE_NAME,
    DEFAULT_COUCHDB_URL,
    DEFAULT_FIND_LIMIT,
    DEFAULT_PAGE_SIZE,
    FALLBACK_ID_PREFIX,
    HIGH_KEY_SUFFIX,
    DESIGN_DOC_ID,
    DESIGN_DOC_NAME,
    DESIGN_DOC_PREFIX,
    STATUS_COUNT_VIEW,
    DEFAULT_STATUS_FIELD,
    DEFAULT_INACTIVE_VALUE,
    UPDATED_AT_FIELD,
    CREATED_AT_FIELD,
)

__all__ = [
    # Core models
    "Document", "InsertResult", "FindResult", "ListRow", "ListResult",
    "BulkResult", "ViewOptions", "ViewRow", "ViewResult",

    # Type definitions
    "StoreBackend", "DocumentType",

    # Schema models
    "BaseRecord", "Observation", "Employee", "Contract", "Account",
    "full_name", "utc_now_iso",

    # Configuration constants
    "DEFAULT_COLLECTION", "DEFAULT_DATABASE_NAME", "DEFAULT_COUCHDB_URL",
    "DEFAULT_FIND_LIMIT", "DEFAULT_PAGE_SIZE", "FALLBACK_ID_PREFIX",
    "HIGH_KEY_SUFFIX", "DESIGN_DOC_ID", "DESIGN_DOC_NAME", "DESIGN_DOC_PREFIX",
    "STATUS_COUNT_VIEW", "DEFAULT_STATUS_FIELD", "DEFAULT_INACTIVE_VALUE",
    "UPDATED_AT_FIELD", "CREATED_AT_FIELD",
]
