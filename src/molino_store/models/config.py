"""Configuration constants for the Molino document store.

This module contains constants and default configuration values used throughout
the package. These constants define default behavior when not overridden by
user configuration.
"""

# Storage layout
DEFAULT_COLLECTION = "documents"
DEFAULT_DATABASE_NAME = "sirh_molino"
DEFAULT_COUCHDB_URL = "http://127.0.0.1:5984"

# Identifier generation
FALLBACK_ID_PREFIX = "doc"

# Query parameters
DEFAULT_FIND_LIMIT = 50
DEFAULT_PAGE_SIZE = 200

# Private-use code point closing prefix ranges ("Jua" .. "Jua\uf8ff")
HIGH_KEY_SUFFIX = "\uf8ff"

# CouchDB design document publishing the views
DESIGN_DOC_NAME = "views"
DESIGN_DOC_ID = f"_design/{DESIGN_DOC_NAME}"
DESIGN_DOC_PREFIX = "_design/"
STATUS_COUNT_VIEW = "estadisticas_empleados"

# Soft delete defaults
DEFAULT_STATUS_FIELD = "estado"
DEFAULT_INACTIVE_VALUE = "inactivo"
UPDATED_AT_FIELD = "fecha_actualizacion"
CREATED_AT_FIELD = "fecha_creacion"
