"""Named views emulated over the single document collection.

Each view is a small declarative record (document type + key field). A
query against a view is translated into an equality or half-open range
filter that every backend can evaluate natively:

* exact lookup:  ``type == T and field == key``
* range lookup:  ``type == T and start_key <= field < end_key``
* full scan:     ``type == T`` ordered by ``field``

The vocabulary is closed. Names outside of it raise ``UnknownViewError``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..errors import UnknownViewError
from ..models.core import Document, DocumentType, ViewOptions
from ..models.config import (
    DESIGN_DOC_ID,
    HIGH_KEY_SUFFIX,
    STATUS_COUNT_VIEW,
)


class ViewName(str, Enum):
    """Canonical view names."""

    DOCUMENTS_BY_SECONDARY_ID = "documents-by-secondary-id"
    DOCUMENTS_BY_DISPLAY_NAME = "documents-by-display-name"
    CHILDREN_BY_PARENT_ID = "children-by-parent-id"
    ACCOUNTS_BY_LOGIN_NAME = "accounts-by-login-name"
    ACCOUNTS_BY_EMAIL = "accounts-by-email"


@dataclass(frozen=True)
class ViewDefinition:
    """Logical secondary index over one document type."""

    name: ViewName
    legacy_name: str
    doc_type: str
    key_field: str

    def key_of(self, doc: Document) -> Any:
        return doc.get(self.key_field)

    def applies_to(self, doc: Document) -> bool:
        return doc.get("type") == self.doc_type and self.key_of(doc) is not None

    def map_function(self) -> str:
        """CouchDB map function emitting the key field."""
        return (
            "function(doc) {\n"
            f"  if (doc.type === '{self.doc_type}' && doc.{self.key_field} !== undefined "
            f"&& doc.{self.key_field} !== null) {{\n"
            f"    emit(doc.{self.key_field}, null);\n"
            "  }\n"
            "}"
        )


VIEW_DEFINITIONS: Dict[ViewName, ViewDefinition] = {
    ViewName.DOCUMENTS_BY_SECONDARY_ID: ViewDefinition(
        ViewName.DOCUMENTS_BY_SECONDARY_ID, "empleados_por_documento",
        DocumentType.EMPLOYEE.value, "nro_documento"),
    ViewName.DOCUMENTS_BY_DISPLAY_NAME: ViewDefinition(
        ViewName.DOCUMENTS_BY_DISPLAY_NAME, "empleados_por_nombre",
        DocumentType.EMPLOYEE.value, "nombre_apellido"),
    ViewName.CHILDREN_BY_PARENT_ID: ViewDefinition(
        ViewName.CHILDREN_BY_PARENT_ID, "contratos_por_empleado",
        DocumentType.CONTRACT.value, "empleado_id"),
    ViewName.ACCOUNTS_BY_LOGIN_NAME: ViewDefinition(
        ViewName.ACCOUNTS_BY_LOGIN_NAME, "usuarios_sistema",
        DocumentType.ACCOUNT.value, "username"),
    ViewName.ACCOUNTS_BY_EMAIL: ViewDefinition(
        ViewName.ACCOUNTS_BY_EMAIL, "usuarios_por_email",
        DocumentType.ACCOUNT.value, "email"),
}

_LEGACY_NAMES: Dict[str, ViewName] = {
    definition.legacy_name: name for name, definition in VIEW_DEFINITIONS.items()
}


@dataclass(frozen=True)
class ViewQuery:
    """A view request translated into a native filter."""

    definition: ViewDefinition
    key: Any = None
    start_key: Any = None
    end_key: Any = None
    limit: Optional[int] = None

    @property
    def is_exact(self) -> bool:
        return self.key is not None

    @property
    def is_range(self) -> bool:
        return self.key is None and (self.start_key is not None or self.end_key is not None)

    def matches(self, doc: Document) -> bool:
        """Evaluate the translated filter against a document."""
        if not self.definition.applies_to(doc):
            return False
        value = self.definition.key_of(doc)
        if self.is_exact:
            return value == self.key
        try:
            if self.start_key is not None and value < self.start_key:
                return False
            if self.end_key is not None and not value < self.end_key:
                return False
        except TypeError:
            # Keys of another type never fall inside a range
            return False
        return True


def collation_key(value: Any) -> tuple:
    """Sort key ordering mixed-type view keys the way CouchDB collates them.

    null < booleans < numbers < strings < arrays < objects
    """
    if value is None:
        return (0,)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, str):
        return (3, value)
    if isinstance(value, (list, tuple)):
        return (4, tuple(collation_key(item) for item in value))
    return (5, str(value))


def resolve_view(view_name: Union[str, ViewName]) -> ViewDefinition:
    """Look up a view by canonical or legacy CouchDB name.

    Raises:
        UnknownViewError: If the name is not part of the vocabulary
    """
    if isinstance(view_name, ViewName):
        return VIEW_DEFINITIONS[view_name]
    try:
        return VIEW_DEFINITIONS[ViewName(view_name)]
    except ValueError:
        pass
    if view_name in _LEGACY_NAMES:
        return VIEW_DEFINITIONS[_LEGACY_NAMES[view_name]]
    raise UnknownViewError(str(view_name))


def translate_view(
    view_name: Union[str, ViewName],
    options: Optional[Union[ViewOptions, Dict[str, Any]]] = None,
) -> ViewQuery:
    """Translate ``(view_name, options)`` into a native filter description.

    A ``start_key`` without ``end_key`` is treated as a prefix search and
    closed with a high private-use code point.
    """
    definition = resolve_view(view_name)
    opts = ViewOptions.from_dict(options) if not isinstance(options, ViewOptions) else options

    if opts.limit is not None and opts.limit < 0:
        raise ValueError(f"limit must be non-negative, got {opts.limit}")

    if opts.key is not None:
        return ViewQuery(definition, key=opts.key, limit=opts.limit)

    end_key = opts.end_key
    if opts.start_key is not None and end_key is None:
        end_key = f"{opts.start_key}{HIGH_KEY_SUFFIX}"
    return ViewQuery(definition, start_key=opts.start_key, end_key=end_key, limit=opts.limit)


def build_design_document() -> Dict[str, Any]:
    """Design document publishing every view to CouchDB.

    Includes the status-count map/reduce used by the statistics service.
    """
    views: Dict[str, Dict[str, str]] = {
        name.value: {"map": definition.map_function()}
        for name, definition in VIEW_DEFINITIONS.items()
    }
    views[STATUS_COUNT_VIEW] = {
        "map": (
            "function(doc) {\n"
            f"  if (doc.type === '{DocumentType.EMPLOYEE.value}' && doc.estado) {{\n"
            "    emit(doc.estado, 1);\n"
            "  }\n"
            "}"
        ),
        "reduce": "_sum",
    }
    return {"_id": DESIGN_DOC_ID, "language": "javascript", "views": views}
