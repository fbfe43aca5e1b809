"""Exception hierarchy for document store operations.

Backend specific failures are normalized to these kinds so callers never
branch on CouchDB or Firestore error shapes.
"""

from typing import Optional


class DocumentStoreError(Exception):
    """Base exception for document store errors."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        code: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.operation = operation
        self.code = code
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.code:
            parts.append(f"code={self.code}")
        return " ".join(parts)


class NotFoundError(DocumentStoreError):
    """Raised when a requested identifier does not exist."""

    def __init__(self, message: str, doc_id: Optional[str] = None, **kwargs):
        kwargs.setdefault("code", "not_found")
        super().__init__(message, **kwargs)
        self.doc_id = doc_id


class UnknownViewError(NotFoundError):
    """Raised when a view name is not part of the known vocabulary."""

    def __init__(self, view_name: str):
        super().__init__(f"Unknown view: {view_name}", operation="view", code="unknown_view")
        self.view_name = view_name


class StoreUnavailableError(DocumentStoreError):
    """Raised for transport, authentication or backend-internal failures."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "unavailable")
        super().__init__(message, **kwargs)


class ConflictError(DocumentStoreError):
    """Raised when a backend rejects a write because of a concurrent revision."""

    def __init__(self, message: str, doc_id: Optional[str] = None, **kwargs):
        kwargs.setdefault("code", "conflict")
        super().__init__(message, **kwargs)
        self.doc_id = doc_id
