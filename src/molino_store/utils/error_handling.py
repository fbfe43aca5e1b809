"""Error handling utilities for the Molino document store."""

from loguru import logger
import functools
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from google.api_core import exceptions as google_exceptions

from ..errors import (
    DocumentStoreError,
    NotFoundError,
    StoreUnavailableError,
    ConflictError,
)


T = TypeVar('T')


def translate_exception(exc: Exception, operation_name: str) -> DocumentStoreError:
    """Map a backend exception onto the store error taxonomy.

    Args:
        exc: Exception raised by the backend client
        operation_name: Name of the store operation, kept for context

    Returns:
        The normalized store error
    """
    if isinstance(exc, DocumentStoreError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        try:
            body = exc.response.json()
        except ValueError:
            body = {}
        reason = body.get("reason") or body.get("error") or exc.response.reason_phrase
        code = body.get("error") or str(status)
        if status == 404:
            # Missing documents are reported by the backends themselves; a 404
            # reaching this point means the database or a view is gone
            missing = "missing_view" if "/_view/" in exc.request.url.path else "db_not_found"
            return StoreUnavailableError(
                f"CouchDB resource not found: {reason}", operation=operation_name, code=missing, cause=exc
            )
        if status == 409:
            return ConflictError(f"Document update conflict: {reason}", operation=operation_name, code=code, cause=exc)
        return StoreUnavailableError(
            f"CouchDB request failed with HTTP {status}: {reason}",
            operation=operation_name,
            code=code,
            cause=exc,
        )

    if isinstance(exc, httpx.HTTPError):
        return StoreUnavailableError(
            f"CouchDB transport error: {exc}", operation=operation_name, cause=exc
        )

    if isinstance(exc, google_exceptions.NotFound):
        return StoreUnavailableError(
            f"Firestore resource not found: {exc.message}", operation=operation_name, code="db_not_found", cause=exc
        )

    if isinstance(exc, (google_exceptions.Conflict, google_exceptions.Aborted)):
        return ConflictError(f"Document update conflict: {exc.message}", operation=operation_name, cause=exc)

    if isinstance(exc, google_exceptions.GoogleAPIError):
        return StoreUnavailableError(
            f"Firestore request failed: {exc}",
            operation=operation_name,
            code=str(getattr(exc, "code", "") or "unavailable"),
            cause=exc,
        )

    return StoreUnavailableError(
        f"Unexpected backend error: {exc}", operation=operation_name, code=type(exc).__name__, cause=exc
    )


def normalize_store_errors(operation_name: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator normalizing backend errors raised by a store operation.

    Argument errors (ValueError, TypeError) raised by the store itself pass
    through untouched. Everything else is logged and re-raised as a
    DocumentStoreError subclass. No retry is attempted.

    Args:
        operation_name: Name of the operation for logging purposes

    Returns:
        The decorated coroutine function
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except NotFoundError:
                raise
            except DocumentStoreError as e:
                logger.error(f"Failed to {operation_name}: {e}")
                raise
            except (ValueError, TypeError):
                raise
            except Exception as e:
                error = translate_exception(e, operation_name)
                logger.error(f"Failed to {operation_name}: {error}")
                raise error from e
        return wrapper
    return decorator
