"""Interfaces module for the Molino document store.

This module contains core interfaces and abstractions that are used
throughout the package without creating circular dependencies.
"""

from .store_interface import DocumentStoreInterface

__all__ = [
    "DocumentStoreInterface",
]
