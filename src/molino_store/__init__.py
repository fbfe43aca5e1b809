"""Molino document store.

Backend-agnostic document storage for the SIRH Molino HR records, with
CouchDB, Firestore and in-memory backends behind one async contract.
"""

__version__ = "0.1.0"
