"""Core module for the bracket engine."""

from .store import apply_mutation, get_client, read_document, run_in_transaction
from .types import FirestoreDocument

__all__ = [
    "FirestoreDocument",
    "apply_mutation",
    "get_client",
    "read_document",
    "run_in_transaction",
]
