"""Core data types for the bracket engine."""

from typing import Any, TypedDict


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    path: str
    updatedAt: Any

