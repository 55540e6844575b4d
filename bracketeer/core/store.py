"""Transactional access to single Firestore documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, TypeVar, cast

from firebase_admin import firestore

from bracketeer.errors import NotFoundError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

T = TypeVar("T")

# mutate(doc_id, data) -> (result, new_document)
Mutation = Callable[[str, dict[str, Any]], "tuple[T, dict[str, Any] | None]"]


def get_client(db: Client | None = None) -> Client:
    """Return the injected client or the default Firestore client."""
    if db is None:
        db = firestore.client()
    return db


def read_document(ref: DocumentReference, label: str = "Document") -> dict[str, Any]:
    """Read a document outside of a transaction, raising if it is absent."""
    snapshot = cast("DocumentSnapshot", ref.get())
    if not snapshot.exists:
        raise NotFoundError(f"{label} not found.")
    return snapshot.to_dict() or {}


def apply_mutation(
    transaction: Transaction,
    ref: DocumentReference,
    mutate: Mutation,
    label: str = "Document",
) -> Any:
    """Read, mutate and write back one document inside ``transaction``.

    A ``None`` document returned by ``mutate`` means nothing changed and no
    write is queued.
    """
    snapshot = cast("DocumentSnapshot", ref.get(transaction=transaction))
    if not snapshot.exists:
        raise NotFoundError(f"{label} not found.")
    result, new_document = mutate(snapshot.id, snapshot.to_dict() or {})
    if new_document is not None:
        transaction.set(ref, new_document)
    return result


def run_in_transaction(
    db: Client, ref: DocumentReference, mutate: Mutation, label: str = "Document"
) -> Any:
    """Run ``mutate`` as an atomic read-modify-write on ``ref``.

    Firestore retries the whole callback on contention, so ``mutate`` must not
    have side effects outside the returned document.
    """

    @firestore.transactional
    def _apply(transaction: Transaction) -> Any:
        return apply_mutation(transaction, ref, mutate, label)

    return _apply(db.transaction())
