"""Loading and transactional mutation of tournament documents."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from bracketeer.core.constants import TOURNAMENTS_COLLECTION
from bracketeer.core.store import get_client, read_document, run_in_transaction
from bracketeer.utils import to_iso, utc_now

from .models import Tournament

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

T = TypeVar("T")


def tournament_ref(db: Client, tournament_id: str) -> DocumentReference:
    return db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)


def load_tournament(tournament_id: str, db: Client | None = None) -> Tournament:
    """Read a tournament without a transaction. Raises NotFoundError."""
    db = get_client(db)
    data = read_document(tournament_ref(db, tournament_id), label="Tournament")
    return Tournament.from_dict(tournament_id, data)


def mutate_tournament(
    tournament_id: str,
    operation: Callable[[Tournament], T],
    db: Client | None = None,
    now: datetime.datetime | None = None,
) -> T:
    """Apply ``operation`` to a tournament inside one transaction.

    The document is only rewritten when the operation changed it, in which
    case ``updatedAt`` is stamped.
    """
    db = get_client(db)

    def _mutate(doc_id: str, data: dict[str, Any]) -> tuple[T, dict[str, Any] | None]:
        tournament = Tournament.from_dict(doc_id, data)
        before = tournament.to_dict()
        result = operation(tournament)
        after = tournament.to_dict()
        if after == before:
            return result, None
        after["updatedAt"] = to_iso(now or utc_now())
        return result, after

    return run_in_transaction(
        db, tournament_ref(db, tournament_id), _mutate, label="Tournament"
    )
