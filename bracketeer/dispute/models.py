"""Data models for match disputes."""

from __future__ import annotations

from enum import Enum

from bracketeer.core.types import FirestoreDocument


class DisputeStatus(str, Enum):
    OPEN = "open"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


# Statuses that still need an admin decision.
ACTIVE_DISPUTE_STATUSES = (DisputeStatus.OPEN.value, DisputeStatus.UNDER_REVIEW.value)


class MatchDispute(FirestoreDocument, total=False):
    """A dispute document in Firestore. Targets exactly one match."""

    matchId: str
    tournamentId: str
    reportedBy: str
    reason: str
    description: str
    status: str
    resolvedAt: str
    resolvedBy: str
    resolution: str
