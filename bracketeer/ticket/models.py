"""Data models for match-entry tickets."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Optional

from bracketeer.utils import parse_iso


@dataclass
class Ticket:
    """A single-use credential scoping a user to a competition or match."""

    code: str
    user_id: str
    competition_id: str
    valid: bool = True
    round_id: Optional[str] = None
    match_id: Optional[str] = None
    issued_at: Optional[str] = None
    expires_at: Optional[str] = None
    id: Optional[str] = None

    def is_expired(self, now: datetime.datetime) -> bool:
        expires_at = parse_iso(self.expires_at)
        return expires_at is not None and expires_at < now

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "code": self.code,
            "userId": self.user_id,
            "competitionId": self.competition_id,
            "valid": self.valid,
            "issuedAt": self.issued_at,
            "expiresAt": self.expires_at,
        }
        if self.round_id is not None:
            data["roundId"] = self.round_id
        if self.match_id is not None:
            data["matchId"] = self.match_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], ticket_id: Optional[str] = None) -> Ticket:
        return cls(
            id=ticket_id,
            code=data["code"],
            user_id=data.get("userId", ""),
            competition_id=data.get("competitionId", ""),
            valid=bool(data.get("valid", False)),
            round_id=data.get("roundId"),
            match_id=data.get("matchId"),
            issued_at=data.get("issuedAt"),
            expires_at=data.get("expiresAt"),
        )
