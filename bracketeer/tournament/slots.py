"""Roster management: registration, waitlist, check-in and late entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bracketeer.errors import ValidationError

if TYPE_CHECKING:
    from .models import Tournament


def _add(members: list[str], participant_id: str) -> bool:
    if participant_id in members:
        return False
    members.append(participant_id)
    return True


def _discard(members: list[str], participant_id: str) -> bool:
    if participant_id not in members:
        return False
    members.remove(participant_id)
    return True


class SlotManager:
    """Mutates the slot sets of an in-memory tournament.

    Every method returns True when the slots changed, so callers can skip the
    write on a no-op.
    """

    @staticmethod
    def register(tournament: Tournament, participant_id: str) -> bool:
        """Register a participant, overflowing to the waitlist past capacity.

        Registering beyond capacity is never an error: the overflow is routed
        to ``waitlist``. Already registered or waitlisted ids are a no-op.
        """
        slots = tournament.slots
        if participant_id in slots.registered or participant_id in slots.waitlist:
            return False

        capacity = tournament.settings.capacity
        if capacity == 0 or len(slots.registered) < capacity:
            slots.registered.append(participant_id)
        else:
            slots.waitlist.append(participant_id)
        return True

    @staticmethod
    def check_in(tournament: Tournament, participant_id: str) -> bool:
        """Check a participant in, even one that never registered."""
        slots = tournament.slots
        changed = _add(slots.checked_in, participant_id)
        changed = _discard(slots.registered, participant_id) or changed
        changed = _discard(slots.waitlist, participant_id) or changed
        return changed

    @staticmethod
    def unregister(tournament: Tournament, participant_id: str) -> bool:
        """Withdraw a participant and fill the freed seat from the waitlist."""
        slots = tournament.slots
        freed_seat = _discard(slots.registered, participant_id)
        changed = _discard(slots.waitlist, participant_id) or freed_seat

        if freed_seat:
            capacity = tournament.settings.capacity
            while slots.waitlist and (
                capacity == 0 or len(slots.registered) < capacity
            ):
                slots.registered.append(slots.waitlist.pop(0))
        return changed

    @staticmethod
    def add_late_entry(tournament: Tournament, participant_id: str) -> bool:
        """Record a participant that joined after registration closed."""
        if not tournament.settings.allow_late_registration:
            raise ValidationError("Late registration is not allowed for this tournament.")
        slots = tournament.slots
        if participant_id in slots.checked_in:
            return False
        return _add(slots.late_entries, participant_id)
