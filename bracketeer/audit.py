"""Append-only log of administrative actions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import GoogleAPICallError

from .core.constants import AUDIT_LOGS_COLLECTION
from .core.store import get_client
from .utils import to_iso, utc_now

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def log_admin_action(
    admin_id: str,
    action: str,
    details: dict[str, Any] | None = None,
    role: str = "admin",
    db: Client | None = None,
) -> None:
    """Record an admin action. Failures are logged and never block the action."""
    try:
        get_client(db).collection(AUDIT_LOGS_COLLECTION).add({
            "adminId": admin_id,
            "role": role,
            "action": action,
            "details": details or {},
            "createdAt": to_iso(utc_now()),
        })
    except GoogleAPICallError as e:
        logger.error(f"Failed to log admin action {action}: {e}")
