from __future__ import annotations

import logging
import uuid
from datetime import datetime

from signage.repositories.player_store import EmergencyState, PlayerContentStore

EMERGENCY_CONTENT_TYPES = frozenset({"scene", "layout", "playlist", "media"})


class EmergencyOverrideResolver:
    """Tenant-wide broadcast that pre-empts every other tier until it expires."""

    def __init__(self, store: PlayerContentStore):
        self._store = store
        self._logger = logging.getLogger("signage.emergency")

    def resolve(self, tenant_id: uuid.UUID, now: datetime) -> EmergencyState | None:
        state = self._store.get_emergency_state(tenant_id)
        if state is None:
            return None
        if not state.is_expired(now):
            return state

        # Only write when the expiry transition is actually observed.
        self._store.clear_emergency_state(tenant_id)
        self._logger.info(
            "cleared expired emergency tenant_id=%s content_type=%s content_id=%s expired_at=%s",
            tenant_id,
            state.content_type,
            state.content_id,
            state.expires_at.isoformat() if state.expires_at else None,
        )
        return None
