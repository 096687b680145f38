from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from unittest import TestCase

from player_fakes import TENANT_ID, InMemoryPlayerContentStore

from signage.services.emergency import EmergencyOverrideResolver

NOW = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)


class EmergencyOverrideResolverTests(TestCase):
    def setUp(self) -> None:
        self.store = InMemoryPlayerContentStore()
        self.resolver = EmergencyOverrideResolver(self.store)

    def test_no_broadcast(self) -> None:
        self.assertIsNone(self.resolver.resolve(TENANT_ID, NOW))
        self.assertEqual(self.store.cleared_emergencies, [])

    def test_running_broadcast_is_returned_untouched(self) -> None:
        state = self.store.set_emergency(
            content_type="playlist",
            content_id=uuid.uuid4(),
            started_at=NOW - timedelta(minutes=9),
            duration_minutes=10,
        )

        self.assertEqual(self.resolver.resolve(TENANT_ID, NOW), state)
        self.assertEqual(state.expires_at, NOW + timedelta(minutes=1))
        self.assertEqual(self.store.cleared_emergencies, [])

    def test_expired_broadcast_is_cleared_once(self) -> None:
        self.store.set_emergency(
            content_type="playlist",
            content_id=uuid.uuid4(),
            started_at=NOW - timedelta(minutes=11),
            duration_minutes=10,
        )

        with self.assertLogs("signage.emergency", level="INFO"):
            self.assertIsNone(self.resolver.resolve(TENANT_ID, NOW))
        self.assertIsNone(self.resolver.resolve(TENANT_ID, NOW))

        self.assertEqual(self.store.cleared_emergencies, [TENANT_ID])
        self.assertIsNone(self.store.get_emergency_state(TENANT_ID))

    def test_expiry_boundary_is_inclusive(self) -> None:
        self.store.set_emergency(
            content_type="media",
            content_id=uuid.uuid4(),
            started_at=NOW - timedelta(minutes=10),
            duration_minutes=10,
        )
        self.assertIsNone(self.resolver.resolve(TENANT_ID, NOW))

    def test_broadcast_without_duration_never_expires(self) -> None:
        state = self.store.set_emergency(
            content_type="scene",
            content_id=uuid.uuid4(),
            started_at=NOW - timedelta(days=30),
        )

        self.assertEqual(self.resolver.resolve(TENANT_ID, NOW), state)
        self.assertIsNone(state.expires_at)

    def test_broadcast_without_start_never_expires(self) -> None:
        state = self.store.set_emergency(
            content_type="layout",
            content_id=uuid.uuid4(),
            duration_minutes=5,
        )
        self.assertEqual(self.resolver.resolve(TENANT_ID, NOW), state)

    def test_other_tenant_broadcast_is_invisible(self) -> None:
        self.store.set_emergency(
            tenant_id=uuid.uuid4(),
            content_type="playlist",
            content_id=uuid.uuid4(),
        )
        self.assertIsNone(self.resolver.resolve(TENANT_ID, NOW))
