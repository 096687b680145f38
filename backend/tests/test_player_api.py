from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest import TestCase

from fastapi import FastAPI
from fastapi.testclient import TestClient
from player_fakes import InMemoryPlayerContentStore, ScriptedRandom, UnusedSessionFactory

from signage.api.player import router as player_router
from signage.core.config import Settings
from signage.dependencies import get_player_content_service
from signage.services.player_content import PlayerContentService

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def _build_service(store: InMemoryPlayerContentStore) -> PlayerContentService:
    return PlayerContentService(
        settings=Settings(),
        session_factory=UnusedSessionFactory(),  # type: ignore[arg-type]
        store_builder=lambda _db: store,
        random_source=ScriptedRandom(),
        clock=lambda: NOW,
    )


class PlayerApiTests(TestCase):
    def setUp(self) -> None:
        self.store = InMemoryPlayerContentStore()
        app = FastAPI()
        app.include_router(player_router)
        app.dependency_overrides[get_player_content_service] = lambda: _build_service(self.store)
        self.client = TestClient(app)

    def test_content_for_screen_with_assigned_playlist(self) -> None:
        media = self.store.add_media(name="welcome.png")
        playlist = self.store.add_playlist(media, name="Welcome")
        device = self.store.add_device(assigned_playlist_id=playlist.id)

        response = self.client.get(f"/api/player/screens/{device.id}/content")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["mode"], "playlist")
        self.assertEqual(body["source"], "assigned_playlist")
        self.assertEqual(body["playlist"]["id"], str(playlist.id))
        self.assertEqual(body["playlist"]["items"][0]["name"], "welcome.png")
        self.assertEqual(body["device"]["id"], str(device.id))

    def test_empty_content(self) -> None:
        device = self.store.add_device()

        response = self.client.get(f"/api/player/screens/{device.id}/content")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["mode"], "empty")
        self.assertEqual(response.json()["source"], "none")

    def test_unknown_screen_returns_404(self) -> None:
        for suffix in ("content", "campaign", "scheduled-scene"):
            response = self.client.get(f"/api/player/screens/{uuid.uuid4()}/{suffix}")
            self.assertEqual(response.status_code, 404, suffix)
            self.assertEqual(response.json()["detail"], "Screen not found")

    def test_dangling_emergency_returns_409(self) -> None:
        device = self.store.add_device()
        missing = uuid.uuid4()
        self.store.set_emergency(content_type="layout", content_id=missing)

        response = self.client.get(f"/api/player/screens/{device.id}/content")

        self.assertEqual(response.status_code, 409)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "dangling_reference")
        self.assertEqual(detail["source"], "emergency")
        self.assertEqual(detail["content_type"], "layout")
        self.assertEqual(detail["content_id"], str(missing))

    def test_invalid_screen_id_is_rejected(self) -> None:
        response = self.client.get("/api/player/screens/not-a-uuid/content")
        self.assertEqual(response.status_code, 422)

    def test_scheduled_scene_preview(self) -> None:
        device = self.store.add_device(timezone="UTC")

        response = self.client.get(f"/api/player/screens/{device.id}/scheduled-scene")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["local_time"], "12:00")
        self.assertEqual(body["day_of_week"], 6)
        self.assertIsNone(body["scene"])

    def test_campaign_preview_without_campaign(self) -> None:
        device = self.store.add_device()

        response = self.client.get(f"/api/player/screens/{device.id}/campaign")

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["campaign"])


class PlayerApiServiceMissingTests(TestCase):
    def test_returns_503_before_startup(self) -> None:
        app = FastAPI()
        app.include_router(player_router)
        client = TestClient(app)

        response = client.get(f"/api/player/screens/{uuid.uuid4()}/content")

        self.assertEqual(response.status_code, 503)
