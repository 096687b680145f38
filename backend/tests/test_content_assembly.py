from __future__ import annotations

import uuid
from unittest import TestCase

from player_fakes import InMemoryPlayerContentStore

from signage.core.config import Settings
from signage.repositories.player_store import LayoutZoneSnapshot, PlaylistItemSnapshot
from signage.schemas.player_content import ZoneMediaContent, ZonePlaylistContent
from signage.services.content_assembly import ContentAssembler, DanglingReferenceError


class ContentAssemblerTests(TestCase):
    def setUp(self) -> None:
        self.store = InMemoryPlayerContentStore()
        self.assembler = ContentAssembler(
            self.store,
            Settings(default_item_duration_seconds=12, default_transition_effect="slide"),
        )

    def test_playlist_items_ordered_by_position_with_duration_fallbacks(self) -> None:
        video = self.store.add_media(name="clip.mp4", media_type="video", duration=30.0)
        image = self.store.add_media(name="poster.png")
        playlist = self.store.add_playlist(
            name="Morning",
            default_duration=8,
            items=(
                PlaylistItemSnapshot(id=uuid.uuid4(), position=2, media=image),
                PlaylistItemSnapshot(id=uuid.uuid4(), position=0, media=video),
                PlaylistItemSnapshot(id=uuid.uuid4(), position=1, media=image, duration=4.5),
            ),
        )

        content = self.assembler.playlist(playlist.id)

        assert content is not None
        self.assertEqual([item.position for item in content.items], [0, 1, 2])
        self.assertEqual([item.duration for item in content.items], [30.0, 4.5, 8])
        self.assertEqual(content.default_duration, 8)
        self.assertEqual(content.transition_effect, "slide")
        self.assertFalse(content.shuffle)
        self.assertEqual(content.items[0].media_type, "video")

    def test_playlist_without_default_uses_configured_duration(self) -> None:
        image = self.store.add_media()
        playlist = self.store.add_playlist(image, transition_effect="cut", shuffle=True)

        content = self.assembler.playlist(playlist.id)

        assert content is not None
        self.assertEqual(content.default_duration, 12)
        self.assertEqual(content.items[0].duration, 12)
        self.assertEqual(content.transition_effect, "cut")
        self.assertTrue(content.shuffle)

    def test_item_with_missing_media_degrades_to_placeholder(self) -> None:
        playlist = self.store.add_playlist(
            items=(PlaylistItemSnapshot(id=uuid.uuid4(), position=0),),
        )

        content = self.assembler.playlist(playlist.id)

        assert content is not None
        item = content.items[0]
        self.assertEqual(item.media_type, "unknown")
        self.assertEqual(item.url, "")
        self.assertEqual(item.thumbnail_url, "")
        self.assertEqual(item.name, "")

    def test_single_media_is_wrapped_as_playlist(self) -> None:
        media = self.store.add_media(name="alert.png", width=1920, height=1080, config={"fit": "cover"})

        content = self.assembler.expand("media", media.id)

        assert content is not None
        self.assertIsNone(content.id)
        self.assertEqual(len(content.items), 1)
        self.assertEqual(content.items[0].id, media.id)
        self.assertEqual(content.items[0].duration, 12)
        self.assertEqual(content.items[0].config, {"fit": "cover"})

    def test_layout_zones_sorted_by_z_index(self) -> None:
        media = self.store.add_media()
        playlist = self.store.add_playlist(media)
        layout = self.store.add_layout(
            LayoutZoneSnapshot(id=uuid.uuid4(), zone_name="ticker", z_index=5, assigned_media_id=media.id),
            LayoutZoneSnapshot(id=uuid.uuid4(), zone_name="main", z_index=0, assigned_playlist_id=playlist.id),
            LayoutZoneSnapshot(id=uuid.uuid4(), zone_name="blank", z_index=2),
            LayoutZoneSnapshot(id=uuid.uuid4(), zone_name="gone", z_index=3, assigned_playlist_id=uuid.uuid4()),
        )

        content = self.assembler.expand("layout", layout.id)

        assert content is not None
        self.assertEqual([zone.zone_name for zone in content.zones], ["main", "blank", "gone", "ticker"])
        self.assertIsInstance(content.zones[0].content, ZonePlaylistContent)
        self.assertIsNone(content.zones[1].content)
        self.assertIsNone(content.zones[2].content)
        self.assertIsInstance(content.zones[3].content, ZoneMediaContent)

    def test_zone_with_deleted_playlist_uses_its_media(self) -> None:
        media = self.store.add_media(name="backup.png")
        live_playlist = self.store.add_playlist(self.store.add_media(name="main.png"))
        layout = self.store.add_layout(
            LayoutZoneSnapshot(
                id=uuid.uuid4(),
                zone_name="fallback",
                z_index=0,
                assigned_playlist_id=uuid.uuid4(),
                assigned_media_id=media.id,
            ),
            LayoutZoneSnapshot(
                id=uuid.uuid4(),
                zone_name="primary",
                z_index=1,
                assigned_playlist_id=live_playlist.id,
                assigned_media_id=media.id,
            ),
        )

        content = self.assembler.layout(layout.id)

        assert content is not None
        fallback, primary = content.zones
        self.assertIsInstance(fallback.content, ZoneMediaContent)
        self.assertEqual(fallback.content.item.name, "backup.png")
        self.assertIsInstance(primary.content, ZonePlaylistContent)
        self.assertEqual(primary.content.playlist.id, live_playlist.id)

    def test_missing_or_unknown_content(self) -> None:
        self.assertIsNone(self.assembler.expand("layout", uuid.uuid4()))
        self.assertIsNone(self.assembler.expand("playlist", uuid.uuid4()))
        self.assertIsNone(self.assembler.expand("media", uuid.uuid4()))
        self.assertIsNone(self.assembler.expand("widget", uuid.uuid4()))

    def test_dangling_reference_error_carries_reference(self) -> None:
        content_id = uuid.uuid4()
        error = DanglingReferenceError(content_type="playlist", content_id=content_id, source="emergency")

        self.assertEqual(error.content_type, "playlist")
        self.assertEqual(error.content_id, content_id)
        self.assertIn(str(content_id), str(error))
