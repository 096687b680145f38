from __future__ import annotations

import uuid
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime

from signage.repositories.player_store import (
    CampaignSnapshot,
    DeviceSnapshot,
    EmergencyState,
    LayoutSnapshot,
    LayoutZoneSnapshot,
    MediaSnapshot,
    PlaylistItemSnapshot,
    PlaylistSnapshot,
    SceneSnapshot,
    ScheduleEntrySnapshot,
    ScreenGroupSnapshot,
)

TENANT_ID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")


class InMemoryPlayerContentStore:
    def __init__(self) -> None:
        self.devices: dict[uuid.UUID, DeviceSnapshot] = {}
        self.groups: dict[uuid.UUID, ScreenGroupSnapshot] = {}
        self.scenes: dict[uuid.UUID, SceneSnapshot] = {}
        self.language_defaults: dict[uuid.UUID, str] = {}
        self.schedule_entries: dict[uuid.UUID, list[ScheduleEntrySnapshot]] = defaultdict(list)
        self.campaigns: list[CampaignSnapshot] = []
        self.emergencies: dict[uuid.UUID, EmergencyState] = {}
        self.playlists: dict[uuid.UUID, PlaylistSnapshot] = {}
        self.layouts: dict[uuid.UUID, LayoutSnapshot] = {}
        self.media: dict[uuid.UUID, MediaSnapshot] = {}
        self.heartbeats: list[tuple[uuid.UUID, datetime]] = []
        self.cleared_emergencies: list[uuid.UUID] = []

    # seeding helpers

    def add_device(self, **fields) -> DeviceSnapshot:
        fields.setdefault("id", uuid.uuid4())
        fields.setdefault("tenant_id", TENANT_ID)
        fields.setdefault("name", "Lobby TV")
        device = DeviceSnapshot(**fields)
        self.devices[device.id] = device
        return device

    def add_group(self, **fields) -> ScreenGroupSnapshot:
        fields.setdefault("id", uuid.uuid4())
        fields.setdefault("tenant_id", TENANT_ID)
        group = ScreenGroupSnapshot(**fields)
        self.groups[group.id] = group
        return group

    def add_scene(self, **fields) -> SceneSnapshot:
        fields.setdefault("id", uuid.uuid4())
        fields.setdefault("tenant_id", TENANT_ID)
        fields.setdefault("name", "Scene")
        scene = SceneSnapshot(**fields)
        self.scenes[scene.id] = scene
        return scene

    def add_media(self, **fields) -> MediaSnapshot:
        fields.setdefault("id", uuid.uuid4())
        fields.setdefault("name", "poster.png")
        fields.setdefault("media_type", "image")
        fields.setdefault("url", f"https://cdn.example.test/{fields['id']}.png")
        media = MediaSnapshot(**fields)
        self.media[media.id] = media
        return media

    def add_playlist(self, *media: MediaSnapshot, **fields) -> PlaylistSnapshot:
        fields.setdefault("id", uuid.uuid4())
        fields.setdefault("name", "Playlist")
        if "items" not in fields:
            fields["items"] = tuple(
                PlaylistItemSnapshot(id=uuid.uuid4(), position=index, media=item)
                for index, item in enumerate(media)
            )
        playlist = PlaylistSnapshot(**fields)
        self.playlists[playlist.id] = playlist
        return playlist

    def add_layout(self, *zones: LayoutZoneSnapshot, **fields) -> LayoutSnapshot:
        fields.setdefault("id", uuid.uuid4())
        fields.setdefault("name", "Layout")
        layout = LayoutSnapshot(zones=tuple(zones), **fields)
        self.layouts[layout.id] = layout
        return layout

    def add_schedule_entry(self, schedule_id: uuid.UUID, **fields) -> ScheduleEntrySnapshot:
        fields.setdefault("id", uuid.uuid4())
        entry = ScheduleEntrySnapshot(schedule_id=schedule_id, **fields)
        self.schedule_entries[schedule_id].append(entry)
        return entry

    def add_campaign(self, **fields) -> CampaignSnapshot:
        fields.setdefault("id", uuid.uuid4())
        fields.setdefault("tenant_id", TENANT_ID)
        fields.setdefault("name", "Campaign")
        fields.setdefault("status", "active")
        campaign = CampaignSnapshot(**fields)
        self.campaigns.append(campaign)
        return campaign

    def set_emergency(self, **fields) -> EmergencyState:
        fields.setdefault("tenant_id", TENANT_ID)
        state = EmergencyState(**fields)
        self.emergencies[state.tenant_id] = state
        return state

    def deactivate_scene(self, scene_id: uuid.UUID) -> None:
        self.scenes[scene_id] = replace(self.scenes[scene_id], is_active=False)

    # PlayerContentStore

    def get_device(self, device_id: uuid.UUID) -> DeviceSnapshot | None:
        return self.devices.get(device_id)

    def get_screen_group(self, group_id: uuid.UUID) -> ScreenGroupSnapshot | None:
        return self.groups.get(group_id)

    def get_scene(self, scene_id: uuid.UUID) -> SceneSnapshot | None:
        return self.scenes.get(scene_id)

    def list_language_variants(self, language_group_id: uuid.UUID) -> list[SceneSnapshot]:
        return [scene for scene in self.scenes.values() if scene.language_group_id == language_group_id]

    def get_language_group_default(self, language_group_id: uuid.UUID) -> str | None:
        return self.language_defaults.get(language_group_id)

    def list_schedule_entries(self, schedule_id: uuid.UUID) -> list[ScheduleEntrySnapshot]:
        return list(self.schedule_entries.get(schedule_id, []))

    def list_campaigns(self, tenant_id: uuid.UUID, statuses: frozenset[str]) -> list[CampaignSnapshot]:
        return [
            campaign
            for campaign in self.campaigns
            if campaign.tenant_id == tenant_id and campaign.status in statuses
        ]

    def get_emergency_state(self, tenant_id: uuid.UUID) -> EmergencyState | None:
        return self.emergencies.get(tenant_id)

    def clear_emergency_state(self, tenant_id: uuid.UUID) -> None:
        self.emergencies.pop(tenant_id, None)
        self.cleared_emergencies.append(tenant_id)

    def record_heartbeat(self, device_id: uuid.UUID, seen_at: datetime) -> None:
        self.heartbeats.append((device_id, seen_at))

    def get_playlist(self, playlist_id: uuid.UUID) -> PlaylistSnapshot | None:
        return self.playlists.get(playlist_id)

    def get_layout(self, layout_id: uuid.UUID) -> LayoutSnapshot | None:
        return self.layouts.get(layout_id)

    def get_media(self, media_id: uuid.UUID) -> MediaSnapshot | None:
        return self.media.get(media_id)


class ScriptedRandom:
    """Returns queued values in order and counts every draw."""

    def __init__(self, *values: float):
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if not self._values:
            raise AssertionError("random() called more often than scripted")
        return self._values.pop(0)


@contextmanager
def _unused_session():
    yield object()


class UnusedSessionFactory:
    def __call__(self):
        return _unused_session()
