from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Protocol


@dataclass(frozen=True)
class DeviceSnapshot:
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str = ""
    screen_group_id: uuid.UUID | None = None
    location_id: uuid.UUID | None = None
    timezone: str | None = None
    display_language: str | None = None
    active_scene_id: uuid.UUID | None = None
    assigned_schedule_id: uuid.UUID | None = None
    assigned_layout_id: uuid.UUID | None = None
    assigned_playlist_id: uuid.UUID | None = None


@dataclass(frozen=True)
class ScreenGroupSnapshot:
    id: uuid.UUID
    tenant_id: uuid.UUID
    active_scene_id: uuid.UUID | None = None
    assigned_schedule_id: uuid.UUID | None = None
    display_language: str | None = None


@dataclass(frozen=True)
class SceneSnapshot:
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str = ""
    layout_id: uuid.UUID | None = None
    primary_playlist_id: uuid.UUID | None = None
    is_active: bool = True
    language_group_id: uuid.UUID | None = None
    language_code: str = "en"


@dataclass(frozen=True)
class ScheduleEntrySnapshot:
    id: uuid.UUID
    schedule_id: uuid.UUID
    target_type: str
    target_id: uuid.UUID | None = None
    content_type: str | None = None
    content_id: uuid.UUID | None = None
    is_active: bool = True
    priority: int = 0
    days_of_week: frozenset[int] | None = None
    start_time: time | None = None
    end_time: time | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class CampaignTargetSnapshot:
    target_type: str
    target_id: uuid.UUID | None = None


@dataclass(frozen=True)
class CampaignContentSnapshot:
    content_type: str
    content_id: uuid.UUID
    weight: int | None = 1
    position: int = 0


@dataclass(frozen=True)
class CampaignSnapshot:
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    status: str
    priority: int = 0
    start_at: datetime | None = None
    end_at: datetime | None = None
    targets: tuple[CampaignTargetSnapshot, ...] = ()
    contents: tuple[CampaignContentSnapshot, ...] = ()


@dataclass(frozen=True)
class EmergencyState:
    tenant_id: uuid.UUID
    content_type: str
    content_id: uuid.UUID
    started_at: datetime | None = None
    duration_minutes: int | None = None

    @property
    def expires_at(self) -> datetime | None:
        # A missing start or duration means the broadcast never expires on its own.
        if self.duration_minutes is None or self.started_at is None:
            return None
        return self.started_at + timedelta(minutes=self.duration_minutes)

    def is_expired(self, now: datetime) -> bool:
        expires_at = self.expires_at
        return expires_at is not None and expires_at <= now


@dataclass(frozen=True)
class MediaSnapshot:
    id: uuid.UUID
    name: str
    media_type: str
    url: str
    thumbnail_url: str | None = None
    duration: float | None = None
    width: int | None = None
    height: int | None = None
    config: dict[str, Any] | None = None


@dataclass(frozen=True)
class PlaylistItemSnapshot:
    id: uuid.UUID
    position: int
    item_type: str = "media"
    duration: float | None = None
    media: MediaSnapshot | None = None


@dataclass(frozen=True)
class PlaylistSnapshot:
    id: uuid.UUID
    name: str
    default_duration: int | None = None
    transition_effect: str | None = None
    shuffle: bool | None = None
    items: tuple[PlaylistItemSnapshot, ...] = ()


@dataclass(frozen=True)
class LayoutZoneSnapshot:
    id: uuid.UUID
    zone_name: str
    x_percent: float = 0.0
    y_percent: float = 0.0
    width_percent: float = 100.0
    height_percent: float = 100.0
    z_index: int = 0
    assigned_playlist_id: uuid.UUID | None = None
    assigned_media_id: uuid.UUID | None = None


@dataclass(frozen=True)
class LayoutSnapshot:
    id: uuid.UUID
    name: str
    zones: tuple[LayoutZoneSnapshot, ...] = field(default_factory=tuple)


class PlayerContentStore(Protocol):
    """Read contract of the resolution engine, plus its two idempotent writes."""

    def get_device(self, device_id: uuid.UUID) -> DeviceSnapshot | None: ...

    def get_screen_group(self, group_id: uuid.UUID) -> ScreenGroupSnapshot | None: ...

    def get_scene(self, scene_id: uuid.UUID) -> SceneSnapshot | None: ...

    def list_language_variants(self, language_group_id: uuid.UUID) -> list[SceneSnapshot]: ...

    def get_language_group_default(self, language_group_id: uuid.UUID) -> str | None: ...

    def list_schedule_entries(self, schedule_id: uuid.UUID) -> list[ScheduleEntrySnapshot]: ...

    def list_campaigns(
        self,
        tenant_id: uuid.UUID,
        statuses: frozenset[str],
    ) -> list[CampaignSnapshot]: ...

    def get_emergency_state(self, tenant_id: uuid.UUID) -> EmergencyState | None: ...

    def clear_emergency_state(self, tenant_id: uuid.UUID) -> None: ...

    def record_heartbeat(self, device_id: uuid.UUID, seen_at: datetime) -> None: ...

    def get_playlist(self, playlist_id: uuid.UUID) -> PlaylistSnapshot | None: ...

    def get_layout(self, layout_id: uuid.UUID) -> LayoutSnapshot | None: ...

    def get_media(self, media_id: uuid.UUID) -> MediaSnapshot | None: ...
