from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

ContentSource = Literal[
    "emergency",
    "campaign",
    "device_override",
    "group_override",
    "schedule",
    "legacy_schedule",
    "assigned_layout",
    "assigned_playlist",
]


class DeviceInfo(BaseModel):
    id: uuid.UUID
    name: str
    timezone: str
    resolved_language: str


class CampaignInfo(BaseModel):
    id: uuid.UUID
    name: str
    priority: int
    target: str


class SceneInfo(BaseModel):
    id: uuid.UUID
    name: str
    language_code: str


class EmergencyInfo(BaseModel):
    content_type: str
    content_id: uuid.UUID
    started_at: datetime | None = None
    duration_minutes: int | None = None
    expires_at: datetime | None = None
    priority: int = 999


class PlaylistItemContent(BaseModel):
    id: uuid.UUID
    position: int
    type: str
    media_type: str
    url: str
    thumbnail_url: str
    name: str
    duration: float
    width: int | None = None
    height: int | None = None
    config: dict[str, Any] | None = None


class PlaylistContent(BaseModel):
    # id is None when a single media item is wrapped as a playlist.
    id: uuid.UUID | None = None
    name: str | None = None
    default_duration: int
    transition_effect: str
    shuffle: bool = False
    items: list[PlaylistItemContent] = Field(default_factory=list)


class ZonePlaylistContent(BaseModel):
    type: Literal["playlist"] = "playlist"
    playlist: PlaylistContent


class ZoneMediaContent(BaseModel):
    type: Literal["media"] = "media"
    item: PlaylistItemContent


ZoneContent = Annotated[
    Union[ZonePlaylistContent, ZoneMediaContent],
    Field(discriminator="type"),
]


class LayoutZoneContent(BaseModel):
    id: uuid.UUID
    zone_name: str
    x_percent: float
    y_percent: float
    width_percent: float
    height_percent: float
    z_index: int
    content: ZoneContent | None = None


class LayoutContent(BaseModel):
    id: uuid.UUID
    name: str
    zones: list[LayoutZoneContent] = Field(default_factory=list)


class LayoutResult(BaseModel):
    mode: Literal["layout"] = "layout"
    source: ContentSource
    device: DeviceInfo
    layout: LayoutContent
    campaign: CampaignInfo | None = None
    scene: SceneInfo | None = None
    emergency: EmergencyInfo | None = None


class PlaylistResult(BaseModel):
    mode: Literal["playlist"] = "playlist"
    source: ContentSource
    device: DeviceInfo
    playlist: PlaylistContent
    campaign: CampaignInfo | None = None
    scene: SceneInfo | None = None
    emergency: EmergencyInfo | None = None


class EmptyResult(BaseModel):
    mode: Literal["empty"] = "empty"
    source: Literal["none"] = "none"
    device: DeviceInfo


PlayerContentResult = Annotated[
    Union[LayoutResult, PlaylistResult, EmptyResult],
    Field(discriminator="mode"),
]


class CampaignPreviewContent(BaseModel):
    content_type: str
    content_id: uuid.UUID
    weight: int
    position: int


class CampaignPreviewResponse(BaseModel):
    screen_id: uuid.UUID
    evaluated_at: datetime
    campaign: CampaignInfo | None = None
    content: CampaignPreviewContent | None = None


class ScheduledScenePreviewResponse(BaseModel):
    screen_id: uuid.UUID
    evaluated_at: datetime
    local_time: str
    day_of_week: int
    schedule_id: uuid.UUID | None = None
    entry_id: uuid.UUID | None = None
    priority: int | None = None
    scene: SceneInfo | None = None
