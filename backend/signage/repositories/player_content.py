from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from signage.db.models import (
    Campaign,
    Layout,
    MediaAsset,
    Playlist,
    PlaylistItem,
    Scene,
    SceneLanguageGroup,
    Schedule,
    ScheduleEntry,
    ScreenGroup,
    Tenant,
    TvDevice,
)
from signage.repositories.player_store import (
    CampaignContentSnapshot,
    CampaignSnapshot,
    CampaignTargetSnapshot,
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


def get_device(db: Session, device_id: uuid.UUID) -> DeviceSnapshot | None:
    device = db.get(TvDevice, device_id)
    if device is None:
        return None
    return DeviceSnapshot(
        id=device.id,
        tenant_id=device.tenant_id,
        name=device.device_name,
        screen_group_id=device.screen_group_id,
        location_id=device.location_id,
        timezone=device.timezone,
        display_language=device.display_language,
        active_scene_id=device.active_scene_id,
        assigned_schedule_id=device.assigned_schedule_id,
        assigned_layout_id=device.assigned_layout_id,
        assigned_playlist_id=device.assigned_playlist_id,
    )


def get_screen_group(db: Session, group_id: uuid.UUID) -> ScreenGroupSnapshot | None:
    group = db.get(ScreenGroup, group_id)
    if group is None:
        return None
    return ScreenGroupSnapshot(
        id=group.id,
        tenant_id=group.tenant_id,
        active_scene_id=group.active_scene_id,
        assigned_schedule_id=group.assigned_schedule_id,
        display_language=group.display_language,
    )


def get_scene(db: Session, scene_id: uuid.UUID) -> SceneSnapshot | None:
    scene = db.get(Scene, scene_id)
    return _scene_snapshot(scene) if scene is not None else None


def list_language_variants(db: Session, language_group_id: uuid.UUID) -> list[SceneSnapshot]:
    scenes = db.scalars(
        select(Scene)
        .where(Scene.language_group_id == language_group_id)
        .order_by(Scene.language_code)
    )
    return [_scene_snapshot(scene) for scene in scenes]


def get_language_group_default(db: Session, language_group_id: uuid.UUID) -> str | None:
    return db.scalars(
        select(SceneLanguageGroup.default_language).where(
            SceneLanguageGroup.id == language_group_id
        )
    ).first()


def list_schedule_entries(db: Session, schedule_id: uuid.UUID) -> list[ScheduleEntrySnapshot]:
    rows = db.scalars(
        select(ScheduleEntry)
        .join(Schedule, Schedule.id == ScheduleEntry.schedule_id)
        .where(
            ScheduleEntry.schedule_id == schedule_id,
            Schedule.is_active.is_(True),
        )
        .order_by(ScheduleEntry.priority.desc(), ScheduleEntry.start_time)
    )
    return [
        ScheduleEntrySnapshot(
            id=entry.id,
            schedule_id=entry.schedule_id,
            target_type=entry.target_type,
            target_id=entry.target_id,
            content_type=entry.content_type,
            content_id=entry.content_id,
            is_active=entry.is_active,
            priority=entry.priority,
            days_of_week=frozenset(entry.days_of_week) if entry.days_of_week is not None else None,
            start_time=entry.start_time,
            end_time=entry.end_time,
            start_date=entry.start_date,
            end_date=entry.end_date,
        )
        for entry in rows
    ]


def list_campaigns(
    db: Session,
    tenant_id: uuid.UUID,
    statuses: frozenset[str],
) -> list[CampaignSnapshot]:
    campaigns = db.scalars(
        select(Campaign)
        .options(selectinload(Campaign.targets), selectinload(Campaign.contents))
        .where(Campaign.tenant_id == tenant_id, Campaign.status.in_(sorted(statuses)))
        .order_by(Campaign.priority.desc())
    )
    return [
        CampaignSnapshot(
            id=campaign.id,
            tenant_id=campaign.tenant_id,
            name=campaign.name,
            status=campaign.status,
            priority=campaign.priority,
            start_at=campaign.start_at,
            end_at=campaign.end_at,
            targets=tuple(
                CampaignTargetSnapshot(target_type=target.target_type, target_id=target.target_id)
                for target in campaign.targets
            ),
            contents=tuple(
                CampaignContentSnapshot(
                    content_type=content.content_type,
                    content_id=content.content_id,
                    weight=content.weight,
                    position=content.position,
                )
                for content in campaign.contents
            ),
        )
        for campaign in campaigns
    ]


def get_emergency_state(db: Session, tenant_id: uuid.UUID) -> EmergencyState | None:
    tenant = db.get(Tenant, tenant_id)
    if tenant is None or tenant.emergency_content_id is None:
        return None
    return EmergencyState(
        tenant_id=tenant.id,
        content_type=tenant.emergency_content_type or "playlist",
        content_id=tenant.emergency_content_id,
        started_at=tenant.emergency_started_at,
        duration_minutes=tenant.emergency_duration_minutes,
    )


def clear_emergency_state(db: Session, tenant_id: uuid.UUID) -> None:
    db.execute(
        update(Tenant)
        .where(Tenant.id == tenant_id)
        .values(
            emergency_content_id=None,
            emergency_content_type=None,
            emergency_started_at=None,
            emergency_duration_minutes=None,
        )
    )
    db.commit()


def record_heartbeat(db: Session, device_id: uuid.UUID, seen_at: datetime) -> None:
    db.execute(
        update(TvDevice)
        .where(TvDevice.id == device_id)
        .values(last_seen=seen_at, is_online=True)
    )
    db.commit()


def get_media(db: Session, media_id: uuid.UUID) -> MediaSnapshot | None:
    media = db.get(MediaAsset, media_id)
    return _media_snapshot(media) if media is not None else None


def get_playlist(db: Session, playlist_id: uuid.UUID) -> PlaylistSnapshot | None:
    playlist = db.scalars(
        select(Playlist)
        .options(selectinload(Playlist.items).selectinload(PlaylistItem.media))
        .where(Playlist.id == playlist_id)
    ).first()
    if playlist is None:
        return None
    return PlaylistSnapshot(
        id=playlist.id,
        name=playlist.name,
        default_duration=playlist.default_duration,
        transition_effect=playlist.transition_effect,
        shuffle=playlist.shuffle,
        items=tuple(
            PlaylistItemSnapshot(
                id=item.id,
                position=item.position,
                item_type=item.item_type,
                duration=item.duration,
                media=_media_snapshot(item.media) if item.media is not None else None,
            )
            for item in playlist.items
        ),
    )


def get_layout(db: Session, layout_id: uuid.UUID) -> LayoutSnapshot | None:
    layout = db.scalars(
        select(Layout).options(selectinload(Layout.zones)).where(Layout.id == layout_id)
    ).first()
    if layout is None:
        return None
    return LayoutSnapshot(
        id=layout.id,
        name=layout.name,
        zones=tuple(
            LayoutZoneSnapshot(
                id=zone.id,
                zone_name=zone.zone_name,
                x_percent=zone.x_percent,
                y_percent=zone.y_percent,
                width_percent=zone.width_percent,
                height_percent=zone.height_percent,
                z_index=zone.z_index,
                assigned_playlist_id=zone.assigned_playlist_id,
                assigned_media_id=zone.assigned_media_id,
            )
            for zone in layout.zones
        ),
    )


class SqlPlayerContentStore:
    """Binds the query functions above to one session."""

    def __init__(self, db: Session):
        self._db = db

    def get_device(self, device_id: uuid.UUID) -> DeviceSnapshot | None:
        return get_device(self._db, device_id)

    def get_screen_group(self, group_id: uuid.UUID) -> ScreenGroupSnapshot | None:
        return get_screen_group(self._db, group_id)

    def get_scene(self, scene_id: uuid.UUID) -> SceneSnapshot | None:
        return get_scene(self._db, scene_id)

    def list_language_variants(self, language_group_id: uuid.UUID) -> list[SceneSnapshot]:
        return list_language_variants(self._db, language_group_id)

    def get_language_group_default(self, language_group_id: uuid.UUID) -> str | None:
        return get_language_group_default(self._db, language_group_id)

    def list_schedule_entries(self, schedule_id: uuid.UUID) -> list[ScheduleEntrySnapshot]:
        return list_schedule_entries(self._db, schedule_id)

    def list_campaigns(
        self,
        tenant_id: uuid.UUID,
        statuses: frozenset[str],
    ) -> list[CampaignSnapshot]:
        return list_campaigns(self._db, tenant_id, statuses)

    def get_emergency_state(self, tenant_id: uuid.UUID) -> EmergencyState | None:
        return get_emergency_state(self._db, tenant_id)

    def clear_emergency_state(self, tenant_id: uuid.UUID) -> None:
        clear_emergency_state(self._db, tenant_id)

    def record_heartbeat(self, device_id: uuid.UUID, seen_at: datetime) -> None:
        record_heartbeat(self._db, device_id, seen_at)

    def get_playlist(self, playlist_id: uuid.UUID) -> PlaylistSnapshot | None:
        return get_playlist(self._db, playlist_id)

    def get_layout(self, layout_id: uuid.UUID) -> LayoutSnapshot | None:
        return get_layout(self._db, layout_id)

    def get_media(self, media_id: uuid.UUID) -> MediaSnapshot | None:
        return get_media(self._db, media_id)


def _scene_snapshot(scene: Scene) -> SceneSnapshot:
    return SceneSnapshot(
        id=scene.id,
        tenant_id=scene.tenant_id,
        name=scene.name,
        layout_id=scene.layout_id,
        primary_playlist_id=scene.primary_playlist_id,
        is_active=scene.is_active,
        language_group_id=scene.language_group_id,
        language_code=scene.language_code,
    )


def _media_snapshot(media: MediaAsset) -> MediaSnapshot:
    return MediaSnapshot(
        id=media.id,
        name=media.name,
        media_type=media.type,
        url=media.url,
        thumbnail_url=media.thumbnail_url,
        duration=media.duration,
        width=media.width,
        height=media.height,
        config=media.config_json,
    )
