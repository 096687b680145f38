from __future__ import annotations

import uuid

from signage.core.config import Settings
from signage.repositories.player_store import (
    LayoutSnapshot,
    LayoutZoneSnapshot,
    MediaSnapshot,
    PlayerContentStore,
    PlaylistItemSnapshot,
    PlaylistSnapshot,
)
from signage.schemas.player_content import (
    LayoutContent,
    LayoutZoneContent,
    PlaylistContent,
    PlaylistItemContent,
    ZoneMediaContent,
    ZonePlaylistContent,
)


class DanglingReferenceError(RuntimeError):
    def __init__(self, *, content_type: str, content_id: uuid.UUID, source: str):
        self.content_type = content_type
        self.content_id = content_id
        self.source = source
        super().__init__(f"{source} references missing {content_type} {content_id}")


class ContentAssembler:
    def __init__(self, store: PlayerContentStore, settings: Settings):
        self._store = store
        self._default_duration = settings.default_item_duration_seconds
        self._default_transition = settings.default_transition_effect

    def expand(self, content_type: str, content_id: uuid.UUID) -> LayoutContent | PlaylistContent | None:
        if content_type == "layout":
            return self.layout(content_id)
        if content_type == "playlist":
            return self.playlist(content_id)
        if content_type == "media":
            return self.media_as_playlist(content_id)
        return None

    def layout(self, layout_id: uuid.UUID) -> LayoutContent | None:
        layout = self._store.get_layout(layout_id)
        if layout is None:
            return None
        return self._layout_content(layout)

    def playlist(self, playlist_id: uuid.UUID) -> PlaylistContent | None:
        playlist = self._store.get_playlist(playlist_id)
        if playlist is None:
            return None
        return self._playlist_content(playlist)

    def media_as_playlist(self, media_id: uuid.UUID) -> PlaylistContent | None:
        media = self._store.get_media(media_id)
        if media is None:
            return None
        return PlaylistContent(
            id=None,
            name=None,
            default_duration=self._default_duration,
            transition_effect=self._default_transition,
            shuffle=False,
            items=[self._media_item(media)],
        )

    def _playlist_content(self, playlist: PlaylistSnapshot) -> PlaylistContent:
        default_duration = playlist.default_duration or self._default_duration
        items = sorted(playlist.items, key=lambda item: item.position)
        return PlaylistContent(
            id=playlist.id,
            name=playlist.name,
            default_duration=default_duration,
            transition_effect=playlist.transition_effect or self._default_transition,
            shuffle=bool(playlist.shuffle),
            items=[self._playlist_item(item, default_duration) for item in items],
        )

    def _playlist_item(self, item: PlaylistItemSnapshot, default_duration: int) -> PlaylistItemContent:
        media = item.media
        duration = item.duration
        if duration is None and media is not None:
            duration = media.duration
        return PlaylistItemContent(
            id=item.id,
            position=item.position,
            type=item.item_type,
            media_type=media.media_type if media is not None else "unknown",
            url=media.url if media is not None else "",
            thumbnail_url=(media.thumbnail_url or "") if media is not None else "",
            name=media.name if media is not None else "",
            duration=duration if duration is not None else default_duration,
            width=media.width if media is not None else None,
            height=media.height if media is not None else None,
            config=media.config if media is not None else None,
        )

    def _media_item(self, media: MediaSnapshot) -> PlaylistItemContent:
        return PlaylistItemContent(
            id=media.id,
            position=0,
            type="media",
            media_type=media.media_type,
            url=media.url,
            thumbnail_url=media.thumbnail_url or "",
            name=media.name,
            duration=media.duration if media.duration is not None else self._default_duration,
            width=media.width,
            height=media.height,
            config=media.config,
        )

    def _layout_content(self, layout: LayoutSnapshot) -> LayoutContent:
        zones = sorted(layout.zones, key=lambda zone: zone.z_index)
        return LayoutContent(
            id=layout.id,
            name=layout.name,
            zones=[self._zone_content(zone) for zone in zones],
        )

    def _zone_content(self, zone: LayoutZoneSnapshot) -> LayoutZoneContent:
        content: ZonePlaylistContent | ZoneMediaContent | None = None
        if zone.assigned_playlist_id is not None:
            playlist = self.playlist(zone.assigned_playlist_id)
            if playlist is not None:
                content = ZonePlaylistContent(playlist=playlist)
        # A deleted playlist falls back to the zone's media reference.
        if content is None and zone.assigned_media_id is not None:
            media = self._store.get_media(zone.assigned_media_id)
            if media is not None:
                content = ZoneMediaContent(item=self._media_item(media))
        return LayoutZoneContent(
            id=zone.id,
            zone_name=zone.zone_name,
            x_percent=zone.x_percent,
            y_percent=zone.y_percent,
            width_percent=zone.width_percent,
            height_percent=zone.height_percent,
            z_index=zone.z_index,
            content=content,
        )
