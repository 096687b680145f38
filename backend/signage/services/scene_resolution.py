from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import time

from signage.repositories.player_store import (
    DeviceSnapshot,
    PlayerContentStore,
    SceneSnapshot,
    ScheduleEntrySnapshot,
    ScreenGroupSnapshot,
)
from signage.services.language_variants import LanguageVariantResolver, normalize_language
from signage.services.time_windows import LocalClock, TimeWindow, clock_matches

LEGACY_CONTENT_TYPES = frozenset({"playlist", "layout", "media"})
LEGACY_ADDRESSING_TYPES = frozenset({"screen", "screen_group", "all"})


@dataclass(frozen=True)
class SceneSelection:
    scene: SceneSnapshot
    requested_scene_id: uuid.UUID
    content_type: str
    content_id: uuid.UUID
    entry: ScheduleEntrySnapshot | None = None


@dataclass(frozen=True)
class LegacySelection:
    entry: ScheduleEntrySnapshot
    content_type: str
    content_id: uuid.UUID


def resolve_display_language(
    device: DeviceSnapshot,
    group: ScreenGroupSnapshot | None,
    default: str = "en",
) -> str:
    return (
        normalize_language(device.display_language)
        or (normalize_language(group.display_language) if group is not None else None)
        or default
    )


def effective_schedule_id(
    device: DeviceSnapshot,
    group: ScreenGroupSnapshot | None,
) -> uuid.UUID | None:
    if device.assigned_schedule_id is not None:
        return device.assigned_schedule_id
    if group is not None:
        return group.assigned_schedule_id
    return None


def scene_content(scene: SceneSnapshot) -> tuple[str, uuid.UUID] | None:
    if scene.layout_id is not None:
        return "layout", scene.layout_id
    if scene.primary_playlist_id is not None:
        return "playlist", scene.primary_playlist_id
    return None


def entry_window(entry: ScheduleEntrySnapshot) -> TimeWindow:
    return TimeWindow(
        days_of_week=entry.days_of_week,
        start=entry.start_time,
        end=entry.end_time,
        start_date=entry.start_date,
        end_date=entry.end_date,
    )


def _entry_rank(entry: ScheduleEntrySnapshot) -> tuple[int, time, str]:
    return (-entry.priority, entry.start_time or time.min, str(entry.id))


def pick_matching_entry(
    entries: Iterable[ScheduleEntrySnapshot],
    clock: LocalClock,
    *,
    accept: Callable[[ScheduleEntrySnapshot], bool] = lambda entry: True,
) -> ScheduleEntrySnapshot | None:
    matching = [
        entry
        for entry in entries
        if entry.is_active and accept(entry) and clock_matches(clock, entry_window(entry))
    ]
    if not matching:
        return None
    return min(matching, key=_entry_rank)


def legacy_entry_content(
    entry: ScheduleEntrySnapshot,
    device: DeviceSnapshot,
) -> tuple[str, uuid.UUID] | None:
    if entry.target_type in LEGACY_CONTENT_TYPES:
        if entry.target_id is None:
            return None
        return entry.target_type, entry.target_id

    if entry.target_type not in LEGACY_ADDRESSING_TYPES:
        return None
    if entry.content_type not in LEGACY_CONTENT_TYPES or entry.content_id is None:
        return None
    if entry.target_type == "screen" and entry.target_id != device.id:
        return None
    if entry.target_type == "screen_group":
        if device.screen_group_id is None or entry.target_id != device.screen_group_id:
            return None
    return entry.content_type, entry.content_id


class SceneResolver:
    def __init__(self, store: PlayerContentStore, language_resolver: LanguageVariantResolver):
        self._store = store
        self._language_resolver = language_resolver
        self._logger = logging.getLogger("signage.scenes")

    def device_override(self, device: DeviceSnapshot, language: str) -> SceneSelection | None:
        if device.active_scene_id is None:
            return None
        return self._select_scene(device.active_scene_id, language)

    def group_override(
        self,
        device: DeviceSnapshot,
        group: ScreenGroupSnapshot | None,
        language: str,
    ) -> SceneSelection | None:
        if device.screen_group_id is None or group is None or group.active_scene_id is None:
            return None
        return self._select_scene(group.active_scene_id, language)

    def scheduled_scene(
        self,
        device: DeviceSnapshot,
        group: ScreenGroupSnapshot | None,
        language: str,
        clock: LocalClock,
    ) -> SceneSelection | None:
        entry = self.scheduled_scene_entry(device, group, clock)
        if entry is None or entry.target_id is None:
            return None
        selection = self._select_scene(entry.target_id, language)
        if selection is None:
            return None
        return SceneSelection(
            scene=selection.scene,
            requested_scene_id=selection.requested_scene_id,
            content_type=selection.content_type,
            content_id=selection.content_id,
            entry=entry,
        )

    def scheduled_scene_entry(
        self,
        device: DeviceSnapshot,
        group: ScreenGroupSnapshot | None,
        clock: LocalClock,
    ) -> ScheduleEntrySnapshot | None:
        schedule_id = effective_schedule_id(device, group)
        if schedule_id is None:
            return None
        entries = self._store.list_schedule_entries(schedule_id)
        return pick_matching_entry(
            entries,
            clock,
            accept=lambda entry: entry.target_type == "scene" and self._base_scene_is_active(entry),
        )

    def _base_scene_is_active(self, entry: ScheduleEntrySnapshot) -> bool:
        if entry.target_id is None:
            return False
        scene = self._store.get_scene(entry.target_id)
        return scene is not None and scene.is_active

    def _select_scene(self, scene_id: uuid.UUID, language: str) -> SceneSelection | None:
        resolved_id = self._language_resolver.resolve(scene_id, language)
        if resolved_id is None:
            return None
        scene = self._store.get_scene(resolved_id)
        if scene is None or not scene.is_active:
            self._logger.debug("scene unavailable scene_id=%s resolved_id=%s", scene_id, resolved_id)
            return None
        content = scene_content(scene)
        if content is None:
            self._logger.debug("scene has neither layout nor playlist scene_id=%s", scene.id)
            return None
        return SceneSelection(
            scene=scene,
            requested_scene_id=scene_id,
            content_type=content[0],
            content_id=content[1],
        )


class LegacyScheduleResolver:
    """Direct-content schedule entries; no language substitution applies."""

    def __init__(self, store: PlayerContentStore):
        self._store = store

    def resolve(self, device: DeviceSnapshot, clock: LocalClock) -> LegacySelection | None:
        if device.assigned_schedule_id is None:
            return None
        entries = self._store.list_schedule_entries(device.assigned_schedule_id)
        entry = pick_matching_entry(
            entries,
            clock,
            accept=lambda candidate: legacy_entry_content(candidate, device) is not None,
        )
        if entry is None:
            return None
        content = legacy_entry_content(entry, device)
        if content is None:
            return None
        return LegacySelection(entry=entry, content_type=content[0], content_id=content[1])
