"""Player content resolution: what should this screen show right now.

Tiers are tried in a fixed order and the first one that yields content wins:

    emergency -> campaign -> device_override -> group_override -> schedule
    -> legacy_schedule -> assigned_layout -> assigned_playlist -> empty

The resolver only talks to a ``PlayerContentStore``; ``PlayerContentService``
binds it to a database session per call.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from signage.core.config import Settings
from signage.repositories.player_content import SqlPlayerContentStore
from signage.repositories.player_store import (
    DeviceSnapshot,
    EmergencyState,
    PlayerContentStore,
    SceneSnapshot,
    ScreenGroupSnapshot,
)
from signage.schemas.player_content import (
    CampaignInfo,
    CampaignPreviewContent,
    CampaignPreviewResponse,
    ContentSource,
    DeviceInfo,
    EmergencyInfo,
    EmptyResult,
    LayoutContent,
    LayoutResult,
    PlayerContentResult,
    PlaylistResult,
    ScheduledScenePreviewResponse,
    SceneInfo,
)
from signage.services.campaign_targeting import LIVE_CAMPAIGN_STATUSES, CampaignTargetingResolver
from signage.services.content_assembly import ContentAssembler, DanglingReferenceError
from signage.services.emergency import EMERGENCY_CONTENT_TYPES, EmergencyOverrideResolver
from signage.services.language_variants import LanguageVariantResolver, StoreLanguageVariantResolver
from signage.services.rotation import RandomSource, WeightedContentRotator, build_random_source
from signage.services.scene_resolution import (
    LegacyScheduleResolver,
    SceneResolver,
    SceneSelection,
    effective_schedule_id,
    resolve_display_language,
    scene_content,
)
from signage.services.time_windows import LocalClock, local_clock


class DeviceNotFoundError(LookupError):
    def __init__(self, screen_id: uuid.UUID):
        self.screen_id = screen_id
        super().__init__(f"Screen not found: {screen_id}")


@dataclass(frozen=True)
class ResolutionContext:
    device: DeviceSnapshot
    group: ScreenGroupSnapshot | None
    language: str
    clock: LocalClock
    now: datetime
    device_info: DeviceInfo


class PlayerContentResolver:
    def __init__(
        self,
        store: PlayerContentStore,
        *,
        settings: Settings,
        rotator: WeightedContentRotator,
        language_resolver: LanguageVariantResolver | None = None,
    ):
        self._store = store
        self._settings = settings
        self._assembler = ContentAssembler(store, settings)
        self._emergency = EmergencyOverrideResolver(store)
        self._campaigns = CampaignTargetingResolver(
            rotator,
            default_timezone=settings.default_timezone,
        )
        self._scenes = SceneResolver(
            store,
            language_resolver if language_resolver is not None else StoreLanguageVariantResolver(store),
        )
        self._legacy = LegacyScheduleResolver(store)
        self._logger = logging.getLogger("signage.player_content")

    def resolve(self, screen_id: uuid.UUID, now: datetime) -> PlayerContentResult:
        context = self.load_context(screen_id, now)
        if self._settings.heartbeat_enabled:
            self._store.record_heartbeat(context.device.id, context.now)

        tiers: tuple[Callable[[ResolutionContext], PlayerContentResult | None], ...] = (
            self._emergency_tier,
            self._campaign_tier,
            self._device_override_tier,
            self._group_override_tier,
            self._schedule_tier,
            self._legacy_schedule_tier,
            self._assigned_layout_tier,
            self._assigned_playlist_tier,
        )
        for tier in tiers:
            result = tier(context)
            if result is not None:
                self._logger.debug(
                    "resolved screen_id=%s source=%s mode=%s",
                    screen_id,
                    result.source,
                    result.mode,
                )
                return result

        self._logger.debug("resolved screen_id=%s source=none mode=empty", screen_id)
        return EmptyResult(device=context.device_info)

    def load_context(self, screen_id: uuid.UUID, now: datetime) -> ResolutionContext:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        device = self._store.get_device(screen_id)
        if device is None:
            raise DeviceNotFoundError(screen_id)

        group = None
        if device.screen_group_id is not None:
            group = self._store.get_screen_group(device.screen_group_id)

        language = resolve_display_language(device, group, self._settings.default_language)
        clock = local_clock(now, device.timezone, default=self._settings.default_timezone)
        return ResolutionContext(
            device=device,
            group=group,
            language=language,
            clock=clock,
            now=now,
            device_info=DeviceInfo(
                id=device.id,
                name=device.name,
                timezone=clock.timezone,
                resolved_language=language,
            ),
        )

    def preview_campaign(self, screen_id: uuid.UUID, now: datetime) -> CampaignPreviewResponse:
        context = self.load_context(screen_id, now)
        match = self._campaigns.resolve(
            context.device,
            self._store.list_campaigns(context.device.tenant_id, LIVE_CAMPAIGN_STATUSES),
            context.now,
        )
        if match is None:
            return CampaignPreviewResponse(screen_id=screen_id, evaluated_at=context.now)
        return CampaignPreviewResponse(
            screen_id=screen_id,
            evaluated_at=context.now,
            campaign=CampaignInfo(
                id=match.campaign.id,
                name=match.campaign.name,
                priority=match.campaign.priority,
                target=match.effective_target,
            ),
            content=CampaignPreviewContent(
                content_type=match.content.content_type,
                content_id=match.content.content_id,
                weight=match.content.effective_weight,
                position=match.content.position,
            ),
        )

    def preview_scheduled_scene(
        self,
        screen_id: uuid.UUID,
        now: datetime,
    ) -> ScheduledScenePreviewResponse:
        context = self.load_context(screen_id, now)
        response: dict[str, Any] = {
            "screen_id": screen_id,
            "evaluated_at": context.now,
            "local_time": context.clock.time.isoformat(timespec="minutes"),
            "day_of_week": context.clock.day_of_week,
            "schedule_id": effective_schedule_id(context.device, context.group),
        }
        selection = self._scenes.scheduled_scene(
            context.device,
            context.group,
            context.language,
            context.clock,
        )
        if selection is not None and selection.entry is not None:
            response["entry_id"] = selection.entry.id
            response["priority"] = selection.entry.priority
            response["scene"] = _scene_info(selection.scene)
        return ScheduledScenePreviewResponse(**response)

    def _emergency_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        state = self._emergency.resolve(context.device.tenant_id, context.now)
        if state is None:
            return None

        scene: SceneSnapshot | None = None
        content_type = state.content_type
        content_id = state.content_id
        if content_type not in EMERGENCY_CONTENT_TYPES:
            raise DanglingReferenceError(
                content_type=content_type,
                content_id=content_id,
                source="emergency",
            )
        if content_type == "scene":
            # Emergency scenes are shown as authored, without language substitution.
            scene = self._store.get_scene(state.content_id)
            target = scene_content(scene) if scene is not None else None
            if target is None:
                raise DanglingReferenceError(
                    content_type="scene",
                    content_id=state.content_id,
                    source="emergency",
                )
            content_type, content_id = target

        content = self._assembler.expand(content_type, content_id)
        if content is None:
            raise DanglingReferenceError(
                content_type=content_type,
                content_id=content_id,
                source="emergency",
            )
        return self._build_result(
            context,
            source="emergency",
            content=content,
            scene=_scene_info(scene) if scene is not None else None,
            emergency=_emergency_info(state),
        )

    def _campaign_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        campaigns = self._store.list_campaigns(context.device.tenant_id, LIVE_CAMPAIGN_STATUSES)
        match = self._campaigns.resolve(context.device, campaigns, context.now)
        if match is None:
            return None
        return self._expand_and_build(
            context,
            source="campaign",
            content_type=match.content.content_type,
            content_id=match.content.content_id,
            campaign=CampaignInfo(
                id=match.campaign.id,
                name=match.campaign.name,
                priority=match.campaign.priority,
                target=match.effective_target,
            ),
        )

    def _device_override_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        selection = self._scenes.device_override(context.device, context.language)
        return self._scene_result(context, "device_override", selection)

    def _group_override_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        selection = self._scenes.group_override(context.device, context.group, context.language)
        return self._scene_result(context, "group_override", selection)

    def _schedule_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        selection = self._scenes.scheduled_scene(
            context.device,
            context.group,
            context.language,
            context.clock,
        )
        return self._scene_result(context, "schedule", selection)

    def _legacy_schedule_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        selection = self._legacy.resolve(context.device, context.clock)
        if selection is None:
            return None
        return self._expand_and_build(
            context,
            source="legacy_schedule",
            content_type=selection.content_type,
            content_id=selection.content_id,
        )

    def _assigned_layout_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        if context.device.assigned_layout_id is None:
            return None
        return self._expand_and_build(
            context,
            source="assigned_layout",
            content_type="layout",
            content_id=context.device.assigned_layout_id,
        )

    def _assigned_playlist_tier(self, context: ResolutionContext) -> PlayerContentResult | None:
        if context.device.assigned_playlist_id is None:
            return None
        return self._expand_and_build(
            context,
            source="assigned_playlist",
            content_type="playlist",
            content_id=context.device.assigned_playlist_id,
        )

    def _scene_result(
        self,
        context: ResolutionContext,
        source: ContentSource,
        selection: SceneSelection | None,
    ) -> PlayerContentResult | None:
        if selection is None:
            return None
        return self._expand_and_build(
            context,
            source=source,
            content_type=selection.content_type,
            content_id=selection.content_id,
            scene=_scene_info(selection.scene),
        )

    def _expand_and_build(
        self,
        context: ResolutionContext,
        *,
        source: ContentSource,
        content_type: str,
        content_id: uuid.UUID,
        campaign: CampaignInfo | None = None,
        scene: SceneInfo | None = None,
    ) -> PlayerContentResult | None:
        content = self._assembler.expand(content_type, content_id)
        if content is None:
            self._logger.warning(
                "skipping tier with missing content source=%s content_type=%s content_id=%s screen_id=%s",
                source,
                content_type,
                content_id,
                context.device.id,
            )
            return None
        return self._build_result(context, source=source, content=content, campaign=campaign, scene=scene)

    def _build_result(
        self,
        context: ResolutionContext,
        *,
        source: ContentSource,
        content: Any,
        campaign: CampaignInfo | None = None,
        scene: SceneInfo | None = None,
        emergency: EmergencyInfo | None = None,
    ) -> PlayerContentResult:
        if isinstance(content, LayoutContent):
            return LayoutResult(
                source=source,
                device=context.device_info,
                layout=content,
                campaign=campaign,
                scene=scene,
                emergency=emergency,
            )
        return PlaylistResult(
            source=source,
            device=context.device_info,
            playlist=content,
            campaign=campaign,
            scene=scene,
            emergency=emergency,
        )


def _scene_info(scene: SceneSnapshot) -> SceneInfo:
    return SceneInfo(id=scene.id, name=scene.name, language_code=scene.language_code)


def _emergency_info(state: EmergencyState) -> EmergencyInfo:
    return EmergencyInfo(
        content_type=state.content_type,
        content_id=state.content_id,
        started_at=state.started_at,
        duration_minutes=state.duration_minutes,
        expires_at=state.expires_at,
    )


class PlayerContentService:
    def __init__(
        self,
        *,
        settings: Settings,
        session_factory: sessionmaker,
        store_builder: Callable[[Session], PlayerContentStore] = SqlPlayerContentStore,
        language_resolver_builder: Callable[[PlayerContentStore], LanguageVariantResolver] | None = None,
        random_source: RandomSource | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._settings = settings
        self._session_factory = session_factory
        self._store_builder = store_builder
        self._language_resolver_builder = language_resolver_builder
        self._rotator = WeightedContentRotator(
            random_source if random_source is not None else build_random_source(settings.rotation_seed)
        )
        self._clock = clock

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return datetime.now(timezone.utc)

    def resolve_player_content(
        self,
        screen_id: uuid.UUID,
        now: datetime | None = None,
    ) -> PlayerContentResult:
        evaluated_at = now or self.now()
        with self._session_factory() as db:
            return self._build_resolver(db).resolve(screen_id, evaluated_at)

    def preview_campaign(
        self,
        screen_id: uuid.UUID,
        now: datetime | None = None,
    ) -> CampaignPreviewResponse:
        evaluated_at = now or self.now()
        with self._session_factory() as db:
            return self._build_resolver(db).preview_campaign(screen_id, evaluated_at)

    def preview_scheduled_scene(
        self,
        screen_id: uuid.UUID,
        now: datetime | None = None,
    ) -> ScheduledScenePreviewResponse:
        evaluated_at = now or self.now()
        with self._session_factory() as db:
            return self._build_resolver(db).preview_scheduled_scene(screen_id, evaluated_at)

    def _build_resolver(self, db: Session) -> PlayerContentResolver:
        store = self._store_builder(db)
        language_resolver = None
        if self._language_resolver_builder is not None:
            language_resolver = self._language_resolver_builder(store)
        return PlayerContentResolver(
            store,
            settings=self._settings,
            rotator=self._rotator,
            language_resolver=language_resolver,
        )
