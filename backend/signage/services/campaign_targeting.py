from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from signage.repositories.player_store import (
    CampaignSnapshot,
    CampaignTargetSnapshot,
    DeviceSnapshot,
)
from signage.services.rotation import RotationCandidate, WeightedContentRotator
from signage.services.time_windows import resolve_timezone

LIVE_CAMPAIGN_STATUSES = frozenset({"active", "scheduled"})

TARGET_SPECIFICITY: dict[str, int] = {
    "screen": 1,
    "screen_group": 2,
    "location": 3,
    "all": 4,
}


@dataclass(frozen=True)
class CampaignMatch:
    campaign: CampaignSnapshot
    effective_target: str
    specificity: int
    content: RotationCandidate


@dataclass(frozen=True)
class _RankedCampaign:
    campaign: CampaignSnapshot
    effective_target: str
    specificity: int


def _bound_instant(value: datetime, zone: tzinfo) -> datetime:
    # Naive bounds are wall-clock times authored for the screen's own zone.
    if value.tzinfo is None:
        value = value.replace(tzinfo=zone)
    # Same-tzinfo comparisons ignore fold, so compare in UTC.
    return value.astimezone(timezone.utc)


def campaign_is_live(campaign: CampaignSnapshot, now: datetime, zone: tzinfo) -> bool:
    if campaign.status not in LIVE_CAMPAIGN_STATUSES:
        return False
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now_utc = now.astimezone(timezone.utc)
    if campaign.start_at is not None and _bound_instant(campaign.start_at, zone) > now_utc:
        return False
    if campaign.end_at is not None and _bound_instant(campaign.end_at, zone) <= now_utc:
        return False
    return True


def target_specificity(target: CampaignTargetSnapshot, device: DeviceSnapshot) -> int | None:
    kind = target.target_type
    if kind == "all":
        return TARGET_SPECIFICITY["all"]
    if target.target_id is None:
        return None
    if kind == "screen" and target.target_id == device.id:
        return TARGET_SPECIFICITY["screen"]
    if kind == "screen_group" and device.screen_group_id is not None:
        if target.target_id == device.screen_group_id:
            return TARGET_SPECIFICITY["screen_group"]
    if kind == "location" and device.location_id is not None:
        if target.target_id == device.location_id:
            return TARGET_SPECIFICITY["location"]
    return None


def _best_target(
    targets: Iterable[CampaignTargetSnapshot],
    device: DeviceSnapshot,
) -> tuple[str, int] | None:
    best: tuple[str, int] | None = None
    for target in targets:
        specificity = target_specificity(target, device)
        if specificity is None:
            continue
        if best is None or specificity < best[1]:
            best = (target.target_type, specificity)
    return best


class CampaignTargetingResolver:
    def __init__(self, rotator: WeightedContentRotator, *, default_timezone: str = "UTC"):
        self._rotator = rotator
        self._default_timezone = default_timezone
        self._logger = logging.getLogger("signage.campaigns")

    def select_campaign(
        self,
        device: DeviceSnapshot,
        campaigns: Iterable[CampaignSnapshot],
        now: datetime,
    ) -> tuple[CampaignSnapshot, str, int] | None:
        zone = resolve_timezone(device.timezone, self._default_timezone)
        ranked: list[_RankedCampaign] = []
        for campaign in campaigns:
            if campaign.tenant_id != device.tenant_id:
                continue
            if not campaign_is_live(campaign, now, zone):
                continue
            best = _best_target(campaign.targets, device)
            if best is None:
                continue
            ranked.append(
                _RankedCampaign(campaign=campaign, effective_target=best[0], specificity=best[1])
            )

        if not ranked:
            return None
        ranked.sort(key=lambda item: (item.specificity, -item.campaign.priority, str(item.campaign.id)))
        winner = ranked[0]
        return winner.campaign, winner.effective_target, winner.specificity

    def resolve(
        self,
        device: DeviceSnapshot,
        campaigns: Iterable[CampaignSnapshot],
        now: datetime,
    ) -> CampaignMatch | None:
        selected = self.select_campaign(device, campaigns, now)
        if selected is None:
            return None
        campaign, effective_target, specificity = selected

        content = self._rotator.select(
            RotationCandidate(
                content_type=item.content_type,
                content_id=item.content_id,
                weight=item.weight,
                position=item.position,
            )
            for item in campaign.contents
        )
        if content is None:
            self._logger.debug(
                "campaign has no eligible content campaign_id=%s device_id=%s",
                campaign.id,
                device.id,
            )
            return None

        self._logger.debug(
            "campaign selected campaign_id=%s target=%s content_type=%s content_id=%s",
            campaign.id,
            effective_target,
            content.content_type,
            content.content_id,
        )
        return CampaignMatch(
            campaign=campaign,
            effective_target=effective_target,
            specificity=specificity,
            content=content,
        )
