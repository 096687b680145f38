from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from signage.dependencies import get_player_content_service
from signage.schemas.player_content import (
    CampaignPreviewResponse,
    PlayerContentResult,
    ScheduledScenePreviewResponse,
)
from signage.services.content_assembly import DanglingReferenceError
from signage.services.player_content import DeviceNotFoundError, PlayerContentService


router = APIRouter(prefix="/api/player", tags=["player"])
logger = logging.getLogger("signage.player_api")


def _raise_not_found(exc: DeviceNotFoundError) -> None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Screen not found") from exc


def _raise_dangling(exc: DanglingReferenceError) -> None:
    logger.warning(
        "dangling content reference source=%s content_type=%s content_id=%s",
        exc.source,
        exc.content_type,
        exc.content_id,
    )
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": "dangling_reference",
            "source": exc.source,
            "content_type": exc.content_type,
            "content_id": str(exc.content_id),
        },
    ) from exc


@router.get("/screens/{screen_id}/content", response_model=PlayerContentResult)
def get_player_content(
    screen_id: uuid.UUID,
    service: PlayerContentService = Depends(get_player_content_service),
) -> PlayerContentResult:
    try:
        return service.resolve_player_content(screen_id)
    except DeviceNotFoundError as exc:
        _raise_not_found(exc)
    except DanglingReferenceError as exc:
        _raise_dangling(exc)


@router.get("/screens/{screen_id}/campaign", response_model=CampaignPreviewResponse)
def get_active_campaign(
    screen_id: uuid.UUID,
    service: PlayerContentService = Depends(get_player_content_service),
) -> CampaignPreviewResponse:
    try:
        return service.preview_campaign(screen_id)
    except DeviceNotFoundError as exc:
        _raise_not_found(exc)


@router.get("/screens/{screen_id}/scheduled-scene", response_model=ScheduledScenePreviewResponse)
def get_scheduled_scene(
    screen_id: uuid.UUID,
    service: PlayerContentService = Depends(get_player_content_service),
) -> ScheduledScenePreviewResponse:
    try:
        return service.preview_scheduled_scene(screen_id)
    except DeviceNotFoundError as exc:
        _raise_not_found(exc)
