from typing import TYPE_CHECKING

from fastapi import HTTPException, Request

from signage.core.config import Settings

if TYPE_CHECKING:
    from signage.services.player_content import PlayerContentService


def get_settings_from_app(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(status_code=503, detail="Application settings are not initialized")
    return settings


def get_player_content_service(request: Request) -> "PlayerContentService":
    service = getattr(request.app.state, "player_content_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Player content service is not initialized")
    return service
