from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from sqlalchemy.orm import Session

from signage.api.player import router as player_router
from signage.core.config import Settings, get_settings
from signage.core.logging import configure_logging
from signage.db.session import SessionLocal, check_db_connection, get_db
from signage.dependencies import get_settings_from_app
from signage.services.player_content import PlayerContentService


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    app.state.player_content_service = PlayerContentService(
        settings=settings,
        session_factory=SessionLocal,
    )
    yield


app = FastAPI(title="Signage Player Core", lifespan=lifespan)
app.include_router(player_router)


@app.get("/health")
def health(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_from_app),
) -> dict[str, object]:
    db_ok, db_error = check_db_connection(db)
    return {
        "status": "ok" if db_ok else "degraded",
        "service": "player-core",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "db": {"ok": db_ok, "error": db_error},
        "config": {
            "default_timezone": settings.default_timezone,
            "default_language": settings.default_language,
            "heartbeat_enabled": settings.heartbeat_enabled,
            "rotation_seeded": settings.rotation_seed is not None,
        },
    }
