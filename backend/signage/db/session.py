from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from signage.core.config import get_settings


def build_session_factory(database_url: str) -> sessionmaker:
    engine = create_engine(database_url, pool_pre_ping=True)
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


SessionLocal = build_session_factory(get_settings().database_url)


def get_db() -> Generator[Session, None, None]:
    with SessionLocal() as db:
        yield db


def check_db_connection(db: Session) -> tuple[bool, str | None]:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return False, str(exc)
    return True, None
