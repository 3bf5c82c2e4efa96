"""Database session management."""
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from guesthouse.config.settings import Settings, settings


def build_engine(config: Optional[Settings] = None, **overrides) -> Engine:
    """
    Create an engine for the configured database URL.

    SQLite connections are shared across FastAPI's worker threads, so
    ``check_same_thread`` is disabled for them.
    """
    config = config or settings
    kwargs = {
        "echo": config.DB_ECHO,
        "pool_pre_ping": config.DB_POOL_PRE_PING,
    }
    if config.is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
    kwargs.update(overrides)
    return create_engine(config.DATABASE_URL, **kwargs)


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/rooms")
        def list_rooms(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
