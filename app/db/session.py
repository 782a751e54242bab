"""Database session management."""
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.settings import settings


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``url``.

    SQLite connections are shared across threads (the request handlers and
    the test suite both need that); in-memory databases use a single static
    connection so every session sees the same schema.
    """
    kwargs: Dict[str, Any] = {"echo": echo}

    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        connect_args.update(settings.DB_CONNECT_ARGS)
        kwargs["connect_args"] = connect_args
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            connect_args=settings.DB_CONNECT_ARGS,
        )

    return create_engine(url, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


# Create database engine using the get_database_url method
engine = build_engine(settings.get_database_url(), echo=settings.DB_ECHO)

# Create SessionLocal class
SessionLocal = build_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/rooms/")
        def list_rooms(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
