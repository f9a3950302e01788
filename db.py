from collections.abc import Generator
from typing import Annotated, Any, Dict

from fastapi import Depends
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from config import settings
from logging_config import get_logger

logger = get_logger("db")


def build_engine(database_url: str) -> Engine:
    """
    Create the engine and its connection pool.

    SQLite gets the default pool and may be shared across threads.
    Everything else gets a bounded pool and a server-side statement timeout,
    so no single query can hold a request open indefinitely.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
        )

    connect_args: Dict[str, Any] = {}
    if database_url.startswith("postgresql"):
        connect_args["options"] = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"

    return create_engine(
        database_url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(settings.database_url)


def create_db_and_tables() -> None:
    """Create all tables in the database if they don't exist."""
    import models  # noqa: F401  registers the tables on SQLModel.metadata

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables checked")


def get_session() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]
