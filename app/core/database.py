"""Database engine and session management (SQLite or PostgreSQL)."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Build the engine for DATABASE_URL; one per application instance."""
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        # Request handlers run in a threadpool; sessions never cross threads.
        return create_engine(
            url,
            echo=settings.DEBUG,
            connect_args={"check_same_thread": False},
        )
    return create_engine(url, pool_pre_ping=True, echo=settings.DEBUG)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to engine; services open one session per operation."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's factory and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
