# File: fixapp\db\session.py
# Project: fixapp-backend
# Auto-added for reference

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from fixapp.core.config import settings
from fixapp.db.base import Base


def make_engine(url: str, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        eng = create_engine(url, connect_args={"check_same_thread": False}, **kwargs)

        # SQLite only honours ON DELETE CASCADE with foreign keys switched on
        @event.listens_for(eng, "connect")
        def _fk_on(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

        return eng
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        pool_timeout=30
    )


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = None):
    """Create missing tables. Called once at application startup."""
    from fixapp.models import issue, status_update, math_problem  # noqa: F401  register mappers
    Base.metadata.create_all(bind=bind or engine)


def close_db(bind: Engine = None):
    (bind or engine).dispose()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
