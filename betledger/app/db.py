# betledger/app/db.py
import logging
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .settings import settings

logger = logging.getLogger(__name__)

# Prefer a full DATABASE_URL (hosting injects this). Fallback to individual parts for local dev.
DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    logger.info(
        "DB CONFIG (local fallback) -> user=%s host=%s port=%s db=%s",
        settings.PGUSER, settings.PGHOST, settings.PGPORT, settings.PGDATABASE,
    )
    DATABASE_URL = (
        f"postgresql://{settings.PGUSER}:{settings.PGPASSWORD}"
        f"@{settings.PGHOST}:{settings.PGPORT}/{settings.PGDATABASE}"
    )

engine_kwargs = {"pool_pre_ping": True}
connect_args = {}

if DATABASE_URL.startswith("sqlite"):
    # one shared connection so an in-memory db survives across sessions
    connect_args["check_same_thread"] = False
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
else:
    # If it's a remote DB (not localhost), enforce SSL
    parsed = urlparse(DATABASE_URL)
    if parsed.hostname not in {"localhost", "127.0.0.1", None}:
        connect_args["sslmode"] = "require"

engine = create_engine(DATABASE_URL, connect_args=connect_args, **engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
