# carlot/db/session.py
from __future__ import annotations

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from carlot.core.config import settings


def _database_url(url: str) -> str:
    # hosted Postgres providers still hand out postgres:// URLs
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def make_engine(url: str) -> Engine:
    url = _database_url(url)
    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI runs sync deps in a threadpool
        connect_args["check_same_thread"] = False

    # pool_pre_ping: avoid stale connections (useful for Postgres)
    return create_engine(
        url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = make_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


# FastAPI Dependency
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
