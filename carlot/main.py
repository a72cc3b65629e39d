from __future__ import annotations

import logging

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from carlot import models  # noqa: F401  (registers every table on Base.metadata)
from carlot.core.config import settings
from carlot.core.logging_config import setup_logging
from carlot.db.session import engine
from carlot.models.base import Base
from carlot.routes.auth import router as auth_router
from carlot.routes.cars import router as cars_router
from carlot.routes.expenses import router as expenses_router
from carlot.routes.settings import router as settings_router
from carlot.routes.uploads import router as uploads_router
from carlot.services.storage import PUBLIC_PREFIX

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

SERVICE_NAME = "carlot-api"
VERSION = "1.0.0"

# ============================================================
# DB table creation (DEV ONLY)
# - In production, run Alembic migrations.
# - Guarded so a transient DB outage doesn't prevent app startup.
# ============================================================
if settings.RUN_CREATE_ALL:
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("DB tables ensured via create_all (RUN_CREATE_ALL=1).")
    except SQLAlchemyError:
        logger.exception("Base.metadata.create_all failed; continuing startup without it.")

app = FastAPI(
    title="Car Inventory API",
    version=VERSION,
)

# ============================================================
# CORS
# - localhost for dev (Expo web / Metro) and FRONTEND_URL for production
# ============================================================
origins = [
    "http://localhost:8081",
    "http://localhost:19006",
    "http://127.0.0.1:8081",
]

frontend_url = settings.FRONTEND_URL
if isinstance(frontend_url, str) and frontend_url.strip():
    origins.append(frontend_url.strip())

allow_origins = sorted({o for o in origins if o})

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api/v1"

# uploaded photos / invoices (public URLs point here)
app.mount(
    PUBLIC_PREFIX,
    StaticFiles(directory=str(settings.STORAGE_DIR), check_dir=False),
    name="storage",
)


@app.api_route("/", methods=["GET", "HEAD"], status_code=status.HTTP_200_OK)
def root():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
    }


@app.api_route("/health", methods=["GET", "HEAD"], status_code=status.HTTP_200_OK)
def health_check():
    """Health check endpoint for uptime monitoring."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": VERSION,
            "database": "connected",
        }

    except SQLAlchemyError:
        logger.warning("health check: database unreachable")
        return {
            "status": "error",
            "service": SERVICE_NAME,
            "database": "disconnected",
        }


# Routers
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(cars_router, prefix=API_PREFIX)
app.include_router(expenses_router, prefix=API_PREFIX)
app.include_router(uploads_router, prefix=API_PREFIX)
app.include_router(settings_router, prefix=API_PREFIX)
