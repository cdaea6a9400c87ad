# betledger/app/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from .db import Base, engine
from . import models  # noqa: F401  (registers tables on Base.metadata)

# --- Routers / modules ---
from .routes import analytics as analytics_router

# --- App init ---
app = FastAPI(title="Bet Ledger Analytics API", version="0.1.0")

# --- CORS for the dashboard frontend ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# --- Health Check ---
@app.get("/health")
def health():
    """Lightweight health check."""
    return {"ok": True}

@app.get("/api/health")
def api_health():
    """Mirror endpoint for dashboard/API checks."""
    return {"ok": True}

# --- Startup ---
@app.on_event("startup")
def startup():
    # Only auto-create tables outside production; there the schema is managed separately
    if settings.ENV != "production":
        Base.metadata.create_all(bind=engine)
        logger.info("tables ensured (env=%s)", settings.ENV)

# --- Include routers ---
app.include_router(analytics_router.router)
