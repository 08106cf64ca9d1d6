"""
Resourcegen — Ecto schema → Ash resource generator
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import health, generate
from config import settings

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("resourcegen")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Resourcegen starting up…")
    yield
    logger.info("Resourcegen shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Resourcegen — Ecto to Ash resource generator",
    description="Introspects a PostgreSQL table and an optional Ecto schema to generate an Ash resource.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router,   prefix="/api")
app.include_router(generate.router, prefix="/api")
