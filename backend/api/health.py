"""GET /api/health — catalog dependency check."""
import logging
from fastapi import APIRouter

from config import settings
from core.db_connector import check_connection
from models.connection import ConnectionRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    catalog_status = _check_catalog()
    overall = "ok" if catalog_status["status"] == "up" else "degraded"
    return {
        "status": overall,
        "services": {
            "catalog": catalog_status,
        },
    }


def _check_catalog() -> dict:
    status = check_connection(ConnectionRequest.from_settings(settings))
    if status["status"] == "down":
        logger.warning("Catalog health check failed: %s", status.get("error"))
    return status
