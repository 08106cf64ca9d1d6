"""
Database connector — SQLAlchemy engine factory for the catalog database.
Only read-only catalog queries are ever issued through these engines.
"""
import logging
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from core.errors import CatalogUnavailable
from models.connection import ConnectionRequest

logger = logging.getLogger(__name__)


def create_engine_from_request(req: ConnectionRequest):
    """Build and test a SQLAlchemy engine from a ConnectionRequest."""
    url = req.get_sqlalchemy_url()
    try:
        engine = create_engine(url, pool_pre_ping=True)
    except (SQLAlchemyError, ImportError) as e:
        raise CatalogUnavailable(f"Invalid catalog URL: {e}") from e
    # Validate the connection immediately
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        engine.dispose()
        raise CatalogUnavailable(f"Could not connect to database: {e}") from e
    logger.debug("Connected to catalog at %s", engine.url.render_as_string(hide_password=True))
    return engine


def check_connection(req: ConnectionRequest) -> dict:
    """Returns {"status": "up"} if the catalog answers, {"status": "down", "error": ...} otherwise."""
    try:
        engine = create_engine_from_request(req)
    except CatalogUnavailable as e:
        return {"status": "down", "error": str(e)}
    engine.dispose()
    return {"status": "up"}
