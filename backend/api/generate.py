"""POST /api/generate — generate an Ash resource for one table."""
import logging
from typing import Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from core.errors import CatalogUnavailable, TableNotFound
from core.resource_generator import generate_resource
from models.resource import GenerationResult

router = APIRouter()
logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    table_name: str
    output_dir: Optional[str] = None            # None = settings.OUTPUT_DIR
    legacy_schema_path: Optional[str] = None
    schema_name: Optional[str] = None           # None = settings.CATALOG_SCHEMA
    write: bool = True


@router.post("/generate", response_model=GenerationResult)
def generate(req: GenerateRequest):
    try:
        return generate_resource(
            req.table_name,
            output_dir=req.output_dir,
            legacy_schema_path=req.legacy_schema_path,
            schema=req.schema_name,
            write=req.write,
        )
    except TableNotFound as e:
        raise HTTPException(404, detail=str(e))
    except CatalogUnavailable as e:
        logger.error("Generation failed for %s: %s", req.table_name, e)
        raise HTTPException(503, detail=str(e))
