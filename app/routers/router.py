from fastapi import APIRouter
from . import metadata_routes

router = APIRouter()

router.include_router(metadata_routes.router, prefix="/metadata", tags=["metadata"])

__all__ = ["router"]
