from app.services.container import container
from app.services.metadata_service import MetadataService


def get_metadata_service() -> MetadataService:
    """FastAPI dependency for the shared metadata service"""
    return container.get_metadata_service()
