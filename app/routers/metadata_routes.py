from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.config.logging_config import get_logger
from app.dependencies.metadata_deps import get_metadata_service
from app.exceptions.metadata import InvalidURLException, MissingParameterException
from app.services.metadata_service import MetadataService
from app.services.url_normalizer import url_host

logger = get_logger(__name__)

router = APIRouter()


@router.get("")
async def get_metadata(
    url: Optional[str] = Query(None),
    metadata_service: MetadataService = Depends(get_metadata_service),
):
    """
    Preview metadata for a URL.

    Extraction failures still return 200 with a degraded record; only a
    missing URL or one without a scheme and host is rejected. URLs with a
    scheme that cannot be fetched get the fallback record.
    """
    logger.info(f"Received request for metadata: {url}")
    if not url or not url.strip():
        raise MissingParameterException("URL")

    if url_host(url) is None:
        raise InvalidURLException(url, "not an absolute URL")

    metadata = await metadata_service.resolve(url)
    logger.info(f"Returned metadata for: {url}")
    return metadata.to_dict()
