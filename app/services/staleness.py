"""Staleness policy for stored link metadata"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.config import settings
from app.core.models import Link
from .link_store import LinkStoreInterface

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def needs_refresh(link: Link, now: Optional[datetime] = None) -> bool:
    """
    Decide whether a link's metadata should be fetched again.

    True when the link is flagged, was never fetched, or its metadata is
    older than the staleness threshold.
    """
    if link.needs_metadata_refresh:
        return True

    if link.metadata_fetched_at is None:
        return True

    now = _as_utc(now or datetime.now(timezone.utc))
    return now - _as_utc(link.metadata_fetched_at) > timedelta(days=settings.metadata_stale_days)


def mark_for_refresh(store: LinkStoreInterface, link_id: str) -> None:
    """Flag a link so the next refresh run picks it up"""
    logger.debug(f"Marking link {link_id} for metadata refresh")
    store.update_link(link_id, {"needs_metadata_refresh": True})


def clear_refresh_flag(store: LinkStoreInterface, link_id: str) -> None:
    store.update_link(link_id, {"needs_metadata_refresh": False})
