"""
Batch refresh of stored link metadata with throttling and retries
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from app.core.config import settings
from app.core.models import Link, LinkMetadata
from app.exceptions.metadata import InvalidURLException, RefreshInProgressException
from .link_store import LinkStoreInterface
from .staleness import needs_refresh

logger = logging.getLogger(__name__)

FetchMetadata = Callable[[str], Awaitable[LinkMetadata]]
ProgressCallback = Callable[[int, int], None]
CompleteCallback = Callable[[int, int], None]
ErrorCallback = Callable[[str, str], None]


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class ItemState(str, Enum):
    PENDING = "pending"
    FETCHING = "fetching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ALLOWED_TRANSITIONS = {
    ItemState.PENDING: {ItemState.FETCHING},
    ItemState.FETCHING: {ItemState.SUCCEEDED, ItemState.FAILED},
    ItemState.SUCCEEDED: set(),
    ItemState.FAILED: set(),
}


@dataclass
class RefreshItem:
    """One link's progress through a refresh run"""
    link: Link
    state: ItemState = ItemState.PENDING
    attempts: int = 0
    metadata: Optional[LinkMetadata] = None
    error: Optional[str] = None


@dataclass
class RefreshError:
    link_id: str
    message: str


@dataclass
class RefreshSummary:
    success: int = 0
    failed: int = 0
    errors: List[RefreshError] = field(default_factory=list)


def transition(item: RefreshItem, new_state: ItemState) -> RefreshItem:
    """
    Move an item to a new state.

    Raises:
        ValueError: If the transition is not allowed from the current state
    """
    if new_state not in ALLOWED_TRANSITIONS[item.state]:
        raise ValueError(f"Invalid transition for link {item.link.id}: {item.state.value} -> {new_state.value}")
    item.state = new_state
    return item


def success_fields(link: Link, metadata: LinkMetadata, fetched_at: datetime) -> Dict[str, Any]:
    return {
        "title": metadata.title or link.title,
        "description": metadata.description,
        "image_url": metadata.image_url,
        "favicon": metadata.favicon,
        "metadata_fetched_at": fetched_at,
        "needs_metadata_refresh": False,
    }


def failure_fields(fetched_at: datetime) -> Dict[str, Any]:
    """
    Failed links keep their existing metadata but still get the flag cleared
    and the fetch time stamped, so a broken URL waits for the next staleness
    window.
    """
    return {
        "metadata_fetched_at": fetched_at,
        "needs_metadata_refresh": False,
    }


class MetadataRefresher:
    """
    Refreshes metadata for links whose metadata is stale.

    Candidates are chosen once when a run starts and processed one at a time
    in fixed-size batches with a pause between batches. Only one run may be
    active per refresher.
    """

    def __init__(
        self,
        fetch_metadata: FetchMetadata,
        store: LinkStoreInterface,
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
        retry_delays: Optional[Sequence[float]] = None,
        max_retries: Optional[int] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.fetch_metadata = fetch_metadata
        self.store = store
        self.batch_size = batch_size or settings.refresh_batch_size
        self.batch_delay = settings.refresh_batch_delay if batch_delay is None else batch_delay
        self.retry_delays = list(retry_delays or settings.refresh_retry_delays)
        self.max_retries = settings.refresh_max_retries if max_retries is None else max_retries
        self.sleep = sleep
        self.clock = clock
        self.state = RunState.IDLE
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def refresh(
        self,
        links: Iterable[Link],
        on_progress: Optional[ProgressCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> RefreshSummary:
        """
        Refresh metadata for every link that needs it.

        Args:
            links: The saved links to consider
            on_progress: Called with (processed, total) after every item
            on_complete: Called once with (success, failed) at the end
            on_error: Called with (message, link_id) for every failed item

        Returns:
            RefreshSummary with counts and per-item error messages

        Raises:
            RefreshInProgressException: If a run is already active
        """
        if self._running:
            raise RefreshInProgressException()

        self._running = True
        self.state = RunState.RUNNING
        try:
            summary = await self._run(list(links), on_progress, on_error)
            self.state = RunState.COMPLETED
        finally:
            self._running = False
            if self.state is RunState.RUNNING:
                # Abandoned mid-run
                self.state = RunState.IDLE

        if on_complete:
            on_complete(summary.success, summary.failed)
        return summary

    async def _run(
        self,
        links: List[Link],
        on_progress: Optional[ProgressCallback],
        on_error: Optional[ErrorCallback],
    ) -> RefreshSummary:
        now = self.clock()
        candidates = [RefreshItem(link=link) for link in links if needs_refresh(link, now)]
        summary = RefreshSummary()
        total = len(candidates)

        if total == 0:
            logger.info("No links need a metadata refresh")
            return summary

        batches = [candidates[i:i + self.batch_size] for i in range(0, total, self.batch_size)]
        logger.info(f"Starting metadata refresh for {total} links in {len(batches)} batches of {self.batch_size}")

        processed = 0
        for index, batch in enumerate(batches):
            for item in batch:
                await self._process_item(item)

                if item.state is ItemState.SUCCEEDED:
                    summary.success += 1
                else:
                    summary.failed += 1
                    summary.errors.append(RefreshError(item.link.id, item.error))
                    if on_error:
                        on_error(item.error, item.link.id)

                processed += 1
                if on_progress:
                    on_progress(processed, total)

            if index < len(batches) - 1:
                await self.sleep(self.batch_delay)

        logger.info(f"Metadata refresh complete: {summary.success} success, {summary.failed} failed")
        return summary

    async def _process_item(self, item: RefreshItem) -> None:
        transition(item, ItemState.FETCHING)
        try:
            metadata = await self._fetch_with_retry(item)
        except Exception as e:
            self._fail(item, str(e) or e.__class__.__name__)
            return

        try:
            self.store.update_link(item.link.id, success_fields(item.link, metadata, self.clock()))
        except Exception as e:
            logger.error(f"Failed to save metadata for link {item.link.id}: {e}")
            self._fail(item, f"Failed to save metadata: {e}")
            return

        item.metadata = metadata
        transition(item, ItemState.SUCCEEDED)

    def _fail(self, item: RefreshItem, error: str) -> None:
        item.error = error
        transition(item, ItemState.FAILED)
        logger.warning(f"Metadata refresh failed for link {item.link.id} after {item.attempts} attempts: {error}")
        try:
            self.store.update_link(item.link.id, failure_fields(self.clock()))
        except Exception as e:
            logger.error(f"Failed to record refresh failure for link {item.link.id}: {e}")

    def retry_delay(self, retry_number: int) -> float:
        """Delay before the given retry (0-based); the last table entry is reused"""
        return self.retry_delays[min(retry_number, len(self.retry_delays) - 1)]

    async def _fetch_with_retry(self, item: RefreshItem) -> LinkMetadata:
        while True:
            item.attempts += 1
            try:
                return await self.fetch_metadata(item.link.url)
            except InvalidURLException:
                # Same input, same result
                raise
            except Exception as e:
                retry_number = item.attempts - 1
                if retry_number >= self.max_retries:
                    raise
                delay = self.retry_delay(retry_number)
                logger.info(
                    f"Retrying link {item.link.id} in {delay:g}s "
                    f"(attempt {item.attempts} of {self.max_retries + 1}): {e}"
                )
                await self.sleep(delay)
