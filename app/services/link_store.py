import asyncio
import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from app.core.config import settings
from app.core.models import Link

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {field.name for field in dataclasses.fields(Link)} - {"id"}


class LinkStoreInterface(ABC):
    """Interface for the link storage collaborator"""

    @abstractmethod
    def get_link(self, link_id: str) -> Optional[Link]:
        """
        Get a link by ID.

        Args:
            link_id: The link ID

        Returns:
            The Link if found, None otherwise
        """
        pass

    @abstractmethod
    def update_link(self, link_id: str, fields: Dict[str, Any]) -> None:
        """
        Apply a partial update to a link.

        Args:
            link_id: The link ID
            fields: Link attribute names mapped to their new values
        """
        pass


class InMemoryLinkStore(LinkStoreInterface):
    """Dictionary backed link store"""

    def __init__(self, links: Iterable[Link] = ()):
        self._links: Dict[str, Link] = {link.id: link for link in links}

    def add_link(self, link: Link) -> None:
        self._links[link.id] = link

    def all_links(self) -> List[Link]:
        return list(self._links.values())

    def get_link(self, link_id: str) -> Optional[Link]:
        return self._links.get(link_id)

    def update_link(self, link_id: str, fields: Dict[str, Any]) -> None:
        link = self._links.get(link_id)
        if link is None:
            logger.warning(f"Ignoring update for unknown link {link_id}")
            return

        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown link fields: {', '.join(sorted(unknown))}")

        self._links[link_id] = dataclasses.replace(link, **fields)


class BufferedLinkWriter(LinkStoreInterface):
    """
    Coalesces partial link updates and writes them to the wrapped store.

    Pending updates are written at most `delay` seconds after the first one
    arrives, or immediately on flush(). Later updates never push the write
    back further.
    """

    def __init__(self, store: LinkStoreInterface, delay: Optional[float] = None):
        self.store = store
        self.delay = settings.write_buffer_delay if delay is None else delay
        self._pending: Dict[str, Dict[str, Any]] = {}
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> Dict[str, Dict[str, Any]]:
        return {link_id: dict(fields) for link_id, fields in self._pending.items()}

    def get_link(self, link_id: str) -> Optional[Link]:
        link = self.store.get_link(link_id)
        if link is None or link_id not in self._pending:
            return link
        return dataclasses.replace(link, **self._pending[link_id])

    def update_link(self, link_id: str, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown link fields: {', '.join(sorted(unknown))}")

        self._pending.setdefault(link_id, {}).update(fields)
        self._schedule()

    def _schedule(self) -> None:
        if self._timer is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop to defer to
            self.flush()
            return
        self._timer = loop.call_later(self.delay, self.flush)

    def flush(self) -> int:
        """
        Write all pending updates to the wrapped store.

        A link whose write fails is logged and dropped; the remaining links
        are still written.

        Returns:
            The number of links written
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        pending, self._pending = self._pending, {}
        written = 0
        for link_id, fields in pending.items():
            try:
                self.store.update_link(link_id, fields)
            except Exception as e:
                logger.error(f"Failed to write buffered update for link {link_id}: {e}")
                continue
            written += 1

        if pending:
            logger.debug(f"Flushed buffered updates for {written} of {len(pending)} links")
        return written
