"""
External Sync Bridge - best-effort replication of leads to HubSpot.

Handles:
- Scheduling one background push per successful lead create/update
- Keeping the push out of the primary operation's outcome
- Tracking outstanding pushes so shutdown can wait for them

Known gaps, kept on purpose:
- The HubSpot id a push returns is not written back onto the local lead.
- The push raises and clears the owning store's shared is_loading flag,
  so the flag can flicker after the primary operation has finished. Use
  store.is_busy(Operation.EXTERNAL_SYNC) to tell the two apart.
- Failures are not retried, not logged and not shown to the user. Pass a
  failure_observer to see them.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from .entity_store import Operation
from .hubspot_client import HubSpotClient
from .models import Lead

if TYPE_CHECKING:
    from .entity_store import EntityStore

logger = logging.getLogger(__name__)

FailureObserver = Callable[[Lead, Exception], None]


class ExternalSyncBridge:
    """Fire-and-forget lead push to HubSpot."""

    def __init__(
        self,
        hubspot: HubSpotClient,
        failure_observer: Optional[FailureObserver] = None,
        enabled: bool = True,
    ):
        self.hubspot = hubspot
        self.failure_observer = failure_observer
        self.enabled = enabled
        self._tasks: set[asyncio.Task] = set()

        # Stats
        self.pushed = 0
        self.failed = 0

    @property
    def outstanding(self) -> int:
        return len(self._tasks)

    def schedule(self, lead: Lead, store: 'EntityStore') -> Optional[asyncio.Task]:
        """Start a background push of lead. Must be called from the event loop."""
        if not self.enabled:
            return None

        task = asyncio.get_running_loop().create_task(self._push(lead, store))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _push(self, lead: Lead, store: 'EntityStore') -> Optional[str]:
        store.begin(Operation.EXTERNAL_SYNC)
        try:
            loop = asyncio.get_running_loop()
            hubspot_id = await loop.run_in_executor(None, self.hubspot.upsert_contact, lead)
        except Exception as e:
            self.failed += 1
            self._notify(lead, e)
            return None
        finally:
            store.end(Operation.EXTERNAL_SYNC)

        self.pushed += 1
        logger.debug(f"Pushed lead {lead.id} to HubSpot as {hubspot_id}")
        return hubspot_id

    def _notify(self, lead: Lead, error: Exception) -> None:
        if self.failure_observer is None:
            return
        try:
            self.failure_observer(lead, error)
        except Exception:
            logger.exception(f"Failure observer raised for lead {lead.id}")

    async def drain(self) -> None:
        """Wait until every outstanding push has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
