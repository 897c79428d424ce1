"""
Vale Session - composition root for one signed-in session.

Builds the API client, the HubSpot bridge and one store per entity kind
from a Config, and owns them for the life of the session. Nothing here
outlives close().
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from .api_client import TokenProvider, ValeApiClient
from .config import Config
from .entity_store import EntityStore
from .hubspot_client import HubSpotClient
from .kinds import EntityKind
from .models import PortfolioSnapshot
from .portfolio import PortfolioAggregator
from .sync_bridge import ExternalSyncBridge, FailureObserver

logger = logging.getLogger(__name__)

SessionCheck = Callable[[], bool]

# Kinds with their own list screen; portfolio sub-entities live in the aggregator
CRM_KINDS = (
    EntityKind.LEAD,
    EntityKind.CLIENT,
    EntityKind.TASK,
    EntityKind.COMMUNICATION,
    EntityKind.REHAB_PROJECT,
)


class ValeSession:
    """Stores, aggregator and bridge wired to one API client."""

    def __init__(
        self,
        cfg: Config,
        token_provider: Optional[TokenProvider] = None,
        is_authenticated: Optional[SessionCheck] = None,
        gateway: Optional[ValeApiClient] = None,
        hubspot: Optional[HubSpotClient] = None,
        failure_observer: Optional[FailureObserver] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = cfg
        self.is_authenticated = is_authenticated or (lambda: True)

        if token_provider is None:
            token_provider = lambda: cfg.API_TOKEN or None

        self.gateway = gateway or ValeApiClient(
            base_url=cfg.API_BASE_URL,
            token_provider=token_provider,
            timeout=cfg.HTTP_TIMEOUT,
        )

        self.bridge: Optional[ExternalSyncBridge] = None
        if hubspot is None and cfg.hubspot_enabled:
            hubspot = HubSpotClient(
                access_token=cfg.HUBSPOT_ACCESS_TOKEN,
                base_url=cfg.HUBSPOT_BASE_URL,
                timeout=cfg.HTTP_TIMEOUT,
            )
        if hubspot is not None:
            self.bridge = ExternalSyncBridge(hubspot, failure_observer=failure_observer)

        self.stores: dict[EntityKind, EntityStore] = {}
        for kind in CRM_KINDS:
            bridge = self.bridge if kind == EntityKind.LEAD else None
            self.stores[kind] = EntityStore(kind, self.gateway, sync_bridge=bridge)

        self.portfolio = PortfolioAggregator(self.gateway, clock=clock)

    # ==========================================================================
    # Store access
    # ==========================================================================

    def store(self, kind: EntityKind) -> EntityStore:
        """Store for a kind; portfolio sub-entity stores come from the aggregator."""
        kind = EntityKind(kind)
        if kind in self.stores:
            return self.stores[kind]
        portfolio_stores = {
            EntityKind.PROPERTY: self.portfolio.properties,
            EntityKind.UNIT: self.portfolio.units,
            EntityKind.RESIDENT: self.portfolio.residents,
            EntityKind.LEASE: self.portfolio.leases,
            EntityKind.PAYMENT: self.portfolio.payments,
            EntityKind.EXPENSE: self.portfolio.expenses,
        }
        return portfolio_stores[kind]

    @property
    def leads(self) -> EntityStore:
        return self.stores[EntityKind.LEAD]

    @property
    def clients(self) -> EntityStore:
        return self.stores[EntityKind.CLIENT]

    @property
    def tasks(self) -> EntityStore:
        return self.stores[EntityKind.TASK]

    @property
    def communications(self) -> EntityStore:
        return self.stores[EntityKind.COMMUNICATION]

    @property
    def projects(self) -> EntityStore:
        return self.stores[EntityKind.REHAB_PROJECT]

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def refresh_all(self) -> dict:
        """
        Fetch every list and the portfolio concurrently.

        Returns {name: success}. Does nothing while the session is signed out.
        """
        if not self.is_authenticated():
            logger.info("Session not authenticated, skipping refresh")
            return {}

        names = [kind.value for kind in self.stores] + ['portfolio']
        results = await asyncio.gather(
            *(store.fetch_all() for store in self.stores.values()),
            self.portfolio.refresh(),
        )
        outcome = dict(zip(names, results))

        failed = [name for name, ok in outcome.items() if not ok]
        if failed:
            logger.warning(f"Refresh incomplete, failed: {', '.join(failed)}")
        else:
            logger.info("Refreshed all collections")
        return outcome

    def errors(self) -> dict:
        """Current error message per store, for stores that have one."""
        errors = {
            kind.value: store.error_message
            for kind, store in self.stores.items()
            if store.error_message
        }
        if self.portfolio.error_message:
            errors['portfolio'] = self.portfolio.error_message
        return errors

    async def close(self) -> None:
        """Wait for outstanding HubSpot pushes, then drop all local state."""
        if self.bridge is not None:
            await self.bridge.drain()
        for store in self.stores.values():
            store.entities = []
        self.portfolio.apply(PortfolioSnapshot())
