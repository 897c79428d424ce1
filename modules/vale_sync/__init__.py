"""
Vale Sync Module - Vale CRM/portfolio API ↔ local entity stores

Entity synchronization, portfolio metrics and best-effort lead
replication to HubSpot.
"""

__version__ = "0.1.0"

from .api_client import ValeApiClient
from .entity_store import EntityStore, Operation
from .exceptions import (
    DecodingError,
    NetworkError,
    ServerError,
    TransportError,
    Unauthorized,
    ValeSyncError,
)
from .kinds import EntityKind
from .portfolio import PortfolioAggregator
from .session import ValeSession
from .sync_bridge import ExternalSyncBridge
