"""
Entity Store - local collection of one entity kind kept in step with the API.

Consistency contract:
- entities mirrors the last successful fetch_all() in server order until
  create/update/delete change it or the next fetch_all() replaces it.
- Writes are remote-first: nothing changes locally until the API call
  succeeds, so a failure needs no rollback.
- create() never inserts an id that is already present.
- Failures never raise; they land in error_message as one readable string.

All mutation happens on the event loop awaiting the store. Blocking HTTP
calls run in the loop's default executor and their results are applied
back on the loop, so mutations never interleave mid-write. Overlapping
calls are neither cancelled nor queued: the last result applied wins.
"""

import asyncio
import functools
import logging
from collections import Counter
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

from .exceptions import NetworkError
from .kinds import EntityKind, InsertPosition, spec_for

if TYPE_CHECKING:
    from .api_client import ValeApiClient
    from .sync_bridge import ExternalSyncBridge

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Operation(str, Enum):
    """What a store is busy doing."""
    FETCH = 'fetch'
    REFRESH = 'refresh'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    EXTERNAL_SYNC = 'external_sync'


class EntityStore(Generic[T]):
    """
    Collection of one entity kind with fetch/create/update/delete.

    is_loading is one flag shared by every operation, the HubSpot push
    included: each start sets it, each completion clears it, so with
    overlapping operations the last one to finish decides its value.
    pending counts in-flight operations per kind of work for callers that
    need to tell fetching, saving and syncing apart.
    """

    def __init__(
        self,
        kind: EntityKind,
        gateway: 'ValeApiClient',
        sync_bridge: Optional['ExternalSyncBridge'] = None,
    ):
        self.kind = EntityKind(kind)
        self.spec = spec_for(self.kind)
        self.gateway = gateway
        self.sync_bridge = sync_bridge

        self.entities: list[T] = []
        self.is_loading = False
        self.error_message: Optional[str] = None
        self.pending: Counter = Counter()

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self):
        return iter(list(self.entities))

    # ==========================================================================
    # State bookkeeping
    # ==========================================================================

    def begin(self, operation: Operation) -> None:
        self.pending[operation] += 1
        self.is_loading = True

    def end(self, operation: Operation) -> None:
        self.pending[operation] -= 1
        if self.pending[operation] <= 0:
            del self.pending[operation]
        self.is_loading = False

    def is_busy(self, operation: Optional[Operation] = None) -> bool:
        """True while any operation (or the given one) is in flight."""
        if operation is None:
            return bool(self.pending)
        return self.pending.get(operation, 0) > 0

    def _start(self, operation: Operation) -> None:
        self.begin(operation)
        self.error_message = None

    def _succeed(self, operation: Operation) -> None:
        self.error_message = None
        self.end(operation)

    def _fail(self, operation: Operation, error: NetworkError) -> None:
        logger.warning(f"{self.kind.value} {operation.value} failed: {error}")
        self.error_message = str(error)
        self.end(operation)

    async def _call(self, func: Callable[..., Any], *args) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    # ==========================================================================
    # Lookups
    # ==========================================================================

    def get(self, entity_id: str) -> Optional[T]:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    def index_of(self, entity_id: str) -> Optional[int]:
        for index, entity in enumerate(self.entities):
            if entity.id == entity_id:
                return index
        return None

    # ==========================================================================
    # Operations
    # ==========================================================================

    async def fetch_all(self) -> bool:
        """Replace the collection with the server's list. Returns success."""
        self._start(Operation.FETCH)
        try:
            fetched = await self._call(self.gateway.fetch_all, self.kind)
        except NetworkError as e:
            self._fail(Operation.FETCH, e)
            return False

        self.entities = list(fetched)
        self._succeed(Operation.FETCH)
        return True

    async def refresh_one(self, entity_id: str) -> bool:
        """Re-read one entity and replace it in place if it is held locally."""
        self._start(Operation.REFRESH)
        try:
            fresh = await self._call(self.gateway.fetch_by_id, self.kind, entity_id)
        except NetworkError as e:
            self._fail(Operation.REFRESH, e)
            return False

        index = self.index_of(fresh.id)
        if index is not None:
            self.entities[index] = fresh
        self._succeed(Operation.REFRESH)
        return True

    async def create(self, draft: T) -> bool:
        """
        Create remotely, then add the server's copy locally.

        An id already in the collection makes the local insert a no-op.
        New entities go to the head or the tail depending on the kind.
        """
        self._start(Operation.CREATE)
        try:
            created = await self._call(self.gateway.create, self.kind, draft)
        except NetworkError as e:
            self._fail(Operation.CREATE, e)
            return False

        if self.index_of(created.id) is not None:
            logger.debug(f"{self.kind.value} {created.id} already present, not inserting")
        elif self.spec.insert_position == InsertPosition.HEAD:
            self.entities.insert(0, created)
        else:
            self.entities.append(created)
        self._succeed(Operation.CREATE)

        if self.sync_bridge is not None:
            self.sync_bridge.schedule(created, self)
        return True

    async def update(self, entity: T) -> bool:
        """Update remotely, then swap the server's copy in at the same position."""
        self._start(Operation.UPDATE)
        try:
            updated = await self._call(self.gateway.update, self.kind, entity)
        except NetworkError as e:
            self._fail(Operation.UPDATE, e)
            return False

        index = self.index_of(updated.id)
        if index is not None:
            self.entities[index] = updated
        self._succeed(Operation.UPDATE)

        if self.sync_bridge is not None:
            self.sync_bridge.schedule(updated, self)
        return True

    async def delete(self, entity_id: str) -> bool:
        """Delete remotely, then drop every local entity with that id."""
        self._start(Operation.DELETE)
        try:
            await self._call(self.gateway.delete, self.kind, entity_id)
        except NetworkError as e:
            self._fail(Operation.DELETE, e)
            return False

        self.entities = [e for e in self.entities if e.id != entity_id]
        self._succeed(Operation.DELETE)
        return True
