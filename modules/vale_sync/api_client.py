"""
Vale API client.

Translates entity operations into REST calls against the Vale backend.
Handles CRM (leads, clients, tasks, communications), portfolio and
project endpoints.
"""

import json
import logging
from typing import Any, Callable, Optional

import httpx

from .exceptions import DecodingError, ServerError, TransportError, Unauthorized
from .kinds import PORTFOLIO_PATH, EntityKind, KindSpec, spec_for
from .models import PortfolioSnapshot

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


class ValeApiClient:
    """Vale CRM/portfolio API client.

    The bearer token is read from token_provider on every request, so a
    refreshed session credential is picked up without rebuilding the
    client. A 401 is raised as Unauthorized and never retried here.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.token_provider = token_provider
        self.timeout = timeout
        self.transport = transport

    def _get_headers(self) -> dict:
        """Get request headers."""
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        token = self.token_provider() if self.token_provider else None
        if token:
            headers['Authorization'] = f'Bearer {token}'
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_data: Optional[dict] = None,
    ) -> httpx.Response:
        """Make a request to the Vale API. Raises NetworkError subclasses."""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {endpoint} params={params}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    method,
                    url,
                    headers=self._get_headers(),
                    params=params,
                    json=json_data,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

        if response.status_code == 401:
            raise Unauthorized()
        if not response.is_success:
            raise ServerError(response.status_code, response.reason_phrase)

        return response

    @staticmethod
    def _decode_body(response: httpx.Response) -> Any:
        if not response.content:
            raise DecodingError("No data returned from server.")
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodingError() from e

    @staticmethod
    def _unwrap(body: Any) -> Any:
        """Pull 'data' out of the {"success": ..., "data": ...} envelope."""
        if not isinstance(body, dict) or 'data' not in body:
            raise DecodingError()
        return body['data']

    def _decode_entity(self, spec: KindSpec, body: Any, enveloped: bool = True):
        payload = self._unwrap(body) if enveloped else body
        try:
            return spec.model.from_api(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodingError() from e

    # ==========================================================================
    # Entity CRUD
    # ==========================================================================

    def fetch_all(self, kind: EntityKind) -> list:
        """Get every entity of a kind, in server order."""
        spec = spec_for(kind)
        body = self._decode_body(self._request('GET', spec.path))
        items = self._unwrap(body)
        if not isinstance(items, list):
            raise DecodingError()
        try:
            entities = [spec.model.from_api(item) for item in items]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodingError() from e
        logger.debug(f"Fetched {len(entities)} {spec.kind.value} entities")
        return entities

    def fetch_by_id(self, kind: EntityKind, entity_id: str):
        """Get a single entity by ID."""
        spec = spec_for(kind)
        body = self._decode_body(self._request('GET', spec.path, params={'id': entity_id}))
        return self._decode_entity(spec, body)

    def create(self, kind: EntityKind, draft):
        """Create an entity. Returns the server's canonical copy."""
        spec = spec_for(kind)
        body = self._decode_body(self._request('POST', spec.path, json_data=draft.to_api()))
        created = self._decode_entity(spec, body, enveloped=spec.enveloped_writes)
        logger.info(f"Created {spec.kind.value} {created.id}")
        return created

    def update(self, kind: EntityKind, entity):
        """Update an entity using the kind's own payload shape."""
        spec = spec_for(kind)
        response = self._request(spec.update_method, spec.path, json_data=entity.update_payload())
        updated = self._decode_entity(spec, self._decode_body(response), enveloped=spec.enveloped_writes)
        logger.info(f"Updated {spec.kind.value} {updated.id}")
        return updated

    def delete(self, kind: EntityKind, entity_id: str) -> None:
        """Delete an entity by ID. The response body is ignored."""
        spec = spec_for(kind)
        self._request('DELETE', spec.path, params={'id': entity_id})
        logger.info(f"Deleted {spec.kind.value} {entity_id}")

    # ==========================================================================
    # Portfolio
    # ==========================================================================

    def fetch_portfolio(self) -> PortfolioSnapshot:
        """Get the dashboard aggregate plus all portfolio collections in one call."""
        body = self._decode_body(self._request('GET', PORTFOLIO_PATH))
        data = self._unwrap(body)
        try:
            snapshot = PortfolioSnapshot.from_api(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodingError() from e
        logger.debug(
            f"Fetched portfolio: {len(snapshot.properties)} properties, "
            f"{len(snapshot.units)} units, {len(snapshot.payments)} payments"
        )
        return snapshot

    def test_connection(self) -> int:
        """Cheap authenticated call. Returns the number of leads visible."""
        return len(self.fetch_all(EntityKind.LEAD))
