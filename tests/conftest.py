"""
pytest configuration and fixtures for Vale sync tests.
"""
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.vale_sync.api_client import ValeApiClient
from modules.vale_sync.exceptions import NetworkError
from modules.vale_sync.kinds import EntityKind
from modules.vale_sync.models import Lead, PortfolioSnapshot


class FakeGateway:
    """In-memory stand-in for ValeApiClient.

    Set `error` to make every call raise it. Results for create/update
    default to echoing the argument; set `next_result` to return a
    different canonical copy.
    """

    def __init__(self):
        self.items: dict[EntityKind, list] = {}
        self.snapshot = PortfolioSnapshot()
        self.error: NetworkError = None
        self.next_result = None
        self.calls = []

    def _check(self, name, *args):
        self.calls.append((name, *args))
        if self.error is not None:
            raise self.error

    def fetch_all(self, kind):
        self._check('fetch_all', kind)
        return list(self.items.get(EntityKind(kind), []))

    def fetch_by_id(self, kind, entity_id):
        self._check('fetch_by_id', kind, entity_id)
        if self.next_result is not None:
            return self.next_result
        for item in self.items.get(EntityKind(kind), []):
            if item.id == entity_id:
                return item
        raise KeyError(entity_id)

    def create(self, kind, draft):
        self._check('create', kind, draft)
        return self.next_result if self.next_result is not None else draft

    def update(self, kind, entity):
        self._check('update', kind, entity)
        return self.next_result if self.next_result is not None else entity

    def delete(self, kind, entity_id):
        self._check('delete', kind, entity_id)

    def fetch_portfolio(self):
        self._check('fetch_portfolio')
        return self.snapshot


@pytest.fixture
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def make_client():
    """Build a ValeApiClient whose requests go to handler(request) -> httpx.Response."""
    def factory(handler, token='test-token'):
        return ValeApiClient(
            base_url='https://vale.test',
            token_provider=lambda: token,
            transport=httpx.MockTransport(handler),
        )
    return factory


@pytest.fixture
def sample_lead():
    """Sample lead data for testing."""
    return {
        "id": "lead-001",
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@example.com",
        "phone": "8285551234",
        "source": "referral",
        "status": "new",
        "priority": "hot",
        "property_address": "123 Main St",
        "property_city": "Asheville",
        "property_state": "NC",
        "property_zip": "28801",
        "asking_price": 350000,
        "created_at": "2026-10-01T14:30:00Z",
    }


@pytest.fixture
def sample_property():
    """Sample property data for testing."""
    return {
        "id": "prop-001",
        "address": "123 Main St",
        "city": "Asheville",
        "state": "NC",
        "zip_code": "28801",
        "property_type": "multi_family",
        "status": "rental",
        "purchase_price": 300000,
        "market_value": 350000,
        "total_units": 4,
    }


@pytest.fixture
def sample_project():
    """Sample rehab project data for testing."""
    return {
        "id": "proj-001",
        "property_address": "45 Oak Ave",
        "property_name": "Oak Flip",
        "status": "active",
        "property_purchase": 100000,
        "total_purchase_costs": 4000,
        "total_rehab_costs": 5000,
        "total_holding_costs": 1000,
        "total_expenses": 2500,
        "after_repair_value": 180000,
    }


@pytest.fixture
def leads():
    return [Lead(id='1', first_name='A'), Lead(id='2', first_name='B'), Lead(id='3', first_name='C')]


@pytest.fixture
def env_vars(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("VALE_ENV", "test")
    monkeypatch.setenv("VALE_API_BASE_URL", "https://staging.vale.test")
    monkeypatch.setenv("VALE_API_TOKEN", "test_token")
    monkeypatch.setenv("HUBSPOT_ACCESS_TOKEN", "hs_test_token")
