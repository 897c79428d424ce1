"""
Portfolio Aggregator - atomic refresh and server-first metrics.

Tests cover:
    - Server aggregate fields win, missing fields fall back per field
    - A failed refresh replaces nothing
    - Payment bucketing follows the injected clock
    - Property CRUD through the aggregator
"""

from datetime import datetime

import pytest

from modules.vale_sync.exceptions import ServerError
from modules.vale_sync.models import (
    Expense,
    Payment,
    PortfolioAggregate,
    PortfolioSnapshot,
    Property,
    Resident,
    Unit,
)
from modules.vale_sync.portfolio import PortfolioAggregator

NOW = datetime(2026, 10, 19, 9, 0)


def _snapshot(aggregate=None):
    return PortfolioSnapshot(
        aggregate=aggregate,
        properties=[
            Property(id='p1', purchase_price=200000, market_value=250000),
            Property(id='p2', purchase_price=100000, market_value=150000),
        ],
        units=[
            Unit(id='u1', property_id='p1', monthly_rent=1500),
            Unit(id='u2', property_id='p1', monthly_rent=1000),
            Unit(id='u3', property_id='p2', monthly_rent=900),
            Unit(id='u4', property_id='p2', monthly_rent=800),
        ],
        residents=[
            Resident(id='r1', status='active'),
            Resident(id='r2', status='Active'),
            Resident(id='r3', status='active'),
            Resident(id='r4', status='moved_out'),
        ],
        expenses=[
            Expense(id='e1', property_id='p1', amount=400),
            Expense(id='e2', property_id='p2', amount=300),
        ],
        payments=[
            Payment(id='pay1', tenant_id='r1', amount_due=1500, amount_paid=1500,
                    payment_date='2026-10-02T10:00:00', status='paid'),
            Payment(id='pay2', tenant_id='r2', amount_due=1000, amount_paid=1000,
                    payment_date='2026-10-05T10:00:00', status='COMPLETED'),
            Payment(id='pay3', tenant_id='r3', amount_due=900, amount_paid=0,
                    payment_date='2026-10-06T10:00:00', status='late'),
            Payment(id='pay4', tenant_id='r1', amount_due=1500, amount_paid=1500,
                    payment_date='2026-09-02T10:00:00', status='paid'),
            Payment(id='pay5', tenant_id='r2', amount_due=1000, amount_paid=1000,
                    payment_date='2025-10-02T10:00:00', status='paid'),
        ],
    )


@pytest.fixture
def aggregator(gateway):
    return PortfolioAggregator(gateway, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_server_occupancy_rate_wins(gateway, aggregator):
    gateway.snapshot = _snapshot(PortfolioAggregate(occupancy_rate=80))

    assert await aggregator.refresh()

    assert aggregator.occupancy_rate == 80
    # Raw collections alone would give 3 of 4
    assert aggregator.occupied_units == 3
    assert aggregator.total_units == 4


@pytest.mark.asyncio
async def test_occupancy_rate_computed_without_aggregate(gateway, aggregator):
    gateway.snapshot = _snapshot()

    await aggregator.refresh()

    assert aggregator.occupancy_rate == 75.0


@pytest.mark.asyncio
async def test_fallback_is_per_field(gateway, aggregator):
    gateway.snapshot = _snapshot(PortfolioAggregate(total_units=10, total_portfolio_value=None))

    await aggregator.refresh()

    assert aggregator.total_units == 10
    assert aggregator.total_portfolio_value == 400000
    assert aggregator.occupancy_rate == 30.0


@pytest.mark.asyncio
async def test_zero_server_value_is_used(gateway, aggregator):
    gateway.snapshot = _snapshot(PortfolioAggregate(net_monthly_cash_flow=0))
    await aggregator.refresh()
    assert aggregator.net_monthly_cash_flow == 0


@pytest.mark.asyncio
async def test_computed_cash_flow(gateway, aggregator):
    gateway.snapshot = _snapshot()

    await aggregator.refresh()

    assert aggregator.total_monthly_income == 4200
    assert aggregator.total_monthly_expenses == 700
    assert aggregator.net_monthly_cash_flow == 3500


@pytest.mark.asyncio
async def test_refresh_failure_replaces_nothing(gateway, aggregator):
    gateway.snapshot = _snapshot(PortfolioAggregate(occupancy_rate=80))
    await aggregator.refresh()

    gateway.error = ServerError(503, 'Service Unavailable')
    assert not await aggregator.refresh()

    assert aggregator.error_message == "Server error (503): Service Unavailable"
    assert aggregator.occupancy_rate == 80
    assert len(aggregator.properties) == 2
    assert len(aggregator.payments) == 5
    assert not aggregator.is_loading


@pytest.mark.asyncio
async def test_payment_buckets(gateway, aggregator):
    gateway.snapshot = _snapshot()
    await aggregator.refresh()

    assert [p.id for p in aggregator.current_month_payments] == ['pay1', 'pay2', 'pay3']
    assert [p.id for p in aggregator.paid_payments] == ['pay1', 'pay2']
    assert [p.id for p in aggregator.unpaid_payments] == ['pay3']


@pytest.mark.asyncio
async def test_current_month_follows_clock(gateway):
    now = {'value': NOW}
    aggregator = PortfolioAggregator(gateway, clock=lambda: now['value'])
    gateway.snapshot = _snapshot()
    await aggregator.refresh()

    now['value'] = datetime(2026, 9, 15)

    assert [p.id for p in aggregator.current_month_payments] == ['pay4']


@pytest.mark.asyncio
async def test_rent_collection_fallbacks(gateway, aggregator):
    gateway.snapshot = _snapshot()
    await aggregator.refresh()

    assert aggregator.total_rent_due == 3400
    assert aggregator.total_rent_collected == 2500
    assert aggregator.collection_rate == pytest.approx(2500 / 3400 * 100)
    assert aggregator.residents_paid == 2


@pytest.mark.asyncio
async def test_property_roi_uses_units_and_expenses(gateway, aggregator):
    gateway.snapshot = _snapshot()
    await aggregator.refresh()

    # p1: (2500 - 400) * 12 / 200000
    assert aggregator.property_roi('p1') == pytest.approx(12.6)
    assert aggregator.property_roi('missing') == 0


@pytest.mark.asyncio
async def test_create_property_appends(gateway, aggregator):
    gateway.snapshot = _snapshot()
    await aggregator.refresh()

    assert await aggregator.create_property(Property(id='p3', address='9 Elm'))

    assert [p.id for p in aggregator.properties.entities] == ['p1', 'p2', 'p3']
    assert aggregator.total_properties == 3


@pytest.mark.asyncio
async def test_update_and_delete_property(gateway, aggregator):
    gateway.snapshot = _snapshot()
    await aggregator.refresh()

    await aggregator.update_property(Property(id='p1', market_value=1))
    assert aggregator.properties.entities[0].market_value == 1

    await aggregator.delete_property('p1')
    assert [p.id for p in aggregator.properties.entities] == ['p2']


@pytest.mark.asyncio
async def test_property_write_failure_sets_error(gateway, aggregator):
    gateway.error = ServerError(500, 'Internal Server Error')

    assert not await aggregator.create_property(Property(id='p9'))

    assert aggregator.error_message == "Server error (500): Internal Server Error"
    assert len(aggregator.properties) == 0


def test_empty_aggregator_metrics_are_zero(gateway, aggregator):
    dashboard = aggregator.dashboard()
    assert dashboard['total_units'] == 0
    assert dashboard['occupancy_rate'] == 0
    assert dashboard['collection_rate'] == 0
