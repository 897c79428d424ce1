"""
Portfolio Aggregator - dashboard metrics for the rental portfolio.

One call to the combined portfolio endpoint refreshes the server
aggregate and six collections (properties, units, residents, leases,
expenses, payments) together: either all seven pieces are replaced or
none are.

Every metric is resolved independently: a non-null field of the server
aggregate wins, otherwise the value is computed from the raw collections.
A response may supply some aggregate fields and omit others.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Optional

from . import metrics
from .entity_store import EntityStore
from .exceptions import NetworkError
from .kinds import EntityKind
from .models import (
    Expense,
    Lease,
    Payment,
    PortfolioAggregate,
    PortfolioSnapshot,
    Property,
    Resident,
    Unit,
    parse_datetime,
)

logger = logging.getLogger(__name__)


class PortfolioAggregator:
    """Portfolio collections plus server-preferred dashboard metrics."""

    def __init__(self, gateway, clock: Callable[[], datetime] = datetime.now):
        self.gateway = gateway
        self.clock = clock

        self.aggregate: Optional[PortfolioAggregate] = None
        self.properties: EntityStore[Property] = EntityStore(EntityKind.PROPERTY, gateway)
        self.units: EntityStore[Unit] = EntityStore(EntityKind.UNIT, gateway)
        self.residents: EntityStore[Resident] = EntityStore(EntityKind.RESIDENT, gateway)
        self.leases: EntityStore[Lease] = EntityStore(EntityKind.LEASE, gateway)
        self.expenses: EntityStore[Expense] = EntityStore(EntityKind.EXPENSE, gateway)
        self.payments: EntityStore[Payment] = EntityStore(EntityKind.PAYMENT, gateway)

        self.is_loading = False
        self.error_message: Optional[str] = None

    # ==========================================================================
    # Refresh
    # ==========================================================================

    async def refresh(self) -> bool:
        """Fetch the combined portfolio payload. Returns success."""
        self.is_loading = True
        self.error_message = None

        try:
            loop = asyncio.get_running_loop()
            snapshot = await loop.run_in_executor(None, self.gateway.fetch_portfolio)
        except NetworkError as e:
            logger.warning(f"Portfolio refresh failed: {e}")
            self.error_message = str(e)
            self.is_loading = False
            return False

        self.apply(snapshot)
        self.is_loading = False
        return True

    def apply(self, snapshot: PortfolioSnapshot) -> None:
        """Replace all seven pieces of state at once."""
        self.aggregate = snapshot.aggregate
        self.properties.entities = list(snapshot.properties)
        self.units.entities = list(snapshot.units)
        self.residents.entities = list(snapshot.residents)
        self.leases.entities = list(snapshot.leases)
        self.expenses.entities = list(snapshot.expenses)
        self.payments.entities = list(snapshot.payments)
        self.error_message = None

    # ==========================================================================
    # Property CRUD
    # ==========================================================================

    async def create_property(self, draft: Property) -> bool:
        ok = await self.properties.create(draft)
        self.error_message = self.properties.error_message
        return ok

    async def update_property(self, prop: Property) -> bool:
        ok = await self.properties.update(prop)
        self.error_message = self.properties.error_message
        return ok

    async def delete_property(self, property_id: str) -> bool:
        ok = await self.properties.delete(property_id)
        self.error_message = self.properties.error_message
        return ok

    # ==========================================================================
    # Metric resolution
    # ==========================================================================

    def _server_value(self, name: str) -> Optional[Any]:
        if self.aggregate is None:
            return None
        return getattr(self.aggregate, name, None)

    def _resolve(self, name: str, fallback: Callable[[], Any]) -> Any:
        value = self._server_value(name)
        if value is not None:
            return value
        return fallback()

    @property
    def total_properties(self) -> int:
        return len(self.properties.entities)

    @property
    def total_units(self) -> int:
        return self._resolve('total_units', lambda: len(self.units.entities))

    @property
    def occupied_units(self) -> int:
        return self._resolve(
            'occupied_units',
            lambda: sum(1 for r in self.residents.entities if r.is_active),
        )

    @property
    def occupancy_rate(self) -> float:
        return self._resolve(
            'occupancy_rate',
            lambda: metrics.occupancy_rate(self.occupied_units, self.total_units),
        )

    @property
    def total_portfolio_value(self) -> float:
        return self._resolve(
            'total_portfolio_value',
            lambda: sum(p.market_value for p in self.properties.entities if p.market_value is not None),
        )

    @property
    def total_monthly_income(self) -> float:
        return self._resolve(
            'total_monthly_income',
            lambda: sum(u.monthly_rent for u in self.units.entities if u.monthly_rent is not None),
        )

    @property
    def total_monthly_expenses(self) -> float:
        return self._resolve(
            'total_monthly_expenses',
            lambda: sum(e.amount or 0 for e in self.expenses.entities),
        )

    @property
    def net_monthly_cash_flow(self) -> float:
        return self._resolve(
            'net_monthly_cash_flow',
            lambda: metrics.net_cash_flow(self.total_monthly_income, self.total_monthly_expenses),
        )

    @property
    def total_rent_due(self) -> float:
        return self._resolve(
            'total_rent_due',
            lambda: sum(p.amount_due or 0 for p in self.current_month_payments),
        )

    @property
    def total_rent_collected(self) -> float:
        return self._resolve(
            'total_rent_collected',
            lambda: sum(p.amount_paid or 0 for p in self.paid_payments),
        )

    @property
    def collection_rate(self) -> float:
        return self._resolve(
            'collection_rate',
            lambda: metrics.collection_rate(self.total_rent_collected, self.total_rent_due),
        )

    @property
    def residents_paid(self) -> int:
        return self._resolve(
            'residents_paid',
            lambda: len({p.tenant_id for p in self.paid_payments if p.tenant_id}),
        )

    # ==========================================================================
    # Payment buckets (recomputed on every read)
    # ==========================================================================

    @property
    def current_month_payments(self) -> list[Payment]:
        """Payments dated in the current calendar month and year."""
        now = self.clock()
        result = []
        for payment in self.payments.entities:
            paid_at = parse_datetime(payment.payment_date)
            if paid_at is None:
                continue
            if paid_at.tzinfo is not None:
                paid_at = paid_at.astimezone()
            if paid_at.year == now.year and paid_at.month == now.month:
                result.append(payment)
        return result

    @property
    def paid_payments(self) -> list[Payment]:
        return [p for p in self.current_month_payments if p.is_paid]

    @property
    def unpaid_payments(self) -> list[Payment]:
        return [p for p in self.current_month_payments if not p.is_paid]

    # ==========================================================================
    # Per-property figures
    # ==========================================================================

    def monthly_income_for(self, property_id: str) -> float:
        """Recorded monthly rent, else the sum of the property's unit rents."""
        prop = self.properties.get(property_id)
        if prop is not None and prop.monthly_rent is not None:
            return prop.monthly_rent
        return sum(
            u.monthly_rent or 0 for u in self.units.entities if u.property_id == property_id
        )

    def monthly_expenses_for(self, property_id: str) -> float:
        """Recorded monthly expenses, else the sum of the property's expense rows."""
        prop = self.properties.get(property_id)
        if prop is not None and prop.monthly_expenses is not None:
            return prop.monthly_expenses
        return sum(
            e.amount or 0 for e in self.expenses.entities if e.property_id == property_id
        )

    def property_roi(self, property_id: str) -> float:
        """Annualized net cash flow over purchase price, in percent."""
        prop = self.properties.get(property_id)
        if prop is None:
            return 0.0
        monthly = metrics.net_cash_flow(
            self.monthly_income_for(property_id),
            self.monthly_expenses_for(property_id),
        )
        return metrics.roi(metrics.annualize(monthly), prop.purchase_price or 0)

    @property
    def average_property_roi(self) -> float:
        return metrics.positive_average(self.property_roi(p.id) for p in self.properties.entities)

    def dashboard(self) -> dict:
        """All resolved metrics, for display or serialization."""
        return {
            'total_properties': self.total_properties,
            'total_units': self.total_units,
            'occupied_units': self.occupied_units,
            'occupancy_rate': self.occupancy_rate,
            'total_portfolio_value': self.total_portfolio_value,
            'total_monthly_income': self.total_monthly_income,
            'total_monthly_expenses': self.total_monthly_expenses,
            'net_monthly_cash_flow': self.net_monthly_cash_flow,
            'total_rent_due': self.total_rent_due,
            'total_rent_collected': self.total_rent_collected,
            'collection_rate': self.collection_rate,
            'residents_paid': self.residents_paid,
            'paid_payments': len(self.paid_payments),
            'unpaid_payments': len(self.unpaid_payments),
        }
