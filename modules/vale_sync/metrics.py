"""
Derived financial and occupancy metrics.

Pure functions over plain numbers. Callers extract the right figures per
entity kind (see summaries.py and portfolio.py) before calling in here.
All percentages are on a 0-100 scale, and every ratio returns 0 instead of
dividing by zero.
"""

from typing import Iterable


def budget_utilization(spent: float, budget: float) -> float:
    """Percent of budget spent."""
    if budget > 0:
        return spent / budget * 100
    return 0.0


def remaining_budget(budget: float, spent: float) -> float:
    """Budget left, floored at zero for overruns."""
    return max(budget - spent, 0)


def roi(profit: float, investment: float) -> float:
    """Return on investment, in percent."""
    if investment > 0:
        return profit / investment * 100
    return 0.0


def net_cash_flow(income: float, expenses: float) -> float:
    return income - expenses


def occupancy_rate(occupied: int, total: int) -> float:
    """Percent of units occupied."""
    if total > 0:
        return occupied / total * 100
    return 0.0


def collection_rate(collected: float, due: float) -> float:
    """Percent of rent due that was collected."""
    if due > 0:
        return collected / due * 100
    return 0.0


def annualize(monthly: float) -> float:
    return monthly * 12


def positive_average(values: Iterable[float]) -> float:
    """
    Mean of the strictly positive values only.

    Zero and negative entries mean "not computed yet" (a project with no
    costs entered, a property with no rent recorded) and are dropped from
    both the sum and the count. Returns 0 when nothing is left.
    """
    positives = [v for v in values if v is not None and v > 0]
    if not positives:
        return 0.0
    return sum(positives) / len(positives)
