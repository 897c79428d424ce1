"""
Per-kind rollups, filters and list helpers over a store's entities.

Plain functions taking the entity list, so they work on a store's
entities or on any filtered slice of it.
"""

import dataclasses
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Optional

from . import metrics
from .models import (
    Client,
    ClientStatus,
    ClientType,
    Communication,
    CommunicationType,
    Lead,
    LeadPriority,
    LeadSource,
    LeadStatus,
    Property,
    RehabProject,
    Task,
    TaskPriority,
    TaskStatus,
    parse_datetime,
)

if TYPE_CHECKING:
    from .entity_store import EntityStore

RECENT_LEADS = 5
RECENT_CLIENTS = 5
RECENT_COMMUNICATIONS = 10


def _matches(search: str, *values: Optional[str]) -> bool:
    """Case-insensitive substring match against any of values; empty search matches all."""
    if not search:
        return True
    needle = search.casefold()
    return any(needle in (value or '').casefold() for value in values)


# =============================================================================
# Rehab projects
# =============================================================================

def project_utilization(project: RehabProject) -> float:
    return metrics.budget_utilization(project.total_spent, project.total_budget)


def project_remaining(project: RehabProject) -> float:
    return metrics.remaining_budget(project.total_budget, project.total_spent)


def project_profit(project: RehabProject) -> float:
    """Server net income, else ARV minus everything spent minus the purchase price."""
    if project.net_income is not None:
        return project.net_income
    return project.arv - project.total_spent - (project.property_purchase or 0)


def project_roi(project: RehabProject) -> float:
    if project.roi is not None:
        return project.roi
    investment = project.total_investment or project.total_budget
    return metrics.roi(project_profit(project), investment)


def active_projects(projects: Iterable[RehabProject]) -> list[RehabProject]:
    return [p for p in projects if p.status.lower() == 'active']


def filter_projects(projects: Iterable[RehabProject], status: Optional[str] = None) -> list[RehabProject]:
    """Projects with exactly this status, or all of them when status is None."""
    return [p for p in projects if status is None or p.status == status]


def rehab_summary(projects: Iterable[RehabProject]) -> dict:
    """Totals and averages for the projects list header."""
    projects = list(projects)
    return {
        'count': len(projects),
        'active': len(active_projects(projects)),
        'total_budget': sum(p.total_budget for p in projects),
        'total_spent': sum(p.total_spent for p in projects),
        'total_remaining': sum(project_remaining(p) for p in projects),
        'total_investment': sum(p.total_investment for p in projects if p.total_investment is not None),
        'total_net_income': sum(p.net_income for p in projects if p.net_income is not None),
        'average_utilization': metrics.positive_average(project_utilization(p) for p in projects),
        'average_roi': metrics.positive_average(project_roi(p) for p in projects),
    }


# =============================================================================
# Properties
# =============================================================================

def property_roi(prop: Property) -> float:
    """Annualized net cash flow over purchase price, from the property's own figures."""
    monthly = metrics.net_cash_flow(prop.monthly_rent or 0, prop.monthly_expenses or 0)
    return metrics.roi(metrics.annualize(monthly), prop.purchase_price or 0)


def rental_properties(properties: Iterable[Property]) -> list[Property]:
    return [p for p in properties if p.status == 'rental']


def active_properties(properties: Iterable[Property]) -> list[Property]:
    """Everything not listed for sale, including properties with no status."""
    return [p for p in properties if p.status != 'for_sale']


def filter_properties(
    properties: Iterable[Property],
    search: str = '',
    property_type: Optional[str] = None,
    status: Optional[str] = None,
) -> list[Property]:
    """Search covers address and city."""
    return [
        p for p in properties
        if _matches(search, p.address, p.city)
        and (property_type is None or p.property_type == property_type)
        and (status is None or p.status == status)
    ]


def property_summary(properties: Iterable[Property]) -> dict:
    properties = list(properties)
    return {
        'count': len(properties),
        'total_value': sum(p.market_value for p in properties if p.market_value is not None),
        'average_roi': metrics.positive_average(property_roi(p) for p in properties),
    }


# =============================================================================
# Leads
# =============================================================================

def hot_leads(leads: Iterable[Lead]) -> list[Lead]:
    return [lead for lead in leads if lead.priority == LeadPriority.HOT]


def recent_leads(leads: Iterable[Lead], limit: int = RECENT_LEADS) -> list[Lead]:
    """First few leads in collection order (newest creates sit at the head)."""
    return list(leads)[:limit]


def filter_leads(
    leads: Iterable[Lead],
    search: str = '',
    source: Optional[LeadSource] = None,
    status: Optional[LeadStatus] = None,
    priority: Optional[LeadPriority] = None,
) -> list[Lead]:
    """Search covers name, email and property address; None means any."""
    return [
        lead for lead in leads
        if _matches(search, lead.full_name, lead.email, lead.property_address)
        and (source is None or lead.source == source)
        and (status is None or lead.status == status)
        and (priority is None or lead.priority == priority)
    ]


# =============================================================================
# Clients
# =============================================================================

def active_clients(clients: Iterable[Client]) -> list[Client]:
    return [c for c in clients if c.status == ClientStatus.ACTIVE]


def recent_clients(clients: Iterable[Client], limit: int = RECENT_CLIENTS) -> list[Client]:
    return list(clients)[:limit]


def filter_clients(
    clients: Iterable[Client],
    search: str = '',
    type: Optional[ClientType] = None,
    status: Optional[ClientStatus] = None,
) -> list[Client]:
    return [
        c for c in clients
        if _matches(search, c.full_name, c.email, c.company)
        and (type is None or c.type == type)
        and (status is None or c.status == status)
    ]


# =============================================================================
# Tasks
# =============================================================================

def pending_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.is_open]


def overdue_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> list[Task]:
    return [t for t in tasks if t.is_overdue(now)]


def tasks_due_today(tasks: Iterable[Task], now: Optional[datetime] = None) -> list[Task]:
    return [t for t in tasks if t.is_due_today(now)]


def completed_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.status == TaskStatus.COMPLETED]


def task_summary(tasks: Iterable[Task], now: Optional[datetime] = None) -> dict:
    tasks = list(tasks)
    return {
        'pending': len(pending_tasks(tasks)),
        'overdue': len(overdue_tasks(tasks, now)),
        'due_today': len(tasks_due_today(tasks, now)),
        'completed': len(completed_tasks(tasks)),
    }


def filter_tasks(
    tasks: Iterable[Task],
    search: str = '',
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    only_overdue: bool = False,
    only_due_today: bool = False,
    now: Optional[datetime] = None,
) -> list[Task]:
    """Search covers title and description."""
    return [
        t for t in tasks
        if _matches(search, t.title, t.description)
        and (status is None or t.status == status)
        and (priority is None or t.priority == priority)
        and (not only_overdue or t.is_overdue(now))
        and (not only_due_today or t.is_due_today(now))
    ]


def mark_completed(task: Task, now: Optional[datetime] = None) -> Task:
    """Copy of task, completed as of now. The original is left untouched."""
    completed_at = now or datetime.now().astimezone()
    return dataclasses.replace(
        task,
        status=TaskStatus.COMPLETED,
        completed_date=completed_at.isoformat(),
    )


async def complete_task(store: 'EntityStore', task: Task, now: Optional[datetime] = None) -> bool:
    """Mark task completed and send it through the store's update."""
    return await store.update(mark_completed(task, now))


# =============================================================================
# Communications
# =============================================================================

def _created_sort_key(comm: Communication) -> float:
    created = parse_datetime(comm.created_at)
    if created is None:
        return float('-inf')
    if created.tzinfo is None:
        created = created.astimezone()
    return created.timestamp()


def recent_communications(
    communications: Iterable[Communication],
    limit: int = RECENT_COMMUNICATIONS,
) -> list[Communication]:
    """Newest first by creation time; undated entries sort last."""
    ordered = sorted(communications, key=_created_sort_key, reverse=True)
    return ordered[:limit]


def filter_communications(
    communications: Iterable[Communication],
    search: str = '',
    type: Optional[CommunicationType] = None,
) -> list[Communication]:
    """Matches on content or subject, newest first."""
    matched = [
        c for c in communications
        if _matches(search, c.content, c.subject)
        and (type is None or c.type == type)
    ]
    return sorted(matched, key=_created_sort_key, reverse=True)
