"""
Entity kinds and their per-kind API conventions.

Everything that legitimately differs between kinds lives in KIND_SPECS:
the collection path, where a newly created entity goes in the local list,
and whether write responses come wrapped in the {"success", "data"}
envelope. Update payload shape is owned by each model's update_payload().
"""

from dataclasses import dataclass
from enum import Enum

from .models import (
    Client,
    Communication,
    Expense,
    Lead,
    Lease,
    Payment,
    Property,
    RehabProject,
    Resident,
    Task,
    Unit,
)


class EntityKind(str, Enum):
    LEAD = 'lead'
    CLIENT = 'client'
    PROPERTY = 'property'
    REHAB_PROJECT = 'rehab_project'
    TASK = 'task'
    COMMUNICATION = 'communication'
    UNIT = 'unit'
    RESIDENT = 'resident'
    LEASE = 'lease'
    PAYMENT = 'payment'
    EXPENSE = 'expense'


class InsertPosition(str, Enum):
    """Where create() puts a new entity in the local collection."""
    HEAD = 'head'  # most recent first
    TAIL = 'tail'


@dataclass(frozen=True)
class KindSpec:
    kind: EntityKind
    path: str
    model: type
    insert_position: InsertPosition
    update_method: str = 'PUT'
    # Property and project writes come back as the bare object
    enveloped_writes: bool = True


KIND_SPECS: dict[EntityKind, KindSpec] = {
    spec.kind: spec for spec in (
        KindSpec(EntityKind.LEAD, '/api/crm/leads', Lead, InsertPosition.HEAD),
        KindSpec(EntityKind.CLIENT, '/api/crm/clients', Client, InsertPosition.HEAD),
        KindSpec(EntityKind.TASK, '/api/crm/tasks', Task, InsertPosition.HEAD),
        KindSpec(EntityKind.COMMUNICATION, '/api/crm/communications', Communication, InsertPosition.HEAD),
        KindSpec(EntityKind.PROPERTY, '/api/portfolio/properties', Property, InsertPosition.TAIL,
                 enveloped_writes=False),
        KindSpec(EntityKind.REHAB_PROJECT, '/api/projects', RehabProject, InsertPosition.TAIL,
                 enveloped_writes=False),
        KindSpec(EntityKind.UNIT, '/api/portfolio/units', Unit, InsertPosition.TAIL),
        KindSpec(EntityKind.RESIDENT, '/api/portfolio/residents', Resident, InsertPosition.TAIL),
        KindSpec(EntityKind.LEASE, '/api/portfolio/leases', Lease, InsertPosition.TAIL),
        KindSpec(EntityKind.PAYMENT, '/api/portfolio/payments', Payment, InsertPosition.TAIL),
        KindSpec(EntityKind.EXPENSE, '/api/portfolio/expenses', Expense, InsertPosition.TAIL),
    )
}

PORTFOLIO_PATH = '/api/portfolio'


def spec_for(kind: EntityKind) -> KindSpec:
    return KIND_SPECS[EntityKind(kind)]
