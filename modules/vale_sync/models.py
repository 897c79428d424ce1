"""
Data models for Vale Sync module.

One dataclass per entity kind. Field names follow the API's snake_case
keys; from_api() also accepts camelCase keys. Dates stay as the ISO-8601
strings the server sent and are parsed on demand.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
import typing
from typing import Any, Optional


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _get(data: dict, key: str, default: Any = None) -> Any:
    """Read a snake_case key, falling back to its camelCase spelling."""
    if key in data:
        return data[key]
    return data.get(_camel(key), default)


def _compact(values: dict) -> dict:
    return {k: v for k, v in values.items() if v is not None}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _to_api(entity) -> dict:
    """Full snake_case object, unset fields omitted."""
    return _compact({f.name: _plain(getattr(entity, f.name)) for f in dataclasses.fields(entity)})


def _number(value: Any, kind: type = float) -> Any:
    """Numeric field value. Strings and booleans are a type mismatch, not a number."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected {kind.__name__}, got {type(value).__name__}")
    if kind is int and not float(value).is_integer():
        raise ValueError(f"expected int, got {value!r}")
    return kind(value)


def _field_type(f: dataclasses.Field) -> Any:
    args = [a for a in typing.get_args(f.type) if a is not type(None)]
    return args[0] if len(args) == 1 else f.type


def _decode_field(f: dataclasses.Field, value: Any) -> Any:
    kind = _field_type(f)
    if kind in (int, float):
        return _number(value, kind)
    if kind is bool and not isinstance(value, bool):
        raise TypeError(f"{f.name}: expected bool, got {type(value).__name__}")
    return value


def _from_fields(cls, data: dict):
    """Build a flat model by reading every dataclass field from the payload."""
    kwargs = {}
    for f in dataclasses.fields(cls):
        value = _get(data, f.name)
        if value is not None:
            kwargs[f.name] = _decode_field(f, value)
    if 'id' not in kwargs:
        raise KeyError('id')
    kwargs['id'] = str(kwargs['id'])
    return cls(**kwargs)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp or date string. Returns None if unparseable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


def _local_date(value: Optional[str]) -> Optional[date]:
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


# =============================================================================
# Enumerations
# =============================================================================

class LeadSource(str, Enum):
    WEB_FORM = 'web_form'
    REFERRAL = 'referral'
    COLD_CALL = 'cold_call'
    DIRECT_MAIL = 'direct_mail'
    SOCIAL_MEDIA = 'social_media'
    HUBSPOT = 'hubspot'
    OTHER = 'other'


class LeadStatus(str, Enum):
    NEW = 'new'
    CONTACTED = 'contacted'
    QUALIFIED = 'qualified'
    NEGOTIATING = 'negotiating'
    UNDER_CONTRACT = 'under_contract'
    CLOSED = 'closed'
    LOST = 'lost'


class LeadPriority(str, Enum):
    HOT = 'hot'
    WARM = 'warm'
    COLD = 'cold'


class ClientType(str, Enum):
    BUYER = 'buyer'
    SELLER = 'seller'
    INVESTOR = 'investor'
    TENANT = 'tenant'
    VENDOR = 'vendor'
    OTHER = 'other'


class ClientStatus(str, Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    PROSPECT = 'prospect'


class TaskType(str, Enum):
    CALL = 'call'
    EMAIL = 'email'
    MEETING = 'meeting'
    FOLLOW_UP = 'follow_up'
    SHOWING = 'showing'
    INSPECTION = 'inspection'
    OTHER = 'other'


class TaskStatus(str, Enum):
    PENDING = 'pending'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class TaskPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    URGENT = 'urgent'


class CommunicationType(str, Enum):
    CALL = 'call'
    EMAIL = 'email'
    SMS = 'sms'
    MEETING = 'meeting'
    NOTE = 'note'


class CommunicationDirection(str, Enum):
    INBOUND = 'inbound'
    OUTBOUND = 'outbound'


class ProjectStatus(str, Enum):
    PLANNING = 'planning'
    ACTIVE = 'active'
    ON_HOLD = 'on_hold'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


def _enum(enum_cls, value, default=None):
    if value is None:
        return default
    return enum_cls(value)


# =============================================================================
# CRM entities
# =============================================================================

@dataclass
class Lead:
    """Seller/buyer lead from the CRM."""
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    hubspot_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[LeadSource] = None
    status: Optional[LeadStatus] = None
    priority: Optional[LeadPriority] = None
    tags: Optional[list[str]] = None
    property_address: Optional[str] = None
    property_city: Optional[str] = None
    property_state: Optional[str] = None
    property_zip: Optional[str] = None
    asking_price: Optional[float] = None
    offer_amount: Optional[float] = None
    arv: Optional[float] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @classmethod
    def from_api(cls, data: dict) -> 'Lead':
        """Create from Vale API response."""
        return cls(
            id=str(data['id']),
            created_at=_get(data, 'created_at'),
            updated_at=_get(data, 'updated_at'),
            hubspot_id=_get(data, 'hubspot_id'),
            first_name=_get(data, 'first_name'),
            last_name=_get(data, 'last_name'),
            email=_get(data, 'email'),
            phone=_get(data, 'phone'),
            source=_enum(LeadSource, _get(data, 'source')),
            status=_enum(LeadStatus, _get(data, 'status')),
            priority=_enum(LeadPriority, _get(data, 'priority')),
            tags=_get(data, 'tags'),
            property_address=_get(data, 'property_address'),
            property_city=_get(data, 'property_city'),
            property_state=_get(data, 'property_state'),
            property_zip=_get(data, 'property_zip'),
            asking_price=_number(_get(data, 'asking_price')),
            offer_amount=_number(_get(data, 'offer_amount')),
            arv=_number(_get(data, 'arv')),
        )

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        """Partial camelCase field set; unset fields are left out."""
        return _compact({
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'status': _plain(self.status),
            'priority': _plain(self.priority),
            'propertyAddress': self.property_address,
            'propertyCity': self.property_city,
            'propertyState': self.property_state,
            'propertyZip': self.property_zip,
            'askingPrice': self.asking_price,
            'offerAmount': self.offer_amount,
            'tags': self.tags,
        })


@dataclass
class Client:
    """Client contact (buyer, seller, investor, ...)."""
    id: str
    first_name: str = ''
    last_name: str = ''
    email: str = ''
    phone: Optional[str] = None
    company: Optional[str] = None
    type: ClientType = ClientType.BUYER
    status: ClientStatus = ClientStatus.ACTIVE
    source: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None
    last_contact_date: Optional[str] = None
    next_follow_up_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api(cls, data: dict) -> 'Client':
        """Create from Vale API response."""
        return cls(
            id=str(data['id']),
            first_name=_get(data, 'first_name') or '',
            last_name=_get(data, 'last_name') or '',
            email=_get(data, 'email') or '',
            phone=_get(data, 'phone'),
            company=_get(data, 'company'),
            type=_enum(ClientType, _get(data, 'type'), ClientType.BUYER),
            status=_enum(ClientStatus, _get(data, 'status'), ClientStatus.ACTIVE),
            source=_get(data, 'source'),
            tags=_get(data, 'tags') or [],
            address=_get(data, 'address'),
            city=_get(data, 'city'),
            state=_get(data, 'state'),
            zip_code=_get(data, 'zip_code', data.get('zip')),
            notes=_get(data, 'notes'),
            last_contact_date=_get(data, 'last_contact_date'),
            next_follow_up_date=_get(data, 'next_follow_up_date'),
            created_at=_get(data, 'created_at'),
            updated_at=_get(data, 'updated_at'),
        )

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        """Editable field set in camelCase; the API names the zip code 'zip'."""
        return _compact({
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'company': self.company,
            'type': self.type.value,
            'status': self.status.value,
            'source': self.source,
            'tags': self.tags,
            'address': self.address,
            'city': self.city,
            'state': self.state,
            'zip': self.zip_code,
            'notes': self.notes,
            'lastContactDate': self.last_contact_date,
            'nextFollowUpDate': self.next_follow_up_date,
        })


@dataclass
class Task:
    """Follow-up task, optionally tied to a lead, client, property or project."""
    id: str
    title: str = ''
    description: Optional[str] = None
    type: TaskType = TaskType.FOLLOW_UP
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[str] = None
    reminder_date: Optional[str] = None
    completed_date: Optional[str] = None
    lead_id: Optional[str] = None
    client_id: Optional[str] = None
    property_id: Optional[str] = None
    project_id: Optional[str] = None
    assigned_to: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status in (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Open task whose due date is before today."""
        due = _local_date(self.due_date)
        if due is None or not self.is_open:
            return False
        today = (now or datetime.now()).date()
        return due < today

    def is_due_today(self, now: Optional[datetime] = None) -> bool:
        due = _local_date(self.due_date)
        if due is None:
            return False
        return due == (now or datetime.now()).date()

    @classmethod
    def from_api(cls, data: dict) -> 'Task':
        """Create from Vale API response."""
        return cls(
            id=str(data['id']),
            title=_get(data, 'title') or '',
            description=_get(data, 'description'),
            type=_enum(TaskType, _get(data, 'type'), TaskType.FOLLOW_UP),
            status=_enum(TaskStatus, _get(data, 'status'), TaskStatus.PENDING),
            priority=_enum(TaskPriority, _get(data, 'priority'), TaskPriority.MEDIUM),
            due_date=_get(data, 'due_date'),
            reminder_date=_get(data, 'reminder_date'),
            completed_date=_get(data, 'completed_date'),
            lead_id=_get(data, 'lead_id', _get(data, 'related_lead_id')),
            client_id=_get(data, 'client_id', _get(data, 'related_client_id')),
            property_id=_get(data, 'property_id', _get(data, 'related_property_id')),
            project_id=_get(data, 'project_id', _get(data, 'related_project_id')),
            assigned_to=_get(data, 'assigned_to'),
            tags=_get(data, 'tags') or [],
            created_at=_get(data, 'created_at'),
            updated_at=_get(data, 'updated_at'),
        )

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        """Editable field set; relationships use the related*Id names."""
        return _compact({
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'type': self.type.value,
            'status': self.status.value,
            'priority': self.priority.value,
            'dueDate': self.due_date,
            'reminderDate': self.reminder_date,
            'completedDate': self.completed_date,
            'relatedLeadId': self.lead_id,
            'relatedClientId': self.client_id,
            'relatedPropertyId': self.property_id,
            'relatedProjectId': self.project_id,
            'assignedTo': self.assigned_to,
            'tags': self.tags,
        })


@dataclass
class Communication:
    """Logged call, email, SMS, meeting or note."""
    id: str
    type: CommunicationType = CommunicationType.NOTE
    direction: Optional[CommunicationDirection] = None
    subject: Optional[str] = None
    content: Optional[str] = None
    notes: Optional[str] = None
    duration: Optional[int] = None  # minutes, for calls
    status: Optional[str] = None
    date: Optional[str] = None
    contact_name: Optional[str] = None
    user_id: Optional[str] = None
    lead_id: Optional[str] = None
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    property_id: Optional[str] = None
    contact_id: Optional[str] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    attachments: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def display_title(self) -> str:
        if self.subject:
            return self.subject
        verb = 'Received' if self.direction == CommunicationDirection.INBOUND else 'Sent'
        label = 'SMS' if self.type == CommunicationType.SMS else self.type.value.capitalize()
        return f"{label} - {verb}"

    @classmethod
    def from_api(cls, data: dict) -> 'Communication':
        """Create from Vale API response."""
        return cls(
            id=str(data['id']),
            type=CommunicationType(data['type']),
            direction=_enum(CommunicationDirection, _get(data, 'direction')),
            subject=_get(data, 'subject'),
            content=_get(data, 'content'),
            notes=_get(data, 'notes'),
            duration=_number(_get(data, 'duration'), int),
            status=_get(data, 'status'),
            date=_get(data, 'date'),
            contact_name=_get(data, 'contact_name'),
            user_id=_get(data, 'user_id'),
            lead_id=_get(data, 'lead_id'),
            client_id=_get(data, 'client_id'),
            project_id=_get(data, 'project_id'),
            property_id=_get(data, 'property_id'),
            contact_id=_get(data, 'contact_id'),
            from_address=_get(data, 'from_address'),
            to_address=_get(data, 'to_address'),
            attachments=_get(data, 'attachments'),
            tags=_get(data, 'tags'),
            created_at=_get(data, 'created_at'),
            updated_at=_get(data, 'updated_at'),
        )

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return _compact({
            'id': self.id,
            'type': self.type.value,
            'direction': _plain(self.direction),
            'subject': self.subject,
            'content': self.content,
            'duration': self.duration,
            'relatedLeadId': self.lead_id,
            'relatedClientId': self.client_id,
            'relatedPropertyId': self.property_id,
            'relatedProjectId': self.project_id,
            'tags': self.tags,
        })


# =============================================================================
# Investment entities (full-object updates)
# =============================================================================

@dataclass
class Property:
    """Owned or tracked property."""
    id: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    property_type: Optional[str] = None
    status: Optional[str] = None
    purchase_price: Optional[float] = None
    market_value: Optional[float] = None
    total_units: Optional[int] = None
    property_tax_annual: Optional[float] = None
    insurance_annual: Optional[float] = None
    hoa_monthly: Optional[float] = None
    monthly_rent: Optional[float] = None
    monthly_expenses: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Property':
        """Create from Vale API response."""
        return _from_fields(cls, data)

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return self.to_api()


@dataclass
class RehabProject:
    """Fix-and-flip project with its cost ledger.

    The total_* figures, net_income, total_investment and roi are
    calculated server side; the properties below only fill in when the
    server left them out.
    """
    id: str
    property_address: str = ''
    property_name: str = ''
    status: str = ProjectStatus.PLANNING.value
    purchase_date: Optional[str] = None
    sell_date: Optional[str] = None
    measured_sqft: Optional[float] = None
    rehab_type: Optional[str] = None

    # Purchase costs
    property_purchase: Optional[float] = None
    home_inspection: Optional[float] = None
    appraisal: Optional[float] = None
    survey: Optional[float] = None
    lender_fees: Optional[float] = None
    purchase_closing_costs: Optional[float] = None
    purchase_other: Optional[float] = None

    # Rehab costs
    total_contractor: Optional[float] = None
    total_materials: Optional[float] = None

    # Holding costs
    mortgage_interest: Optional[float] = None
    investor_mortgage_interest: Optional[float] = None
    property_taxes: Optional[float] = None
    insurance: Optional[float] = None
    total_utilities: Optional[float] = None
    lawn_care: Optional[float] = None
    holding_other: Optional[float] = None

    # Selling
    sales_revenue: Optional[float] = None
    after_repair_value: Optional[float] = None
    broker_commission_percent: Optional[float] = None
    home_warranty: Optional[float] = None
    buyer_termite: Optional[float] = None
    closing_costs_buyer: Optional[float] = None
    selling_closing_costs: Optional[float] = None

    bank_service_charges: Optional[float] = None
    quickbooks_property_name: Optional[str] = None

    # Calculated by the server
    total_purchase_costs: Optional[float] = None
    total_rehab_costs: Optional[float] = None
    total_holding_costs: Optional[float] = None
    total_selling_costs: Optional[float] = None
    total_expenses: Optional[float] = None
    net_income: Optional[float] = None
    total_investment: Optional[float] = None
    roi: Optional[float] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.property_name or self.property_address

    @property
    def total_budget(self) -> float:
        return (self.total_purchase_costs or 0) + (self.total_rehab_costs or 0) + (self.total_holding_costs or 0)

    @property
    def total_spent(self) -> float:
        if self.total_expenses is not None:
            return self.total_expenses
        return self.total_budget + (self.total_selling_costs or 0)

    @property
    def arv(self) -> float:
        """After-repair value; the recorded sale price stands in when no ARV was entered."""
        if self.after_repair_value is not None:
            return self.after_repair_value
        return self.sales_revenue or 0

    @classmethod
    def from_api(cls, data: dict) -> 'RehabProject':
        """Create from Vale API response."""
        return _from_fields(cls, data)

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return self.to_api()


# =============================================================================
# Portfolio sub-entities
# =============================================================================

@dataclass
class Unit:
    id: str
    property_id: Optional[str] = None
    unit_number: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    monthly_rent: Optional[float] = None
    status: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Unit':
        return _from_fields(cls, data)

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return self.to_api()


@dataclass
class Resident:
    id: str
    property_id: Optional[str] = None
    unit_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None
    move_in_date: Optional[str] = None
    move_out_date: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def is_active(self) -> bool:
        return (self.status or '').lower() == 'active'

    @classmethod
    def from_api(cls, data: dict) -> 'Resident':
        return _from_fields(cls, data)

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return self.to_api()


@dataclass
class Lease:
    id: str
    property_id: Optional[str] = None
    tenant_id: Optional[str] = None
    unit_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    monthly_rent: Optional[float] = None
    status: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Lease':
        return _from_fields(cls, data)

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return self.to_api()


@dataclass
class Payment:
    id: str
    property_id: Optional[str] = None
    tenant_id: Optional[str] = None
    lease_id: Optional[str] = None
    due_date: Optional[str] = None
    amount_due: Optional[float] = None
    amount_paid: Optional[float] = None
    payment_date: Optional[str] = None
    payment_method: Optional[str] = None
    status: Optional[str] = None

    PAID_STATUSES = frozenset({'paid', 'completed'})

    @property
    def amount(self) -> float:
        if self.amount_paid is not None:
            return self.amount_paid
        return self.amount_due or 0

    @property
    def is_paid(self) -> bool:
        return (self.status or '').lower() in self.PAID_STATUSES

    @classmethod
    def from_api(cls, data: dict) -> 'Payment':
        return _from_fields(cls, data)

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return self.to_api()


@dataclass
class Expense:
    id: str
    property_id: Optional[str] = None
    expense_date: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    is_recurring: Optional[bool] = None

    @classmethod
    def from_api(cls, data: dict) -> 'Expense':
        return _from_fields(cls, data)

    def to_api(self) -> dict:
        return _to_api(self)

    def update_payload(self) -> dict:
        return self.to_api()


@dataclass
class PortfolioAggregate:
    """Server-computed dashboard figures. Any field may be missing."""
    total_rent_due: Optional[float] = None
    total_rent_collected: Optional[float] = None
    total_units: Optional[int] = None
    occupied_units: Optional[int] = None
    occupancy_rate: Optional[float] = None
    residents_paid: Optional[int] = None
    collection_rate: Optional[float] = None
    total_portfolio_value: Optional[float] = None
    total_monthly_income: Optional[float] = None
    total_monthly_expenses: Optional[float] = None
    net_monthly_cash_flow: Optional[float] = None

    @classmethod
    def from_api(cls, data: dict) -> 'PortfolioAggregate':
        return cls(**{
            f.name: _number(_get(data, f.name), _field_type(f))
            for f in dataclasses.fields(cls)
        })


@dataclass
class PortfolioSnapshot:
    """Everything the combined portfolio endpoint returns in one response."""
    aggregate: Optional[PortfolioAggregate] = None
    properties: list[Property] = field(default_factory=list)
    units: list[Unit] = field(default_factory=list)
    residents: list[Resident] = field(default_factory=list)
    leases: list[Lease] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> 'PortfolioSnapshot':
        """Create from the 'data' object of the portfolio response."""
        dashboard = _get(data, 'dashboard')
        return cls(
            aggregate=PortfolioAggregate.from_api(dashboard) if dashboard else None,
            properties=[Property.from_api(p) for p in data.get('properties', [])],
            units=[Unit.from_api(u) for u in data.get('units', [])],
            residents=[Resident.from_api(r) for r in data.get('residents', [])],
            leases=[Lease.from_api(lease) for lease in data.get('leases', [])],
            expenses=[Expense.from_api(e) for e in data.get('expenses', [])],
            payments=[Payment.from_api(p) for p in data.get('payments', [])],
        )
