"""
Data models for the allocation working set: people, contracts,
assignments and logged time.
"""

import math
from typing import List, Dict, Any, Optional, Union, Iterable
from datetime import date, datetime
from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from ..errors import InvalidQuantity, ValidationError


class ContractStatus(str, Enum):
    """Lifecycle label of a contract."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Union[str, "ContractStatus"]) -> "ContractStatus":
        """Coerce text or an existing status, raising ValidationError on unknown labels."""
        try:
            return cls(value)
        except ValueError:
            allowed = [s.value for s in cls]
            raise ValidationError(f"Status must be one of {allowed}, got {value!r}")


def new_id(prefix: str) -> str:
    """Generate a collection-unique id such as 'a3f9c1d2e4b5'."""
    return f"{prefix}{uuid4().hex[:12]}"


def parse_day(value: Union[str, date, datetime]) -> date:
    """Coerce an ISO 'YYYY-MM-DD' string, date or datetime to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}. Use YYYY-MM-DD")


def parse_skills(value: Optional[Union[str, Iterable[str]]]) -> List[str]:
    """Accept a list of tags or a comma-separated string; trim and drop blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    skills = []
    for tag in value:
        tag = str(tag).strip()
        if tag and tag not in skills:
            skills.append(tag)
    return skills


def check_hours(value: Optional[float], allow_zero: bool, label: str = "Hours") -> float:
    """
    Validate an hour quantity coming from a caller.

    Args:
        value: Quantity to check
        allow_zero: Accept 0 (edits) or require a positive value (new assignments)
        label: Name used in the error message

    Returns:
        The quantity as float

    Raises:
        InvalidQuantity: None, NaN, infinite, negative, or zero when not allowed
    """
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise InvalidQuantity(f"{label} must be a number, got {value!r}", value) from None
    if not math.isfinite(hours):
        raise InvalidQuantity(f"{label} must be finite, got {value}", value)
    if hours < 0 or (hours == 0 and not allow_zero):
        bound = "must not be negative" if allow_zero else "must be positive"
        raise InvalidQuantity(f"{label} {bound}, got {value}", value)
    return hours


@dataclass
class Person:
    """A staff member with a capacity ceiling and a running committed-hours total."""

    id: str
    name: str
    region: str
    max_hours: float
    hours_allocated: float = 0.0
    holidays: int = 0
    skills: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Person':
        """Create Person instance from dictionary."""
        return cls(
            id=str(data['id']),
            name=data['name'],
            region=data['region'],
            max_hours=float(data['max_hours']),
            hours_allocated=float(data.get('hours_allocated', 0) or 0),
            holidays=int(data.get('holidays', 0) or 0),
            skills=parse_skills(data.get('skills')),
        )

    @property
    def available_hours(self) -> float:
        """Capacity left before reaching max_hours (never negative)."""
        return max(0.0, self.max_hours - self.hours_allocated)

    def has_any_skill(self, required: Iterable[str]) -> bool:
        """Check whether at least one required tag is among this person's skills."""
        return any(skill in self.skills for skill in required)

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'name': self.name,
            'region': self.region,
            'hours_allocated': self.hours_allocated,
            'max_hours': self.max_hours,
            'holidays': self.holidays,
            'skills': list(self.skills),
        }


@dataclass
class Contract:
    """A time-bounded piece of work needing a number of hours in one region."""

    id: str
    vendor_name: str
    region: str
    hours_required: float
    skills_required: List[str]
    start_date: date
    end_date: date
    status: ContractStatus = ContractStatus.PENDING

    def __post_init__(self):
        self.status = ContractStatus.parse(self.status)
        if self.end_date < self.start_date:
            raise ValidationError(
                f"Contract '{self.id}' ends ({self.end_date}) before it starts ({self.start_date})"
            )

    @classmethod
    def from_dict(cls, data: Dict) -> 'Contract':
        """Create Contract instance from dictionary."""
        return cls(
            id=str(data['id']),
            vendor_name=data['vendor_name'],
            region=data['region'],
            hours_required=float(data['hours_required']),
            skills_required=parse_skills(data.get('skills_required')),
            start_date=parse_day(data['start_date']),
            end_date=parse_day(data['end_date']),
            status=data.get('status', ContractStatus.PENDING),
        )

    @property
    def total_days(self) -> int:
        """Inclusive number of calendar days in the contract period."""
        return (self.end_date - self.start_date).days + 1

    @property
    def is_pending(self) -> bool:
        """True until the contract is fully staffed or closed."""
        return self.status == ContractStatus.PENDING

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'vendor_name': self.vendor_name,
            'region': self.region,
            'hours_required': self.hours_required,
            'skills_required': list(self.skills_required),
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'status': self.status.value,
        }


@dataclass
class Assignment:
    """Hours of one contract committed to one person."""

    id: str
    contract_id: str
    person_id: str
    hours_assigned: float

    @classmethod
    def from_dict(cls, data: Dict) -> 'Assignment':
        """Create Assignment instance from dictionary."""
        return cls(
            id=str(data['id']),
            contract_id=str(data['contract_id']),
            person_id=str(data['person_id']),
            hours_assigned=float(data['hours_assigned']),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'contract_id': self.contract_id,
            'person_id': self.person_id,
            'hours_assigned': self.hours_assigned,
        }


@dataclass
class TimeEntry:
    """
    Hours actually worked on one day against an assignment.

    person_id and contract_id are copies of the owning assignment's
    references; the store rejects entries where they disagree.
    """

    id: str
    assignment_id: str
    person_id: str
    contract_id: str
    date: date
    hours_clocked: float

    @classmethod
    def from_dict(cls, data: Dict) -> 'TimeEntry':
        """Create TimeEntry instance from dictionary (date as ISO text or date)."""
        return cls(
            id=str(data['id']),
            assignment_id=str(data['assignment_id']),
            person_id=str(data['person_id']),
            contract_id=str(data['contract_id']),
            date=parse_day(data['date']),
            hours_clocked=float(data['hours_clocked']),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation with an ISO date."""
        return {
            'id': self.id,
            'assignment_id': self.assignment_id,
            'person_id': self.person_id,
            'contract_id': self.contract_id,
            'date': self.date.isoformat(),
            'hours_clocked': self.hours_clocked,
        }
