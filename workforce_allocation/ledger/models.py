"""
Derived hour aggregates. These are never stored; the ledger rebuilds
them from the working set on every request.
"""

from typing import Dict
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class PersonHours:
    """Hours picture for one person."""

    assigned: float
    worked: float
    unassigned: float
    remaining: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ContractHours:
    """Assigned and worked hours for one contract."""

    assigned: float
    worked: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ContractCoverage:
    """How much of a contract's requirement is committed to people."""

    required: float
    assigned: float
    remaining: float

    @property
    def is_covered(self) -> bool:
        return self.remaining <= 0

    def to_dict(self) -> Dict[str, float]:
        return {**asdict(self), 'is_covered': self.is_covered}


@dataclass(frozen=True)
class Utilization:
    """Committed share of a person's capacity and its roster label."""

    percentage: float
    status: str

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class WorkforceOverview:
    total_staff: int
    fully_available: int
    partially_allocated: int
    fully_allocated: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
