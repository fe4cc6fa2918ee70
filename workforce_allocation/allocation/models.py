"""
Data models for allocation results.
"""

from typing import List, Dict, Any
from dataclasses import dataclass, field

import pandas as pd

from ..entities.models import Assignment, ContractStatus


@dataclass
class AllocationResult:
    """Outcome of one auto-assignment run for a contract."""

    contract_id: str
    assignments: List[Assignment]
    status: ContractStatus
    hours_required: float
    remaining_hours: float
    candidates_considered: List[str] = field(default_factory=list)

    @property
    def hours_allocated(self) -> float:
        """Hours handed out by this run."""
        return sum(a.hours_assigned for a in self.assignments)

    @property
    def is_fully_staffed(self) -> bool:
        return self.status == ContractStatus.ACTIVE

    @property
    def coverage_percentage(self) -> float:
        """Share of the required hours covered by this run."""
        if self.hours_required <= 0:
            return 100.0
        return (self.hours_allocated / self.hours_required) * 100

    def to_dataframe(self) -> pd.DataFrame:
        """Convert created assignments to pandas DataFrame."""
        return pd.DataFrame(
            [a.to_dict() for a in self.assignments],
            columns=['id', 'contract_id', 'person_id', 'hours_assigned'],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'contract_id': self.contract_id,
            'assignments': [a.to_dict() for a in self.assignments],
            'status': self.status.value,
            'hours_required': self.hours_required,
            'hours_allocated': self.hours_allocated,
            'remaining_hours': self.remaining_hours,
            'coverage_percentage': self.coverage_percentage,
            'candidates_considered': list(self.candidates_considered),
        }
