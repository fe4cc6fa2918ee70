"""
Result models for calendar expansion and performance classification.
"""

from typing import List, Dict, Any, Optional
from datetime import date
from dataclasses import dataclass

import pandas as pd


@dataclass
class DayStatus:
    """One calendar day of an assignment."""

    day: date
    expected_hours: float
    hours_clocked: Optional[float]
    underperforming: bool
    is_weekend: bool
    is_today: bool
    is_past: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.day.isoformat(),
            'day_name': self.day.strftime('%A'),
            'expected_hours': self.expected_hours,
            'hours_clocked': self.hours_clocked,
            'underperforming': self.underperforming,
            'is_weekend': self.is_weekend,
            'is_today': self.is_today,
            'is_past': self.is_past,
        }


@dataclass
class AssignmentCalendar:
    """Per-day classification of an assignment over its contract period."""

    assignment_id: str
    person_id: str
    contract_id: str
    days: List[DayStatus]

    @property
    def underperforming_days(self) -> List[date]:
        return [d.day for d in self.days if d.underperforming]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert day classification to pandas DataFrame."""
        return pd.DataFrame([d.to_dict() for d in self.days])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'assignment_id': self.assignment_id,
            'person_id': self.person_id,
            'contract_id': self.contract_id,
            'days': [d.to_dict() for d in self.days],
        }


@dataclass
class AssignmentPerformance:
    """Totals and variance for one assignment."""

    assignment_id: str
    person_id: str
    contract_id: str
    hours_assigned: float
    hours_worked: float
    expected_daily_hours: float
    underperforming_days: int
    hours_behind: float

    @property
    def performance_percentage(self) -> float:
        if self.hours_assigned <= 0:
            return 0.0
        return (self.hours_worked / self.hours_assigned) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'assignment_id': self.assignment_id,
            'person_id': self.person_id,
            'contract_id': self.contract_id,
            'hours_assigned': self.hours_assigned,
            'hours_worked': self.hours_worked,
            'expected_daily_hours': self.expected_daily_hours,
            'underperforming_days': self.underperforming_days,
            'hours_behind': self.hours_behind,
            'performance_percentage': self.performance_percentage,
        }
