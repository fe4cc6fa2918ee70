"""
Calendar & Performance Analyzer.

Expands a contract period into calendar days, spreads each assignment's
hours evenly over every day (weekends included), and flags past days
where logged time falls short of that flat daily rate.
"""

import logging
from datetime import date, timedelta
from typing import List, Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error

from ..entities.models import Assignment, Contract, ContractStatus
from ..entities.store import EntityStore
from ..errors import ValidationError
from .models import DayStatus, AssignmentCalendar, AssignmentPerformance

logger = logging.getLogger(__name__)


def expand(contract: Contract) -> List[date]:
    """Every calendar day from start_date to end_date inclusive."""
    return [ts.date() for ts in pd.date_range(contract.start_date, contract.end_date, freq='D')]


def expected_daily_hours(assignment: Assignment, contract: Contract) -> float:
    """Assignment hours divided evenly across all days of the contract."""
    return assignment.hours_assigned / contract.total_days


def window_days(kind: str, today: Optional[date] = None) -> List[date]:
    """
    Calendar window around today.

    Args:
        kind: 'two_weeks' (today plus the next 13 days) or 'month'
            (first to last day of today's month)
        today: Reference day (default: date.today())

    Returns:
        List of dates in the window
    """
    today = today or date.today()
    if kind == 'two_weeks':
        start, end = today, today + timedelta(days=13)
    elif kind == 'month':
        start = today.replace(day=1)
        end = (pd.Timestamp(start) + pd.offsets.MonthEnd(1)).date()
    else:
        raise ValidationError(f"Window must be 'two_weeks' or 'month', got {kind!r}")
    return [ts.date() for ts in pd.date_range(start, end, freq='D')]


class PerformanceAnalyzer:
    """
    Read-only projections of logged time against assignments.

    Every time-dependent method accepts ``today`` so results are
    reproducible; it defaults to the current date.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def _resolve(self, assignment_id: str):
        assignment = self.store.find_assignment(assignment_id)
        contract = self.store.find_contract(assignment.contract_id)
        return assignment, contract

    def is_underperforming(self,
                           assignment: Assignment,
                           contract: Contract,
                           day: date,
                           today: Optional[date] = None) -> bool:
        """
        Check whether a day fell short of the expected daily hours.

        Only past days can be flagged. A past day with no time entry is
        underperforming by definition.
        """
        today = today or date.today()
        if day >= today:
            return False
        entry = self.store.entry_for_day(assignment.person_id, contract.id, day)
        if entry is None:
            return True
        return entry.hours_clocked < expected_daily_hours(assignment, contract)

    def classify_assignment(self, assignment_id: str, today: Optional[date] = None) -> AssignmentCalendar:
        """
        Classify every day of an assignment's contract.

        Args:
            assignment_id: Assignment to classify
            today: Reference day (default: date.today())

        Returns:
            AssignmentCalendar with one DayStatus per contract day
        """
        today = today or date.today()
        assignment, contract = self._resolve(assignment_id)
        expected = expected_daily_hours(assignment, contract)

        days = []
        for day in expand(contract):
            entry = self.store.entry_for_day(assignment.person_id, contract.id, day)
            days.append(DayStatus(
                day=day,
                expected_hours=expected,
                hours_clocked=entry.hours_clocked if entry else None,
                underperforming=self.is_underperforming(assignment, contract, day, today),
                is_weekend=day.weekday() >= 5,
                is_today=day == today,
                is_past=day < today,
            ))
        return AssignmentCalendar(
            assignment_id=assignment.id,
            person_id=assignment.person_id,
            contract_id=contract.id,
            days=days,
        )

    def contract_calendar(self, contract_id: str, today: Optional[date] = None) -> List[AssignmentCalendar]:
        """Calendars for every assignment on a contract, in assignment order."""
        self.store.find_contract(contract_id)
        return [self.classify_assignment(a.id, today)
                for a in self.store.assignments_for_contract(contract_id)]

    def hours_worked(self, assignment_id: str) -> float:
        """Sum of time entries logged against this assignment."""
        return sum(e.hours_clocked for e in self.store.entries_for_assignment(assignment_id))

    def hours_behind(self, assignment_id: str) -> float:
        """
        Assigned minus worked hours when positive.

        Reported as 0 while the contract is still pending.
        """
        assignment, contract = self._resolve(assignment_id)
        if contract.status == ContractStatus.PENDING:
            return 0.0
        return max(0.0, assignment.hours_assigned - self.hours_worked(assignment_id))

    def assignment_performance(self, assignment_id: str, today: Optional[date] = None) -> AssignmentPerformance:
        """
        Worked and outstanding hours of one assignment.

        Args:
            assignment_id: Assignment to summarize
            today: Reference day for the calendar (default: date.today())

        Returns:
            AssignmentPerformance
        """
        assignment, contract = self._resolve(assignment_id)
        calendar = self.classify_assignment(assignment_id, today)
        return AssignmentPerformance(
            assignment_id=assignment.id,
            person_id=assignment.person_id,
            contract_id=contract.id,
            hours_assigned=assignment.hours_assigned,
            hours_worked=self.hours_worked(assignment_id),
            expected_daily_hours=expected_daily_hours(assignment, contract),
            underperforming_days=len(calendar.underperforming_days),
            hours_behind=self.hours_behind(assignment_id),
        )

    def deviation_metrics(self, assignment_id: str, today: Optional[date] = None) -> Dict[str, Optional[float]]:
        """
        Compare logged hours with the expected daily rate over past contract days.

        Days without an entry count as zero hours.

        Args:
            assignment_id: Assignment to evaluate
            today: Reference day (default: date.today())

        Returns:
            Dictionary with MAE, RMSE and the number of days evaluated
        """
        today = today or date.today()
        assignment, contract = self._resolve(assignment_id)
        past_days = [d for d in expand(contract) if d < today]
        if not past_days:
            return {'mae': None, 'rmse': None, 'days_evaluated': 0}

        expected = expected_daily_hours(assignment, contract)
        actual_values = []
        for day in past_days:
            entry = self.store.entry_for_day(assignment.person_id, contract.id, day)
            actual_values.append(entry.hours_clocked if entry else 0.0)
        expected_values = [expected] * len(past_days)

        mae = mean_absolute_error(expected_values, actual_values)
        rmse = np.sqrt(mean_squared_error(expected_values, actual_values))
        return {
            'mae': float(mae),
            'rmse': float(rmse),
            'days_evaluated': len(past_days),
        }
