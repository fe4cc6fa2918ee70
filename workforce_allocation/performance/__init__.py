"""
Calendar expansion and performance classification.
"""

from .analyzer import PerformanceAnalyzer, expand, expected_daily_hours, window_days
from .models import DayStatus, AssignmentCalendar, AssignmentPerformance

__all__ = [
    "PerformanceAnalyzer",
    "expand",
    "expected_daily_hours",
    "window_days",
    "DayStatus",
    "AssignmentCalendar",
    "AssignmentPerformance",
]
