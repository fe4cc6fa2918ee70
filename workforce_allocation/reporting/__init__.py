"""
Report data for export collaborators.
"""

from .export import (
    build_export,
    company_report,
    performance_report,
    personnel_report,
    rows_to_dataframe,
    schedule_report,
)

__all__ = [
    "build_export",
    "company_report",
    "performance_report",
    "personnel_report",
    "rows_to_dataframe",
    "schedule_report",
]
