"""
Hours ledger: derived aggregates and hour bookkeeping.
"""

from .ledger import HoursLedger
from .models import PersonHours, ContractHours, ContractCoverage, Utilization, WorkforceOverview

__all__ = ["HoursLedger", "PersonHours", "ContractHours", "ContractCoverage", "Utilization", "WorkforceOverview"]
