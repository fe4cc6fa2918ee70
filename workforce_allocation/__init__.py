"""
Workforce Allocation Engine

Staffs time-bounded contracts from a limited pool of people and tracks
logged work against the allocation.
"""

from .allocation.engine import AllocationEngine
from .allocation.models import AllocationResult
from .entities.models import Person, Contract, ContractStatus, Assignment, TimeEntry
from .entities.store import EntityStore
from .ledger.ledger import HoursLedger
from .performance.analyzer import PerformanceAnalyzer

__all__ = [
    "AllocationEngine",
    "AllocationResult",
    "Assignment",
    "Contract",
    "ContractStatus",
    "EntityStore",
    "HoursLedger",
    "PerformanceAnalyzer",
    "Person",
    "TimeEntry",
]
