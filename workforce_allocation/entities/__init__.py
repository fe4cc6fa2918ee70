"""
Entity models and the in-memory store.
"""

from .models import Person, Contract, ContractStatus, Assignment, TimeEntry
from .store import EntityStore

__all__ = ["Person", "Contract", "ContractStatus", "Assignment", "TimeEntry", "EntityStore"]
