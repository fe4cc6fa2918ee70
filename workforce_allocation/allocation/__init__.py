"""
Allocation module for staffing contracts.
"""

from .engine import AllocationEngine
from .models import AllocationResult

__all__ = ["AllocationEngine", "AllocationResult"]
