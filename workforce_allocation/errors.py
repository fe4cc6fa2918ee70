"""
Error taxonomy for the allocation engine.

Every operation validates references and quantities before it mutates
anything, so a raised error always means the working set is untouched.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for all engine errors."""


class NotFound(EngineError, LookupError):
    """A referenced Person, Contract, Assignment or TimeEntry does not exist."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} '{entity_id}' not found")


class ValidationError(EngineError, ValueError):
    """Input has the wrong shape (bad date range, unknown status, ...)."""


class InvalidQuantity(ValidationError):
    """Hours value outside the range an operation accepts."""

    def __init__(self, message: str, value: Optional[float] = None):
        self.value = value
        super().__init__(message)


class DataIntegrityError(EngineError):
    """Duplicate ids or denormalized copies that disagree with their source."""


class AlreadyAllocated(EngineError):
    """Auto-assignment was re-run on a contract that already has assignments."""

    def __init__(self, contract_id: str, existing: int):
        self.contract_id = contract_id
        self.existing = existing
        super().__init__(
            f"Contract '{contract_id}' already has {existing} assignment(s); "
            "use top_up=True to fill the remaining shortfall"
        )
