"""
Allocation Engine: matches people to a contract and splits its hours.

Implements the core allocation rules:
1. Eligible = same region, spare capacity, and at least one shared skill
2. Sort by fewest committed hours first (workload balancing)
3. Walk the list granting min(remaining, available) until the requirement is met
4. Contract becomes "active" when fully covered, otherwise stays "pending"
"""

import logging
import math
from datetime import date
from typing import List, Optional, Union, Iterable

from ..entities.models import (
    Person, Contract, ContractStatus, Assignment, check_hours, new_id, parse_day, parse_skills,
)
from ..entities.store import EntityStore, HOURS_EPSILON
from ..errors import InvalidQuantity, AlreadyAllocated, ValidationError
from .models import AllocationResult

logger = logging.getLogger(__name__)


class AllocationEngine:
    """
    Creates contracts and assignments against a caller-owned EntityStore.

    The engine keeps no state of its own: every decision is made from the
    store's current people and assignments.
    """

    def __init__(self, store: EntityStore):
        """
        Initialize engine with the working set it operates on.

        Args:
            store: EntityStore shared with the ledger and analyzer
        """
        self.store = store

    def create_contract(self,
                        vendor_name: str,
                        region: str,
                        hours_required: float,
                        skills_required: Union[str, Iterable[str]],
                        start_date: Union[str, date],
                        end_date: Union[str, date],
                        contract_id: Optional[str] = None) -> Contract:
        """
        Register a new pending contract. Allocation is a separate, explicit call.

        Args:
            vendor_name: Customer the work is for
            region: Region tag people must share to be eligible
            hours_required: Total hours needed over the period
            skills_required: Tags (list or comma-separated text), any-match
            start_date: First day of the period (inclusive)
            end_date: Last day of the period (inclusive)
            contract_id: Explicit id; generated when omitted

        Returns:
            The stored Contract with status "pending"
        """
        if hours_required is None or not math.isfinite(float(hours_required)):
            raise InvalidQuantity(f"Hours required must be finite, got {hours_required}", hours_required)
        contract = Contract(
            id=contract_id or new_id("c"),
            vendor_name=vendor_name.strip(),
            region=region,
            hours_required=float(hours_required),
            skills_required=parse_skills(skills_required),
            start_date=parse_day(start_date),
            end_date=parse_day(end_date),
            status=ContractStatus.PENDING,
        )
        with self.store.lock:
            self.store.add_contract(contract)
        logger.info("Created contract %s for %s (%s h, %s)",
                    contract.id, contract.vendor_name, contract.hours_required, contract.region)
        return contract

    def is_eligible(self, person: Person, contract: Contract) -> bool:
        """Same region, capacity left, and at least one matching skill."""
        return (
            person.region == contract.region
            and person.hours_allocated < person.max_hours
            and person.has_any_skill(contract.skills_required)
        )

    def eligible_candidates(self, contract: Contract) -> List[Person]:
        """
        Get eligible people for a contract, least-loaded first.

        The sort is stable, so ties keep store insertion order.

        Args:
            contract: Contract to staff

        Returns:
            List of Person objects in the order the walk visits them
        """
        eligible = [p for p in self.store.people.values() if self.is_eligible(p, contract)]
        eligible.sort(key=lambda person: person.hours_allocated)
        return eligible

    def auto_assign(self, contract_id: str, top_up: bool = False) -> AllocationResult:
        """
        Staff a contract from the eligible pool.

        A shortfall is not an error: partial assignments are kept and the
        contract stays pending.

        Args:
            contract_id: Contract to staff
            top_up: Allow re-running on a contract that already has
                assignments; only the uncovered hours are handed out

        Returns:
            AllocationResult with the assignments created by this call

        Raises:
            ValidationError: the contract is completed
            AlreadyAllocated: the contract has assignments and top_up is False
        """
        with self.store.lock:
            contract = self.store.find_contract(contract_id)
            if contract.status == ContractStatus.COMPLETED:
                raise ValidationError(f"Contract '{contract_id}' is completed and cannot be staffed")
            existing = self.store.assignments_for_contract(contract_id)
            if existing and not top_up:
                raise AlreadyAllocated(contract_id, len(existing))

            remaining_hours = contract.hours_required
            if top_up:
                remaining_hours -= sum(a.hours_assigned for a in existing)

            candidates = self.eligible_candidates(contract)
            logger.debug("Contract %s: %d eligible candidates %s",
                         contract_id, len(candidates), [p.id for p in candidates])

            new_assignments = []
            for person in candidates:
                if remaining_hours <= 0:
                    break
                hours_to_assign = min(remaining_hours, person.max_hours - person.hours_allocated)
                if hours_to_assign > 0:
                    assignment = self.store.add_assignment(Assignment(
                        id=new_id("a"),
                        contract_id=contract.id,
                        person_id=person.id,
                        hours_assigned=hours_to_assign,
                    ))
                    person.hours_allocated += hours_to_assign
                    remaining_hours -= hours_to_assign
                    new_assignments.append(assignment)
                    logger.debug("Assigned %s h of %s to %s", hours_to_assign, contract_id, person.id)

            if remaining_hours <= HOURS_EPSILON:
                remaining_hours = 0.0
                contract.status = ContractStatus.ACTIVE
            else:
                contract.status = ContractStatus.PENDING
                logger.warning("Contract %s short by %s h after allocation", contract_id, remaining_hours)

        logger.info("Auto-assigned contract %s: %d assignment(s), status %s",
                    contract_id, len(new_assignments), contract.status.value)
        return AllocationResult(
            contract_id=contract.id,
            assignments=new_assignments,
            status=contract.status,
            hours_required=contract.hours_required,
            remaining_hours=remaining_hours,
            candidates_considered=[p.id for p in candidates],
        )

    def manual_assign(self, contract_id: str, person_id: str, hours: float) -> Assignment:
        """
        Assign hours to a specific person, bypassing eligibility and capacity.

        Exceeding max_hours is allowed; it is logged so callers can warn.

        Args:
            contract_id: Contract the hours belong to
            person_id: Person receiving the hours
            hours: Positive number of hours

        Returns:
            The created Assignment
        """
        hours = check_hours(hours, allow_zero=False)

        with self.store.lock:
            self.store.find_contract(contract_id)
            person = self.store.find_person(person_id)
            assignment = self.store.add_assignment(Assignment(
                id=new_id("a"),
                contract_id=contract_id,
                person_id=person_id,
                hours_assigned=float(hours),
            ))
            person.hours_allocated += float(hours)

        if person.hours_allocated > person.max_hours:
            logger.warning("Manual assignment puts %s at %s h, above max %s h",
                           person_id, person.hours_allocated, person.max_hours)
        logger.info("Manually assigned %s h of %s to %s", hours, contract_id, person_id)
        return assignment

    def mark_completed(self, contract_id: str) -> Contract:
        """Close a contract. Never done by auto-assignment."""
        with self.store.lock:
            contract = self.store.find_contract(contract_id)
            contract.status = ContractStatus.COMPLETED
        logger.info("Contract %s marked completed", contract_id)
        return contract
