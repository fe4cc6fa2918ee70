"""
Hours Ledger: read-side hour projections plus the edit paths that keep
each person's committed-hours counter equal to the sum of their assignments.
"""

import logging
from datetime import date
from typing import Optional, Union

from ..config import Settings
from ..entities.models import TimeEntry, check_hours, new_id, parse_day
from ..entities.store import EntityStore
from .models import PersonHours, ContractHours, ContractCoverage, Utilization, WorkforceOverview

logger = logging.getLogger(__name__)

AVAILABLE = "Available"
LIMITED = "Limited"
ALMOST_FULL = "Almost Full"


class HoursLedger:
    """
    Aggregates and bookkeeping over a caller-owned EntityStore.

    Aggregates are recomputed on each call, so they cannot drift from
    the underlying assignments and time entries.
    """

    def __init__(self, store: EntityStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or Settings()

    # ---- projections -----------------------------------------------------

    def person_hours(self, person_id: str) -> PersonHours:
        """
        Assigned, worked, unassigned and remaining hours for a person.

        Args:
            person_id: Person to aggregate

        Returns:
            PersonHours where unassigned = max_hours - assigned and
            remaining = assigned - worked
        """
        person = self.store.find_person(person_id)
        assigned = sum(a.hours_assigned for a in self.store.assignments_for_person(person_id))
        worked = sum(e.hours_clocked for e in self.store.entries_for_person(person_id))
        return PersonHours(
            assigned=assigned,
            worked=worked,
            unassigned=person.max_hours - assigned,
            remaining=assigned - worked,
        )

    def contract_hours(self, contract_id: str) -> ContractHours:
        """Assigned and worked hours scoped to one contract."""
        self.store.find_contract(contract_id)
        return ContractHours(
            assigned=sum(a.hours_assigned for a in self.store.assignments_for_contract(contract_id)),
            worked=sum(e.hours_clocked for e in self.store.entries_for_contract(contract_id)),
        )

    def contract_coverage(self, contract_id: str) -> ContractCoverage:
        """Required hours against hours already assigned to a contract."""
        contract = self.store.find_contract(contract_id)
        assigned = sum(a.hours_assigned for a in self.store.assignments_for_contract(contract_id))
        return ContractCoverage(
            required=contract.hours_required,
            assigned=assigned,
            remaining=contract.hours_required - assigned,
        )

    def utilization(self, person_id: str) -> Utilization:
        """Roster label from hours_allocated / max_hours."""
        person = self.store.find_person(person_id)
        percentage = person.hours_allocated * 100 / person.max_hours if person.max_hours else 0.0
        if percentage >= self.settings.almost_full_threshold:
            status = ALMOST_FULL
        elif percentage >= self.settings.limited_threshold:
            status = LIMITED
        else:
            status = AVAILABLE
        return Utilization(percentage=percentage, status=status)

    def workforce_overview(self) -> WorkforceOverview:
        """Headcounts by allocation state across the whole roster."""
        people = list(self.store.people.values())
        return WorkforceOverview(
            total_staff=len(people),
            fully_available=sum(1 for p in people if p.hours_allocated == 0),
            partially_allocated=sum(1 for p in people if 0 < p.hours_allocated < p.max_hours),
            fully_allocated=sum(1 for p in people if p.hours_allocated >= p.max_hours),
        )

    # ---- assignment edits ------------------------------------------------

    def update_assignment(self, assignment_id: str, new_hours: float):
        """
        Change an assignment's hours and move the owning person's counter by the same delta.

        Args:
            assignment_id: Assignment to edit
            new_hours: Replacement hours (zero allowed; negative or non-finite rejected)

        Returns:
            The updated Assignment
        """
        new_hours = check_hours(new_hours, allow_zero=True)

        with self.store.lock:
            assignment = self.store.find_assignment(assignment_id)
            person = self.store.find_person(assignment.person_id)
            delta = float(new_hours) - assignment.hours_assigned
            assignment.hours_assigned = float(new_hours)
            person.hours_allocated += delta

        logger.info("Assignment %s set to %s h (person %s %+g h)",
                    assignment_id, new_hours, person.id, delta)
        return assignment

    def delete_assignment(self, assignment_id: str):
        """
        Remove an assignment and release its hours from the owning person.

        Time entries logged against it are left in place.
        """
        with self.store.lock:
            assignment = self.store.find_assignment(assignment_id)
            person = self.store.find_person(assignment.person_id)
            self.store.remove_assignment(assignment_id)
            person.hours_allocated -= assignment.hours_assigned
            orphans = len(self.store.entries_for_assignment(assignment_id))

        if orphans:
            logger.warning("Deleted assignment %s leaves %d time entr%s orphaned",
                           assignment_id, orphans, "y" if orphans == 1 else "ies")
        logger.info("Deleted assignment %s (person %s -%s h)",
                    assignment_id, person.id, assignment.hours_assigned)
        return assignment

    # ---- time entries ----------------------------------------------------

    def add_time_entry(self,
                       assignment_id: str,
                       day: Union[str, date],
                       hours_clocked: float) -> TimeEntry:
        """
        Log worked hours for one day. Person and contract are taken from the assignment.

        Args:
            assignment_id: Assignment the work counts against
            day: Calendar day worked
            hours_clocked: Hours worked that day (fractional allowed)

        Returns:
            The stored TimeEntry
        """
        hours_clocked = _check_clocked(hours_clocked)
        work_day = parse_day(day)
        with self.store.lock:
            assignment = self.store.find_assignment(assignment_id)
            entry = self.store.add_time_entry(TimeEntry(
                id=new_id("t"),
                assignment_id=assignment.id,
                person_id=assignment.person_id,
                contract_id=assignment.contract_id,
                date=work_day,
                hours_clocked=float(hours_clocked),
            ))
        logger.info("Logged %s h on %s for assignment %s", hours_clocked, work_day, assignment_id)
        return entry

    def update_time_entry(self, entry_id: str, hours_clocked: float) -> TimeEntry:
        """Replace the hours of a logged day. Allocation counters are unaffected."""
        hours_clocked = _check_clocked(hours_clocked)
        with self.store.lock:
            entry = self.store.find_time_entry(entry_id)
            entry.hours_clocked = float(hours_clocked)
        return entry

    def delete_time_entry(self, entry_id: str) -> TimeEntry:
        """Remove a logged day and return it."""
        with self.store.lock:
            return self.store.remove_time_entry(entry_id)


def _check_clocked(hours_clocked: float) -> float:
    return check_hours(hours_clocked, allow_zero=True, label="Clocked hours")
