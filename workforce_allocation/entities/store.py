"""
In-memory working set of people, contracts, assignments and time entries.

The store is owned by the caller and passed by reference into the
allocation engine and the hours ledger. It enforces referential
integrity on insertion and offers lookups and insertion-ordered filters;
it never recomputes or caches derived totals.
"""

import logging
import threading
from datetime import date
from typing import List, Dict, Optional, Iterable, Sequence

from ..errors import NotFound, DataIntegrityError, ValidationError
from .models import Person, Contract, Assignment, TimeEntry

logger = logging.getLogger(__name__)

# Tolerance for float comparisons of hour totals.
HOURS_EPSILON = 1e-9


class EntityStore:
    """
    Holds the four entity collections and enforces their invariants on mutation.

    Collections are dicts keyed by id, so iteration follows insertion order.
    ``lock`` is re-entrant; engine operations hold it for their whole
    duration so an assignment write and its paired person counter write
    are never observed separately.
    """

    def __init__(self,
                 people: Optional[Iterable[Person]] = None,
                 contracts: Optional[Iterable[Contract]] = None,
                 assignments: Optional[Iterable[Assignment]] = None,
                 time_entries: Optional[Iterable[TimeEntry]] = None,
                 regions: Optional[Sequence[str]] = None):
        """
        Initialize store, validating every seeded record.

        Args:
            people: Initial Person records
            contracts: Initial Contract records
            assignments: Initial Assignment records (must reference seeded people/contracts)
            time_entries: Initial TimeEntry records (must reference seeded assignments)
            regions: Allowed region tags; None or empty disables the check
        """
        self.regions = tuple(regions) if regions else ()
        self.lock = threading.RLock()

        self.people: Dict[str, Person] = {}
        self.contracts: Dict[str, Contract] = {}
        self.assignments: Dict[str, Assignment] = {}
        self.time_entries: Dict[str, TimeEntry] = {}

        for person in people or []:
            self.add_person(person)
        for contract in contracts or []:
            self.add_contract(contract)
        for assignment in assignments or []:
            self.add_assignment(assignment)
        for entry in time_entries or []:
            self.add_time_entry(entry)

    # ---- lookups ---------------------------------------------------------

    def find_person(self, person_id: str) -> Person:
        """Get a person by id, raising NotFound when absent."""
        try:
            return self.people[person_id]
        except KeyError:
            raise NotFound("Person", person_id) from None

    def find_contract(self, contract_id: str) -> Contract:
        """Get a contract by id, raising NotFound when absent."""
        try:
            return self.contracts[contract_id]
        except KeyError:
            raise NotFound("Contract", contract_id) from None

    def find_assignment(self, assignment_id: str) -> Assignment:
        """Get an assignment by id, raising NotFound when absent."""
        try:
            return self.assignments[assignment_id]
        except KeyError:
            raise NotFound("Assignment", assignment_id) from None

    def find_time_entry(self, entry_id: str) -> TimeEntry:
        """Get a time entry by id, raising NotFound when absent."""
        try:
            return self.time_entries[entry_id]
        except KeyError:
            raise NotFound("TimeEntry", entry_id) from None

    # ---- filters ---------------------------------------------------------

    def assignments_for_contract(self, contract_id: str) -> List[Assignment]:
        """Assignments of a contract, in insertion order."""
        return [a for a in self.assignments.values() if a.contract_id == contract_id]

    def assignments_for_person(self, person_id: str) -> List[Assignment]:
        """Assignments held by a person, in insertion order."""
        return [a for a in self.assignments.values() if a.person_id == person_id]

    def find_assignment_for_pair(self, contract_id: str, person_id: str) -> Optional[Assignment]:
        """First assignment linking this contract and person, if any."""
        for assignment in self.assignments.values():
            if assignment.contract_id == contract_id and assignment.person_id == person_id:
                return assignment
        return None

    def entries_for_assignment(self, assignment_id: str) -> List[TimeEntry]:
        """Time entries logged against an assignment id (live or deleted)."""
        return [e for e in self.time_entries.values() if e.assignment_id == assignment_id]

    def entries_for_person(self, person_id: str) -> List[TimeEntry]:
        """Time entries logged by a person, orphans included."""
        return [e for e in self.time_entries.values() if e.person_id == person_id]

    def entries_for_contract(self, contract_id: str) -> List[TimeEntry]:
        """Time entries logged on a contract, orphans included."""
        return [e for e in self.time_entries.values() if e.contract_id == contract_id]

    def entry_for_day(self, person_id: str, contract_id: str, day: date) -> Optional[TimeEntry]:
        """First time entry logged by a person on a contract for a given day."""
        for entry in self.time_entries.values():
            if entry.person_id == person_id and entry.contract_id == contract_id and entry.date == day:
                return entry
        return None

    def orphaned_entries(self, contract_id: Optional[str] = None) -> List[TimeEntry]:
        """
        Time entries whose assignment has been deleted.

        Args:
            contract_id: Restrict to one contract (default: all contracts)
        """
        return [
            e for e in self.time_entries.values()
            if e.assignment_id not in self.assignments
            and (contract_id is None or e.contract_id == contract_id)
        ]

    # ---- mutators --------------------------------------------------------

    def add_person(self, person: Person) -> Person:
        """
        Insert a person.

        Raises:
            DataIntegrityError: id already taken
            ValidationError: unknown region or negative hours
        """
        if person.id in self.people:
            raise DataIntegrityError(f"Duplicate person id '{person.id}'")
        if self.regions and person.region not in self.regions:
            raise ValidationError(f"Region must be one of {list(self.regions)}, got {person.region!r}")
        if person.max_hours < 0 or person.hours_allocated < 0:
            raise ValidationError(f"Person '{person.id}' has negative hours")
        self.people[person.id] = person
        return person

    def add_contract(self, contract: Contract) -> Contract:
        """Insert a contract; duplicate ids and unknown regions are rejected."""
        if contract.id in self.contracts:
            raise DataIntegrityError(f"Duplicate contract id '{contract.id}'")
        if self.regions and contract.region not in self.regions:
            raise ValidationError(f"Region must be one of {list(self.regions)}, got {contract.region!r}")
        self.contracts[contract.id] = contract
        return contract

    def add_assignment(self, assignment: Assignment) -> Assignment:
        """Insert an assignment record. Person counters are the caller's concern."""
        if assignment.id in self.assignments:
            raise DataIntegrityError(f"Duplicate assignment id '{assignment.id}'")
        self.find_contract(assignment.contract_id)
        self.find_person(assignment.person_id)
        self.assignments[assignment.id] = assignment
        return assignment

    def remove_assignment(self, assignment_id: str) -> Assignment:
        """Drop an assignment record and return it. Its time entries stay."""
        assignment = self.find_assignment(assignment_id)
        del self.assignments[assignment_id]
        return assignment

    def add_time_entry(self, entry: TimeEntry, allow_orphan: bool = False) -> TimeEntry:
        """
        Insert a time entry.

        Args:
            entry: Entry to store; its person/contract copies must match the owning assignment
            allow_orphan: Accept an entry whose assignment no longer exists, as long as
                its person and contract do (used when restoring a saved working set)

        Returns:
            The stored TimeEntry
        """
        if entry.id in self.time_entries:
            raise DataIntegrityError(f"Duplicate time entry id '{entry.id}'")
        assignment = self.assignments.get(entry.assignment_id)
        if assignment is None:
            if not allow_orphan:
                raise NotFound("Assignment", entry.assignment_id)
            self.find_person(entry.person_id)
            self.find_contract(entry.contract_id)
        elif entry.person_id != assignment.person_id or entry.contract_id != assignment.contract_id:
            raise DataIntegrityError(
                f"Time entry '{entry.id}' references person '{entry.person_id}' / contract "
                f"'{entry.contract_id}' but assignment '{assignment.id}' belongs to person "
                f"'{assignment.person_id}' / contract '{assignment.contract_id}'"
            )
        self.time_entries[entry.id] = entry
        return entry

    def remove_time_entry(self, entry_id: str) -> TimeEntry:
        """Drop a time entry and return it."""
        entry = self.find_time_entry(entry_id)
        del self.time_entries[entry_id]
        return entry

    # ---- integrity & persistence ----------------------------------------

    def check_integrity(self) -> List[str]:
        """
        Audit the working set.

        Returns:
            Human-readable problems; an empty list means the set is consistent
        """
        problems = []
        for person in self.people.values():
            committed = sum(a.hours_assigned for a in self.assignments_for_person(person.id))
            if abs(committed - person.hours_allocated) > HOURS_EPSILON:
                problems.append(
                    f"Person '{person.id}' hours_allocated={person.hours_allocated} "
                    f"but assignments total {committed}"
                )
        for assignment in self.assignments.values():
            if assignment.contract_id not in self.contracts:
                problems.append(f"Assignment '{assignment.id}' references missing contract '{assignment.contract_id}'")
            if assignment.person_id not in self.people:
                problems.append(f"Assignment '{assignment.id}' references missing person '{assignment.person_id}'")
        for entry in self.time_entries.values():
            owner = self.assignments.get(entry.assignment_id)
            if owner is None:
                continue
            if entry.person_id != owner.person_id or entry.contract_id != owner.contract_id:
                problems.append(f"Time entry '{entry.id}' copies disagree with assignment '{owner.id}'")
        return problems

    def snapshot(self) -> Dict[str, List[Dict]]:
        """Serialize the working set to plain dictionaries."""
        return {
            'people': [p.to_dict() for p in self.people.values()],
            'contracts': [c.to_dict() for c in self.contracts.values()],
            'assignments': [a.to_dict() for a in self.assignments.values()],
            'time_entries': [e.to_dict() for e in self.time_entries.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict, regions: Optional[Sequence[str]] = None) -> 'EntityStore':
        """
        Rebuild a store from the structure produced by snapshot().

        Time entries whose assignment was deleted before the snapshot are
        restored as orphans.
        """
        store = cls(
            people=[Person.from_dict(p) for p in data.get('people', [])],
            contracts=[Contract.from_dict(c) for c in data.get('contracts', [])],
            assignments=[Assignment.from_dict(a) for a in data.get('assignments', [])],
            regions=regions,
        )
        for raw in data.get('time_entries', []):
            store.add_time_entry(TimeEntry.from_dict(raw), allow_orphan=True)
        orphans = len(store.orphaned_entries())
        logger.info(
            "Loaded working set: %d people, %d contracts, %d assignments, %d time entries (%d orphaned)",
            len(store.people), len(store.contracts), len(store.assignments), len(store.time_entries), orphans,
        )
        return store
