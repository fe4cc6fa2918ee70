"""Shared fixtures: small rosters and a seeded working set."""

from datetime import date

import pytest

from workforce_allocation import (
    AllocationEngine, Assignment, Contract, ContractStatus, EntityStore,
    HoursLedger, PerformanceAnalyzer, Person, TimeEntry,
)

REFERENCE_DAY = date(2025, 12, 4)


@pytest.fixture
def make_person():
    def _make(pid, region="North", allocated=0.0, max_hours=40.0, skills=("Construction",), name=None):
        return Person(
            id=pid,
            name=name or f"Person {pid}",
            region=region,
            max_hours=max_hours,
            hours_allocated=allocated,
            skills=list(skills),
        )
    return _make


@pytest.fixture
def empty_store():
    return EntityStore(regions=("North", "South", "East", "West"))


@pytest.fixture
def seeded_store():
    """
    One running North contract with two assignments and some logged time.

    hours_allocated on every person equals their assignment total.
    """
    people = [
        Person(id="1", name="John Smith", region="North", max_hours=40, hours_allocated=25,
               holidays=4, skills=["Construction", "Safety"]),
        Person(id="2", name="Sarah Johnson", region="North", max_hours=40, hours_allocated=0,
               holidays=4, skills=["Logistics", "Management"]),
        Person(id="4", name="Emily Davis", region="North", max_hours=40, hours_allocated=35,
               holidays=4, skills=["Construction", "Equipment"]),
        Person(id="5", name="James Wilson", region="East", max_hours=40, hours_allocated=0,
               holidays=4, skills=["Security", "Safety"]),
    ]
    contracts = [
        Contract(id="c1", vendor_name="BuildCo Industries", region="North", hours_required=80,
                 skills_required=["Construction", "Safety"], start_date=date(2025, 11, 24),
                 end_date=date(2025, 12, 8), status=ContractStatus.ACTIVE),
        Contract(id="c2", vendor_name="FutureTech Systems", region="East", hours_required=70,
                 skills_required=["Security", "Safety"], start_date=date(2025, 12, 9),
                 end_date=date(2025, 12, 22), status=ContractStatus.PENDING),
    ]
    assignments = [
        Assignment(id="a1", contract_id="c1", person_id="1", hours_assigned=25),
        Assignment(id="a2", contract_id="c1", person_id="4", hours_assigned=35),
    ]
    entries = []
    for i, (day, hours) in enumerate([(25, 3), (26, 4), (27, 3), (28, 4), (29, 3)]):
        entries.append(TimeEntry(id=f"t{i}", assignment_id="a1", person_id="1", contract_id="c1",
                                 date=date(2025, 11, day), hours_clocked=hours))
    for i, day in enumerate([25, 26, 27, 28]):
        entries.append(TimeEntry(id=f"e{i}", assignment_id="a2", person_id="4", contract_id="c1",
                                 date=date(2025, 11, day), hours_clocked=5))
    return EntityStore(people=people, contracts=contracts, assignments=assignments,
                       time_entries=entries, regions=("North", "South", "East", "West"))


@pytest.fixture
def engine(seeded_store):
    return AllocationEngine(seeded_store)


@pytest.fixture
def ledger(seeded_store):
    return HoursLedger(seeded_store)


@pytest.fixture
def analyzer(seeded_store):
    return PerformanceAnalyzer(seeded_store)
