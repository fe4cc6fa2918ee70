"""
Export data for reporting collaborators.

These functions return plain data structures. Turning them into CSV or
any other text format is left to the caller (a DataFrame's to_csv is
usually enough).

Every scope reports assignments the same way: assigned and worked hours,
performance percentage and variance. Time entries whose assignment was
deleted are reported as extra ``orphaned`` rows with 0 assigned hours, so
row sums always match the ledger's contract and person totals.
"""

from datetime import date
from typing import List, Dict, Any, Iterable, Optional

import pandas as pd

from ..entities.models import Assignment, Contract, TimeEntry
from ..entities.store import EntityStore
from ..errors import ValidationError
from ..ledger.ledger import HoursLedger
from ..performance.analyzer import PerformanceAnalyzer, expand, expected_daily_hours

SCOPES = ('all', 'personnel', 'company')

OK = "OK"
UNDERPERFORMING = "UNDERPERFORMING"


def _performance(worked: float, assigned: float) -> float:
    return (worked / assigned) * 100 if assigned > 0 else 0.0


def _contract_header(contract: Contract) -> Dict[str, Any]:
    return {
        'contract_id': contract.id,
        'vendor_name': contract.vendor_name,
        'status': contract.status.value,
        'start_date': contract.start_date.isoformat(),
        'end_date': contract.end_date.isoformat(),
        'region': contract.region,
        'hours_required': contract.hours_required,
    }


def _assignment_row(store: EntityStore, analyzer: PerformanceAnalyzer, assignment: Assignment) -> Dict[str, Any]:
    """Hours, performance and variance of one live assignment."""
    person = store.people.get(assignment.person_id)
    worked = analyzer.hours_worked(assignment.id)
    return {
        'assignment_id': assignment.id,
        'person_id': assignment.person_id,
        'person_name': person.name if person else None,
        'assigned_hours': assignment.hours_assigned,
        'worked_hours': worked,
        'performance': _performance(worked, assignment.hours_assigned),
        'variance': worked - assignment.hours_assigned,
        'orphaned': False,
    }


def _orphan_rows(store: EntityStore, entries: Iterable[TimeEntry]) -> List[Dict[str, Any]]:
    """One row per deleted assignment that still has logged time."""
    grouped: Dict[str, List[TimeEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.assignment_id, []).append(entry)

    rows = []
    for assignment_id, logged in grouped.items():
        person = store.people.get(logged[0].person_id)
        worked = sum(e.hours_clocked for e in logged)
        rows.append({
            'assignment_id': assignment_id,
            'person_id': logged[0].person_id,
            'person_name': person.name if person else None,
            'assigned_hours': 0.0,
            'worked_hours': worked,
            'performance': 0.0,
            'variance': worked,
            'orphaned': True,
        })
    return rows


def _contract_rows(store: EntityStore, analyzer: PerformanceAnalyzer, contract: Contract) -> List[Dict[str, Any]]:
    rows = [_assignment_row(store, analyzer, a) for a in store.assignments_for_contract(contract.id)]
    return rows + _orphan_rows(store, store.orphaned_entries(contract.id))


def _totals(rows: List[Dict[str, Any]]) -> Dict[str, float]:
    assigned = sum(r['assigned_hours'] for r in rows)
    worked = sum(r['worked_hours'] for r in rows)
    return {
        'assigned_hours': assigned,
        'worked_hours': worked,
        'performance': _performance(worked, assigned),
        'variance': worked - assigned,
    }


def performance_report(store: EntityStore) -> List[Dict[str, Any]]:
    """
    Per-contract performance with one row per assignment.

    Worked hours per row are the entries logged against that assignment;
    orphaned rows carry the entries of deleted assignments.
    """
    analyzer = PerformanceAnalyzer(store)
    report = []
    for contract in store.contracts.values():
        rows = _contract_rows(store, analyzer, contract)
        report.append({
            **_contract_header(contract),
            'assignments': rows,
            'totals': _totals(rows),
        })
    return report


def personnel_report(store: EntityStore) -> List[Dict[str, Any]]:
    """
    Per-person hours with one row per contract assignment.

    Each row repeats the contract header (status, period, required hours).
    """
    analyzer = PerformanceAnalyzer(store)
    ledger = HoursLedger(store)
    report = []
    for person in store.people.values():
        hours = ledger.person_hours(person.id)
        contracts = []
        for assignment in store.assignments_for_person(person.id):
            contract = store.find_contract(assignment.contract_id)
            contracts.append({**_contract_header(contract), **_assignment_row(store, analyzer, assignment)})
        orphans = [e for e in store.orphaned_entries() if e.person_id == person.id]
        for row in _orphan_rows(store, orphans):
            contract_id = next(e.contract_id for e in orphans if e.assignment_id == row['assignment_id'])
            contracts.append({**_contract_header(store.find_contract(contract_id)), **row})
        report.append({
            'person_id': person.id,
            'name': person.name,
            'region': person.region,
            **hours.to_dict(),
            'contracts': contracts,
        })
    return report


def company_report(store: EntityStore) -> List[Dict[str, Any]]:
    """Per-contract hours with one row per person assigned to it."""
    analyzer = PerformanceAnalyzer(store)
    report = []
    for contract in store.contracts.values():
        rows = _contract_rows(store, analyzer, contract)
        report.append({
            **_contract_header(contract),
            **_totals(rows),
            'personnel_count': len(store.assignments_for_contract(contract.id)),
            'personnel': rows,
        })
    return report


def schedule_report(store: EntityStore, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Day-by-day schedule for every contract, earliest start first.

    Each contract lists one row per (day, assignment) with hours clocked
    (0 when nothing was logged), expected hours and an OK/UNDERPERFORMING flag.
    """
    analyzer = PerformanceAnalyzer(store)
    report = []
    for contract in sorted(store.contracts.values(), key=lambda c: c.start_date):
        assignments = store.assignments_for_contract(contract.id)
        rows = []
        for day in expand(contract):
            for assignment in assignments:
                person = store.people.get(assignment.person_id)
                entry = next((e for e in store.entries_for_assignment(assignment.id) if e.date == day), None)
                underperforming = analyzer.is_underperforming(assignment, contract, day, today)
                rows.append({
                    'date': day.isoformat(),
                    'person_name': person.name if person else None,
                    'hours_clocked': entry.hours_clocked if entry else 0.0,
                    'expected_hours': expected_daily_hours(assignment, contract),
                    'status': UNDERPERFORMING if underperforming else OK,
                })
        report.append({**_contract_header(contract), 'rows': rows})
    return report


def build_export(store: EntityStore, scope: str) -> List[Dict[str, Any]]:
    """
    Export data for a reporting scope.

    Args:
        store: Working set to report on
        scope: 'all' (performance of all contracts), 'personnel' or 'company'

    Returns:
        List of per-contract or per-person records
    """
    if scope == 'all':
        return performance_report(store)
    if scope == 'personnel':
        return personnel_report(store)
    if scope == 'company':
        return company_report(store)
    raise ValidationError(f"Scope must be one of {list(SCOPES)}, got {scope!r}")


def rows_to_dataframe(report: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Flatten a performance report into one row per assignment.

    Contract header fields are repeated on each row.
    """
    records = []
    for contract in report:
        header = {k: v for k, v in contract.items() if k not in ('assignments', 'totals')}
        for row in contract.get('assignments', []):
            records.append({**header, **row})
    return pd.DataFrame(records)
