"""Tests for export data."""

import pytest

from workforce_allocation import HoursLedger
from workforce_allocation.errors import ValidationError
from workforce_allocation.reporting import (
    build_export, company_report, performance_report, personnel_report,
    rows_to_dataframe, schedule_report,
)

from .conftest import REFERENCE_DAY


class TestPerformanceReport:
    def test_contract_fields(self, seeded_store):
        report = performance_report(seeded_store)
        c1 = report[0]
        assert c1['vendor_name'] == "BuildCo Industries"
        assert c1['status'] == "active"
        assert (c1['start_date'], c1['end_date']) == ("2025-11-24", "2025-12-08")
        assert c1['region'] == "North"
        assert c1['hours_required'] == 80

    def test_assignment_rows(self, seeded_store):
        rows = performance_report(seeded_store)[0]['assignments']
        john = rows[0]
        assert john['person_name'] == "John Smith"
        assert john['assigned_hours'] == 25
        assert john['worked_hours'] == 17
        assert john['performance'] == pytest.approx(68.0)
        assert john['variance'] == -8

    def test_zero_assigned_has_zero_performance(self, seeded_store):
        HoursLedger(seeded_store).update_assignment("a1", 0)
        john = performance_report(seeded_store)[0]['assignments'][0]
        assert john['performance'] == 0.0
        assert john['variance'] == 17

    def test_rows_reproduce_contract_hours(self, seeded_store):
        ledger = HoursLedger(seeded_store)
        ledger.add_time_entry("a2", "2025-12-01", 2.5)
        ledger.delete_assignment("a1")

        for contract in performance_report(seeded_store):
            hours = ledger.contract_hours(contract['contract_id'])
            assert sum(r['assigned_hours'] for r in contract['assignments']) == hours.assigned
            assert sum(r['worked_hours'] for r in contract['assignments']) == hours.worked
            assert contract['totals']['assigned_hours'] == hours.assigned

    def test_deleted_assignment_keeps_its_worked_hours(self, seeded_store):
        HoursLedger(seeded_store).delete_assignment("a1")

        c1 = performance_report(seeded_store)[0]

        orphan = c1['assignments'][-1]
        assert orphan['orphaned']
        assert (orphan['assignment_id'], orphan['person_name']) == ("a1", "John Smith")
        assert (orphan['assigned_hours'], orphan['worked_hours'], orphan['variance']) == (0.0, 17, 17)
        assert c1['totals']['worked_hours'] == 37
        assert not c1['assignments'][0]['orphaned']

    def test_dataframe_flattens_rows(self, seeded_store):
        df = rows_to_dataframe(performance_report(seeded_store))
        assert len(df) == 2
        assert set(df['vendor_name']) == {"BuildCo Industries"}
        assert df['worked_hours'].sum() == 37


class TestScopes:
    def test_personnel(self, seeded_store):
        report = personnel_report(seeded_store)
        john = next(p for p in report if p['person_id'] == "1")
        assert john['region'] == "North"
        assert (john['assigned'], john['worked'], john['remaining'], john['unassigned']) == (25, 17, 8, 15)
        row = john['contracts'][0]
        assert (row['contract_id'], row['vendor_name'], row['status']) == ("c1", "BuildCo Industries", "active")
        assert (row['start_date'], row['end_date'], row['hours_required']) == ("2025-11-24", "2025-12-08", 80)
        assert (row['assigned_hours'], row['worked_hours'], row['variance']) == (25, 17, -8)
        assert row['performance'] == pytest.approx(68.0)

    def test_personnel_rows_reproduce_person_hours(self, seeded_store):
        ledger = HoursLedger(seeded_store)
        ledger.delete_assignment("a1")

        for person in personnel_report(seeded_store):
            hours = ledger.person_hours(person['person_id'])
            assert sum(r['assigned_hours'] for r in person['contracts']) == hours.assigned
            assert sum(r['worked_hours'] for r in person['contracts']) == hours.worked

    def test_company(self, seeded_store):
        c1 = company_report(seeded_store)[0]
        assert c1['assigned_hours'] == 60
        assert c1['worked_hours'] == 37
        assert c1['personnel_count'] == 2
        assert [p['person_name'] for p in c1['personnel']] == ["John Smith", "Emily Davis"]
        emily = c1['personnel'][1]
        assert (emily['assigned_hours'], emily['worked_hours'], emily['variance']) == (35, 20, -15)
        assert emily['performance'] == pytest.approx(20 / 35 * 100)
        assert (c1['status'], c1['hours_required'], c1['end_date']) == ("active", 80, "2025-12-08")

    @pytest.mark.parametrize("scope,first_key", [
        ("all", "assignments"), ("personnel", "contracts"), ("company", "personnel")])
    def test_dispatch(self, seeded_store, scope, first_key):
        assert first_key in build_export(seeded_store, scope)[0]

    def test_unknown_scope(self, seeded_store):
        with pytest.raises(ValidationError):
            build_export(seeded_store, "vendors")


class TestScheduleReport:
    def test_rows_per_day_and_assignment(self, seeded_store):
        report = schedule_report(seeded_store, REFERENCE_DAY)
        c1 = report[0]
        assert c1['contract_id'] == "c1"
        assert len(c1['rows']) == 15 * 2
        # c2 has no assignments yet
        assert report[1]['rows'] == []

    def test_row_status(self, seeded_store):
        rows = schedule_report(seeded_store, REFERENCE_DAY)[0]['rows']
        john = [r for r in rows if r['person_name'] == "John Smith"]
        by_date = {r['date']: r for r in john}
        assert by_date['2025-11-25']['status'] == "OK"
        assert by_date['2025-11-25']['hours_clocked'] == 3
        assert by_date['2025-12-02']['status'] == "UNDERPERFORMING"
        assert by_date['2025-12-02']['hours_clocked'] == 0.0
        assert by_date['2025-12-06']['status'] == "OK"
        assert by_date['2025-12-06']['expected_hours'] == pytest.approx(25 / 15)

    def test_ordered_by_start_date(self, seeded_store):
        seeded_store.find_contract("c2").start_date = seeded_store.find_contract("c1").start_date.replace(day=1)
        report = schedule_report(seeded_store, REFERENCE_DAY)
        assert [c['contract_id'] for c in report] == ["c2", "c1"]
