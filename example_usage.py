#!/usr/bin/env python3
"""
Example usage of the Workforce Allocation Engine.

This script demonstrates how to load a roster, create contracts, let the
engine staff them, log time and read back hours, calendars and reports.
"""

from datetime import date

from workforce_allocation import AllocationEngine, EntityStore, HoursLedger, PerformanceAnalyzer
from workforce_allocation.config import Settings, load_env
from workforce_allocation.entities.loader import read_people_csv
from workforce_allocation.errors import EngineError
from workforce_allocation.reporting import performance_report, rows_to_dataframe, schedule_report

# Fixed reference day so the calendar output is reproducible
TODAY = date(2025, 12, 4)


def main():
    print("=== Workforce Allocation Demo ===\n")
    load_env()
    settings = Settings.from_env()

    # 1. Load roster
    print("1. Loading roster...")
    try:
        people = read_people_csv('data/people.csv')
    except FileNotFoundError:
        print("Error: data/people.csv not found")
        return
    store = EntityStore(people=people, regions=settings.regions)
    print(f"Loaded {len(store.people)} people")
    for person in store.people.values():
        print(f"     - {person.name} ({person.region}): {', '.join(person.skills)}")

    engine = AllocationEngine(store)
    ledger = HoursLedger(store, settings)
    analyzer = PerformanceAnalyzer(store)

    # 2. Create contracts and staff them
    print("\n2. Creating contracts...")
    build = engine.create_contract("BuildCo Industries", "North", 60, "Construction, Safety",
                                   "2025-11-24", "2025-12-08")
    secure = engine.create_contract("FutureTech Systems", "East", 70, ["Security", "Safety"],
                                    "2025-12-09", "2025-12-22")
    for contract in (build, secure):
        result = engine.auto_assign(contract.id)
        print(f"   {contract.vendor_name}: {len(result.assignments)} assignment(s), "
              f"{result.hours_allocated:g}/{contract.hours_required:g} h -> {result.status.value}")
        if result.remaining_hours:
            print(f"     Short by {result.remaining_hours:g} h")

    # 3. Manual top-up for the understaffed contract
    print("\n3. Manual assignment...")
    try:
        assignment = engine.manual_assign(secure.id, "8", 30)
        print(f"   Assigned {assignment.hours_assigned:g} h of {secure.vendor_name} to "
              f"{store.find_person('8').name}")
    except EngineError as e:
        print(f"   Manual assignment failed: {e}")

    # 4. Log some time
    print("\n4. Logging time...")
    for a in store.assignments_for_contract(build.id):
        for day in ("2025-11-25", "2025-11-26", "2025-11-27"):
            ledger.add_time_entry(a.id, day, 4)
    print(f"   {len(store.time_entries)} time entries logged")

    # 5. Hours per person
    print("\n5. Hours per person:")
    for person in store.people.values():
        hours = ledger.person_hours(person.id)
        if not hours.assigned:
            continue
        util = ledger.utilization(person.id)
        print(f"   {person.name}: assigned {hours.assigned:g}, worked {hours.worked:g}, "
              f"remaining {hours.remaining:g}, unassigned {hours.unassigned:g} [{util.status}]")

    # 6. Calendar for the running contract
    print(f"\n6. Calendar for {build.vendor_name} (as of {TODAY}):")
    for calendar in analyzer.contract_calendar(build.id, TODAY):
        perf = analyzer.assignment_performance(calendar.assignment_id, TODAY)
        name = store.find_person(calendar.person_id).name
        print(f"   {name}: {perf.hours_worked:g}h / {perf.hours_assigned:g}h, "
              f"~{perf.expected_daily_hours:.1f}h/day, {perf.underperforming_days} underperforming day(s)")
        if perf.hours_behind:
            print(f"     {perf.hours_behind:.1f}h behind")

    # 7. Export data
    print("\n7. Exporting results...")
    performance_df = rows_to_dataframe(performance_report(store))
    performance_df.to_csv('performance_report.csv', index=False)
    print("   ✓ Performance report saved to performance_report.csv")

    schedule_rows = [
        {'vendor_name': c['vendor_name'], **row}
        for c in schedule_report(store, TODAY) for row in c['rows']
    ]
    print(f"   ✓ Schedule has {len(schedule_rows)} day rows")

    problems = store.check_integrity()
    print(f"\nIntegrity check: {'OK' if not problems else problems}")
    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
