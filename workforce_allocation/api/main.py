"""
FastAPI application for the workforce allocation engine.

Provides REST API endpoints for:
- Loading and listing people
- Creating contracts and auto-assigning staff
- Editing assignments and logging time
- Hour aggregates, calendars and export data
"""

import logging
from typing import List, Dict, Any, Optional, Union
from datetime import date

from fastapi import FastAPI, HTTPException, UploadFile, File, Request
from pydantic import BaseModel, Field

from ..allocation.engine import AllocationEngine
from ..config import Settings
from ..entities.loader import read_people_csv, load_store
from ..entities.models import Person, new_id, parse_skills
from ..entities.store import EntityStore
from ..errors import (
    EngineError, NotFound, DataIntegrityError, AlreadyAllocated,
)
from ..ledger.ledger import HoursLedger
from ..performance.analyzer import PerformanceAnalyzer
from ..reporting.export import build_export, schedule_report

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# Pydantic models for API
class PersonCreate(BaseModel):
    id: Optional[str] = None
    name: str
    region: str
    max_hours: float = Field(..., ge=0)
    holidays: int = 0
    skills: Union[List[str], str] = []


class ContractCreate(BaseModel):
    vendor_name: str
    region: str
    hours_required: float
    skills_required: Union[List[str], str]
    start_date: date
    end_date: date
    auto_assign: bool = False


class AutoAssignRequest(BaseModel):
    top_up: bool = False


class ManualAssignmentCreate(BaseModel):
    contract_id: str
    person_id: str
    hours: float


class AssignmentUpdate(BaseModel):
    hours_assigned: float


class TimeEntryCreate(BaseModel):
    assignment_id: str
    date: date
    hours_clocked: float


class TimeEntryUpdate(BaseModel):
    hours_clocked: float


class HealthResponse(BaseModel):
    status: str
    version: str
    counts: Dict[str, int]


def _http_error(exc: EngineError) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (DataIntegrityError, AlreadyAllocated)):
        return HTTPException(status_code=409, detail=str(exc))
    # ValidationError / InvalidQuantity
    return HTTPException(status_code=400, detail=str(exc))


def create_app(store: Optional[EntityStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API around one working set.

    Args:
        store: Working set to serve; loaded from settings.seed_file or empty when omitted
        settings: Runtime settings (default: read from environment)
    """
    settings = settings or Settings.from_env()
    if store is None:
        if settings.seed_file is not None:
            store = load_store(settings.seed_file, regions=settings.regions)
        else:
            store = EntityStore(regions=settings.regions)

    app = FastAPI(
        title="Workforce Allocation API",
        description="API for contract staffing and time accounting",
        version=VERSION,
    )
    app.state.store = store
    app.state.settings = settings
    _register_routes(app)
    return app


def _engine(request: Request) -> AllocationEngine:
    return AllocationEngine(request.app.state.store)


def _ledger(request: Request) -> HoursLedger:
    return HoursLedger(request.app.state.store, request.app.state.settings)


def _analyzer(request: Request) -> PerformanceAnalyzer:
    return PerformanceAnalyzer(request.app.state.store)


def _register_routes(app: FastAPI) -> None:

    @app.get("/", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        store = request.app.state.store
        return HealthResponse(
            status="healthy",
            version=VERSION,
            counts={
                "people": len(store.people),
                "contracts": len(store.contracts),
                "assignments": len(store.assignments),
                "time_entries": len(store.time_entries),
            },
        )

    # ---- people ----------------------------------------------------------

    @app.get("/people")
    async def list_people(request: Request):
        ledger = _ledger(request)
        return [
            {**p.to_dict(), "utilization": ledger.utilization(p.id).to_dict()}
            for p in request.app.state.store.people.values()
        ]

    @app.post("/people", status_code=201)
    async def create_person(request: Request, body: PersonCreate):
        store = request.app.state.store
        try:
            with store.lock:
                person = store.add_person(Person(
                    id=body.id or new_id("p"),
                    name=body.name,
                    region=body.region,
                    max_hours=body.max_hours,
                    holidays=body.holidays,
                    skills=parse_skills(body.skills),
                ))
        except EngineError as e:
            raise _http_error(e)
        return person.to_dict()

    @app.post("/people/load")
    async def load_people(request: Request, file: UploadFile = File(...)):
        """
        Load people from CSV file.

        Expected CSV columns: id, name, region, max_hours[, hours_allocated, holidays, skills]
        """
        if not file.filename.endswith('.csv'):
            raise HTTPException(status_code=400, detail="File must be CSV format")

        store = request.app.state.store
        content = await file.read()
        try:
            people = read_people_csv(content)
            # validate the whole file before touching the live store
            EntityStore(people=people, regions=store.regions)
            with store.lock:
                for person in people:
                    if person.id in store.people:
                        raise DataIntegrityError(f"Duplicate person id '{person.id}'")
                for person in people:
                    store.add_person(person)
        except EngineError as e:
            raise _http_error(e)
        except (ValueError, KeyError) as e:
            raise HTTPException(status_code=400, detail=f"Error processing people CSV: {str(e)}")

        return {
            "status": "success",
            "message": f"Loaded {len(people)} people from CSV",
            "people": [p.name for p in people],
        }

    @app.get("/people/{person_id}/hours")
    async def person_hours(request: Request, person_id: str):
        ledger = _ledger(request)
        try:
            return {
                **ledger.person_hours(person_id).to_dict(),
                "utilization": ledger.utilization(person_id).to_dict(),
            }
        except EngineError as e:
            raise _http_error(e)

    @app.get("/overview")
    async def workforce_overview(request: Request):
        return _ledger(request).workforce_overview().to_dict()

    # ---- contracts -------------------------------------------------------

    @app.get("/contracts")
    async def list_contracts(request: Request):
        return [c.to_dict() for c in request.app.state.store.contracts.values()]

    @app.post("/contracts", status_code=201)
    async def create_contract(request: Request, body: ContractCreate):
        """Create a pending contract, optionally staffing it in the same request."""
        engine = _engine(request)
        try:
            contract = engine.create_contract(
                vendor_name=body.vendor_name,
                region=body.region,
                hours_required=body.hours_required,
                skills_required=body.skills_required,
                start_date=body.start_date,
                end_date=body.end_date,
            )
            result = engine.auto_assign(contract.id) if body.auto_assign else None
        except EngineError as e:
            raise _http_error(e)
        return {
            "contract": contract.to_dict(),
            "allocation": result.to_dict() if result else None,
        }

    @app.post("/contracts/{contract_id}/auto-assign")
    async def auto_assign(request: Request, contract_id: str, body: Optional[AutoAssignRequest] = None):
        try:
            result = _engine(request).auto_assign(contract_id, top_up=body.top_up if body else False)
        except EngineError as e:
            raise _http_error(e)
        return result.to_dict()

    @app.post("/contracts/{contract_id}/complete")
    async def complete_contract(request: Request, contract_id: str):
        try:
            return _engine(request).mark_completed(contract_id).to_dict()
        except EngineError as e:
            raise _http_error(e)

    @app.get("/contracts/{contract_id}/hours")
    async def contract_hours(request: Request, contract_id: str):
        ledger = _ledger(request)
        try:
            return {
                **ledger.contract_hours(contract_id).to_dict(),
                "coverage": ledger.contract_coverage(contract_id).to_dict(),
            }
        except EngineError as e:
            raise _http_error(e)

    @app.get("/contracts/{contract_id}/calendar")
    async def contract_calendar(request: Request, contract_id: str, today: Optional[date] = None):
        analyzer = _analyzer(request)
        try:
            calendars = analyzer.contract_calendar(contract_id, today)
            return [
                {
                    **calendar.to_dict(),
                    "performance": analyzer.assignment_performance(calendar.assignment_id, today).to_dict(),
                }
                for calendar in calendars
            ]
        except EngineError as e:
            raise _http_error(e)

    # ---- assignments -----------------------------------------------------

    @app.post("/assignments", status_code=201)
    async def manual_assign(request: Request, body: ManualAssignmentCreate):
        store = request.app.state.store
        try:
            assignment = _engine(request).manual_assign(body.contract_id, body.person_id, body.hours)
        except EngineError as e:
            raise _http_error(e)
        person = store.people[assignment.person_id]
        return {
            "assignment": assignment.to_dict(),
            "over_capacity": person.hours_allocated > person.max_hours,
        }

    @app.patch("/assignments/{assignment_id}")
    async def update_assignment(request: Request, assignment_id: str, body: AssignmentUpdate):
        try:
            return _ledger(request).update_assignment(assignment_id, body.hours_assigned).to_dict()
        except EngineError as e:
            raise _http_error(e)

    @app.delete("/assignments/{assignment_id}")
    async def delete_assignment(request: Request, assignment_id: str):
        try:
            return _ledger(request).delete_assignment(assignment_id).to_dict()
        except EngineError as e:
            raise _http_error(e)

    # ---- time entries ----------------------------------------------------

    @app.post("/time-entries", status_code=201)
    async def add_time_entry(request: Request, body: TimeEntryCreate):
        try:
            return _ledger(request).add_time_entry(body.assignment_id, body.date, body.hours_clocked).to_dict()
        except EngineError as e:
            raise _http_error(e)

    @app.patch("/time-entries/{entry_id}")
    async def update_time_entry(request: Request, entry_id: str, body: TimeEntryUpdate):
        try:
            return _ledger(request).update_time_entry(entry_id, body.hours_clocked).to_dict()
        except EngineError as e:
            raise _http_error(e)

    @app.delete("/time-entries/{entry_id}")
    async def delete_time_entry(request: Request, entry_id: str):
        try:
            return _ledger(request).delete_time_entry(entry_id).to_dict()
        except EngineError as e:
            raise _http_error(e)

    # ---- exports ---------------------------------------------------------

    @app.get("/exports/schedule")
    async def export_schedule(request: Request, today: Optional[date] = None):
        return schedule_report(request.app.state.store, today)

    @app.get("/exports/{scope}")
    async def export_scope(request: Request, scope: str) -> List[Dict[str, Any]]:
        try:
            return build_export(request.app.state.store, scope)
        except EngineError as e:
            raise _http_error(e)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=app.state.settings.api_host, port=app.state.settings.api_port)
