"""Dashboard API routes.

The probe runs in the background on the shared controller; clients poll
GET /api/dashboard for the rolling log and the busy flag.
"""

from fastapi import APIRouter, BackgroundTasks, Depends

from nexus.api.deps import get_prospector
from nexus.api.models.dashboard import (
    DashboardResponse,
    ErrorResponse,
    LeadResponse,
    NewLeadRequest,
    ProbeAccepted,
    ProbeRequest,
)
from nexus.services.prospector import Service
from nexus.services.store.models import LeadWithEnrichment

router = APIRouter(prefix="/api", tags=["leads"])


@router.get("/leads", response_model=list[LeadResponse])
async def list_leads(prospector: Service = Depends(get_prospector)):
    """Current lead list, newest first (as of the last refresh)."""
    return [LeadResponse.from_lead(lead) for lead in prospector.state.snapshot().leads]


@router.post("/leads", response_model=LeadResponse, status_code=201)
async def add_lead(request: NewLeadRequest, prospector: Service = Depends(get_prospector)):
    """Add a lead by hand, outside of a probe cycle."""
    created = await prospector.add_lead(request.to_new_lead())
    snapshot = prospector.state.snapshot()
    stored = next((lead for lead in snapshot.leads if lead.id == created.id), None)
    if stored is None:
        stored = LeadWithEnrichment.model_validate(created.model_dump())
    return LeadResponse.from_lead(stored)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(prospector: Service = Depends(get_prospector)):
    return DashboardResponse.from_snapshot(prospector.state.snapshot())


@router.post(
    "/probe",
    response_model=ProbeAccepted,
    status_code=202,
    responses={400: {"model": ErrorResponse, "description": "Invalid request body"}},
)
async def start_probe(
    request: ProbeRequest,
    background_tasks: BackgroundTasks,
    prospector: Service = Depends(get_prospector),
):
    """Start a probe cycle. Ignored while another cycle is running."""
    query = request.query.strip()
    if not query:
        return ProbeAccepted(accepted=False, query=query, message="Empty query ignored")
    # Claim the slot now so a second request cannot be accepted before the
    # background task starts
    if not prospector.claim_probe(query):
        return ProbeAccepted(accepted=False, query=query, message="A probe is already running")

    background_tasks.add_task(prospector.run_probe, query, claimed=True)
    return ProbeAccepted(accepted=True, query=query, message="Probe started")


@router.post("/refresh", response_model=DashboardResponse)
async def refresh(prospector: Service = Depends(get_prospector)):
    """Reload leads and the market insight from the store."""
    await prospector.refresh()
    return DashboardResponse.from_snapshot(prospector.state.snapshot())
