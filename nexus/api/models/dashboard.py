"""Pydantic models for the dashboard API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from nexus.services.prospector import DashboardSnapshot
from nexus.services.store.models import LeadWithEnrichment, NewLead


class ProbeRequest(BaseModel):
    """POST /api/probe request body."""

    query: str = Field(..., max_length=500)


class NewLeadRequest(BaseModel):
    """POST /api/leads request body for a hand-entered lead."""

    company_name: str = Field(..., min_length=1, alias="companyName")
    source: str = Field("Manual Entry", min_length=1)
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    def to_new_lead(self) -> NewLead:
        return NewLead(**self.model_dump())


class ProbeAccepted(BaseModel):
    accepted: bool
    query: str
    message: str


class LeadResponse(BaseModel):
    """A lead row as shown in the pipeline view."""

    id: str
    company_name: str = Field(..., alias="companyName")
    source: str
    website: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    score: float = 0.0
    validated: bool = False
    social_networks: list[str] = Field(default_factory=list, alias="socialNetworks")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_lead(cls, lead: LeadWithEnrichment) -> "LeadResponse":
        e = lead.enrichment
        return cls(
            id=lead.id,
            company_name=lead.company_name,
            source=lead.source,
            website=lead.website,
            email=lead.email,
            location=lead.location,
            industry=lead.industry,
            score=lead.score,
            validated=bool(e and e.validated),
            social_networks=e.social_profiles.found() if e and e.social_profiles else [],
        )


class StatsResponse(BaseModel):
    total_leads: int = Field(0, alias="totalLeads")
    verified_emails: int = Field(0, alias="verifiedEmails")
    high_readiness: int = Field(0, alias="highReadiness")

    model_config = ConfigDict(populate_by_name=True)


class DashboardResponse(BaseModel):
    """GET /api/dashboard response."""

    stats: StatsResponse
    top_performers: list[LeadResponse] = Field(..., alias="topPerformers")
    insight: str
    logs: list[str]
    is_searching: bool = Field(..., alias="isSearching")
    phase: str
    loading: bool

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_snapshot(cls, snap: DashboardSnapshot) -> "DashboardResponse":
        stats = snap.stats
        return cls(
            stats=StatsResponse(
                total_leads=stats.total_leads,
                verified_emails=stats.verified_emails,
                high_readiness=stats.high_readiness,
            ),
            top_performers=[LeadResponse.from_lead(lead) for lead in snap.top_performers()],
            insight=snap.insight,
            logs=list(snap.logs),
            is_searching=snap.is_searching,
            phase=snap.phase.value,
            loading=snap.loading,
        )


class ErrorResponse(BaseModel):
    error: str
    message: str
