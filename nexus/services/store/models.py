"""Pydantic models for leads and their enrichment records."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SOCIAL_NETWORKS = ("instagram", "facebook", "linkedin", "tiktok")

# Placeholder strings the model returns instead of a JSON null
_UNKNOWN_VALUES = {"", "null", "none", "n/a", "na", "unknown"}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _UNKNOWN_VALUES:
        return None
    return value


class SocialProfiles(BaseModel):
    """Social network name -> profile URL. A missing network is unknown."""

    model_config = ConfigDict(extra="ignore")

    instagram: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    tiktok: Optional[str] = None

    @field_validator(*SOCIAL_NETWORKS, mode="before")
    @classmethod
    def unknown_to_none(cls, v):
        return _blank_to_none(v)

    def found(self) -> list[str]:
        """Names of the networks with a known profile URL."""
        return [name for name in SOCIAL_NETWORKS if getattr(self, name)]


class NewLead(BaseModel):
    """A lead about to be written to the store."""

    model_config = ConfigDict(extra="ignore")

    source: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None


class Lead(BaseModel):
    """A persisted lead."""

    model_config = ConfigDict(extra="ignore")

    id: str
    source: str
    company_name: str
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # PostgREST returns integer or uuid keys depending on the table
        return str(v) if v is not None else v


class LeadEnrichment(BaseModel):
    """A persisted enrichment row (at most one per lead)."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    lead_id: str
    enriched_email: Optional[str] = None
    social_profiles: Optional[SocialProfiles] = None
    ai_score: float = 0.0
    validated: bool = False
    industry_category: Optional[str] = None
    last_checked: Optional[datetime] = None
    readiness_explanation: Optional[str] = None

    @field_validator("id", "lead_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return str(v) if v is not None else v

    @field_validator("ai_score", "validated", mode="before")
    @classmethod
    def null_to_default(cls, v, info):
        # Nullable columns come back as explicit nulls
        if v is None:
            return 0.0 if info.field_name == "ai_score" else False
        return v


class EnrichmentUpsert(BaseModel):
    """Write-side enrichment, merged on conflict with an existing lead_id."""

    lead_id: str
    enriched_email: Optional[str] = None
    social_profiles: SocialProfiles = Field(default_factory=SocialProfiles)
    ai_score: float = Field(..., ge=0, le=100)
    validated: bool
    industry_category: Optional[str] = None
    readiness_explanation: Optional[str] = None
    last_checked: datetime


class LeadWithEnrichment(Lead):
    """A lead joined with its enrichment, if one exists yet."""

    enrichment: Optional[LeadEnrichment] = None

    @field_validator("enrichment", mode="before")
    @classmethod
    def unwrap_embedded(cls, v):
        # The embedded resource comes back as an array unless the FK is unique
        if isinstance(v, list):
            return v[0] if v else None
        return v

    @property
    def score(self) -> float:
        return self.enrichment.ai_score if self.enrichment else 0.0
