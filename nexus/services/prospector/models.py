"""Pydantic models for the prospector workflow."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ProbeOutcome(str, Enum):
    COMPLETED = "completed"
    NO_LEADS = "no_leads"
    NOTHING_CREATED = "nothing_created"
    FAILED = "failed"
    IGNORED = "ignored"


class ProbeResult(BaseModel):
    """Statistics for one probe cycle."""

    outcome: ProbeOutcome
    query: str = ""
    leads_found: int = 0
    leads_created: int = 0
    enriched: int = 0
    enrichment_skipped: int = 0
    enrichment_errors: int = 0
    error: Optional[str] = None
