"""Decoding of model replies into validated results.

Replies are free text that should contain JSON, sometimes wrapped in
markdown fences. Decoding never raises: every function returns either a
parsed result or a ParseFailure describing what went wrong.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from nexus.services.store.models import SocialProfiles

_FENCE_RE = re.compile(r"```(?:json|JSON)?")


class ProspectedLead(BaseModel):
    """A business as described by the model, before it is persisted."""

    model_config = ConfigDict(extra="ignore")

    company_name: str = Field(..., min_length=1)
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    source: Optional[str] = None

    @field_validator("company_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("website", "email", "phone", "location", "industry", "source", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class EnrichmentResult(BaseModel):
    """The model's assessment of a single lead."""

    model_config = ConfigDict(extra="ignore")

    validated_email: bool
    social_profiles: SocialProfiles = Field(default_factory=SocialProfiles)
    industry_category: Optional[str] = None
    lead_score: float
    explanation: Optional[str] = None

    @field_validator("social_profiles", mode="before")
    @classmethod
    def null_profiles(cls, v):
        return {} if v is None else v

    @field_validator("lead_score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return min(100.0, max(0.0, v))


@dataclass
class ParsedLeads:
    leads: list[ProspectedLead]
    dropped: int = 0


@dataclass
class ParsedEnrichment:
    enrichment: EnrichmentResult


@dataclass
class ParseFailure:
    reason: str
    raw: str = ""


LeadsParse = Union[ParsedLeads, ParseFailure]
EnrichmentParse = Union[ParsedEnrichment, ParseFailure]


def strip_fences(text: str) -> str:
    """Remove markdown code fences around a JSON payload."""
    return _FENCE_RE.sub("", text or "").strip()


def decode_json(text: str) -> Union[Any, ParseFailure]:
    cleaned = strip_fences(text)
    if not cleaned:
        return ParseFailure("empty reply", raw=text or "")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        return ParseFailure(f"invalid JSON: {e}", raw=text)


def parse_leads(text: str) -> LeadsParse:
    """Decode a prospecting reply: a bare array or an object with `leads`."""
    data = decode_json(text)
    if isinstance(data, ParseFailure):
        return data

    if isinstance(data, dict):
        data = data.get("leads") or []
    if not isinstance(data, list):
        return ParseFailure(f"expected a list of leads, got {type(data).__name__}", raw=text)

    leads: list[ProspectedLead] = []
    dropped = 0
    for item in data:
        try:
            leads.append(ProspectedLead.model_validate(item))
        except ValidationError:
            dropped += 1
    return ParsedLeads(leads=leads, dropped=dropped)


def parse_enrichment(text: str) -> EnrichmentParse:
    """Decode an enrichment reply into a single validated object."""
    data = decode_json(text)
    if isinstance(data, ParseFailure):
        return data

    # Some replies wrap the object in a one-element array
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        return ParseFailure(f"expected an object, got {type(data).__name__}", raw=text)

    try:
        return ParsedEnrichment(EnrichmentResult.model_validate(data))
    except ValidationError as e:
        return ParseFailure(f"invalid enrichment: {e.error_count()} errors", raw=text)
