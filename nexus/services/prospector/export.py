"""CSV export of the lead pipeline."""

import csv
from pathlib import Path
from typing import IO, Iterable

from nexus.services.store.models import SOCIAL_NETWORKS, LeadWithEnrichment

EXPORT_COLUMNS = [
    "id",
    "company_name",
    "source",
    "website",
    "email",
    "phone",
    "location",
    "industry",
    "industry_category",
    "validated",
    "enriched_email",
    "ai_score",
    *SOCIAL_NETWORKS,
    "readiness_explanation",
    "created_at",
]


def lead_to_row(lead: LeadWithEnrichment) -> dict:
    e = lead.enrichment
    profiles = e.social_profiles if e and e.social_profiles else None
    row = {
        "id": lead.id,
        "company_name": lead.company_name,
        "source": lead.source,
        "website": lead.website or "",
        "email": lead.email or "",
        "phone": lead.phone or "",
        "location": lead.location or "",
        "industry": lead.industry or "",
        "industry_category": (e.industry_category if e else None) or "",
        "validated": "yes" if e and e.validated else "no",
        "enriched_email": (e.enriched_email if e else None) or "",
        "ai_score": f"{e.ai_score:.0f}" if e else "",
        "readiness_explanation": (e.readiness_explanation if e else None) or "",
        "created_at": lead.created_at.isoformat() if lead.created_at else "",
    }
    for network in SOCIAL_NETWORKS:
        row[network] = (getattr(profiles, network) if profiles else None) or ""
    return row


def write_csv(leads: Iterable[LeadWithEnrichment], out: IO[str]) -> int:
    """Write leads to an open text stream. Returns the number of rows."""
    writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    count = 0
    for lead in leads:
        writer.writerow(lead_to_row(lead))
        count += 1
    return count


def export_csv(leads: Iterable[LeadWithEnrichment], path: str | Path) -> int:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        return write_csv(leads, f)
