"""Prompt builders for the prospecting, enrichment and insight calls."""

import json

from nexus.services.store.models import Lead


def prospect_prompt(query: str, count: int) -> str:
    return f"""Act as a world-class B2B Lead Generation Agent.
Your mission: Find {count} high-quality, 100% authentic businesses matching this search query: "{query}".

Search targets: Google Maps, Instagram, LinkedIn, and major B2B directories (Alibaba, Kompass, etc.).
Priority: Find businesses with a website, a verifiable email address, and active social media presence.

Return ONLY a JSON array of objects with the following fields:
[
  {{
    "company_name": "string",
    "website": "string",
    "email": "string",
    "phone": "string",
    "location": "string",
    "industry": "string",
    "source": "string (e.g., 'Google Maps', 'Instagram', 'Alibaba')"
  }}
]

Ensure every lead has a 'source' specified. Do not include placeholders or fake data."""


def enrich_prompt(lead: Lead) -> str:
    email = lead.email or "N/A"
    return f"""You are a professional B2B lead enrichment AI specialized in finding authentic business data.

Current Lead Information:
- Company: "{lead.company_name}"
- Website: "{lead.website or 'N/A'}"
- Email: "{email}"
- Source: "{lead.source}"

Instructions:
1. Search the internet (Google, LinkedIn, Instagram, Facebook, TikTok) to find the most accurate digital footprint for this business.
2. Verify if the provided email "{email}" is a valid business email.
3. Find direct URLs for their Instagram, Facebook, LinkedIn, and TikTok profiles.
4. Categorize the industry precisely.
5. Calculate a "Lead Readiness Score" (0-100) based on their digital presence, contactability, and B2B relevance.

You MUST return ONLY a JSON object with this exact structure:
{{
  "validated_email": boolean,
  "social_profiles": {{
    "instagram": "string or null",
    "facebook": "string or null",
    "linkedin": "string or null",
    "tiktok": "string or null"
  }},
  "industry_category": "string",
  "lead_score": number,
  "explanation": "string (brief reasoning for the score)"
}}"""


def insight_prompt(leads: list[Lead]) -> str:
    sample = json.dumps([lead.model_dump(mode="json") for lead in leads])
    return (
        "Analyze this list of B2B leads and provide a sharp, one-sentence strategic insight "
        "for a sales director. Focus on quality, industry concentration, or contactability "
        f"trends.\nLeads: {sample}"
    )
