"""AI gateway service: prospecting, enrichment and market insight.

Every operation makes a single attempt and reports failure as a safe value
([], None or a fixed sentence). Nothing raised by the model API or by reply
decoding reaches the caller.
"""

from abc import ABC, abstractmethod
from typing import Optional

from loguru import logger

from nexus.config import settings
from nexus.services.gateway.client import GeminiClient
from nexus.services.gateway.exceptions import ParseError
from nexus.services.gateway.parsing import (
    EnrichmentResult,
    ParseFailure,
    ProspectedLead,
    parse_enrichment,
    parse_leads,
)
from nexus.services.gateway.prompts import enrich_prompt, insight_prompt, prospect_prompt
from nexus.services.store.models import Lead

EMPTY_INSIGHT = "No lead data available for analysis. Initiate a probe to begin."
PENDING_INSIGHT = "Market intelligence is currently being synthesized."
OFFLINE_INSIGHT = "Strategic analysis temporarily offline."


class IService(ABC):
    """Interface for the AI gateway."""

    @abstractmethod
    async def prospect(self, query: str) -> list[ProspectedLead]: ...

    @abstractmethod
    async def enrich(self, lead: Lead) -> Optional[EnrichmentResult]: ...

    @abstractmethod
    async def summarize(self, leads: list[Lead]) -> str: ...


class Service(IService):
    """AI gateway backed by Gemini with Google Search grounding."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        prospect_count: Optional[int] = None,
        summary_sample_size: Optional[int] = None,
    ):
        self.client = client or GeminiClient()
        self.prospect_count = prospect_count or settings.prospect_count
        self.summary_sample_size = summary_sample_size or settings.summary_sample_size

    async def prospect(self, query: str) -> list[ProspectedLead]:
        """Ask the model for real businesses matching the query."""
        try:
            text = await self.client.generate(
                prospect_prompt(query, self.prospect_count), json_mode=True, search=True
            )
            result = parse_leads(text)
            if isinstance(result, ParseFailure):
                raise ParseError(result.reason)
        except Exception as e:
            logger.error(f"Prospecting failed for '{query}': {e}")
            return []

        if result.dropped:
            logger.warning(f"Dropped {result.dropped} malformed leads for '{query}'")
        logger.info(f"Prospected {len(result.leads)} leads for '{query}'")
        return result.leads

    async def enrich(self, lead: Lead) -> Optional[EnrichmentResult]:
        """Validate, score and find social profiles for one lead."""
        try:
            text = await self.client.generate(enrich_prompt(lead), json_mode=True, search=True)
            result = parse_enrichment(text)
            if isinstance(result, ParseFailure):
                raise ParseError(result.reason)
        except Exception as e:
            logger.error(f"Enrichment failed for {lead.company_name} ({lead.id}): {e}")
            return None
        return result.enrichment

    async def summarize(self, leads: list[Lead]) -> str:
        """One strategic sentence about the current lead set."""
        if not leads:
            return EMPTY_INSIGHT

        try:
            text = await self.client.generate(insight_prompt(leads[: self.summary_sample_size]))
        except Exception as e:
            logger.warning(f"Market insight unavailable: {e}")
            return OFFLINE_INSIGHT
        return text.strip() or PENDING_INSIGHT
