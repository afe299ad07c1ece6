"""Prospector service: the probe cycle and the dashboard read path.

A probe cycle discovers businesses for a query, stores them, then enriches
each stored lead one at a time. Enrichment holds a one-slot semaphore for
every model call so that at most one enrichment request is in flight
against the model quota, even if a refresh or another controller method
runs concurrently.
"""

import asyncio
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from nexus.config import settings
from nexus.core.logging import StructuredLogger, log_execution_time, probe_id_var
from nexus.services.gateway import IService as IGateway
from nexus.services.gateway import Service as GatewayService
from nexus.services.gateway.parsing import EnrichmentResult, ProspectedLead
from nexus.services.prospector.exceptions import WorkflowError
from nexus.services.prospector.models import ProbeOutcome, ProbeResult
from nexus.services.prospector.state import DashboardState, ProbePhase
from nexus.services.store import StoreClient
from nexus.services.store.models import (
    EnrichmentUpsert,
    Lead,
    LeadWithEnrichment,
    NewLead,
)

ENRICH_CONCURRENCY = 1


class IService(ABC):
    """Interface for the prospector controller."""

    @abstractmethod
    def claim_probe(self, query: str) -> bool: ...

    @abstractmethod
    async def run_probe(self, query: str, claimed: bool = False) -> ProbeResult: ...

    @abstractmethod
    async def refresh(self) -> list[LeadWithEnrichment]: ...

    @abstractmethod
    async def add_lead(self, lead: NewLead) -> Lead: ...


class Service(IService):
    """Owns the dashboard state and drives probe cycles."""

    def __init__(
        self,
        store: Optional[StoreClient] = None,
        gateway: Optional[IGateway] = None,
        state: Optional[DashboardState] = None,
        fallback_source: Optional[str] = None,
    ):
        self.store = store or StoreClient()
        self.gateway = gateway or GatewayService()
        self.state = state or DashboardState()
        self.fallback_source = fallback_source or settings.fallback_source
        self._enrich_slot = asyncio.Semaphore(ENRICH_CONCURRENCY)

    def claim_probe(self, query: str) -> bool:
        """Take the single probe slot for query. False if empty or busy."""
        query = (query or "").strip()
        return bool(query) and self.state.begin_probe(query)

    async def run_probe(self, query: str, claimed: bool = False) -> ProbeResult:
        """Run one probe cycle for a user query.

        Empty queries and queries submitted while a cycle is running are
        ignored. Pass claimed=True when claim_probe already took the slot,
        as the API does before scheduling the cycle in the background. The
        busy flag and the query are always cleared on exit.
        """
        query = (query or "").strip()
        if not claimed and not self.claim_probe(query):
            return ProbeResult(outcome=ProbeOutcome.IGNORED, query=query)

        token = probe_id_var.set(uuid.uuid4().hex[:8])
        result = ProbeResult(outcome=ProbeOutcome.COMPLETED, query=query)
        try:
            await self._run_cycle(query, result)
        except Exception as e:
            failure = WorkflowError(str(e) or "Check connection.")
            failure.__cause__ = e
            logger.opt(exception=e).error(f"Probe cycle for '{query}' failed: {failure}")
            result.outcome = ProbeOutcome.FAILED
            result.error = str(failure)
            self.state.add_log(f"Critical: Search failed. {failure}")
        finally:
            self.state.end_probe()
            probe_id_var.reset(token)

        StructuredLogger.info(
            f"Probe cycle finished: {result.outcome.value}",
            query=query,
            found=result.leads_found,
            created=result.leads_created,
            enriched=result.enriched,
        )
        return result

    async def _run_cycle(self, query: str, result: ProbeResult) -> None:
        self.state.add_log(f'Probe: Initiated deep search for "{query}"')

        # Phase 1: Discovery
        self.state.add_log("AI: Crawling B2B indices and social networks...")
        prospected = await self.gateway.prospect(query)
        result.leads_found = len(prospected)
        if not prospected:
            self.state.add_log("AI: No leads found for this query. Refine keywords.")
            result.outcome = ProbeOutcome.NO_LEADS
            return

        # Phase 2: Persist
        self.state.set_phase(ProbePhase.PERSISTING_LEADS)
        to_save = [self._to_new_lead(p) for p in prospected]
        self.state.add_log(f"Data: Saving {len(to_save)} authentic entities to local node...")
        created = await self.store.create_leads(to_save)
        result.leads_created = len(created)
        if not created:
            self.state.add_log("Notice: No new leads were created in the database.")
            result.outcome = ProbeOutcome.NOTHING_CREATED
            return

        # Phase 3: Enrichment, one lead at a time
        self.state.set_phase(ProbePhase.ENRICHING)
        self.state.add_log("Cycle: Starting real-time enrichment and social lookup...")
        for lead in created:
            async with self._enrich_slot:
                await self._enrich_lead(lead, result)

        self.state.add_log("Status: Global probe cycle complete.")
        await self.refresh()

    async def _enrich_lead(self, lead: Lead, result: ProbeResult) -> None:
        """Enrich and store one lead. Failures are logged, never raised."""
        self.state.add_log(f"Enriching: {lead.company_name}...")
        try:
            enrichment = await self.gateway.enrich(lead)
            if enrichment is None:
                result.enrichment_skipped += 1
                self.state.add_log(f"Warning: No enrichment data found for {lead.company_name}.")
                return

            self.state.set_phase(ProbePhase.PERSISTING_ENRICHMENT)
            await self.store.upsert_enrichment(self._to_upsert(lead, enrichment))
            result.enriched += 1
            self.state.add_log(
                f"Success: {lead.company_name} enriched (Score: {enrichment.lead_score:.0f})"
            )
        except Exception as e:
            result.enrichment_errors += 1
            logger.error(f"Failed to enrich lead {lead.id}: {e}")
            self.state.add_log(f"Error: Could not enrich {lead.company_name}.")
        finally:
            self.state.set_phase(ProbePhase.ENRICHING)

    def _to_new_lead(self, prospected: ProspectedLead) -> NewLead:
        data = prospected.model_dump()
        data["source"] = prospected.source or self.fallback_source
        return NewLead(**data)

    @staticmethod
    def _to_upsert(lead: Lead, enrichment: EnrichmentResult) -> EnrichmentUpsert:
        return EnrichmentUpsert(
            lead_id=lead.id,
            enriched_email=lead.email if enrichment.validated_email else None,
            social_profiles=enrichment.social_profiles,
            ai_score=enrichment.lead_score,
            validated=enrichment.validated_email,
            industry_category=enrichment.industry_category,
            readiness_explanation=enrichment.explanation,
            last_checked=datetime.now(timezone.utc),
        )

    async def add_lead(self, lead: NewLead) -> Lead:
        """Store one hand-entered lead, then reload the list.

        Store errors propagate to the caller.
        """
        created = await self.store.create_lead(lead)
        self.state.add_log(f"Data: Added {created.company_name} manually.")
        await self.refresh()
        return created

    @log_execution_time
    async def refresh(self) -> list[LeadWithEnrichment]:
        """Reload the lead list and the market insight.

        Any failure keeps the previous list and adds a log line; nothing
        is raised, so a finished probe cycle is never reported as failed.
        """
        self.state.begin_loading()
        try:
            leads = await self.store.list_leads()
            self.state.set_leads(leads)
            self.state.set_insight(await self.gateway.summarize(leads))
        except Exception as e:
            logger.opt(exception=e).error(f"Fetch leads failed: {e}")
            self.state.add_log("System: Database fetch error.")
        finally:
            self.state.end_loading()
        return list(self.state.snapshot().leads)
