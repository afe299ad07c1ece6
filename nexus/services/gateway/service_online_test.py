"""
Online tests for the AI gateway - real Gemini calls with search grounding.

Run with: pytest nexus/services/gateway/service_online_test.py --online -v -s

These tests require GEMINI_API_KEY in the environment or .env.
"""

import pytest
from loguru import logger

from nexus.services.gateway import Service
from nexus.services.gateway.service import EMPTY_INSIGHT, OFFLINE_INSIGHT
from nexus.services.store.models import Lead

SAMPLE_LEAD = Lead(
    id="online-1",
    source="Google Maps",
    company_name="Emirates NBD",
    website="https://www.emiratesnbd.com",
    location="Dubai, UAE",
)


@pytest.mark.online
class TestGatewayOnline:
    @pytest.mark.asyncio
    async def test_prospect_returns_named_businesses(self):
        leads = await Service(prospect_count=3).prospect("Commercial banks in Dubai")

        logger.info(f"Prospected {len(leads)} leads: {[l.company_name for l in leads]}")
        assert leads
        assert all(lead.company_name for lead in leads)

    @pytest.mark.asyncio
    async def test_enrich_scores_within_range(self):
        result = await Service().enrich(SAMPLE_LEAD)

        assert result is not None
        logger.info(f"Enrichment: {result.model_dump()}")
        assert 0 <= result.lead_score <= 100

    @pytest.mark.asyncio
    async def test_summarize_produces_text(self):
        insight = await Service().summarize([SAMPLE_LEAD])

        logger.info(f"Insight: {insight}")
        assert insight
        assert insight not in (EMPTY_INSIGHT, OFFLINE_INSIGHT)
