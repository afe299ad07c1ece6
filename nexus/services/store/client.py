"""Async REST client for the PostgREST lead store."""

import time
from typing import Any, Optional

import httpx

from nexus.config import settings
from nexus.core.logging import log_http_request
from nexus.services.store.exceptions import TransportError
from nexus.services.store.local_settings import LocalSettingsStore
from nexus.services.store.models import (
    EnrichmentUpsert,
    Lead,
    LeadEnrichment,
    LeadWithEnrichment,
    NewLead,
)

LIST_LEADS_QUERY = "leads?select=*,enrichment:lead_enrichment(*)&order=created_at.desc"


class StoreClient:
    """CRUD access to the `leads` and `lead_enrichment` tables."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        if base_url is None or api_key is None:
            creds = LocalSettingsStore(settings.local_settings_path).resolve_store_credentials(
                settings.store_url, settings.store_key
            )
            base_url = base_url or creds.base_url
            api_key = api_key or creds.api_key
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else settings.http_timeout

    def _headers(self, prefer: str) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": prefer,
        }

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        prefer: str = "return=representation",
    ) -> Any:
        url = f"{self.base_url}/rest/v1/{endpoint}"
        start = time.perf_counter()

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.request(
                    method, url, headers=self._headers(prefer), json=json
                )
            except httpx.HTTPError as e:
                log_http_request(method, url, duration=time.perf_counter() - start, error=str(e))
                raise TransportError(f"Network error: {e}") from e

        log_http_request(
            method, url, status_code=response.status_code, duration=time.perf_counter() - start
        )

        if response.status_code >= 400:
            raise TransportError(
                self._error_message(response), status_code=response.status_code
            )

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return f"Request failed: {response.status_code}"

    async def list_leads(self) -> list[LeadWithEnrichment]:
        """All leads joined with their enrichment, newest first."""
        rows = await self._request("GET", LIST_LEADS_QUERY)
        return [LeadWithEnrichment.model_validate(row) for row in rows or []]

    async def create_leads(self, leads: list[NewLead]) -> list[Lead]:
        """Insert leads and return the created rows with their ids."""
        if not leads:
            return []
        rows = await self._request(
            "POST", "leads", json=[lead.model_dump(mode="json") for lead in leads]
        )
        return [Lead.model_validate(row) for row in rows or []]

    async def create_lead(self, lead: NewLead) -> Lead:
        rows = await self._request("POST", "leads", json=lead.model_dump(mode="json"))
        if isinstance(rows, list):
            if not rows:
                raise TransportError("Store returned no row for the created lead")
            rows = rows[0]
        return Lead.model_validate(rows)

    async def upsert_enrichment(self, record: EnrichmentUpsert) -> list[LeadEnrichment]:
        """Create or replace the enrichment row for record.lead_id."""
        rows = await self._request(
            "POST",
            "lead_enrichment?on_conflict=lead_id",
            json=record.model_dump(mode="json"),
            prefer="resolution=merge-duplicates,return=representation",
        )
        return [LeadEnrichment.model_validate(row) for row in rows or []]
