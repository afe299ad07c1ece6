"""Gemini generateContent client.

One HTTP call per generation, no retries. The API key is sent in the
x-goog-api-key header rather than the query string so it never shows up
in request logs.
"""

import time
from typing import Optional

import httpx

from nexus.config import settings
from nexus.core.logging import log_http_request
from nexus.services.gateway.exceptions import GatewayError


class GeminiClient:
    """Minimal async client for models/{model}:generateContent."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @staticmethod
    def build_payload(prompt: str, json_mode: bool = False, search: bool = False) -> dict:
        payload: dict = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if json_mode:
            payload["generationConfig"] = {"responseMimeType": "application/json"}
        if search:
            payload["tools"] = [{"google_search": {}}]
        return payload

    @staticmethod
    def extract_text(data: dict) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    async def generate(self, prompt: str, json_mode: bool = False, search: bool = False) -> str:
        if not self.api_key:
            raise GatewayError("GEMINI_API_KEY is not configured")

        start = time.perf_counter()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    headers={
                        "x-goog-api-key": self.api_key,
                        "Content-Type": "application/json",
                    },
                    json=self.build_payload(prompt, json_mode=json_mode, search=search),
                )
            except httpx.HTTPError as e:
                log_http_request("POST", self.endpoint, duration=time.perf_counter() - start, error=str(e))
                raise GatewayError(f"Gemini request failed: {e}") from e

        log_http_request(
            "POST", self.endpoint, status_code=response.status_code, duration=time.perf_counter() - start
        )

        if response.status_code == 429:
            raise GatewayError("Gemini quota exceeded")
        if response.status_code >= 400:
            raise GatewayError(f"Gemini API error {response.status_code}: {response.text[:200]}")

        return self.extract_text(response.json())
