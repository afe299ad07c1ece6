"""Dashboard state owned by the prospector controller.

The presentation layer only reads snapshots; every mutation goes through a
named transition so subscribers can re-render after each one.
"""

from collections import deque
from enum import Enum
from typing import Callable, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict

from nexus.services.store.models import LeadWithEnrichment

LOG_CAPACITY = 10
HIGH_READINESS_SCORE = 90


class ProbePhase(str, Enum):
    IDLE = "idle"
    PROSPECTING = "prospecting"
    PERSISTING_LEADS = "persisting-leads"
    ENRICHING = "enriching"
    PERSISTING_ENRICHMENT = "persisting-enrichment"


class DashboardStats(BaseModel):
    total_leads: int = 0
    verified_emails: int = 0
    high_readiness: int = 0


class DashboardSnapshot(BaseModel):
    """Immutable view of the dashboard state."""

    model_config = ConfigDict(frozen=True)

    leads: tuple[LeadWithEnrichment, ...] = ()
    logs: tuple[str, ...] = ()
    # Lines ever added, including those rotated out of logs
    log_count: int = 0
    is_searching: bool = False
    search_query: str = ""
    phase: ProbePhase = ProbePhase.IDLE
    insight: str = ""
    loading: bool = False

    @property
    def stats(self) -> DashboardStats:
        return DashboardStats(
            total_leads=len(self.leads),
            verified_emails=sum(
                1 for lead in self.leads if lead.enrichment and lead.enrichment.validated
            ),
            high_readiness=sum(1 for lead in self.leads if lead.score >= HIGH_READINESS_SCORE),
        )

    def top_performers(self, n: int = 5) -> list[LeadWithEnrichment]:
        return sorted(self.leads, key=lambda lead: lead.score, reverse=True)[:n]


Listener = Callable[[DashboardSnapshot], None]


class DashboardState:
    """Mutable application state: lead list, rolling log, busy flag, insight."""

    def __init__(self, log_capacity: int = LOG_CAPACITY):
        self._leads: list[LeadWithEnrichment] = []
        self._logs: deque[str] = deque(maxlen=log_capacity)
        self._log_count = 0
        self._is_searching = False
        self._search_query = ""
        self._phase = ProbePhase.IDLE
        self._insight = ""
        self._loading = False
        self._listeners: list[Listener] = []

    @property
    def is_searching(self) -> bool:
        return self._is_searching

    @property
    def phase(self) -> ProbePhase:
        return self._phase

    def snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot(
            leads=tuple(self._leads),
            logs=tuple(self._logs),
            log_count=self._log_count,
            is_searching=self._is_searching,
            search_query=self._search_query,
            phase=self._phase,
            insight=self._insight,
            loading=self._loading,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception as e:
                logger.warning(f"Dashboard listener {listener!r} failed: {e}")

    # -- transitions --------------------------------------------------------

    def add_log(self, message: str) -> None:
        """Prepend a line to the rolling log (most recent first)."""
        self._logs.appendleft(message)
        self._log_count += 1
        logger.info(message)
        self._notify()

    def begin_probe(self, query: str) -> bool:
        """Claim the single probe slot. False if a probe is already running."""
        if self._is_searching:
            return False
        self._is_searching = True
        self._search_query = query
        self._phase = ProbePhase.PROSPECTING
        self._notify()
        return True

    def set_phase(self, phase: ProbePhase) -> None:
        self._phase = phase
        self._notify()

    def end_probe(self) -> None:
        self._is_searching = False
        self._search_query = ""
        self._phase = ProbePhase.IDLE
        self._notify()

    def begin_loading(self) -> None:
        self._loading = True
        self._notify()

    def end_loading(self) -> None:
        self._loading = False
        self._notify()

    def set_leads(self, leads: list[LeadWithEnrichment]) -> None:
        self._leads = list(leads)
        self._notify()

    def set_insight(self, insight: Optional[str]) -> None:
        self._insight = insight or ""
        self._notify()
