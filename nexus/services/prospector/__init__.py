"""Prospector workflow: probe cycles, dashboard state and export."""

from .exceptions import WorkflowError
from .models import ProbeOutcome, ProbeResult
from .service import IService, Service
from .state import DashboardSnapshot, DashboardState, DashboardStats, ProbePhase

__all__ = [
    "WorkflowError",
    "ProbeOutcome",
    "ProbeResult",
    "IService",
    "Service",
    "DashboardSnapshot",
    "DashboardState",
    "DashboardStats",
    "ProbePhase",
]
