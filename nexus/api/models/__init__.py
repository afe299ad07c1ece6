from .dashboard import (
    ProbeRequest,
    NewLeadRequest,
    ProbeAccepted,
    LeadResponse,
    StatsResponse,
    DashboardResponse,
    ErrorResponse,
)

__all__ = [
    "ProbeRequest",
    "NewLeadRequest",
    "ProbeAccepted",
    "LeadResponse",
    "StatsResponse",
    "DashboardResponse",
    "ErrorResponse",
]
