"""Dashboard module - role-scoped data behind each dashboard and its reports."""

from mwalimu.modules.dashboard.router import router
from mwalimu.modules.dashboard.service import DashboardService

__all__ = ["router", "DashboardService"]
