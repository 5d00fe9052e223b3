"""Request-scoped dependencies shared by the report routers."""
from fastapi import Request #type: ignore

from music_analytics.core.errors import ReportError
from music_analytics.services.report_service import ReportService


def get_report_service(request: Request) -> ReportService:
    executor = getattr(request.app.state, "executor", None)
    if executor is None:
        raise ReportError.execution("Database connection is not initialized")
    return ReportService(executor)
