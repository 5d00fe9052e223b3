from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from music_analytics.api.deps import get_report_service
from music_analytics.main import app
from music_analytics.services.report_service import ReportService

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeExecutor:
    """Records every plan and answers with canned rows (or raises)."""

    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.plans = []

    async def execute(self, plan):
        self.plans.append(plan)
        if self.error is not None:
            raise self.error
        return [dict(row) for row in self.rows]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def client(executor):
    app.dependency_overrides[get_report_service] = lambda: ReportService(executor)
    yield TestClient(app)
    app.dependency_overrides.clear()
