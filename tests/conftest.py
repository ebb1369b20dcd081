"""
Pytest fixtures for ROI Engine testing.

This module provides:
1. A fixed reference date (the engine never reads the clock)
2. Common tool cost and workflow fixtures
3. Settings and an HTTP client for router tests
"""

import os
import sys
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from roi_engine.config import Settings  # noqa: E402
from roi_engine.models.enums import BillingPeriod  # noqa: E402
from roi_engine.services.roi.types import CalculationResult, ToolCost  # noqa: E402


# ==================== DATES ====================

@pytest.fixture
def reference_date() -> date:
    """Fixed "now" for calculations."""
    return date(2025, 12, 8)


# ==================== TOOL COSTS ====================

@pytest.fixture
def hosting_tool() -> ToolCost:
    """Yearly hosting fee anchored 14 months before the reference date."""
    return ToolCost(
        name="Hosting",
        cost=Decimal("120"),
        recurring=True,
        period=BillingPeriod.YEARLY,
        start_date=date(2024, 10, 8),
    )


@pytest.fixture
def setup_fee_tool() -> ToolCost:
    """One-time setup fee already incurred."""
    return ToolCost(
        name="Audit / Initial setup",
        cost=Decimal("500"),
        recurring=False,
        end_date=date(2025, 6, 1),
    )


# ==================== WORKFLOW RESULTS ====================

@pytest.fixture
def labor_result() -> CalculationResult:
    """Labor-saving workflow with an incurred implementation cost."""
    return CalculationResult(
        workflow_id="wf-invoices",
        workflow_name="Invoice Sync",
        labor_cost_saved=Decimal("250"),
        minutes_saved=Decimal("600"),
        formula_trace="trace",
        deployment_date=date(2025, 1, 15),
        implementation_cost=Decimal("1000"),
        implementation_date=date(2025, 1, 10),
    )


@pytest.fixture
def value_result() -> CalculationResult:
    """Value-creating workflow whose implementation cost is not due yet."""
    return CalculationResult(
        workflow_id="wf-reactivation",
        workflow_name="client reactivation",
        value_created=Decimal("100"),
        formula_trace="trace",
        deployment_date=date(2025, 3, 1),
        implementation_cost=Decimal("300"),
        implementation_date=date(2026, 1, 1),
    )


# ==================== APPLICATION ====================

@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, independent of the environment cache."""
    return Settings(environment="testing")


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to a fresh application instance."""
    from roi_engine.main import create_app

    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
