"""
ROI Calculations Router

Stateless ROI endpoints. Every request carries the tenant's already-fetched
records (workflow configs, execution stats, tool costs); nothing is stored.

Endpoint Structure:
- POST /api/roi/workflows/calculate - Per-workflow ROI with formula traces
- POST /api/roi/summary - Tenant summary with per-workflow rows
- POST /api/roi/breakdown - Grouped KPI breakdown
- POST /api/roi/tool-costs/allocate - Tool cost allocation only
- GET /api/roi/tool-costs/defaults - Default tool catalog
"""

import logging
from datetime import date, datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from roi_engine.config import Settings, get_settings
from roi_engine.models.contracts.roi import (
    DefaultToolCostsResponse,
    ROIBreakdownResponse,
    ROICalculationRequest,
    ROISummaryResponse,
    ToolCostAllocationRequest,
    ToolCostAllocationResponse,
    WorkflowROIResult,
)
from roi_engine.services.roi_calculation_service import ROICalculationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/roi", tags=["ROI Calculations"])


def get_roi_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ROICalculationService:
    """Provide an ROI calculation service bound to the app settings."""
    return ROICalculationService(settings)


ROIService = Annotated[ROICalculationService, Depends(get_roi_service)]


def resolve_reference_date(reference_date: date | None) -> date:
    """Requested reference date, else today (UTC)."""
    return reference_date or datetime.now(timezone.utc).date()


# =============================================================================
# HTTP Endpoints
# =============================================================================


@router.post(
    "/workflows/calculate",
    response_model=list[WorkflowROIResult],
    summary="Calculate workflow ROI",
    description="Calculate ROI for each workflow config in the snapshot.",
)
async def calculate_workflows(
    request: ROICalculationRequest,
    service: ROIService,
) -> list[WorkflowROIResult]:
    """
    Calculate per-workflow ROI.

    Workflows without a deployment date, or with an unknown ROI type,
    come back as zero results with an empty formula trace.
    """
    try:
        return service.calculate_workflows(request, resolve_reference_date(request.reference_date))
    except Exception as e:
        logger.error(f"Error calculating workflow ROI: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate workflow ROI",
        )


@router.post(
    "/summary",
    response_model=ROISummaryResponse,
    summary="Get tenant ROI summary",
    description="Summarize labor saved, value created, automation cost and net ROI.",
)
async def get_roi_summary(
    request: ROICalculationRequest,
    service: ROIService,
) -> ROISummaryResponse:
    """
    Get the tenant ROI summary.

    Totals are the exact sums of the per-workflow rows returned with them.
    """
    try:
        return service.summarize(request, resolve_reference_date(request.reference_date))
    except Exception as e:
        logger.error(f"Error getting ROI summary: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get ROI summary",
        )


@router.post(
    "/breakdown",
    response_model=ROIBreakdownResponse,
    summary="Get ROI breakdown",
    description="Group the tenant summary into labor, value, development and tool sections.",
)
async def get_roi_breakdown(
    request: ROICalculationRequest,
    service: ROIService,
) -> ROIBreakdownResponse:
    """Get the grouped ROI breakdown."""
    try:
        return service.breakdown(request, resolve_reference_date(request.reference_date))
    except Exception as e:
        logger.error(f"Error getting ROI breakdown: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get ROI breakdown",
        )


@router.post(
    "/tool-costs/allocate",
    response_model=ToolCostAllocationResponse,
    summary="Allocate tool costs",
    description="Allocate tool costs up to the reference date and share them across workflows.",
)
async def allocate_tool_costs(
    request: ToolCostAllocationRequest,
    service: ROIService,
) -> ToolCostAllocationResponse:
    """Allocate tool costs without workflow configs."""
    try:
        return service.allocate_tools(request, resolve_reference_date(request.reference_date))
    except Exception as e:
        logger.error(f"Error allocating tool costs: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to allocate tool costs",
        )


@router.get(
    "/tool-costs/defaults",
    response_model=DefaultToolCostsResponse,
    summary="Get default tool costs",
    description="Default tool catalog offered to a new tenant.",
)
async def get_default_tool_costs(
    service: ROIService,
    reference_date: date | None = Query(
        None, description="Due date for the one-time setup fee (defaults to today)"
    ),
) -> DefaultToolCostsResponse:
    """Get the default tool catalog."""
    return service.default_tool_costs(resolve_reference_date(reference_date))
