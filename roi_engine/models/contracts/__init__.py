"""
Pydantic contracts (API request/response).
"""

from roi_engine.models.contracts.health import BasicHealthResponse
from roi_engine.models.contracts.roi import (
    BreakdownItemEntry,
    DefaultToolCostEntry,
    DefaultToolCostsResponse,
    ROIBreakdownResponse,
    ROICalculationRequest,
    ROISummaryResponse,
    ToolAllocationEntry,
    ToolCostAllocationRequest,
    ToolCostAllocationResponse,
    ToolCostRecord,
    WorkflowExecutionStatsRecord,
    WorkflowROIConfigRecord,
    WorkflowROIResult,
    WorkflowROIRow,
)

__all__ = [
    "BasicHealthResponse",
    "BreakdownItemEntry",
    "DefaultToolCostEntry",
    "DefaultToolCostsResponse",
    "ROIBreakdownResponse",
    "ROICalculationRequest",
    "ROISummaryResponse",
    "ToolAllocationEntry",
    "ToolCostAllocationRequest",
    "ToolCostAllocationResponse",
    "ToolCostRecord",
    "WorkflowExecutionStatsRecord",
    "WorkflowROIConfigRecord",
    "WorkflowROIResult",
    "WorkflowROIRow",
]
