"""
ROI Calculation Engine

Stateless, deterministic calculation layer over already-fetched records:
- normalization: loose records -> strict value types
- tool_costs: tool cost allocation over billing periods
- formulas: per-workflow ROI formulas and derivation traces
- aggregator: tenant summary (automation cost, net ROI)
- breakdown: grouping for the KPI breakdown panel
- formatting: currency/hours/date rendering for traces

Every entry point takes an explicit reference date; nothing here reads the
clock, does I/O or keeps state.
"""

from roi_engine.services.roi.aggregator import (
    implementation_cost_applied,
    reconcile,
    summarize,
    workflow_automation_cost,
)
from roi_engine.services.roi.breakdown import ROIBreakdown, BreakdownItem, build_breakdown
from roi_engine.services.roi.formulas import (
    calculate,
    calculate_new_capability,
    calculate_per_execution,
    calculate_recurring_task,
    fractional_periods,
)
from roi_engine.services.roi.tool_costs import allocate_tool_cost, allocated_cost
from roi_engine.services.roi.types import (
    CalculationResult,
    NewCapabilityConfig,
    PerExecutionConfig,
    RecurringTaskConfig,
    TenantROISummary,
    ToolAllocation,
    ToolCost,
    WorkflowAllocation,
    WorkflowExecutionStats,
    WorkflowROIConfig,
)

__all__ = [
    "BreakdownItem",
    "CalculationResult",
    "NewCapabilityConfig",
    "PerExecutionConfig",
    "ROIBreakdown",
    "RecurringTaskConfig",
    "TenantROISummary",
    "ToolAllocation",
    "ToolCost",
    "WorkflowAllocation",
    "WorkflowExecutionStats",
    "WorkflowROIConfig",
    "allocate_tool_cost",
    "allocated_cost",
    "build_breakdown",
    "calculate",
    "calculate_new_capability",
    "calculate_per_execution",
    "calculate_recurring_task",
    "fractional_periods",
    "implementation_cost_applied",
    "reconcile",
    "summarize",
    "workflow_automation_cost",
]
