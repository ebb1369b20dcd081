"""ROI calculation request and response contracts.

Input records are deliberately loose (strings for enums and dates, every
field optional) because they arrive straight from the dashboard's views;
the engine's normalization layer makes them strict. Output money values
are floats: Decimals are converted only here, at the response boundary.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roi_engine.core.exceptions import DuplicateToolCostError


# =============================================================================
# Input records
# =============================================================================


class ToolCostRecord(BaseModel):
    """A tenant tool cost as stored by the admin tool manager."""

    model_config = ConfigDict(extra="allow")

    tool: str = Field(..., min_length=1, description="Tool name (unique per tenant, case-insensitive)")
    cost: float | None = Field(default=0, description="Cost per period, or the one-time fee")
    recurring: bool | None = Field(
        default=None,
        description="Recurring fee? Inferred from end_date when omitted",
    )
    period: str | None = Field(
        default=None,
        description="monthly, quarterly, yearly or 24months (recurring only)",
    )
    start_date: str | None = Field(
        default=None,
        description="Billing anchor (ISO date); falls back to earliest deployment date",
    )
    end_date: str | None = Field(
        default=None,
        description="Date a one-time fee is incurred (ISO date)",
    )
    currency_code: str | None = None


class WorkflowROIConfigRecord(BaseModel):
    """A workflow's ROI configuration. Fields irrelevant to roi_type are ignored."""

    model_config = ConfigDict(extra="allow")

    workflow_id: str = Field(..., min_length=1)
    client_id: str | None = Field(default=None, description="Tenant identifier")
    workflow_name: str | None = None
    roi_type: str | None = Field(
        default=None,
        description="per_execution, recurring_task or new_capability",
    )
    deployment_date: str | None = Field(
        default=None,
        description="ISO date; without it the workflow calculates to zero",
    )
    currency_code: str | None = None

    manual_minutes_saved: float | None = None
    hourly_rate: float | None = None

    frequency: str | None = Field(default=None, description="daily, weekly, monthly or quarterly")
    occurrences_per_frequency: float | None = None

    value_per_execution: float | None = None
    value_per_frequency: float | None = None
    clients_per_report: float | None = None
    reactivation_rate_percent: float | None = None
    value_per_client: float | None = None

    implementation_cost: float | None = None
    implementation_date: str | None = None

    value_description: str | None = None
    notes: str | None = None


class WorkflowExecutionStatsRecord(BaseModel):
    """Execution aggregates for one workflow."""

    model_config = ConfigDict(extra="allow")

    workflow_id: str = Field(..., min_length=1)
    successful_executions: int | None = Field(default=0)
    days_since_deployment: int | None = Field(
        default=None,
        description="Derived from deployment_date and reference_date when omitted",
    )


def _ensure_unique_tool_names(tools: list[ToolCostRecord]) -> list[ToolCostRecord]:
    seen: set[str] = set()
    for tool in tools:
        key = tool.tool.strip().lower()
        if key in seen:
            raise DuplicateToolCostError(tool.tool)
        seen.add(key)
    return tools


# =============================================================================
# Requests
# =============================================================================


class ROICalculationRequest(BaseModel):
    """Snapshot of a tenant's ROI inputs."""

    client_id: str | None = Field(default=None, description="Opaque tenant identifier")
    reference_date: date | None = Field(
        default=None,
        description="Calculation date; defaults to today (UTC)",
    )
    currency_code: str | None = None
    configs: list[WorkflowROIConfigRecord] = Field(default_factory=list)
    stats: list[WorkflowExecutionStatsRecord] = Field(default_factory=list)
    tool_costs: list[ToolCostRecord] = Field(default_factory=list)
    workflow_count: int | None = Field(
        default=None,
        ge=0,
        description="Active workflows sharing tool costs; defaults to the number of configs",
    )
    fallback_start_date: date | None = Field(
        default=None,
        description="Anchor for tools without start_date; defaults to earliest deployment date",
    )

    @field_validator("tool_costs")
    @classmethod
    def tool_names_unique(cls, v: list[ToolCostRecord]) -> list[ToolCostRecord]:
        return _ensure_unique_tool_names(v)


class ToolCostAllocationRequest(BaseModel):
    """Tool costs to allocate, without workflow configs."""

    reference_date: date | None = None
    currency_code: str | None = None
    tool_costs: list[ToolCostRecord] = Field(default_factory=list)
    workflow_count: int = Field(default=0, ge=0)
    fallback_start_date: date | None = None

    @field_validator("tool_costs")
    @classmethod
    def tool_names_unique(cls, v: list[ToolCostRecord]) -> list[ToolCostRecord]:
        return _ensure_unique_tool_names(v)


# =============================================================================
# Responses
# =============================================================================


class WorkflowROIResult(BaseModel):
    """Calculated ROI for one workflow."""

    workflow_id: str
    workflow_name: str | None = None
    roi_type: str | None = None
    currency_code: str
    deployment_date: date | None = None
    days_since_deployment: int = 0
    successful_executions: int = 0
    minutes_saved: float = 0
    hours_saved: float = 0
    labor_cost_saved: float = 0
    value_created: float = 0
    formula_trace: str = ""
    configured: bool = Field(
        default=False,
        description="False when the workflow lacks the inputs needed to calculate",
    )


class WorkflowROIRow(BaseModel):
    """One workflow's share of the tenant summary."""

    workflow_id: str
    workflow_name: str | None = None
    labor_cost_saved: float
    value_created: float
    implementation_cost_applied: float
    one_time_tool_cost_share: float
    recurring_tool_cost_share: float
    allocated_tool_cost: float
    automation_cost: float
    net_roi: float


class ToolAllocationEntry(BaseModel):
    """Allocated cost for one tool."""

    tool: str
    cost: float
    recurring: bool
    period: str | None = None
    period_display: str = ""
    anchor_date: date | None = None
    end_date: date | None = None
    months_since_anchor: int = 0
    allocated_cost: float
    common: bool = False
    formula_trace: str = ""


class ROISummaryResponse(BaseModel):
    """Tenant ROI summary with the per-workflow rows it was summed from."""

    client_id: str | None = None
    reference_date: date
    currency_code: str
    workflow_count: int
    workflows_with_roi: int
    total_minutes_saved: float
    total_hours_saved: float
    total_labor_cost_saved: float
    total_value_created: float
    total_workflow_implementation_cost: float
    total_one_time_tool_cost: float
    total_recurring_tool_cost: float
    total_tool_cost: float
    unassigned_tool_cost: float = Field(
        default=0.0, description="Tool cost not carried by any per-workflow row"
    )
    total_automation_cost: float
    net_roi: float
    workflows: list[WorkflowROIRow]
    tools: list[ToolAllocationEntry]


class BreakdownItemEntry(BaseModel):
    """One line of a breakdown section."""

    id: str
    name: str
    kind: str
    amount: float
    formula_trace: str = ""
    common: bool = False


class ROIBreakdownResponse(BaseModel):
    """Sections of the KPI breakdown panel."""

    client_id: str | None = None
    reference_date: date
    currency_code: str
    labor_items: list[BreakdownItemEntry]
    value_items: list[BreakdownItemEntry]
    development_items: list[BreakdownItemEntry]
    tool_items: list[BreakdownItemEntry]
    labor_subtotal: float
    value_subtotal: float
    development_subtotal: float
    tools_subtotal: float
    total_labor_cost_saved: float
    total_value_created: float
    total_automation_cost: float
    net_roi: float
    roi_trace: str


class ToolCostAllocationResponse(BaseModel):
    """Allocated tool costs and the even per-workflow share."""

    reference_date: date
    currency_code: str
    tools: list[ToolAllocationEntry]
    one_time_total: float
    recurring_total: float
    total: float
    workflow_count: int
    per_workflow_share: float


class DefaultToolCostEntry(BaseModel):
    """Entry of the default tool catalog."""

    tool: str
    cost: float
    recurring: bool
    period: str | None = None
    end_date: date | None = None
    enabled: bool


class DefaultToolCostsResponse(BaseModel):
    tools: list[DefaultToolCostEntry]
