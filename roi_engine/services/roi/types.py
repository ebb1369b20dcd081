"""
ROI engine value types.

Immutable inputs and outputs of the calculation engine. Loose external
records are converted into these by `normalization`; nothing past that
boundary needs to guard against missing or malformed fields.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from roi_engine.core.constants import DEFAULT_CURRENCY_CODE, MINUTES_PER_HOUR
from roi_engine.models.enums import BillingPeriod, Frequency, ROIType
from roi_engine.services.roi.precision import exact_arithmetic

ZERO = Decimal(0)


@dataclass(frozen=True)
class ToolCost:
    """A recurring or one-time expense attributable to a tenant."""

    name: str
    cost: Decimal = ZERO
    recurring: bool = True
    period: BillingPeriod | None = None
    start_date: date | None = None
    end_date: date | None = None
    currency_code: str | None = None


# =============================================================================
# ROI configuration variants
# =============================================================================


@dataclass(frozen=True)
class WorkflowROIBase:
    """Fields shared by every ROI configuration variant."""

    workflow_id: str
    tenant_id: str | None = None
    workflow_name: str | None = None
    deployment_date: date | None = None
    currency_code: str = DEFAULT_CURRENCY_CODE
    implementation_cost: Decimal = ZERO
    implementation_date: date | None = None


@dataclass(frozen=True)
class PerExecutionConfig(WorkflowROIBase):
    """Each successful execution saves a fixed amount of manual time."""

    manual_minutes_saved: Decimal = ZERO
    hourly_rate: Decimal = ZERO

    roi_type: ROIType = field(default=ROIType.PER_EXECUTION, init=False)


@dataclass(frozen=True)
class RecurringTaskConfig(WorkflowROIBase):
    """Replaces a manual task that recurred on a schedule."""

    manual_minutes_saved: Decimal = ZERO
    hourly_rate: Decimal = ZERO
    frequency: Frequency | None = None
    occurrences_per_frequency: Decimal = Decimal(1)

    roi_type: ROIType = field(default=ROIType.RECURRING_TASK, init=False)


@dataclass(frozen=True)
class NewCapabilityConfig(WorkflowROIBase):
    """Creates value that did not exist before automation."""

    frequency: Frequency | None = None
    value_per_frequency: Decimal = ZERO
    clients_per_report: Decimal = ZERO
    reactivation_rate_percent: Decimal = ZERO
    value_per_client: Decimal = ZERO
    value_per_execution: Decimal = ZERO

    roi_type: ROIType = field(default=ROIType.NEW_CAPABILITY, init=False)


WorkflowROIConfig = PerExecutionConfig | RecurringTaskConfig | NewCapabilityConfig


@dataclass(frozen=True)
class WorkflowExecutionStats:
    """Aggregated execution counts for one workflow."""

    workflow_id: str
    successful_executions: int = 0
    days_since_deployment: int = 0


# =============================================================================
# Engine outputs
# =============================================================================


@dataclass(frozen=True)
class CalculationResult:
    """
    Value produced by one workflow.

    At most one of labor_cost_saved / value_created is non-zero. An empty
    formula_trace means the workflow was not computable (unconfigured),
    as opposed to configured but worth nothing yet.
    """

    workflow_id: str
    roi_type: ROIType | None = None
    minutes_saved: Decimal = ZERO
    labor_cost_saved: Decimal = ZERO
    value_created: Decimal = ZERO
    formula_trace: str = ""
    workflow_name: str | None = None
    currency_code: str = DEFAULT_CURRENCY_CODE
    deployment_date: date | None = None
    days_since_deployment: int = 0
    successful_executions: int = 0
    implementation_cost: Decimal = ZERO
    implementation_date: date | None = None

    @property
    def hours_saved(self) -> Decimal:
        return self.minutes_saved / MINUTES_PER_HOUR

    @property
    def total_benefit(self) -> Decimal:
        with exact_arithmetic():
            return self.labor_cost_saved + self.value_created

    @property
    def is_configured(self) -> bool:
        return bool(self.formula_trace)

    @property
    def display_name(self) -> str:
        return self.workflow_name or self.workflow_id

    @classmethod
    def zero(
        cls,
        config: WorkflowROIConfig,
        stats: WorkflowExecutionStats | None = None,
    ) -> "CalculationResult":
        """Empty result that still carries the workflow's identity and costs."""
        return cls(
            workflow_id=config.workflow_id,
            roi_type=config.roi_type,
            workflow_name=config.workflow_name,
            currency_code=config.currency_code,
            deployment_date=config.deployment_date,
            days_since_deployment=stats.days_since_deployment if stats else 0,
            successful_executions=stats.successful_executions if stats else 0,
            implementation_cost=config.implementation_cost,
            implementation_date=config.implementation_date,
        )


@dataclass(frozen=True)
class ToolAllocation:
    """Cost recognised for one tool up to the reference date."""

    tool: ToolCost
    allocated_cost: Decimal = ZERO
    anchor_date: date | None = None
    months_since_anchor: int = 0
    formula_trace: str = ""


@dataclass(frozen=True)
class WorkflowAllocation:
    """One workflow's row in the tenant breakdown."""

    workflow_id: str
    workflow_name: str | None = None
    labor_cost_saved: Decimal = ZERO
    value_created: Decimal = ZERO
    minutes_saved: Decimal = ZERO
    implementation_cost_applied: Decimal = ZERO
    one_time_tool_cost_share: Decimal = ZERO
    recurring_tool_cost_share: Decimal = ZERO

    @property
    def allocated_tool_cost(self) -> Decimal:
        with exact_arithmetic():
            return self.one_time_tool_cost_share + self.recurring_tool_cost_share

    @property
    def automation_cost(self) -> Decimal:
        with exact_arithmetic():
            return self.implementation_cost_applied + self.allocated_tool_cost

    @property
    def total_benefit(self) -> Decimal:
        with exact_arithmetic():
            return self.labor_cost_saved + self.value_created

    @property
    def net_roi(self) -> Decimal:
        with exact_arithmetic():
            return self.total_benefit - self.automation_cost


@dataclass(frozen=True)
class TenantROISummary:
    """Tenant-wide totals plus the per-workflow rows they were summed from."""

    reference_date: date
    workflow_count: int
    currency_code: str = DEFAULT_CURRENCY_CODE
    total_minutes_saved: Decimal = ZERO
    total_labor_cost_saved: Decimal = ZERO
    total_value_created: Decimal = ZERO
    total_workflow_implementation_cost: Decimal = ZERO
    total_one_time_tool_cost: Decimal = ZERO
    total_recurring_tool_cost: Decimal = ZERO
    # Tool cost carried by no row: zero workflow count, or slots with no result
    unassigned_tool_cost: Decimal = ZERO
    total_automation_cost: Decimal = ZERO
    net_roi: Decimal = ZERO
    workflows_with_roi: int = 0
    workflows: tuple[WorkflowAllocation, ...] = ()
    tool_allocations: tuple[ToolAllocation, ...] = ()

    @property
    def total_hours_saved(self) -> Decimal:
        return self.total_minutes_saved / MINUTES_PER_HOUR

    @property
    def total_benefit(self) -> Decimal:
        with exact_arithmetic():
            return self.total_labor_cost_saved + self.total_value_created

    @property
    def total_tool_cost(self) -> Decimal:
        with exact_arithmetic():
            return self.total_one_time_tool_cost + self.total_recurring_tool_cost
