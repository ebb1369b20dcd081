"""
ROI Calculation Service

Runs the calculation engine over a tenant snapshot carried in a request:
normalize the loose records, calculate each workflow, summarize, and map
the engine's Decimal results onto the response contracts.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal

from roi_engine.config import Settings, get_settings
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
    WorkflowROIResult,
    WorkflowROIRow,
)
from roi_engine.services.roi.aggregator import summarize
from roi_engine.services.roi.breakdown import BreakdownItem, ROIBreakdown, build_breakdown
from roi_engine.services.roi.formatting import format_period_display
from roi_engine.services.roi.formulas import calculate
from roi_engine.services.roi.normalization import (
    earliest_deployment_date,
    normalize_execution_stats,
    normalize_roi_config,
    normalize_tool_costs,
)
from roi_engine.services.roi.precision import exact_sum
from roi_engine.services.roi.tool_costs import (
    allocate_tool_cost,
    default_tool_costs,
    is_common_cost,
    per_workflow_share,
)
from roi_engine.services.roi.types import (
    CalculationResult,
    TenantROISummary,
    ToolAllocation,
    ToolCost,
    WorkflowROIConfig,
)

logger = logging.getLogger(__name__)


def _money(value: Decimal) -> float:
    return float(value)


@dataclass(frozen=True)
class TenantSnapshot:
    """Normalized inputs for one tenant calculation."""

    reference_date: date
    currency_code: str
    configs: tuple[WorkflowROIConfig, ...]
    results: tuple[CalculationResult, ...]
    tool_costs: tuple[ToolCost, ...]
    workflow_count: int
    fallback_start_date: date | None


class ROICalculationService:
    """Service for calculating tenant ROI from request snapshots."""

    def __init__(self, settings: Settings | None = None):
        """Initialize the service with application settings."""
        self.settings = settings or get_settings()

    def _currency(self, requested: str | None) -> str:
        return (requested or self.settings.default_currency_code).upper()

    def _is_common(self, tool: ToolCost) -> bool:
        return is_common_cost(tool, self.settings.common_cost_keywords_list)

    # ==================== PREPARATION ====================

    def prepare(self, request: ROICalculationRequest, reference_date: date) -> TenantSnapshot:
        """
        Normalize a request and calculate every workflow in it.

        Configs without a usable roi_type are skipped. Configs without a
        currency take the request's (or the default) currency.

        Args:
            request: Tenant snapshot from the client
            reference_date: "Now" for the calculation

        Returns:
            TenantSnapshot ready for summarizing
        """
        currency = self._currency(request.currency_code)
        stats_by_workflow = {record.workflow_id: record for record in request.stats}

        configs: list[WorkflowROIConfig] = []
        for record in request.configs:
            config = normalize_roi_config(record)
            if config is None:
                logger.debug(f"Workflow {record.workflow_id} has no ROI type; skipping")
                continue
            if not record.currency_code:
                config = replace(config, currency_code=currency)
            configs.append(config)

        results = []
        for config in configs:
            stats = normalize_execution_stats(
                stats_by_workflow.get(config.workflow_id),
                config.workflow_id,
                config.deployment_date,
                reference_date,
            )
            results.append(calculate(config, stats))

        workflow_count = (
            request.workflow_count if request.workflow_count is not None else len(results)
        )
        fallback = request.fallback_start_date or earliest_deployment_date(request.configs)

        return TenantSnapshot(
            reference_date=reference_date,
            currency_code=currency,
            configs=tuple(configs),
            results=tuple(results),
            tool_costs=tuple(normalize_tool_costs(request.tool_costs)),
            workflow_count=workflow_count,
            fallback_start_date=fallback,
        )

    # ==================== OPERATIONS ====================

    def calculate_workflows(
        self, request: ROICalculationRequest, reference_date: date
    ) -> list[WorkflowROIResult]:
        """Calculate ROI for each workflow in the request."""
        snapshot = self.prepare(request, reference_date)
        return [self._result_contract(result) for result in snapshot.results]

    def summarize(
        self, request: ROICalculationRequest, reference_date: date
    ) -> ROISummaryResponse:
        """Tenant summary with per-workflow rows and tool allocations."""
        snapshot = self.prepare(request, reference_date)
        summary = self._summarize(snapshot)
        logger.info(
            f"ROI summary for {request.client_id or 'tenant'}: "
            f"{summary.workflow_count} workflows, net ROI {summary.net_roi}"
        )
        return self._summary_contract(summary, request.client_id)

    def breakdown(
        self, request: ROICalculationRequest, reference_date: date
    ) -> ROIBreakdownResponse:
        """Grouped breakdown of the tenant summary."""
        snapshot = self.prepare(request, reference_date)
        summary = self._summarize(snapshot)
        breakdown = build_breakdown(
            summary,
            snapshot.results,
            reference_date,
            self.settings.common_cost_keywords_list,
        )
        return self._breakdown_contract(breakdown, summary, request.client_id)

    def allocate_tools(
        self, request: ToolCostAllocationRequest, reference_date: date
    ) -> ToolCostAllocationResponse:
        """Allocate tool costs on their own, without workflow configs."""
        currency = self._currency(request.currency_code)
        tools = normalize_tool_costs(request.tool_costs)
        allocations = [
            allocate_tool_cost(tool, reference_date, request.fallback_start_date, currency)
            for tool in tools
        ]

        one_time_total = exact_sum(a.allocated_cost for a in allocations if not a.tool.recurring)
        recurring_total = exact_sum(a.allocated_cost for a in allocations if a.tool.recurring)
        total = exact_sum([one_time_total, recurring_total])

        return ToolCostAllocationResponse(
            reference_date=reference_date,
            currency_code=currency,
            tools=[self._tool_entry(allocation) for allocation in allocations],
            one_time_total=_money(one_time_total),
            recurring_total=_money(recurring_total),
            total=_money(total),
            workflow_count=request.workflow_count,
            per_workflow_share=_money(per_workflow_share(total, request.workflow_count)),
        )

    def default_tool_costs(self, reference_date: date) -> DefaultToolCostsResponse:
        """Default tool catalog offered to a new tenant."""
        return DefaultToolCostsResponse(
            tools=[
                DefaultToolCostEntry(
                    tool=tool.name,
                    cost=_money(tool.cost),
                    recurring=tool.recurring,
                    period=tool.period.value if tool.period else None,
                    end_date=tool.end_date,
                    enabled=enabled,
                )
                for tool, enabled in default_tool_costs(reference_date)
            ]
        )

    # ==================== HELPERS ====================

    def _summarize(self, snapshot: TenantSnapshot) -> TenantROISummary:
        return summarize(
            snapshot.results,
            snapshot.tool_costs,
            snapshot.workflow_count,
            snapshot.reference_date,
            snapshot.fallback_start_date,
            snapshot.currency_code,
        )

    def _result_contract(self, result: CalculationResult) -> WorkflowROIResult:
        return WorkflowROIResult(
            workflow_id=result.workflow_id,
            workflow_name=result.workflow_name,
            roi_type=result.roi_type.value if result.roi_type else None,
            currency_code=result.currency_code,
            deployment_date=result.deployment_date,
            days_since_deployment=result.days_since_deployment,
            successful_executions=result.successful_executions,
            minutes_saved=_money(result.minutes_saved),
            hours_saved=_money(result.hours_saved),
            labor_cost_saved=_money(result.labor_cost_saved),
            value_created=_money(result.value_created),
            formula_trace=result.formula_trace,
            configured=result.is_configured,
        )

    def _tool_entry(self, allocation: ToolAllocation) -> ToolAllocationEntry:
        tool = allocation.tool
        return ToolAllocationEntry(
            tool=tool.name,
            cost=_money(tool.cost),
            recurring=tool.recurring,
            period=tool.period.value if tool.period else None,
            period_display=format_period_display(tool.period) if tool.recurring else "one-time",
            anchor_date=allocation.anchor_date,
            end_date=tool.end_date,
            months_since_anchor=allocation.months_since_anchor,
            allocated_cost=_money(allocation.allocated_cost),
            common=self._is_common(tool),
            formula_trace=allocation.formula_trace,
        )

    def _summary_contract(
        self, summary: TenantROISummary, client_id: str | None
    ) -> ROISummaryResponse:
        return ROISummaryResponse(
            client_id=client_id,
            reference_date=summary.reference_date,
            currency_code=summary.currency_code,
            workflow_count=summary.workflow_count,
            workflows_with_roi=summary.workflows_with_roi,
            total_minutes_saved=_money(summary.total_minutes_saved),
            total_hours_saved=_money(summary.total_hours_saved),
            total_labor_cost_saved=_money(summary.total_labor_cost_saved),
            total_value_created=_money(summary.total_value_created),
            total_workflow_implementation_cost=_money(summary.total_workflow_implementation_cost),
            total_one_time_tool_cost=_money(summary.total_one_time_tool_cost),
            total_recurring_tool_cost=_money(summary.total_recurring_tool_cost),
            total_tool_cost=_money(summary.total_tool_cost),
            unassigned_tool_cost=_money(summary.unassigned_tool_cost),
            total_automation_cost=_money(summary.total_automation_cost),
            net_roi=_money(summary.net_roi),
            workflows=[
                WorkflowROIRow(
                    workflow_id=row.workflow_id,
                    workflow_name=row.workflow_name,
                    labor_cost_saved=_money(row.labor_cost_saved),
                    value_created=_money(row.value_created),
                    implementation_cost_applied=_money(row.implementation_cost_applied),
                    one_time_tool_cost_share=_money(row.one_time_tool_cost_share),
                    recurring_tool_cost_share=_money(row.recurring_tool_cost_share),
                    allocated_tool_cost=_money(row.allocated_tool_cost),
                    automation_cost=_money(row.automation_cost),
                    net_roi=_money(row.net_roi),
                )
                for row in summary.workflows
            ],
            tools=[self._tool_entry(allocation) for allocation in summary.tool_allocations],
        )

    def _breakdown_contract(
        self,
        breakdown: ROIBreakdown,
        summary: TenantROISummary,
        client_id: str | None,
    ) -> ROIBreakdownResponse:
        def entries(items: Sequence[BreakdownItem]) -> list[BreakdownItemEntry]:
            return [
                BreakdownItemEntry(
                    id=item.id,
                    name=item.name,
                    kind=item.kind,
                    amount=_money(item.amount),
                    formula_trace=item.formula_trace,
                    common=item.common,
                )
                for item in items
            ]

        return ROIBreakdownResponse(
            client_id=client_id,
            reference_date=summary.reference_date,
            currency_code=breakdown.currency_code,
            labor_items=entries(breakdown.labor_items),
            value_items=entries(breakdown.value_items),
            development_items=entries(breakdown.development_items),
            tool_items=entries(breakdown.tool_items),
            labor_subtotal=_money(breakdown.labor_subtotal),
            value_subtotal=_money(breakdown.value_subtotal),
            development_subtotal=_money(breakdown.development_subtotal),
            tools_subtotal=_money(breakdown.tools_subtotal),
            total_labor_cost_saved=_money(breakdown.total_labor_cost_saved),
            total_value_created=_money(breakdown.total_value_created),
            total_automation_cost=_money(breakdown.total_automation_cost),
            net_roi=_money(breakdown.net_roi),
            roi_trace=breakdown.roi_trace,
        )
