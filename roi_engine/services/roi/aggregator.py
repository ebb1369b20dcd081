"""
ROI Aggregator

Combines per-workflow calculation results with tenant tool costs into the
tenant summary (automation cost and net ROI).

Tool costs enter the totals in full: one-time fees once, recurring fees
as allocated. For the per-workflow rows each pool is also split evenly over
the tenant's workflow count; whatever no row carries (zero count, or more
workflows than results) is kept as `unassigned_tool_cost`, so the rows plus
that remainder always add back up to the tenant totals.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from roi_engine.core.constants import DEFAULT_CURRENCY_CODE
from roi_engine.services.roi.precision import exact_arithmetic, exact_sum
from roi_engine.services.roi.tool_costs import (
    allocate_tool_cost,
    split_evenly,
    total_tool_cost,
)
from roi_engine.services.roi.types import (
    ZERO,
    CalculationResult,
    TenantROISummary,
    ToolCost,
    WorkflowAllocation,
)

logger = logging.getLogger(__name__)


def implementation_cost_applied(result: CalculationResult, reference_date: date) -> Decimal:
    """A workflow's own implementation cost, once its implementation date has passed."""
    if result.implementation_date is None or result.implementation_date > reference_date:
        return ZERO
    return max(ZERO, result.implementation_cost)


def fallback_anchor(results: Iterable[CalculationResult]) -> date | None:
    """Earliest deployment date among the results."""
    dates = [result.deployment_date for result in results if result.deployment_date is not None]
    return min(dates) if dates else None


def workflow_automation_cost(summary: TenantROISummary, workflow_id: str) -> Decimal:
    """
    Automation cost shown on a single workflow's card.

    Read from the workflow's summary row so the card matches the summary
    to the last digit.

    Raises:
        KeyError: If the workflow has no row in the summary
    """
    for row in summary.workflows:
        if row.workflow_id == workflow_id:
            return row.automation_cost
    raise KeyError(workflow_id)


def summarize(
    workflow_results: Sequence[CalculationResult],
    tool_costs: Sequence[ToolCost],
    workflow_count: int,
    reference_date: date,
    fallback_start_date: date | None = None,
    currency_code: str | None = None,
) -> TenantROISummary:
    """
    Summarize a tenant's ROI.

    Steps:
    1. Resolve the tool cost fallback anchor (argument, else earliest deployment)
    2. Allocate one-time and recurring tool costs into two tenant pools
    3. Count both pools in full in the tenant totals
    4. Split each pool evenly over `workflow_count` slots for the rows,
       assigned to results in order (results beyond the count get no share)
    5. Record the pool amount no row carries as `unassigned_tool_cost`

    Args:
        workflow_results: Output of the formula engine, one per active workflow
        tool_costs: Normalized tenant tool costs
        workflow_count: Number of active workflows sharing the tool costs
        reference_date: "Now" for the calculation
        fallback_start_date: Anchor for recurring tools with no start date
        currency_code: Summary currency (defaults to the first result's)

    Returns:
        TenantROISummary whose net_roi equals the sum of its rows' net_roi
        less `unassigned_tool_cost`
    """
    anchor = fallback_start_date or fallback_anchor(workflow_results)
    count = max(0, workflow_count)

    if count and len(workflow_results) != count:
        logger.warning(
            f"Workflow count {count} does not match {len(workflow_results)} results; "
            f"tool costs are shared over {count} workflows"
        )

    one_time_pool = total_tool_cost(tool_costs, reference_date, anchor, recurring=False)
    recurring_pool = total_tool_cost(tool_costs, reference_date, anchor, recurring=True)
    one_time_shares = split_evenly(one_time_pool, count)
    recurring_shares = split_evenly(recurring_pool, count)

    rows: list[WorkflowAllocation] = []
    for index, result in enumerate(workflow_results):
        rows.append(
            WorkflowAllocation(
                workflow_id=result.workflow_id,
                workflow_name=result.workflow_name,
                labor_cost_saved=result.labor_cost_saved,
                value_created=result.value_created,
                minutes_saved=result.minutes_saved,
                implementation_cost_applied=implementation_cost_applied(result, reference_date),
                one_time_tool_cost_share=one_time_shares[index] if index < count else ZERO,
                recurring_tool_cost_share=recurring_shares[index] if index < count else ZERO,
            )
        )

    currency = currency_code or next(
        (result.currency_code for result in workflow_results if result.currency_code),
        DEFAULT_CURRENCY_CODE,
    )

    with exact_arithmetic():
        total_labor = exact_sum(row.labor_cost_saved for row in rows)
        total_value = exact_sum(row.value_created for row in rows)
        total_implementation = exact_sum(row.implementation_cost_applied for row in rows)
        unassigned = one_time_pool + recurring_pool - exact_sum(
            row.allocated_tool_cost for row in rows
        )
        total_automation = total_implementation + one_time_pool + recurring_pool
        net_roi = total_labor + total_value - total_automation
        total_minutes = exact_sum(row.minutes_saved for row in rows)

    return TenantROISummary(
        reference_date=reference_date,
        workflow_count=count,
        currency_code=currency,
        total_minutes_saved=total_minutes,
        total_labor_cost_saved=total_labor,
        total_value_created=total_value,
        total_workflow_implementation_cost=total_implementation,
        total_one_time_tool_cost=one_time_pool,
        total_recurring_tool_cost=recurring_pool,
        unassigned_tool_cost=unassigned,
        total_automation_cost=total_automation,
        net_roi=net_roi,
        workflows_with_roi=sum(1 for result in workflow_results if result.total_benefit > 0),
        workflows=tuple(rows),
        tool_allocations=tuple(
            allocate_tool_cost(tool, reference_date, anchor, currency) for tool in tool_costs
        ),
    )


def reconcile(summary: TenantROISummary) -> bool:
    """Check the summary's net ROI against its per-workflow rows and unassigned tool cost."""
    with exact_arithmetic():
        bottom_up = exact_sum(row.net_roi for row in summary.workflows) - summary.unassigned_tool_cost
    return bottom_up == summary.net_roi
