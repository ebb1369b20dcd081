"""
KPI Breakdown

Groups a tenant summary into the sections of the dashboard's "View
Details" panel: labor cost saved, value created, development costs
(implementation costs plus one-time fees) and recurring tools.

Headline figures are copied from the summary, never recomputed, so the
panel cannot drift from the KPI cards.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from roi_engine.core.constants import DEFAULT_COMMON_COST_KEYWORDS
from roi_engine.services.roi.aggregator import implementation_cost_applied
from roi_engine.services.roi.formatting import format_currency
from roi_engine.services.roi.precision import exact_sum
from roi_engine.services.roi.tool_costs import is_common_cost
from roi_engine.services.roi.types import (
    ZERO,
    CalculationResult,
    TenantROISummary,
    ToolAllocation,
)


@dataclass(frozen=True)
class BreakdownItem:
    """One line in a breakdown section."""

    id: str
    name: str
    amount: Decimal
    kind: Literal["workflow", "tool"] = "workflow"
    formula_trace: str = ""
    common: bool = False


@dataclass(frozen=True)
class ROIBreakdown:
    """All sections of the breakdown panel."""

    currency_code: str
    labor_items: tuple[BreakdownItem, ...]
    value_items: tuple[BreakdownItem, ...]
    development_items: tuple[BreakdownItem, ...]
    tool_items: tuple[BreakdownItem, ...]
    labor_subtotal: Decimal
    value_subtotal: Decimal
    development_subtotal: Decimal
    tools_subtotal: Decimal
    total_labor_cost_saved: Decimal
    total_value_created: Decimal
    total_automation_cost: Decimal
    net_roi: Decimal
    roi_trace: str


def _sort_key(item: BreakdownItem) -> str:
    return item.name.lower()


def _sorted(items: Iterable[BreakdownItem]) -> tuple[BreakdownItem, ...]:
    return tuple(sorted(items, key=_sort_key))


def roi_formula_trace(summary: TenantROISummary) -> str:
    """Three-row ROI tooltip."""
    currency = summary.currency_code
    return (
        "ROI = (Labor Cost Saved + Value Created) - Automation Cost\n"
        f"= ({format_currency(summary.total_labor_cost_saved, currency)}"
        f" + {format_currency(summary.total_value_created, currency)})"
        f" - {format_currency(summary.total_automation_cost, currency)}\n"
        f"= {format_currency(summary.net_roi, currency)}"
    )


def build_breakdown(
    summary: TenantROISummary,
    results: Sequence[CalculationResult],
    reference_date: date | None = None,
    common_cost_keywords: Iterable[str] = DEFAULT_COMMON_COST_KEYWORDS,
) -> ROIBreakdown:
    """
    Build the breakdown panel from a summary and its calculation results.

    Args:
        summary: Output of aggregator.summarize
        results: The calculation results the summary was built from
        reference_date: Defaults to the summary's reference date
        common_cost_keywords: Tool name fragments flagged as common costs

    Returns:
        ROIBreakdown with every section sorted case-insensitively by name
    """
    reference = reference_date or summary.reference_date
    keywords = tuple(common_cost_keywords)

    labor_items = _sorted(
        BreakdownItem(
            id=result.workflow_id,
            name=result.display_name,
            amount=result.labor_cost_saved,
            formula_trace=result.formula_trace,
        )
        for result in results
        if result.labor_cost_saved > 0
    )
    value_items = _sorted(
        BreakdownItem(
            id=result.workflow_id,
            name=result.display_name,
            amount=result.value_created,
            formula_trace=result.formula_trace,
        )
        for result in results
        if result.value_created > 0
    )

    development: list[BreakdownItem] = []
    for result in results:
        applied = implementation_cost_applied(result, reference)
        if applied > 0:
            development.append(
                BreakdownItem(id=result.workflow_id, name=result.display_name, amount=applied)
            )
    tool_items: list[BreakdownItem] = []
    for allocation in summary.tool_allocations:
        tool = allocation.tool
        if not tool.recurring:
            development.append(_tool_item(allocation))
        else:
            tool_items.append(_tool_item(allocation, common=is_common_cost(tool, keywords)))

    development_items = _sorted(development)
    recurring_items = _sorted(tool_items)

    return ROIBreakdown(
        currency_code=summary.currency_code,
        labor_items=labor_items,
        value_items=value_items,
        development_items=development_items,
        tool_items=recurring_items,
        labor_subtotal=exact_sum(item.amount for item in labor_items),
        value_subtotal=exact_sum(item.amount for item in value_items),
        development_subtotal=exact_sum(item.amount for item in development_items),
        tools_subtotal=exact_sum(item.amount for item in recurring_items),
        total_labor_cost_saved=summary.total_labor_cost_saved,
        total_value_created=summary.total_value_created,
        total_automation_cost=summary.total_automation_cost,
        net_roi=summary.net_roi,
        roi_trace=roi_formula_trace(summary),
    )


def _tool_item(allocation: ToolAllocation, common: bool = False) -> BreakdownItem:
    return BreakdownItem(
        id=allocation.tool.name,
        name=allocation.tool.name,
        amount=allocation.allocated_cost if allocation.allocated_cost > 0 else ZERO,
        kind="tool",
        formula_trace=allocation.formula_trace,
        common=common,
    )
