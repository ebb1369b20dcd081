"""
Tool Cost Allocation

Works out how much of a tenant's tool spend has been incurred by a
reference date, and how it is shared across the tenant's workflows.

Recurring fees are charged per elapsed billing period counted in whole
calendar months from the anchor month (day-of-month is ignored). One-time
fees are recognised in full on their end date, not amortised.
"""

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from roi_engine.core.constants import DEFAULT_COMMON_COST_KEYWORDS, USAGE_ESTIMATE_KEYWORD
from roi_engine.models.enums import BillingPeriod
from roi_engine.services.roi.formatting import (
    format_currency,
    format_date,
    pluralize,
)
from roi_engine.services.roi.precision import exact_arithmetic, exact_sum
from roi_engine.services.roi.types import ZERO, ToolAllocation, ToolCost

logger = logging.getLogger(__name__)

_PERIOD_MONTHS: dict[BillingPeriod, int] = {
    BillingPeriod.MONTHLY: 1,
    BillingPeriod.QUARTERLY: 3,
    BillingPeriod.YEARLY: 12,
    BillingPeriod.TWENTY_FOUR_MONTHS: 24,
}

# Default catalog offered to a new tenant: (name, cost, recurring, period, enabled)
DEFAULT_TOOL_COSTS: tuple[tuple[str, Decimal, bool, BillingPeriod | None, bool], ...] = (
    ("Audit / Initial setup", Decimal("0"), False, None, True),
    ("Hosting", Decimal("83.88"), True, BillingPeriod.YEARLY, True),
    ("Supabase", Decimal("0"), True, BillingPeriod.MONTHLY, False),
    ("LLM Tokens", Decimal("0"), True, BillingPeriod.MONTHLY, False),
)


def period_months(period: BillingPeriod | None) -> int:
    """Length of a billing period in months (1 when unknown)."""
    if period is None:
        return 1
    return _PERIOD_MONTHS.get(period, 1)


def months_between(anchor: date, reference: date) -> int:
    """Calendar months from anchor to reference, ignoring day-of-month. May be negative."""
    return (reference.year - anchor.year) * 12 + (reference.month - anchor.month)


def resolve_anchor(tool: ToolCost, fallback_start_date: date | None) -> date | None:
    """Billing anchor: the tool's own start date, else the tenant fallback."""
    return tool.start_date or fallback_start_date


def _recurring_periods(period: BillingPeriod | None, months: int) -> int:
    """Number of billed periods after `months` elapsed calendar months."""
    if period is BillingPeriod.MONTHLY:
        return max(0, months)
    if period is BillingPeriod.QUARTERLY:
        return max(0, (months + 1) // 3)
    if period is BillingPeriod.YEARLY:
        # Annual fees are billed upfront: the first year counts immediately
        return max(1, (months + 1) // 12)
    if period is BillingPeriod.TWENTY_FOUR_MONTHS:
        return max(0, (months + 1) // 24)
    return 0


def allocated_cost(
    tool: ToolCost,
    reference_date: date,
    fallback_start_date: date | None = None,
) -> Decimal:
    """
    Cumulative cost of a tool incurred up to the reference date.

    Args:
        tool: Normalized tool cost
        reference_date: "Now" for the calculation
        fallback_start_date: Tenant's earliest workflow deployment date,
            used when a recurring tool has no start date of its own

    Returns:
        Allocated cost, never negative. Unknown periods and missing anchors
        yield zero. An anchor after the reference month bills nothing, except
        a yearly fee, which is charged upfront for its first year.
    """
    cost = max(ZERO, tool.cost)

    if not tool.recurring:
        if tool.end_date is None:
            return ZERO
        return cost if reference_date >= tool.end_date else ZERO

    anchor = resolve_anchor(tool, fallback_start_date)
    if anchor is None:
        return ZERO

    months = months_between(anchor, reference_date)
    if tool.period is None:
        logger.debug(f"Tool {tool.name!r} has no recognised billing period")
        return ZERO

    return cost * _recurring_periods(tool.period, months)


def allocate_tool_cost(
    tool: ToolCost,
    reference_date: date,
    fallback_start_date: date | None = None,
    currency_code: str = "GBP",
) -> ToolAllocation:
    """Allocated cost for one tool plus the tooltip text explaining it."""
    amount = allocated_cost(tool, reference_date, fallback_start_date)
    currency = tool.currency_code or currency_code

    if not tool.recurring:
        if tool.end_date is None:
            trace = ""
        elif reference_date >= tool.end_date:
            trace = (
                f"One-time fee incurred on {format_date(tool.end_date)}\n"
                f"{format_currency(tool.cost, currency, decimals=2)}"
            )
        else:
            trace = f"One-time fee not yet incurred (due {format_date(tool.end_date)})"
        return ToolAllocation(
            tool=tool,
            allocated_cost=amount,
            anchor_date=tool.end_date,
            formula_trace=trace,
        )

    anchor = resolve_anchor(tool, fallback_start_date)
    months = max(0, months_between(anchor, reference_date)) if anchor else 0

    if anchor is None or tool.period is None:
        trace = ""
    elif USAGE_ESTIMATE_KEYWORD in tool.name.lower():
        month_label = f"{months} {pluralize(months, 'month')}"
        trace = (
            f"Estimated monthly cost: {format_currency(tool.cost, currency, decimals=2)}.\n\n"
            f"{month_label} since workflow deployment.\n\n"
            f"Calculation:\n"
            f"{month_label} × {format_currency(tool.cost, currency, decimals=2)} / month"
            f" = {format_currency(amount, currency, decimals=2)}."
        )
    else:
        length = period_months(tool.period)
        trace = (
            f"{length} {pluralize(length, 'month')} {tool.name} paid on {format_date(anchor)}\n"
            f"{format_currency(tool.cost, currency, decimals=2)}"
        )

    return ToolAllocation(
        tool=tool,
        allocated_cost=amount,
        anchor_date=anchor,
        months_since_anchor=months,
        formula_trace=trace,
    )


def total_tool_cost(
    tools: Iterable[ToolCost],
    reference_date: date,
    fallback_start_date: date | None = None,
    recurring: bool | None = None,
) -> Decimal:
    """Sum of allocated costs, optionally restricted to recurring or one-time tools."""
    return exact_sum(
        allocated_cost(tool, reference_date, fallback_start_date)
        for tool in tools
        if recurring is None or tool.recurring == recurring
    )


def per_workflow_share(amount: Decimal, workflow_count: int) -> Decimal:
    """Even share of a tenant-level cost for one workflow; zero when there are none."""
    if workflow_count <= 0:
        return ZERO
    return amount / Decimal(workflow_count)


def split_evenly(amount: Decimal, workflow_count: int) -> list[Decimal]:
    """
    Split a tenant-level cost into `workflow_count` even shares.

    The last share absorbs the division remainder so the shares add back
    up to `amount` exactly.
    """
    if workflow_count <= 0:
        return []
    share = per_workflow_share(amount, workflow_count)
    shares = [share] * (workflow_count - 1)
    with exact_arithmetic():
        shares.append(amount - share * (workflow_count - 1))
    return shares


def is_common_cost(
    tool: ToolCost,
    keywords: Iterable[str] = DEFAULT_COMMON_COST_KEYWORDS,
) -> bool:
    """Recurring tools whose name matches a shared running-cost keyword."""
    if not tool.recurring:
        return False
    name = tool.name.lower()
    return any(keyword.lower() in name for keyword in keywords)


def default_tool_costs(reference_date: date) -> list[tuple[ToolCost, bool]]:
    """
    Default tool catalog for a tenant, with each entry's enabled flag.

    The one-time setup fee is due on the reference date.
    """
    catalog = []
    for name, cost, recurring, period, enabled in DEFAULT_TOOL_COSTS:
        tool = ToolCost(
            name=name,
            cost=cost,
            recurring=recurring,
            period=period,
            end_date=None if recurring else reference_date,
        )
        catalog.append((tool, enabled))
    return catalog
