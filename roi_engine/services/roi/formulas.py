"""
Workflow ROI Formula Engine

Turns one workflow's ROI configuration and execution stats into minutes
saved, labor cost saved or value created, along with a step-by-step
derivation for tooltip display.

Three calculation models, selected by roi_type:
- per_execution: each successful run saves a fixed amount of manual time
- recurring_task: replaces a task that recurred daily/weekly/monthly/quarterly
- new_capability: creates value per period, per converted item, or per run

Every function here is pure. Missing inputs produce a zero result with an
empty trace; nothing raises.
"""

import logging
from decimal import Decimal

from roi_engine.core.constants import (
    AVERAGE_DAYS_PER_MONTH,
    AVERAGE_DAYS_PER_QUARTER,
    DAYS_PER_WEEK,
    MINUTES_PER_HOUR,
    PERCENT,
)
from roi_engine.models.enums import Frequency
from roi_engine.services.roi.formatting import (
    format_currency,
    format_fixed,
    format_quantity,
    pluralize,
)
from roi_engine.services.roi.types import (
    ZERO,
    CalculationResult,
    NewCapabilityConfig,
    PerExecutionConfig,
    RecurringTaskConfig,
    WorkflowExecutionStats,
    WorkflowROIConfig,
)

logger = logging.getLogger(__name__)

_FREQUENCY_UNITS: dict[Frequency, str] = {
    Frequency.DAILY: "day",
    Frequency.WEEKLY: "week",
    Frequency.MONTHLY: "month",
    Frequency.QUARTERLY: "quarter",
}


def fractional_periods(frequency: Frequency | None, days: int) -> Decimal | None:
    """
    Convert elapsed days into a (fractional) number of frequency periods.

    Partial weeks, months and quarters count proportionally; months and
    quarters use average lengths (30.44 and 91.25 days).

    Returns:
        Period count, or None for an unknown/missing frequency
    """
    elapsed = Decimal(max(0, days))
    if frequency is Frequency.DAILY:
        return elapsed
    if frequency is Frequency.WEEKLY:
        return elapsed / DAYS_PER_WEEK
    if frequency is Frequency.MONTHLY:
        return elapsed / AVERAGE_DAYS_PER_MONTH
    if frequency is Frequency.QUARTERLY:
        return elapsed / AVERAGE_DAYS_PER_QUARTER
    return None


def _elapsed_text(frequency: Frequency, days: int, periods: Decimal) -> str:
    text = f"{days} {pluralize(days, 'day')} since workflow deployment"
    if frequency is Frequency.DAILY:
        return text
    unit = _FREQUENCY_UNITS[frequency]
    return f"{text} ({format_fixed(periods)} {unit}s)"


def _positive(value: Decimal) -> Decimal:
    return value if value > 0 else ZERO


def _executions(stats: WorkflowExecutionStats | None) -> int:
    return max(0, stats.successful_executions) if stats else 0


def _days(stats: WorkflowExecutionStats | None) -> int:
    return max(0, stats.days_since_deployment) if stats else 0


# =============================================================================
# per_execution
# =============================================================================


def calculate_per_execution(
    config: PerExecutionConfig,
    stats: WorkflowExecutionStats | None,
) -> CalculationResult:
    """
    Labor saved by individual runs.

    total_minutes = executions × manual_minutes_saved
    labor_cost_saved = total_minutes / 60 × hourly_rate
    """
    minutes_per_run = _positive(config.manual_minutes_saved)
    hourly_rate = _positive(config.hourly_rate)
    executions = _executions(stats)

    if minutes_per_run == 0 or hourly_rate == 0 or executions == 0:
        logger.debug(f"per_execution workflow {config.workflow_id} not computable yet")
        return CalculationResult.zero(config, stats)

    total_minutes = Decimal(executions) * minutes_per_run
    total_hours = total_minutes / MINUTES_PER_HOUR
    labor_cost = total_hours * hourly_rate

    currency = config.currency_code
    rate_text = format_currency(hourly_rate, currency, decimals=2)
    runs_text = f"{executions} {pluralize(executions, 'execution')}"
    trace = (
        f"Time saved per execution: {format_quantity(minutes_per_run)} minutes\n"
        f"Hourly labor rate: {rate_text} per hour\n"
        f"Convert minutes to hours: ÷ 60 minutes\n"
        f"Number of successful executions: {runs_text}\n\n"
        f"Calculation:\n"
        f"{runs_text} × {format_quantity(minutes_per_run)} min = {format_quantity(total_minutes)} minutes\n"
        f"{format_quantity(total_minutes)} min ÷ 60 = {format_fixed(total_hours)} hours\n"
        f"{format_fixed(total_hours)} hours × {rate_text}/hour = {format_currency(labor_cost, currency, decimals=2)}"
    )

    return _result(config, stats, minutes_saved=total_minutes, labor_cost_saved=labor_cost, trace=trace)


# =============================================================================
# recurring_task
# =============================================================================


def calculate_recurring_task(
    config: RecurringTaskConfig,
    stats: WorkflowExecutionStats | None,
) -> CalculationResult:
    """
    Labor saved by replacing a scheduled manual task.

    Execution counts are ignored; elapsed time since deployment drives the
    figure. occurrences = periods × occurrences_per_frequency, then the
    same minutes → hours → cost conversion as per_execution.
    """
    minutes_per_task = _positive(config.manual_minutes_saved)
    hourly_rate = _positive(config.hourly_rate)
    occurrences = config.occurrences_per_frequency if config.occurrences_per_frequency > 0 else Decimal(1)
    days = _days(stats)
    periods = fractional_periods(config.frequency, days)

    if minutes_per_task == 0 or hourly_rate == 0 or periods is None:
        logger.debug(f"recurring_task workflow {config.workflow_id} not computable yet")
        return CalculationResult.zero(config, stats)

    total_occurrences = periods * occurrences
    total_minutes = total_occurrences * minutes_per_task
    total_hours = total_minutes / MINUTES_PER_HOUR
    labor_cost = total_hours * hourly_rate

    unit = _FREQUENCY_UNITS[config.frequency]
    currency = config.currency_code
    rate_text = format_currency(hourly_rate, currency, decimals=2)
    occurrence_word = pluralize(occurrences, "occurrence")

    if config.frequency is Frequency.DAILY:
        occurrences_text = (
            f"{days} {pluralize(days, 'day')} × {format_quantity(occurrences)} {occurrence_word} per day"
            f" = {format_quantity(total_occurrences)} total {pluralize(total_occurrences, 'occurrence')}"
        )
    else:
        occurrences_text = (
            f"{format_fixed(periods)} {unit}s × {format_quantity(occurrences)} {occurrence_word} per {unit}"
            f" = {format_fixed(total_occurrences)} total {pluralize(total_occurrences, 'occurrence')}"
        )

    trace = (
        f"Manual work pattern: {format_quantity(occurrences)} {pluralize(occurrences, 'time')} per {unit}\n"
        f"Time saved per occurrence: {format_quantity(minutes_per_task)} minutes\n"
        f"Hourly labor rate: {rate_text} per hour\n"
        f"Convert minutes to hours: ÷ 60 minutes\n"
        f"{_elapsed_text(config.frequency, days, periods)}\n\n"
        f"{occurrences_text}\n\n"
        f"Calculation:\n"
        f"{format_fixed(total_occurrences)} {pluralize(total_occurrences, 'occurrence')}"
        f" × {format_quantity(minutes_per_task)} min = {format_fixed(total_minutes)} minutes\n"
        f"{format_fixed(total_minutes)} min ÷ 60 = {format_fixed(total_hours)} hours\n"
        f"{format_fixed(total_hours)} hours × {rate_text}/hour = {format_currency(labor_cost, currency, decimals=2)}"
    )

    return _result(config, stats, minutes_saved=total_minutes, labor_cost_saved=labor_cost, trace=trace)


# =============================================================================
# new_capability
# =============================================================================


def calculate_new_capability(
    config: NewCapabilityConfig,
    stats: WorkflowExecutionStats | None,
) -> CalculationResult:
    """
    Value created by a capability that did not exist before.

    The first matching mode wins:
    1. Frequency-based: periods since deployment × value_per_frequency
    2. Conversion-based: executions × items × conversion% × value per item
    3. Simple: executions × value_per_execution
    """
    currency = config.currency_code
    executions = _executions(stats)
    value_per_frequency = _positive(config.value_per_frequency)

    if config.frequency is not None and value_per_frequency > 0:
        days = _days(stats)
        periods = fractional_periods(config.frequency, days)
        value = periods * value_per_frequency
        unit = _FREQUENCY_UNITS[config.frequency]
        per_text = format_currency(value_per_frequency, currency, decimals=2)
        trace = (
            f"Value generation pattern: {per_text} per {unit}\n"
            f"{_elapsed_text(config.frequency, days, periods)}\n\n"
            f"Calculation:\n"
            f"{format_fixed(periods)} {unit}{'' if periods == 1 else 's'} × {per_text}/{unit}"
            f" = {format_currency(value, currency, decimals=2)}"
        )
        return _result(config, stats, value_created=value, trace=trace)

    items_per_run = _positive(config.clients_per_report)
    conversion_rate = _positive(config.reactivation_rate_percent)
    value_per_item = _positive(config.value_per_client)

    if items_per_run > 0 and conversion_rate > 0 and value_per_item > 0:
        total_items = Decimal(executions) * items_per_run
        converted_items = total_items * (conversion_rate / PERCENT)
        value = converted_items * value_per_item
        runs_text = f"{executions} {pluralize(executions, 'execution')}"
        item_text = format_currency(value_per_item, currency, decimals=2)
        trace = (
            f"Items per execution: {format_quantity(items_per_run)}\n"
            f"Conversion rate: {format_quantity(conversion_rate)}%\n"
            f"Value per converted item: {item_text}\n"
            f"Number of successful executions: {runs_text}\n\n"
            f"Calculation:\n"
            f"{runs_text} × {format_quantity(items_per_run)} items = {format_quantity(total_items)} total items\n"
            f"{format_quantity(total_items)} items × {format_quantity(conversion_rate)}%"
            f" = {format_fixed(converted_items)} converted items\n"
            f"{format_fixed(converted_items)} items × {item_text} = {format_currency(value, currency, decimals=2)}"
        )
        return _result(config, stats, value_created=value, trace=trace)

    value_per_run = _positive(config.value_per_execution)
    if value_per_run > 0 and executions > 0:
        value = Decimal(executions) * value_per_run
        runs_text = f"{executions} {pluralize(executions, 'execution')}"
        run_value_text = format_currency(value_per_run, currency, decimals=2)
        trace = (
            f"Value per execution: {run_value_text}\n"
            f"Number of successful executions: {runs_text}\n\n"
            f"Calculation:\n"
            f"{runs_text} × {run_value_text} = {format_currency(value, currency, decimals=2)}"
        )
        return _result(config, stats, value_created=value, trace=trace)

    logger.debug(f"new_capability workflow {config.workflow_id} not computable yet")
    return CalculationResult.zero(config, stats)


# =============================================================================
# Dispatcher
# =============================================================================


def calculate(
    config: WorkflowROIConfig,
    stats: WorkflowExecutionStats | None,
) -> CalculationResult:
    """
    Calculate one workflow's ROI.

    A workflow without a deployment date is not computable and returns a
    zero result regardless of roi_type.

    Args:
        config: Normalized ROI config variant
        stats: Execution stats for the same workflow (None = no executions)

    Returns:
        CalculationResult; identical inputs always give identical output
    """
    if config.deployment_date is None:
        logger.debug(f"Workflow {config.workflow_id} has no deployment date; ROI unavailable")
        return CalculationResult.zero(config, stats)

    if isinstance(config, PerExecutionConfig):
        return calculate_per_execution(config, stats)
    if isinstance(config, RecurringTaskConfig):
        return calculate_recurring_task(config, stats)
    if isinstance(config, NewCapabilityConfig):
        return calculate_new_capability(config, stats)

    logger.debug(f"Unsupported ROI config type for workflow {config.workflow_id}: {type(config).__name__}")
    return CalculationResult(workflow_id=config.workflow_id)


def _result(
    config: WorkflowROIConfig,
    stats: WorkflowExecutionStats | None,
    minutes_saved: Decimal = ZERO,
    labor_cost_saved: Decimal = ZERO,
    value_created: Decimal = ZERO,
    trace: str = "",
) -> CalculationResult:
    return CalculationResult(
        workflow_id=config.workflow_id,
        roi_type=config.roi_type,
        minutes_saved=max(ZERO, minutes_saved),
        labor_cost_saved=max(ZERO, labor_cost_saved),
        value_created=max(ZERO, value_created),
        formula_trace=trace,
        workflow_name=config.workflow_name,
        currency_code=config.currency_code,
        deployment_date=config.deployment_date,
        days_since_deployment=_days(stats),
        successful_executions=_executions(stats),
        implementation_cost=config.implementation_cost,
        implementation_date=config.implementation_date,
    )
