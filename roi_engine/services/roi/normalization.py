"""
Boundary normalization for ROI records.

Converts loosely-typed records (dicts from the data-access layer, or the
request contracts) into the strict engine types. Every conversion here is
lenient: bad numbers become zero, bad dates become None, unknown enum
values become None. Nothing raises.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from roi_engine.core.constants import DEFAULT_CURRENCY_CODE
from roi_engine.models.enums import BillingPeriod, Frequency, ROIType
from roi_engine.services.roi.types import (
    ZERO,
    NewCapabilityConfig,
    PerExecutionConfig,
    RecurringTaskConfig,
    ToolCost,
    WorkflowExecutionStats,
    WorkflowROIConfig,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _field(record: Any, *names: str, default: Any = None) -> Any:
    """Read the first present field from a mapping or an attribute-style object."""
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return default


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a numeric-ish value to a non-negative Decimal.

    None, booleans, unparseable strings, NaN, infinities and negatives all
    become zero. Floats go through str() so 83.88 stays 83.88.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return ZERO
            number = Decimal(str(value))
        else:
            number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO

    if not number.is_finite() or number < 0:
        return ZERO
    return number


def to_count(value: Any) -> int:
    """Non-negative whole count; fractional inputs are floored."""
    return int(to_decimal(value))


def parse_date(value: Any) -> date | None:
    """
    Parse a date from a date, datetime or ISO string.

    Timestamps keep only their date part. Unparseable values return None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            logger.debug(f"Ignoring unparseable date: {value!r}")
            return None
    return None


def parse_enum(enum_cls: type[E], value: Any) -> E | None:
    """Case-insensitive enum lookup; unknown values return None."""
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    raw = value.value if isinstance(value, Enum) else value
    key = str(raw).strip().lower()
    if not key:
        return None
    for member in enum_cls:
        if member.value == key:
            return member
    logger.debug(f"Unknown {enum_cls.__name__} value: {value!r}")
    return None


# =============================================================================
# Tool costs
# =============================================================================


def normalize_tool_cost(record: Any) -> ToolCost | None:
    """
    Convert one tool cost record.

    `recurring` is inferred from the presence of an end date when absent,
    which is how the admin form stores it. One-time fees drop period and
    start date; recurring fees drop end date. Records without a name are
    skipped.
    """
    name = _field(record, "name", "tool")
    if not name or not str(name).strip():
        return None

    end_date = parse_date(_field(record, "end_date"))
    recurring = _field(record, "recurring")
    if recurring is None:
        recurring = end_date is None
    recurring = bool(recurring)

    if recurring:
        return ToolCost(
            name=str(name).strip(),
            cost=to_decimal(_field(record, "cost")),
            recurring=True,
            period=parse_enum(BillingPeriod, _field(record, "period")),
            start_date=parse_date(_field(record, "start_date")),
            end_date=None,
            currency_code=_field(record, "currency_code"),
        )

    return ToolCost(
        name=str(name).strip(),
        cost=to_decimal(_field(record, "cost")),
        recurring=False,
        period=None,
        start_date=None,
        end_date=end_date,
        currency_code=_field(record, "currency_code"),
    )


def normalize_tool_costs(records: Iterable[Any] | None) -> list[ToolCost]:
    """
    Convert a tenant's tool cost list.

    Names are unique per tenant (case-insensitive); the first record wins
    and later duplicates are dropped with a warning.
    """
    tools: list[ToolCost] = []
    seen: set[str] = set()
    for record in records or []:
        tool = normalize_tool_cost(record)
        if tool is None:
            continue
        key = tool.name.lower()
        if key in seen:
            logger.warning(f"Ignoring duplicate tool cost entry: {tool.name}")
            continue
        seen.add(key)
        tools.append(tool)
    return tools


# =============================================================================
# Workflow ROI configs
# =============================================================================


def normalize_roi_config(record: Any) -> WorkflowROIConfig | None:
    """
    Convert a raw ROI config into its strict variant.

    Dispatches on roi_type; fields that the variant does not use are
    ignored. Returns None when there is no workflow id or the roi_type is
    missing or unknown.
    """
    workflow_id = _field(record, "workflow_id")
    roi_type = parse_enum(ROIType, _field(record, "roi_type"))
    if not workflow_id or roi_type is None:
        logger.debug(f"Skipping ROI config without usable workflow_id/roi_type: {workflow_id!r}")
        return None

    common = dict(
        workflow_id=str(workflow_id),
        tenant_id=_field(record, "tenant_id", "client_id"),
        workflow_name=_field(record, "workflow_name"),
        deployment_date=parse_date(_field(record, "deployment_date")),
        currency_code=str(_field(record, "currency_code", default=DEFAULT_CURRENCY_CODE)).upper(),
        implementation_cost=to_decimal(_field(record, "implementation_cost")),
        implementation_date=parse_date(_field(record, "implementation_date")),
    )

    if roi_type is ROIType.PER_EXECUTION:
        return PerExecutionConfig(
            **common,
            manual_minutes_saved=to_decimal(_field(record, "manual_minutes_saved")),
            hourly_rate=to_decimal(_field(record, "hourly_rate")),
        )

    if roi_type is ROIType.RECURRING_TASK:
        occurrences = to_decimal(_field(record, "occurrences_per_frequency"))
        return RecurringTaskConfig(
            **common,
            manual_minutes_saved=to_decimal(_field(record, "manual_minutes_saved")),
            hourly_rate=to_decimal(_field(record, "hourly_rate")),
            frequency=parse_enum(Frequency, _field(record, "frequency")),
            occurrences_per_frequency=occurrences if occurrences > 0 else Decimal(1),
        )

    return NewCapabilityConfig(
        **common,
        frequency=parse_enum(Frequency, _field(record, "frequency")),
        value_per_frequency=to_decimal(_field(record, "value_per_frequency")),
        clients_per_report=to_decimal(_field(record, "clients_per_report")),
        reactivation_rate_percent=to_decimal(_field(record, "reactivation_rate_percent")),
        value_per_client=to_decimal(_field(record, "value_per_client")),
        value_per_execution=to_decimal(_field(record, "value_per_execution")),
    )


# =============================================================================
# Execution stats
# =============================================================================


def days_since_deployment(deployment_date: date | None, reference_date: date) -> int:
    """Whole days from deployment to the reference date, never negative."""
    if deployment_date is None:
        return 0
    return max(0, (reference_date - deployment_date).days)


def normalize_execution_stats(
    record: Any,
    workflow_id: str,
    deployment_date: date | None,
    reference_date: date,
) -> WorkflowExecutionStats:
    """
    Convert raw execution stats for one workflow.

    days_since_deployment is derived from the deployment date when the
    record does not carry it. A missing record means no executions yet.
    """
    days = _field(record, "days_since_deployment") if record is not None else None
    return WorkflowExecutionStats(
        workflow_id=workflow_id,
        successful_executions=to_count(
            _field(record, "successful_executions") if record is not None else None
        ),
        days_since_deployment=(
            to_count(days)
            if days is not None
            else days_since_deployment(deployment_date, reference_date)
        ),
    )


def earliest_deployment_date(configs: Iterable[Any]) -> date | None:
    """Tenant-wide fallback anchor for tool costs without a start date."""
    dates = [
        parsed
        for parsed in (parse_date(_field(config, "deployment_date")) for config in configs)
        if parsed is not None
    ]
    return min(dates) if dates else None
