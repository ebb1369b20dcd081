"""
Unit tests for tool cost allocation.

Tests billing period counting, one-time fee recognition, the fallback
anchor, even splitting across workflows and the default catalog.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from roi_engine.models.enums import BillingPeriod
from roi_engine.services.roi.precision import exact_sum
from roi_engine.services.roi.tool_costs import (
    allocate_tool_cost,
    allocated_cost,
    default_tool_costs,
    is_common_cost,
    months_between,
    per_workflow_share,
    period_months,
    split_evenly,
    total_tool_cost,
)
from roi_engine.services.roi.types import ToolCost


def recurring(cost, period, start_date=None, name="Tool") -> ToolCost:
    return ToolCost(
        name=name,
        cost=Decimal(cost),
        recurring=True,
        period=period,
        start_date=start_date,
    )


class TestMonthsBetween:
    """Tests for months_between."""

    def test_ignores_day_of_month(self):
        """Test only year and month contribute."""
        assert months_between(date(2025, 1, 31), date(2025, 2, 1)) == 1
        assert months_between(date(2025, 1, 1), date(2025, 1, 31)) == 0

    def test_spans_years(self):
        """Test month counting across a year boundary."""
        assert months_between(date(2024, 10, 8), date(2025, 12, 8)) == 14

    def test_negative_when_anchor_is_later(self):
        """Test future anchors give a negative count."""
        assert months_between(date(2026, 2, 1), date(2025, 12, 8)) == -2


class TestRecurringAllocation:
    """Tests for recurring tool cost allocation."""

    def test_yearly_anchor_fourteen_months_ago(self, hosting_tool, reference_date):
        """Test a yearly fee 14 months in has been billed once."""
        assert allocated_cost(hosting_tool, reference_date) == Decimal("120")

    def test_yearly_billed_upfront(self):
        """Test the first year is recognised in the anchor month."""
        tool = recurring("120", BillingPeriod.YEARLY, date(2025, 12, 1))
        assert allocated_cost(tool, date(2025, 12, 31)) == Decimal("120")

    def test_yearly_second_year(self):
        """Test the second year is billed after 23 elapsed months."""
        tool = recurring("120", BillingPeriod.YEARLY, date(2024, 1, 1))
        assert allocated_cost(tool, date(2025, 11, 1)) == Decimal("120")
        assert allocated_cost(tool, date(2025, 12, 1)) == Decimal("240")

    def test_monthly_counts_elapsed_months(self):
        """Test monthly fees are charged per elapsed calendar month."""
        tool = recurring("10", BillingPeriod.MONTHLY, date(2025, 9, 20))
        assert allocated_cost(tool, date(2025, 12, 1)) == Decimal("30")

    def test_monthly_same_month_is_zero(self):
        """Test nothing is charged in the anchor month."""
        tool = recurring("10", BillingPeriod.MONTHLY, date(2025, 12, 1))
        assert allocated_cost(tool, date(2025, 12, 28)) == Decimal("0")

    def test_quarterly(self):
        """Test quarterly periods round on the (months + 1) boundary."""
        tool = recurring("90", BillingPeriod.QUARTERLY, date(2025, 10, 1))
        assert allocated_cost(tool, date(2025, 11, 1)) == Decimal("0")
        assert allocated_cost(tool, date(2025, 12, 1)) == Decimal("90")

    def test_twenty_four_months(self):
        """Test 24-month fees are billed after 23 elapsed months."""
        tool = recurring("400", BillingPeriod.TWENTY_FOUR_MONTHS, date(2024, 1, 1))
        assert allocated_cost(tool, date(2025, 11, 1)) == Decimal("0")
        assert allocated_cost(tool, date(2025, 12, 1)) == Decimal("400")

    def test_future_yearly_anchor_charges_first_year(self):
        """Test a yearly fee starting after the reference month is still billed upfront."""
        tool = recurring("120", BillingPeriod.YEARLY, date(2026, 2, 1))
        assert allocated_cost(tool, date(2025, 12, 8)) == Decimal("120")

    @pytest.mark.parametrize(
        "period",
        [BillingPeriod.MONTHLY, BillingPeriod.QUARTERLY, BillingPeriod.TWENTY_FOUR_MONTHS],
    )
    def test_future_anchor_bills_no_periods(self, period):
        """Test non-yearly fees starting after the reference month contribute nothing."""
        tool = recurring("120", period, date(2026, 3, 1))
        assert allocated_cost(tool, date(2025, 12, 8)) == Decimal("0")

    def test_missing_anchor_is_zero(self):
        """Test no start date and no fallback contributes nothing."""
        tool = recurring("10", BillingPeriod.MONTHLY)
        assert allocated_cost(tool, date(2025, 12, 8)) == Decimal("0")

    def test_fallback_anchor_used(self):
        """Test the tenant fallback anchors tools without a start date."""
        tool = recurring("10", BillingPeriod.MONTHLY)
        assert allocated_cost(tool, date(2025, 12, 15), date(2025, 10, 1)) == Decimal("20")

    def test_own_start_date_beats_fallback(self):
        """Test the tool's start date wins over the fallback."""
        tool = recurring("10", BillingPeriod.MONTHLY, date(2025, 11, 1))
        assert allocated_cost(tool, date(2025, 12, 15), date(2025, 1, 1)) == Decimal("10")

    def test_unknown_period_is_zero(self):
        """Test a recurring tool with no recognised period contributes nothing."""
        tool = recurring("10", None, date(2025, 1, 1))
        assert allocated_cost(tool, date(2025, 12, 8)) == Decimal("0")

    def test_negative_cost_is_floored(self):
        """Test a negative cost never produces a negative allocation."""
        tool = recurring("-10", BillingPeriod.MONTHLY, date(2025, 1, 1))
        assert allocated_cost(tool, date(2025, 12, 8)) == Decimal("0")


class TestOneTimeAllocation:
    """Tests for one-time fee recognition."""

    @pytest.fixture
    def setup_fee(self, reference_date) -> ToolCost:
        return ToolCost(
            name="Initial setup",
            cost=Decimal("500"),
            recurring=False,
            end_date=reference_date + timedelta(days=10),
        )

    def test_not_incurred_before_end_date(self, setup_fee, reference_date):
        """Test a fee due in 10 days has not been incurred."""
        assert allocated_cost(setup_fee, reference_date) == Decimal("0")

    def test_step_at_end_date(self, setup_fee):
        """Test the fee switches from zero to the full cost on its end date."""
        due = setup_fee.end_date
        assert allocated_cost(setup_fee, due - timedelta(days=1)) == Decimal("0")
        assert allocated_cost(setup_fee, due) == Decimal("500")

    def test_incurred_after_end_date(self, setup_fee):
        """Test the fee stays incurred after its end date."""
        assert allocated_cost(setup_fee, setup_fee.end_date + timedelta(days=1)) == Decimal("500")

    def test_does_not_need_anchor(self, setup_fee):
        """Test one-time fees ignore start date and fallback."""
        later = setup_fee.end_date + timedelta(days=30)
        assert allocated_cost(setup_fee, later, None) == Decimal("500")

    def test_missing_end_date_is_zero(self):
        """Test a one-time fee without an end date is never incurred."""
        tool = ToolCost(name="Setup", cost=Decimal("500"), recurring=False)
        assert allocated_cost(tool, date(2025, 12, 8)) == Decimal("0")


class TestAllocateToolCost:
    """Tests for allocate_tool_cost traces."""

    def test_subscription_trace(self, hosting_tool, reference_date):
        """Test subscription trace names the period and anchor."""
        allocation = allocate_tool_cost(hosting_tool, reference_date)

        assert allocation.allocated_cost == Decimal("120")
        assert allocation.anchor_date == date(2024, 10, 8)
        assert allocation.months_since_anchor == 14
        assert allocation.formula_trace == "12 months Hosting paid on 8 Oct 2024\n£120.00"

    def test_usage_estimate_trace(self):
        """Test LLM token costs are explained as a monthly estimate."""
        tool = recurring("15", BillingPeriod.MONTHLY, date(2025, 9, 1), name="LLM Tokens")

        allocation = allocate_tool_cost(tool, date(2025, 12, 1))

        assert allocation.allocated_cost == Decimal("45")
        assert "Estimated monthly cost: £15.00." in allocation.formula_trace
        assert "3 months since workflow deployment." in allocation.formula_trace
        assert allocation.formula_trace.endswith("3 months × £15.00 / month = £45.00.")

    def test_one_time_trace(self, setup_fee_tool, reference_date):
        """Test incurred one-time fees show the date and amount."""
        allocation = allocate_tool_cost(setup_fee_tool, reference_date, currency_code="USD")

        assert allocation.allocated_cost == Decimal("500")
        assert allocation.formula_trace == "One-time fee incurred on 1 Jun 2025\n$500.00"

    def test_pending_one_time_trace(self, setup_fee_tool):
        """Test pending one-time fees say when they are due."""
        allocation = allocate_tool_cost(setup_fee_tool, date(2025, 5, 1))

        assert allocation.allocated_cost == Decimal("0")
        assert allocation.formula_trace == "One-time fee not yet incurred (due 1 Jun 2025)"

    def test_tool_currency_overrides_default(self, reference_date):
        """Test a tool's own currency is used in its trace."""
        tool = ToolCost(
            name="Hosting",
            cost=Decimal("120"),
            period=BillingPeriod.YEARLY,
            start_date=date(2025, 1, 1),
            currency_code="EUR",
        )
        allocation = allocate_tool_cost(tool, reference_date, currency_code="GBP")
        assert allocation.formula_trace.endswith("€120.00")

    def test_unallocatable_tool_has_empty_trace(self, reference_date):
        """Test tools without an anchor produce no trace."""
        allocation = allocate_tool_cost(recurring("10", BillingPeriod.MONTHLY), reference_date)
        assert allocation.allocated_cost == Decimal("0")
        assert allocation.formula_trace == ""


class TestTotalsAndShares:
    """Tests for totals and per-workflow shares."""

    def test_total_tool_cost(self, hosting_tool, setup_fee_tool, reference_date):
        """Test totals can be restricted to recurring or one-time tools."""
        tools = [hosting_tool, setup_fee_tool]

        assert total_tool_cost(tools, reference_date) == Decimal("620")
        assert total_tool_cost(tools, reference_date, recurring=True) == Decimal("120")
        assert total_tool_cost(tools, reference_date, recurring=False) == Decimal("500")

    def test_per_workflow_share_zero_workflows(self):
        """Test no workflows means no share rather than a division error."""
        assert per_workflow_share(Decimal("100"), 0) == Decimal("0")

    def test_per_workflow_share(self):
        """Test shares divide evenly."""
        assert per_workflow_share(Decimal("620"), 2) == Decimal("310")

    def test_split_evenly_sums_exactly(self):
        """Test thirds add back up to the pool exactly."""
        shares = split_evenly(Decimal("100"), 3)

        assert len(shares) == 3
        assert exact_sum(shares) == Decimal("100")
        assert shares[0] == shares[1]

    def test_split_evenly_no_workflows(self):
        """Test splitting across no workflows gives no shares."""
        assert split_evenly(Decimal("100"), 0) == []


class TestCatalog:
    """Tests for period lengths, common costs and default tools."""

    def test_period_months(self):
        """Test billing period lengths."""
        assert period_months(BillingPeriod.MONTHLY) == 1
        assert period_months(BillingPeriod.QUARTERLY) == 3
        assert period_months(BillingPeriod.YEARLY) == 12
        assert period_months(BillingPeriod.TWENTY_FOUR_MONTHS) == 24
        assert period_months(None) == 1

    def test_is_common_cost(self, hosting_tool, setup_fee_tool):
        """Test only recurring tools matching a keyword are common."""
        assert is_common_cost(hosting_tool) is True
        assert is_common_cost(recurring("5", BillingPeriod.MONTHLY, name="Zapier")) is False
        assert is_common_cost(setup_fee_tool) is False

    def test_is_common_cost_custom_keywords(self):
        """Test keyword matching is case-insensitive."""
        tool = recurring("5", BillingPeriod.MONTHLY, name="Zapier Pro")
        assert is_common_cost(tool, ["ZAPIER"]) is True

    def test_default_tool_costs(self, reference_date):
        """Test the default catalog and its enabled flags."""
        catalog = default_tool_costs(reference_date)

        names = [tool.name for tool, _ in catalog]
        assert names == ["Audit / Initial setup", "Hosting", "Supabase", "LLM Tokens"]

        setup, enabled = catalog[0]
        assert setup.recurring is False
        assert setup.end_date == reference_date
        assert enabled is True

        hosting, _ = catalog[1]
        assert hosting.cost == Decimal("83.88")
        assert hosting.period == BillingPeriod.YEARLY

        assert [enabled for _, enabled in catalog] == [True, True, False, False]
