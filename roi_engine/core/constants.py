"""
Calculation Constants

Calendar approximations used to turn elapsed days into fractional periods.
Averages are applied uniformly; no calendar-exact day counting is done.
"""

from decimal import Decimal

MINUTES_PER_HOUR = Decimal(60)

DAYS_PER_WEEK = Decimal("7.0")

# 365.25 / 12, rounded to two places
AVERAGE_DAYS_PER_MONTH = Decimal("30.44")

# 365 / 4
AVERAGE_DAYS_PER_QUARTER = Decimal("91.25")

PERCENT = Decimal(100)

# Tool name fragments treated as shared running costs in the breakdown
DEFAULT_COMMON_COST_KEYWORDS = ("database", "hosting", "supabase", "llm tokens")

# Tools whose cost is a usage estimate rather than a fixed subscription
USAGE_ESTIMATE_KEYWORD = "llm tokens"

DEFAULT_CURRENCY_CODE = "GBP"
