"""
Enumeration types used across the application.
"""

from enum import Enum


class ROIType(str, Enum):
    """How a workflow's value is calculated"""
    PER_EXECUTION = "per_execution"
    RECURRING_TASK = "recurring_task"
    NEW_CAPABILITY = "new_capability"


class Frequency(str, Enum):
    """How often the manual task (or value event) would have happened"""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class BillingPeriod(str, Enum):
    """Billing cycle of a recurring tool cost"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    TWENTY_FOUR_MONTHS = "24months"
