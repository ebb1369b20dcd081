"""
ROI Engine Models

Pydantic contracts (API request/response):
    from roi_engine.models import ROICalculationRequest
    from roi_engine.models.contracts.roi import ROICalculationRequest  # Granular access

Enums:
    from roi_engine.models import ROIType
    from roi_engine.models.enums import ROIType
"""

from roi_engine.models.contracts import *  # noqa: F401, F403
from roi_engine.models.contracts import __all__ as _contracts_all
from roi_engine.models.enums import BillingPeriod, Frequency, ROIType

__all__ = [
    "BillingPeriod",
    "Frequency",
    "ROIType",
    *_contracts_all,
]
