"""
Core Exceptions

Raised only at the request boundary. The calculation engine never raises
for bad data; it degrades to zero instead.
"""


class ROIEngineError(Exception):
    """Base class for ROI engine boundary errors."""

    def __init__(self, message: str = "Invalid ROI input"):
        self.message = message
        super().__init__(self.message)


class DuplicateToolCostError(ROIEngineError, ValueError):
    """
    Raised when a tenant's tool cost list names the same tool twice.

    Tool names are unique per tenant, compared case-insensitively.
    Subclasses ValueError so pydantic validators surface it as a 422.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A tool with this name already exists: {name}")

