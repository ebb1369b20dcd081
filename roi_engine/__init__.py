"""Workflow ROI cost allocation and calculation engine."""

__version__ = "1.0.0"
