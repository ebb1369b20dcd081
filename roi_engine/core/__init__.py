"""Core settings-independent helpers: constants and exceptions."""
