"""
FormFlow Errors
===============

All formflow-specific errors inherit from FormflowError so callers can catch
the whole family at once.
"""


class FormflowError(Exception):
    """Base error for all formflow operations."""


class InactivePipelineError(FormflowError):
    """Raised when a stopped pipeline is asked to accept input or new listeners."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: the pipeline has been stopped")


class ConfigError(FormflowError, ValueError):
    """Invalid pipeline configuration."""
