"""Custom exceptions for the prospector workflow."""


class WorkflowError(Exception):
    """Raised for any otherwise-uncaught failure during a probe cycle."""
