"""Feed ranking and filtering for a college second-hand marketplace."""

__version__ = "0.1.0"
