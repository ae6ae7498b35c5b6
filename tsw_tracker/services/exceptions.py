"""
Service-level exceptions.

Data problems never raise: malformed check-ins are skipped and thin logs
produce empty, typed results. These exceptions signal caller mistakes.
"""

class InsightsError(Exception):
    """Base exception for insight calculation errors."""
    pass

class InvalidTimeWindowError(InsightsError):
    """Raised when a time window value is not one of week, month or all."""
    pass
