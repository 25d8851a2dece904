"""
Exception types raised by the technical analysis engine.

ValidationError is raised for malformed price input; InvalidParameterError
for indicator parameters that do not fit the supplied data. Both derive from
ValueError so callers that only care about "bad input" can catch that.
"""


class TechnicalAnalysisError(Exception):
    """Base class for all engine errors."""
    pass


class ValidationError(TechnicalAnalysisError, ValueError):
    """Raised when a price series fails structural or numeric sanity checks."""
    pass


class InvalidParameterError(TechnicalAnalysisError, ValueError):
    """Raised when an indicator parameter is incompatible with the data length."""
    pass
