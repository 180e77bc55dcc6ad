"""Custom exception hierarchy for loan-calendar."""


class LoanCalendarError(Exception):
    """Base exception for all loan-calendar errors."""


class LoanDataError(LoanCalendarError):
    """Raised when a loan or holiday record has the wrong structure."""


class ConfigurationError(LoanCalendarError):
    """Raised when configuration is invalid."""
