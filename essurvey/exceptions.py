"""
Defines custom exceptions for the package to allow for more specific error handling.
"""


class ESSurveyError(Exception):
    """Base exception for all package-specific errors."""


class ValidationError(ESSurveyError):
    """Raised when requested rounds, formats or directories are invalid."""


class AuthenticationError(ESSurveyError):
    """Raised when no email is available or the ESS portal rejects it."""


class NetworkError(ESSurveyError):
    """Raised when a file cannot be fetched from the ESS portal."""


class ArchiveError(ESSurveyError):
    """Raised when a downloaded archive is corrupt or not a zip file."""


class ParseError(ESSurveyError):
    """
    Raised when no reader could parse the data files of a round.

    The ``attempts`` attribute lists every reader that was tried, in order.
    """

    def __init__(self, message: str, attempts: list | None = None):
        super().__init__(message)
        self.attempts = attempts or []


class ConfigurationError(ESSurveyError):
    """Raised for issues related to configuration loading or validation."""
