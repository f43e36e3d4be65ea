"""
Sampler exceptions.

Every exception raised here is fatal: it propagates out of the
scheduler to the bootstrap, which prints a diagnostic and exits.
Failures that latency plugins expect (unreachable targets, wrong
responses) are never raised, they are encoded as sentinel values.
"""
from typing import Any, Dict, List, Optional


class SamplerError(Exception):
    """
    Base exception for all sampler errors.

    All sampler exceptions inherit from this class so the bootstrap
    can handle them in a single place.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details
        }


class ConfigurationError(SamplerError):
    """
    Raised when the configuration file or a plugin block is invalid.

    Can carry the list of individual problems found while validating.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        instance: Optional[str] = None,
        errors: Optional[List[str]] = None
    ):
        self.instance = instance
        self.errors = errors or []
        details: Dict[str, Any] = {}
        if instance:
            details['instance'] = instance
        if self.errors:
            details['errors'] = self.errors
        super().__init__(
            message=message,
            code='CONFIGURATION_ERROR',
            details=details
        )


class SourceError(SamplerError):
    """Raised when a structurally required source cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        raw_value: Optional[str] = None
    ):
        self.source = source
        self.raw_value = raw_value
        details: Dict[str, Any] = {}
        if source is not None:
            details['source'] = source
        if raw_value is not None:
            details['raw_value'] = raw_value
        super().__init__(
            message=message,
            code='SOURCE_ERROR',
            details=details
        )


class ClockError(SamplerError):
    """Raised when the system clock reports a time before the unix epoch."""

    def __init__(self, message: str = "howdy fellow time traveler!"):
        super().__init__(message=message, code='CLOCK_ERROR')
