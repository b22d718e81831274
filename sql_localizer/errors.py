"""
Exceptions raised by the localizer.
"""


class LocalizerError(Exception):
    """Base exception for the localizer."""
    pass


class ServiceError(LocalizerError):
    """Raised when the text-generation service fails or returns garbage."""
    pass


class ServiceNotConfigured(ServiceError):
    """Raised when a real client is requested without an API key."""
    pass
