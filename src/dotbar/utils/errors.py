"""Custom exceptions for dotbar."""


class DotbarError(Exception):
    """Base exception for dotbar errors."""
    pass


class ConfigurationError(DotbarError):
    """Display configuration or glyph policy is invalid."""
    pass


class InvalidEventError(DotbarError):
    """Lifecycle event carried values the reporter cannot use."""
    pass
