"""Custom exceptions for Event Scout."""


class EventScoutError(Exception):
    """Base exception for all Event Scout errors."""


class ConfigurationError(EventScoutError):
    """Exception raised for configuration related errors."""


class GenerationError(EventScoutError):
    """Exception raised when a model generation call fails."""


class ExtractionError(EventScoutError):
    """Exception raised when no JSON value can be recovered from model output."""


class ValidationError(EventScoutError):
    """Exception raised for data validation errors."""


class ToolError(EventScoutError):
    """Base exception for search/scrape tool failures."""


class ToolTransportError(ToolError):
    """Exception raised when the transport to the tool server is unusable."""


class ToolInvocationError(ToolError):
    """Exception raised when a tool reports an error result."""


class ToolNotFoundError(ToolError):
    """Exception raised when the tool server does not expose a requested tool."""
