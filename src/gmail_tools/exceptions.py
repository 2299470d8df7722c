"""Custom exceptions for Gmail Tools."""


class GmailToolsError(Exception):
    """Base exception for all Gmail Tools errors."""


class GmailAPIError(GmailToolsError):
    """Exception raised for Gmail API related errors."""


class ConfigurationError(GmailToolsError):
    """Exception raised for configuration related errors."""


class AuthenticationError(GmailToolsError):
    """Exception raised for authentication failures."""


class ValidationError(GmailToolsError):
    """Exception raised when search parameters or outgoing mail fields are invalid."""


class ToolError(GmailToolsError):
    """Exception raised for unknown tools or malformed tool arguments."""
