"""Custom exceptions for Inbox Triage."""


class TriageError(Exception):
    """Base exception for all Inbox Triage errors."""


class DecodeError(TriageError):
    """Exception raised when a message part cannot be decoded."""


class FetchError(TriageError):
    """Exception raised when listing or fetching inbox messages fails."""


class GmailAPIError(FetchError):
    """Exception raised for Gmail API related errors."""


class ConfigurationError(TriageError):
    """Exception raised for configuration related errors."""


class AuthenticationError(TriageError):
    """Exception raised for authentication failures."""


class IngestionInProgressError(TriageError):
    """Exception raised when an ingestion is started while another is running."""


class UnknownActionError(TriageError):
    """Exception raised when a session is asked to dispatch an unknown action."""


class InvalidFilterError(TriageError):
    """Exception raised when filter criteria fail validation."""
