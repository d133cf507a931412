"""
pawjournal exception hierarchy.

All pawjournal exceptions inherit from PawJournalError, making it easy for
callers to catch library-level errors while still distinguishing specific
failure modes.  The analytics functions never raise these; only the I/O
adjacent collaborators (store, assistant, config loading) do.
"""

DEFAULT_ASSISTANT_MESSAGE = "Unable to reach the assistant. Please try again."


class PawJournalError(Exception):
    """Base exception class for all pawjournal errors."""


class ConfigurationError(PawJournalError):
    """Raised for configuration errors (missing keys, invalid values)."""


class PersistenceError(PawJournalError):
    """Raised by stores when a write cannot be completed."""


class AssistantError(PawJournalError):
    """Raised when the remote assistant call fails.

    ``user_message`` is safe to show as-is; the exception text keeps the
    underlying cause for logs.
    """

    def __init__(self, message: str = "", user_message: str = DEFAULT_ASSISTANT_MESSAGE):
        super().__init__(message or user_message)
        self.user_message = user_message
