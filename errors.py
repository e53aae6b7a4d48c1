# errors.py - exceptions raised by the triage pipeline


class AssistantError(Exception):
    """Base class for errors the assistant reports to its caller."""


class ValidationError(AssistantError):
    """The request payload was rejected before classification."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class StorageError(AssistantError):
    """A knowledge read or a conversation write failed."""
