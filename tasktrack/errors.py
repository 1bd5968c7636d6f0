"""Error types raised by tasktrack."""


class TaskTrackError(Exception):
    """Base class for tasktrack errors."""


class ValidationError(TaskTrackError, ValueError):
    """Input was malformed: bad import document, missing field, wrong type or empty title."""


class NotFoundError(TaskTrackError, LookupError):
    """A referenced task or subtask does not exist."""


class SerializationError(TaskTrackError):
    """The persistence blob could not be decoded."""
