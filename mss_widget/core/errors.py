"""
Store exceptions.

Read paths never raise these; they degrade to defaults or empty results.
Write paths raise them and the API layer maps them to HTTP status codes.
"""


class StoreError(Exception):
    """Base exception for config and log store operations."""
    pass


class UnknownConfigKindError(StoreError):
    """Config kind is not registered."""
    pass


class ConfigWriteError(StoreError):
    """Writing a config document to the runtime tier failed."""
    pass


class LogWriteError(StoreError):
    """Appending to or rewriting a CSV log failed."""
    pass


class RowNotFoundError(StoreError):
    """The CSV log does not exist."""
    pass


class RowOutOfRangeError(StoreError):
    """Row id is not a valid index into the CSV log."""
    pass


class AnnotationError(StoreError):
    """Annotation request is invalid or could not be stored."""
    pass
