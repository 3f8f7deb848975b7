"""
Exception hierarchy for Infinite Note.
"""


class InfiniteNoteError(Exception):
    """Base class for all application errors."""


class InitializationError(InfiniteNoteError):
    """A required rendering surface was not available at startup."""


class CorruptSessionError(InfiniteNoteError):
    """Persisted session state could not be parsed."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt session value for '{key}': {reason}")
        self.key = key
        self.reason = reason


class ExportError(InfiniteNoteError):
    """The drawing could not be rasterized or encoded."""


class ShareRejected(InfiniteNoteError):
    """The share target declined or aborted the share action."""


__all__ = [
    'InfiniteNoteError',
    'InitializationError',
    'CorruptSessionError',
    'ExportError',
    'ShareRejected',
]
