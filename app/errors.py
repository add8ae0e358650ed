# app/errors.py


class TypingTestError(Exception):
    """Base class for every error raised by the typing test core."""


class InvalidInput(TypingTestError, ValueError):
    """Rejected at the call boundary: empty text, unsupported mode, empty corpus."""


class OutOfRange(TypingTestError, IndexError):
    """advance/undo called outside the valid cursor bounds. State is left unchanged."""


class StorageError(TypingTestError):
    """Raised by the personal bests store when sqlite fails."""
