"""Exception hierarchy for Apt-List-Parser.

Line-level parse failures are data, not errors: the classifier turns
``EntryParseError`` into a ``Malformed`` line. Only I/O-level problems
(``SourceReadError``, ``SourceWriteError``) propagate out of a scan or a
write-back.
"""

from typing import Optional


class SourceError(Exception):
    """Base exception for all package-specific errors."""


# --- Parse errors ---


class EntryParseError(SourceError):
    """Raised when a line does not match the one-line entry grammar."""


class MissingField(EntryParseError):
    """Raised when a required field of an entry is absent."""

    def __init__(self, field: str):
        super().__init__(f"missing field in apt source list: '{field}'")
        self.field = field


class InvalidValue(EntryParseError):
    """Raised when a field holds a value that is not allowed."""

    def __init__(self, field: str, value: str):
        super().__init__(
            f"invalid field in apt source list: '{value}' is invalid for '{field}'"
        )
        self.field = field
        self.value = value


# --- I/O errors ---


class SourceReadError(SourceError):
    """Raised when a list file cannot be opened, read or decoded."""

    def __init__(self, path: str, reason: Optional[BaseException] = None):
        message = f"failed to read {path}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
        self.reason = reason


class SourceNotFound(SourceError):
    """Raised when a list path is not part of the scanned sources."""

    def __init__(self, path: str):
        super().__init__(f"apt source list not found: {path}")
        self.path = path


class SourceWriteError(SourceError):
    """Raised when a list file cannot be written back; earlier writes are restored."""

    def __init__(self, path: str, reason: Optional[BaseException] = None):
        message = f"failed to write {path}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
        self.reason = reason
