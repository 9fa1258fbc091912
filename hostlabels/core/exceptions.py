"""Exception types raised by hostlabels."""

from typing import Optional


class LabelError(Exception):
    """Base exception for hostlabels errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class LabelFileError(LabelError):
    """A label file exists but could not be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Cannot read label file {path}: {reason}",
            details={"path": path},
        )
        self.path = path


class LabelBufferOverflowError(LabelError):
    """Rendered labels do not fit in the output capacity.

    Any text produced before the overflow is discarded.
    """

    def __init__(self, capacity: int, length: int):
        super().__init__(
            "Formatted labels exceed output capacity",
            details={"capacity": capacity, "length": length},
        )
        self.capacity = capacity
        self.length = length


class LabelExpansionOverflowError(LabelBufferOverflowError):
    """A single label value does not fit in the expansion buffer."""

    def __init__(self, key: str, max_length: int, partial: str):
        super().__init__(max_length, max_length)
        self.message = f"Expanded value of label {key!r} exceeds expansion capacity"
        self.args = (self.message,)
        self.details["key"] = key
        self.key = key
        self.partial = partial
