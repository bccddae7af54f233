"""
Exception hierarchy for graphbase.

Capacity problems are not represented here: a negative capacity hint is
clamped and logged by the graph store.
"""

from typing import Optional


class GraphBaseError(Exception):
    """Base error for all graphbase errors."""

    def __init__(self, message: str, *, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class SerializationError(GraphBaseError):
    """A graph could not be encoded or its destination could not be written."""


class GBFormatError(GraphBaseError):
    """
    Malformed GB input.

    The message is prefixed with ``file:line`` when the position is known.
    """

    def __init__(self, reason: str, filename: Optional[str] = None,
                 lineno: Optional[int] = None, *, cause: Optional[Exception] = None):
        if filename is not None and lineno is not None:
            message = f"{filename}:{lineno} {reason}"
        elif lineno is not None:
            message = f"line {lineno}: {reason}"
        else:
            message = reason
        super().__init__(message, cause=cause)
        self.reason = reason
        self.filename = filename
        self.lineno = lineno


class GBChecksumError(GBFormatError):
    """The checksum line does not match the file contents."""


class UtilTypeError(GraphBaseError, ValueError):
    """A utility slot or value does not agree with the graph's util types."""
