"""Exception hierarchy for the volume navigation core.

Every failure surfaced by this package is an ``HFSNavError`` subclass so
callers can present it without knowing which layer produced it.
"""

from __future__ import annotations

from dataclasses import dataclass


class HFSNavError(Exception):
    """Base exception for all volume navigation errors."""


class VolumeClosedError(HFSNavError):
    """Raised when an operation is attempted after the session was closed."""


class NotFoundError(HFSNavError):
    """Raised when a listing or attribute lookup hits a vanished path."""


class InvalidArgumentError(HFSNavError):
    """Raised for rejected input, e.g. no partition candidates at all."""


class IOFailureError(HFSNavError):
    """Raised when the access engine fails a read or write.

    The engine-native exception is kept on ``cause`` and chained.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidDropError(HFSNavError):
    """Raised when a move/copy targets the source itself or its subtree."""


@dataclass(frozen=True)
class NameConflict:
    """An existing entry that collides with an incoming name.

    Not an error: callers resolve it through a replace decision.
    """

    directory: str
    incoming_name: str
    existing_name: str
    existing_is_directory: bool


__all__ = [
    "HFSNavError",
    "VolumeClosedError",
    "NotFoundError",
    "InvalidArgumentError",
    "IOFailureError",
    "InvalidDropError",
    "NameConflict",
]
