"""Errors raised while resolving, downloading and installing interpreters."""

from __future__ import annotations


class LilyenvError(Exception):
    """Base class of every error surfaced to the command line."""


class RequestError(LilyenvError):
    """A network or transport failure."""


class FilesystemError(LilyenvError):
    """A local I/O failure."""


class VersionNotFoundError(LilyenvError):
    def __init__(self, requested: str) -> None:
        super().__init__(f"Could not find {requested} to download.")
        self.requested = requested


class InvalidVersionError(LilyenvError, ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f"{text} is not a valid Python version")
        self.text = text


class ReleaseParseError(LilyenvError, ValueError):
    """An upstream catalog entry that does not follow the expected naming grammar."""

    def __init__(self, entry: str) -> None:
        super().__init__(f"cannot parse release entry {entry!r}")
        self.entry = entry


class ChecksumMismatchError(LilyenvError):
    def __init__(self, name: str, expected: str, actual: str) -> None:
        super().__init__(f"checksum mismatch for {name}: expected {expected}, got {actual}")
        self.name = name
        self.expected = expected
        self.actual = actual


class VenvCreationError(LilyenvError):
    """The installed interpreter failed to create a virtual environment."""


__all__ = [
    "ChecksumMismatchError",
    "FilesystemError",
    "InvalidVersionError",
    "LilyenvError",
    "ReleaseParseError",
    "RequestError",
    "VenvCreationError",
    "VersionNotFoundError",
]
