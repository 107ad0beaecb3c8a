"""Interpreter versions, their textual grammars and the compatibility relation between them."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from ._errors import InvalidVersionError, ReleaseParseError

_DC_KW = {"frozen": True, "slots": True} if sys.version_info >= (3, 10) else {"frozen": True}

PYPY_DOWNLOAD_URL: Final[str] = "https://downloads.python.org/pypy/"
_COMPONENT_MAX: Final[int] = 255

_USER_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    (?P<impl>pypy)?             # alternate family tag
    (?P<major>[0-9]+)
    \.(?P<minor>[0-9]+)
    (?:\.(?P<patch>[0-9]+))?    # optional patch, a wildcard when missing
    """,
    re.VERBOSE,
)
_CPYTHON_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    cpython-
    (?P<major>[0-9]+)
    \.(?P<minor>[0-9]+)
    \.(?P<patch>[0-9]+)
    \+(?P<tag>[0-9]+)           # build date of the release, e.g. 20230116
    """,
    re.VERBOSE,
)
_PYPY_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    pypy
    (?P<major>[0-9]+)
    \.(?P<minor>[0-9]+)
    -(?P<tag>[^-]*)-            # PyPy release, e.g. v7.3.11
    """,
    re.VERBOSE,
)


class Interpreter(IntEnum):
    """Interpreter family; the declaration order is the sort order."""

    CPYTHON = 0
    PYPY = 1

    @property
    def prefix(self) -> str:
        return "pypy" if self is Interpreter.PYPY else ""


def _component(text: str, source: str, error: type[ValueError]) -> int:
    value = int(text)
    if value > _COMPONENT_MAX:
        raise error(source)
    return value


@dataclass(**_DC_KW)
class Version:
    """Identity of an interpreter build: family, major, minor and an optional patch."""

    family: Interpreter
    major: int
    minor: int
    patch: int | None = None

    @classmethod
    def from_string(cls, text: str) -> Version:
        """Parse user input such as ``3.11``, ``3.11.2`` or ``pypy3.9``."""
        if not (match := _USER_RE.fullmatch(text)):
            raise InvalidVersionError(text)
        patch = match.group("patch")
        return cls(
            family=Interpreter.PYPY if match.group("impl") else Interpreter.CPYTHON,
            major=_component(match.group("major"), text, InvalidVersionError),
            minor=_component(match.group("minor"), text, InvalidVersionError),
            patch=None if patch is None else _component(patch, text, InvalidVersionError),
        )

    def compatible(self, requested: Version) -> bool:
        """
        Check whether this candidate release satisfies *requested*.

        A request without a patch level accepts every patch of the same family, major and minor. A request with a
        patch level only accepts the identical version, so the relation is not symmetric.
        """
        if self == requested:
            return True
        return (
            self.family == requested.family
            and self.major == requested.major
            and self.minor == requested.minor
            and requested.patch is None
        )

    @property
    def _sort_key(self) -> tuple[int, int, int, int]:
        return self.family.value, self.major, self.minor, -1 if self.patch is None else self.patch

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key < other._sort_key

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key <= other._sort_key

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key > other._sort_key

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key >= other._sort_key

    def __str__(self) -> str:
        base = f"{self.family.prefix}{self.major}.{self.minor}"
        return base if self.patch is None else f"{base}.{self.patch}"


def parse_cpython_filename(name: str) -> tuple[str, Version]:
    """Parse a python-build-standalone asset name into its release tag and version."""
    if not (match := _CPYTHON_RE.match(name)):
        raise ReleaseParseError(name)
    version = Version(
        family=Interpreter.CPYTHON,
        major=_component(match.group("major"), name, ReleaseParseError),
        minor=_component(match.group("minor"), name, ReleaseParseError),
        patch=_component(match.group("patch"), name, ReleaseParseError),
    )
    return match.group("tag"), version


def parse_pypy_url(url: str) -> tuple[str, str, Version]:
    """Parse a PyPy download link into its file name, release tag and (patch-less) version."""
    if not url.startswith(PYPY_DOWNLOAD_URL):
        raise ReleaseParseError(url)
    filename = url[len(PYPY_DOWNLOAD_URL) :]
    if not (match := _PYPY_RE.match(filename)):
        raise ReleaseParseError(url)
    version = Version(
        family=Interpreter.PYPY,
        major=_component(match.group("major"), url, ReleaseParseError),
        minor=_component(match.group("minor"), url, ReleaseParseError),
    )
    return filename, match.group("tag"), version


__all__ = [
    "PYPY_DOWNLOAD_URL",
    "Interpreter",
    "Version",
    "parse_cpython_filename",
    "parse_pypy_url",
]
