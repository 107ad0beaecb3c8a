"""Downloadable interpreter distributions as listed by a release provider."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Union

from ._errors import ReleaseParseError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._version import Version

_DC_KW = {"frozen": True, "slots": True} if sys.version_info >= (3, 10) else {"frozen": True}
_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


@dataclass(**_DC_KW)
class Release:
    """One downloadable archive of an interpreter build."""

    display_name: str
    source_url: str
    version: Version
    release_tag: str
    checksum_url: str | None = None

    def __str__(self) -> str:
        return f"{self.version} ({self.release_tag})"


ReleaseResult = Union[Release, ReleaseParseError]


@dataclass
class Catalog:
    """Usable releases of a provider listing, with the entries that failed to parse kept alongside."""

    releases: list[Release] = field(default_factory=list)
    errors: list[ReleaseParseError] = field(default_factory=list)

    @classmethod
    def collect(cls, results: Iterable[ReleaseResult]) -> Catalog:
        catalog = cls()
        for result in results:
            if isinstance(result, ReleaseParseError):
                _LOGGER.warning("skipping release entry: %s", result)
                catalog.errors.append(result)
            else:
                catalog.releases.append(result)
        return catalog

    def extend(self, other: Catalog) -> None:
        self.releases.extend(other.releases)
        self.errors.extend(other.errors)

    def sorted(self) -> Catalog:
        return Catalog(sorted(self.releases, key=lambda release: release.version), list(self.errors))


__all__ = [
    "Catalog",
    "Release",
    "ReleaseResult",
]
