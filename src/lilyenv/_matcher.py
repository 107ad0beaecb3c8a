"""Pick the release satisfying a requested version from a provider catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from ._errors import VersionNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._release import Release
    from ._version import Version

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


def resolve(requested: Version, releases: Iterable[Release], *, newest: bool = False) -> Release:
    """
    Pick the release satisfying *requested*.

    By default the first compatible release in catalog order wins. With *newest* the greatest compatible version is
    chosen instead, earlier catalog entries winning ties.
    """
    compatible = (release for release in releases if release.version.compatible(requested))
    if newest:
        chosen = None
        for release in compatible:
            if chosen is None or release.version > chosen.version:
                chosen = release
    else:
        chosen = next(compatible, None)
    if chosen is None:
        raise VersionNotFoundError(str(requested))
    _LOGGER.info("resolved %s to %s", requested, chosen.display_name)
    return chosen


__all__ = [
    "resolve",
]
