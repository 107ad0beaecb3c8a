"""Fetch release archives into the download cache."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import TYPE_CHECKING, Final

import requests
from filelock import FileLock

from ._errors import ChecksumMismatchError, FilesystemError, RequestError
from ._http import get, new_session

if TYPE_CHECKING:
    from collections.abc import Generator

    from ._release import Release

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
CHUNK_SIZE: Final[int] = 1 << 16


@contextmanager
def locked(target: Path) -> Generator[None]:
    """Hold an inter-process lock next to *target* while the block runs."""
    lock_path = target.with_name(f"{target.name}.lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with FileLock(str(lock_path)):
        yield


def _expected_checksum(session: requests.Session, url: str) -> str:
    text = get(session, url).text.strip()
    if not text:
        msg = f"empty checksum file at {url}"
        raise RequestError(msg)
    return text.split()[0].lower()


def _stream_to(session: requests.Session, url: str, target: Path) -> str:
    """Write the body of *url* to *target* and return its SHA-256 hex digest."""
    digest = hashlib.sha256()
    response = get(session, url, stream=True)
    try:
        with target.open("wb") as handle:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                digest.update(chunk)
                handle.write(chunk)
    except requests.RequestException as exc:
        raise RequestError(str(exc)) from exc
    finally:
        response.close()
    return digest.hexdigest()


def ensure_cached(release: Release, cache_dir: Path, *, session: requests.Session | None = None) -> Path:
    """
    Return the cached archive of *release*, downloading it when missing.

    An existing file under the release's display name is a cache hit. Downloads land in a temporary file renamed into
    place once complete (and checksum verified, when the provider published one).
    """
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        target = cache_dir / release.display_name
        with locked(target):
            if target.exists():
                _LOGGER.debug("cache hit for %s at %s", release.display_name, target)
                return target
            session = new_session() if session is None else session
            expected = None if release.checksum_url is None else _expected_checksum(session, release.checksum_url)
            fd, tmp_name = tempfile.mkstemp(dir=cache_dir, prefix=f".{release.display_name}.", suffix=".part")
            os.close(fd)
            tmp = Path(tmp_name)
            try:
                _LOGGER.info("download %s from %s", release.display_name, release.source_url)
                actual = _stream_to(session, release.source_url, tmp)
                if expected is not None and actual != expected:
                    raise ChecksumMismatchError(release.display_name, expected, actual)
                tmp.replace(target)
            finally:
                with suppress(OSError):
                    tmp.unlink()
    except OSError as exc:
        raise FilesystemError(str(exc)) from exc
    _LOGGER.debug("cached %s at %s", release.display_name, target)
    return target


__all__ = [
    "ensure_cached",
    "locked",
]
