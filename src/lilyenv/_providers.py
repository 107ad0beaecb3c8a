"""Release providers: python-build-standalone on GitHub for CPython and the PyPy download page for PyPy."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from html.parser import HTMLParser
from typing import TYPE_CHECKING, Final, Union

from ._errors import ReleaseParseError
from ._http import get, new_session
from ._platform import current_target
from ._release import Catalog, Release, ReleaseResult
from ._version import PYPY_DOWNLOAD_URL, Interpreter, parse_cpython_filename, parse_pypy_url

if TYPE_CHECKING:
    from collections.abc import Generator

    import requests

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

GITHUB_RELEASES_URL: Final[str] = "https://api.github.com/repos/indygreg/python-build-standalone/releases"
GITHUB_PAGE_SIZE: Final[int] = 100
# older releases use a naming scheme the filename grammar does not understand
CPYTHON_CREATED_AFTER: Final[datetime] = datetime(2022, 2, 26, tzinfo=timezone.utc)
CHECKSUM_SUFFIX: Final[str] = ".sha256"
INSTALL_ONLY_MARKER: Final[str] = "install_only"

PYPY_INDEX_URL: Final[str] = "https://www.pypy.org/download.html"
PYPY_PLATFORM_MARKER: Final[str] = "linux64"
_PYPY_LINK_PARENTS: Final[list[str]] = ["table", "tbody", "tr", "td", "p"]


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class CPythonProvider:
    """Lists install-only CPython builds for one target triple from the python-build-standalone releases."""

    family: Final[Interpreter] = Interpreter.CPYTHON

    def __init__(
        self,
        session: requests.Session | None = None,
        target: str | None = None,
        created_after: datetime = CPYTHON_CREATED_AFTER,
    ) -> None:
        self._session = new_session({"Accept": "application/vnd.github+json"}) if session is None else session
        self.target = current_target() if target is None else target
        self.created_after = created_after

    def _fetch(self) -> list[dict]:
        _LOGGER.info("list CPython releases from %s", GITHUB_RELEASES_URL)
        return get(self._session, GITHUB_RELEASES_URL, params={"per_page": GITHUB_PAGE_SIZE}).json()

    def iter_releases(self) -> Generator[ReleaseResult, None, None]:
        for release in self._fetch():
            created_at = release.get("created_at")
            if created_at is None or _parse_timestamp(created_at) <= self.created_after:
                continue
            assets = release.get("assets", [])
            checksums = {
                asset["name"][: -len(CHECKSUM_SUFFIX)]: asset["browser_download_url"]
                for asset in assets
                if asset["name"].endswith(CHECKSUM_SUFFIX)
            }
            for asset in assets:
                name = asset["name"]
                if name.endswith(CHECKSUM_SUFFIX) or self.target not in name or INSTALL_ONLY_MARKER not in name:
                    continue
                try:
                    release_tag, version = parse_cpython_filename(name)
                except ReleaseParseError as exc:
                    yield exc
                    continue
                yield Release(
                    display_name=name,
                    source_url=asset["browser_download_url"],
                    version=version,
                    release_tag=release_tag,
                    checksum_url=checksums.get(name),
                )

    def list(self) -> Catalog:
        return Catalog.collect(self.iter_releases())


class _PyPyLinkParser(HTMLParser):
    """Collect ``href`` of anchors matching ``table > tbody > tr > td > p > a``."""

    _VOID: Final[frozenset[str]] = frozenset({
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "wbr",
    })

    def __init__(self) -> None:
        super().__init__()
        self._stack: list[str] = []
        self.links: list[str] = []

    def _close_until(self, *boundaries: str, closing: frozenset[str]) -> None:
        while self._stack and self._stack[-1] not in boundaries and self._stack[-1] in closing:
            self._stack.pop()

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in self._VOID:
            return
        # implied end tags and the tbody an HTML5 parser inserts between table and tr
        if tag == "p" and self._stack and self._stack[-1] == "p":
            self._stack.pop()
        elif tag in {"td", "th"}:
            self._close_until("tr", "table", closing=frozenset({"td", "th", "p", "a"}))
        elif tag == "tr":
            self._close_until("tbody", "thead", "tfoot", "table", closing=frozenset({"tr", "td", "th", "p", "a"}))
            if self._stack and self._stack[-1] == "table":
                self._stack.append("tbody")
        if tag == "a" and self._stack[-len(_PYPY_LINK_PARENTS) :] == _PYPY_LINK_PARENTS:
            href = dict(attrs).get("href")
            if href is not None:
                self.links.append(href)
        self._stack.append(tag)

    def handle_endtag(self, tag: str) -> None:
        if tag not in self._stack:
            return
        while self._stack:
            if self._stack.pop() == tag:
                break


class PyPyProvider:
    """Lists 64-bit Linux PyPy builds linked from the PyPy download page."""

    family: Final[Interpreter] = Interpreter.PYPY

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = new_session() if session is None else session

    def _fetch(self) -> str:
        _LOGGER.info("list PyPy releases from %s", PYPY_INDEX_URL)
        return get(self._session, PYPY_INDEX_URL).text

    def iter_releases(self) -> Generator[ReleaseResult, None, None]:
        parser = _PyPyLinkParser()
        parser.feed(self._fetch())
        parser.close()
        for url in parser.links:
            if not url.startswith(PYPY_DOWNLOAD_URL) or PYPY_PLATFORM_MARKER not in url:
                continue
            try:
                name, release_tag, version = parse_pypy_url(url)
            except ReleaseParseError as exc:
                yield exc
                continue
            yield Release(display_name=name, source_url=url, version=version, release_tag=release_tag)

    def list(self) -> Catalog:
        return Catalog.collect(self.iter_releases())


Provider = Union[CPythonProvider, PyPyProvider]


def provider_for(
    family: Interpreter,
    session: requests.Session | None = None,
    target: str | None = None,
) -> Provider:
    if family is Interpreter.PYPY:
        return PyPyProvider(session)
    return CPythonProvider(session, target)


__all__ = [
    "CPythonProvider",
    "Provider",
    "PyPyProvider",
    "provider_for",
]
