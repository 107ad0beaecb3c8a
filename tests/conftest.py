from __future__ import annotations

import io
import json
import tarfile
from typing import TYPE_CHECKING, Any

import pytest
import requests

from lilyenv import Layout

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping
    from pathlib import Path


class FakeResponse:
    def __init__(self, url: str, body: bytes, status_code: int = 200) -> None:
        self.url = url
        self.content = body
        self.status_code = status_code
        self.closed = False

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.content)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:  # noqa: PLR2004
            msg = f"{self.status_code} Client Error for url: {self.url}"
            raise requests.HTTPError(msg)

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        for at in range(0, len(self.content), chunk_size):
            yield self.content[at : at + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Serve canned bodies per URL and record every request made."""

    def __init__(self, routes: Mapping[str, bytes | str | int | Exception] | None = None) -> None:
        self.routes: dict[str, bytes | str | int | Exception] = dict(routes or {})
        self.calls: list[str] = []
        self.kwargs: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        self.kwargs.append(kwargs)
        if url not in self.routes:
            return FakeResponse(url, b"", status_code=404)
        body = self.routes[url]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, int):
            return FakeResponse(url, b"", status_code=body)
        return FakeResponse(url, body.encode("utf-8") if isinstance(body, str) else body)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def layout(tmp_path: Path) -> Layout:
    return Layout(data_dir=tmp_path / "data", cache_dir=tmp_path / "cache", target="x86_64-unknown-linux-gnu")


def _tar_bytes(mode: str, top: str, files: Mapping[str, tuple[bytes, int]]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as tar:
        folder = tarfile.TarInfo(top)
        folder.type = tarfile.DIRTYPE
        folder.mode = 0o755
        tar.addfile(folder)
        for name, (content, file_mode) in files.items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(content)
            info.mode = file_mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def make_tar() -> Callable[..., bytes]:
    """Build an in-memory tar (``w:gz`` or ``w:bz2``) holding a single top-level directory."""

    def _make(mode: str = "w:gz", top: str = "python", files: Mapping[str, tuple[bytes, int]] | None = None) -> bytes:
        files = {"bin/python3": (b"#!/bin/sh\n", 0o755)} if files is None else files
        return _tar_bytes(mode, top, files)

    return _make
