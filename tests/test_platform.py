from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from lilyenv._platform import current_target, normalize_isa

if TYPE_CHECKING:
    from collections.abc import Generator

    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def _clear_target_cache() -> Generator[None]:
    current_target.cache_clear()
    yield
    current_target.cache_clear()


@pytest.mark.parametrize(
    ("isa", "expected"),
    [("AMD64", "x86_64"), ("arm64", "aarch64"), ("aarch64", "aarch64"), ("i386", "i686"), ("ppc64le", "ppc64le")],
)
def test_normalize_isa(isa: str, expected: str) -> None:
    assert normalize_isa(isa) == expected


def test_current_target_linux_gnu(mocker: MockerFixture) -> None:
    mocker.patch("lilyenv._platform.sys.platform", "linux")
    mocker.patch("lilyenv._platform.platform.machine", return_value="x86_64")
    mocker.patch("lilyenv._platform.platform.libc_ver", return_value=("glibc", "2.36"))
    assert current_target() == "x86_64-unknown-linux-gnu"


def test_current_target_linux_musl(mocker: MockerFixture) -> None:
    mocker.patch("lilyenv._platform.sys.platform", "linux")
    mocker.patch("lilyenv._platform.platform.machine", return_value="aarch64")
    mocker.patch("lilyenv._platform.platform.libc_ver", return_value=("", ""))
    assert current_target() == "aarch64-unknown-linux-musl"


def test_current_target_macos(mocker: MockerFixture) -> None:
    mocker.patch("lilyenv._platform.sys.platform", "darwin")
    mocker.patch("lilyenv._platform.platform.machine", return_value="arm64")
    assert current_target() == "aarch64-apple-darwin"
