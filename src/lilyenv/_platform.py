"""Detect the target triple python-build-standalone uses for the running platform."""

from __future__ import annotations

import functools
import logging
import platform
import sys
from typing import Final

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


def normalize_isa(isa: str) -> str:
    low = isa.lower()
    return {"amd64": "x86_64", "arm64": "aarch64", "i386": "i686", "x86": "i686"}.get(low, low)


def _linux_abi() -> str:
    libc, _ = platform.libc_ver()
    return "gnu" if libc == "glibc" else "musl"


@functools.lru_cache(maxsize=1)
def current_target() -> str:
    """Return the triple (e.g. ``x86_64-unknown-linux-gnu``) of the interpreter running this code."""
    isa = normalize_isa(platform.machine() or "unknown")
    if sys.platform == "darwin":
        target = f"{isa}-apple-darwin"
    elif sys.platform == "win32":  # pragma: win32 cover
        target = f"{isa}-pc-windows-msvc"
    else:
        target = f"{isa}-unknown-linux-{_linux_abi()}"
    _LOGGER.debug("running on target %s", target)
    return target


__all__ = [
    "current_target",
    "normalize_isa",
]
