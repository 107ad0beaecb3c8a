"""Download standalone Python interpreters and manage per-project virtual environments."""

from __future__ import annotations

from importlib.metadata import version

from ._download import ensure_cached
from ._errors import (
    ChecksumMismatchError,
    FilesystemError,
    InvalidVersionError,
    LilyenvError,
    ReleaseParseError,
    RequestError,
    VenvCreationError,
    VersionNotFoundError,
)
from ._extract import ArchiveFormat, extract
from ._install import Installer, activation_env
from ._layout import Layout
from ._matcher import resolve
from ._providers import CPythonProvider, PyPyProvider, provider_for
from ._release import Catalog, Release
from ._version import Interpreter, Version, parse_cpython_filename, parse_pypy_url

__version__ = version("lilyenv")

__all__ = [
    "ArchiveFormat",
    "CPythonProvider",
    "Catalog",
    "ChecksumMismatchError",
    "FilesystemError",
    "Installer",
    "Interpreter",
    "InvalidVersionError",
    "Layout",
    "LilyenvError",
    "PyPyProvider",
    "Release",
    "ReleaseParseError",
    "RequestError",
    "VenvCreationError",
    "Version",
    "VersionNotFoundError",
    "__version__",
    "activation_env",
    "ensure_cached",
    "extract",
    "parse_cpython_filename",
    "parse_pypy_url",
    "provider_for",
    "resolve",
]
