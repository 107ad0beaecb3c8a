"""On-disk layout of downloads, installed interpreters and virtual environments."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from platformdirs import user_cache_path, user_data_path

from ._errors import FilesystemError
from ._platform import current_target

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._version import Version

_DC_KW = {"frozen": True, "slots": True} if sys.version_info >= (3, 10) else {"frozen": True}
_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
APP_NAME: Final[str] = "lilyenv"


@dataclass(**_DC_KW)
class Layout:
    """Base directories and platform target shared by every installation step."""

    data_dir: Path
    cache_dir: Path
    target: str

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Layout:
        """Build the layout from ``LILYENV_DATA_DIR``, ``LILYENV_CACHE_DIR`` and ``LILYENV_TARGET`` or defaults."""
        env = os.environ if env is None else env
        if data_dir := env.get("LILYENV_DATA_DIR"):
            data_path = Path(data_dir).expanduser()
        else:
            data_path = user_data_path(APP_NAME, appauthor=False)
        if cache_dir := env.get("LILYENV_CACHE_DIR"):
            cache_path = Path(cache_dir).expanduser()
        else:
            cache_path = user_cache_path(APP_NAME, appauthor=False)
        layout = cls(data_dir=data_path, cache_dir=cache_path, target=env.get("LILYENV_TARGET") or current_target())
        _LOGGER.debug("using %r", layout)
        return layout

    @property
    def pythons_dir(self) -> Path:
        return self.data_dir / "pythons"

    @property
    def downloads_dir(self) -> Path:
        return self.cache_dir / "downloads"

    def installed_dir(self, version: Version) -> Path:
        return self.pythons_dir / str(version)

    def venv_dir(self, project: str, version: Version) -> Path:
        return self.data_dir / "virtualenvs" / project / str(version)

    def is_installed(self, version: Version) -> bool:
        return self.installed_dir(version).exists()

    def python_executable(self, version: Version) -> Path:
        """Locate the interpreter inside the single top-level entry the archive unpacked into."""
        installed = self.installed_dir(version)
        try:
            entry = next(iter(sorted(installed.iterdir())), None)
        except OSError as exc:
            raise FilesystemError(str(exc)) from exc
        if entry is None:
            msg = f"installation at {installed} is empty"
            raise FilesystemError(msg)
        return entry / "bin" / "python3"


__all__ = [
    "APP_NAME",
    "Layout",
]
