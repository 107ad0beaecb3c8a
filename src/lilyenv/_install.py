"""Tie version resolution, download, extraction and virtual environment creation together."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess  # noqa: S404
from shlex import quote
from typing import TYPE_CHECKING, Final

from ._download import ensure_cached, locked
from ._errors import FilesystemError, VenvCreationError
from ._extract import ArchiveFormat, extract
from ._matcher import resolve
from ._providers import provider_for
from ._release import Catalog
from ._version import Interpreter

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from pathlib import Path

    import requests

    from ._layout import Layout
    from ._providers import Provider
    from ._version import Version

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
TERMINFO_DIRS: Final[str] = "/etc/terminfo:/lib/terminfo:/usr/share/terminfo"


class Installer:
    """Installs interpreters and creates virtual environments under a :class:`Layout`."""

    def __init__(
        self,
        layout: Layout,
        session: requests.Session | None = None,
        *,
        newest: bool = False,
        provider_factory: Callable[[Interpreter], Provider] | None = None,
    ) -> None:
        self.layout = layout
        self.newest = newest
        self._session = session
        self._provider_factory = provider_factory

    def provider(self, family: Interpreter) -> Provider:
        if self._provider_factory is not None:
            return self._provider_factory(family)
        return provider_for(family, self._session, self.layout.target)

    def list_available(self, *families: Interpreter) -> Catalog:
        """Every release the providers of *families* (default: all) offer, sorted by version."""
        catalog = Catalog()
        for family in families or tuple(Interpreter):
            catalog.extend(self.provider(family).list())
        return catalog.sorted()

    def ensure_installed(self, requested: Version) -> Path:
        """
        Return the installation directory of *requested*, downloading and extracting it when missing.

        The directory is keyed by the requested version, so ``3.11`` and the ``3.11.2`` it resolves to are installed
        separately. An existing directory short-circuits everything, including the network.
        """
        installed = self.layout.installed_dir(requested)
        if installed.exists():
            _LOGGER.debug("%s already installed at %s", requested, installed)
            return installed
        with locked(installed):
            if installed.exists():
                return installed
            release = resolve(requested, self.provider(requested.family).list().releases, newest=self.newest)
            archive = ensure_cached(release, self.layout.downloads_dir, session=self._session)
            extract(archive, installed, ArchiveFormat.for_family(requested.family))
        _LOGGER.info("installed %s at %s", requested, installed)
        return installed

    def ensure_venv(self, requested: Version, project: str) -> Path:
        venv = self.layout.venv_dir(project, requested)
        if venv.exists():
            _LOGGER.debug("virtualenv %s already exists", venv)
            return venv
        self.ensure_installed(requested)
        python = self.layout.python_executable(requested)
        with locked(venv):
            if venv.exists():
                return venv
            self._create_venv(python, venv)
        return venv

    @staticmethod
    def _create_venv(python: Path, venv: Path) -> None:
        cmd = [str(python), "-m", "venv", str(venv)]
        _LOGGER.info("create virtualenv via cmd: %s", " ".join(quote(c) for c in cmd))
        try:
            process = subprocess.run(cmd, capture_output=True, text=True, check=False)  # noqa: S603
        except OSError as exc:
            raise FilesystemError(f"cannot run {python}: {exc}") from exc
        if process.returncode != 0:
            shutil.rmtree(venv, ignore_errors=True)
            msg = f"{python} failed to create {venv} with code {process.returncode}"
            if process.stderr:
                msg += f": {process.stderr.strip()}"
            raise VenvCreationError(msg)

    def activate(self, requested: Version, project: str, env: Mapping[str, str] | None = None) -> int:
        """Run an interactive shell inside the project's virtual environment and return its exit code."""
        venv = self.ensure_venv(requested, project)
        shell_env = activation_env(venv, project, requested, env)
        shell = shell_env.get("SHELL") or "bash"
        _LOGGER.info("activate %s in %s", venv, shell)
        try:
            return subprocess.run([shell], env=shell_env, check=False).returncode  # noqa: S603
        except OSError as exc:
            raise FilesystemError(f"cannot run {shell}: {exc}") from exc


def activation_env(venv: Path, project: str, version: Version, env: Mapping[str, str] | None = None) -> dict[str, str]:
    env = os.environ if env is None else env
    result = dict(env)
    bin_dir = str(venv / "bin")
    path = env.get("PATH")
    result["PATH"] = f"{bin_dir}{os.pathsep}{path}" if path else bin_dir
    result["VIRTUAL_ENV"] = str(venv)
    result["VIRTUAL_ENV_PROMPT"] = f"{project} ({version}) "
    result["TERMINFO_DIRS"] = TERMINFO_DIRS
    return result


__all__ = [
    "TERMINFO_DIRS",
    "Installer",
    "activation_env",
]
