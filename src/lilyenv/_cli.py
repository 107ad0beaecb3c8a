"""Command line interface of lilyenv."""

from __future__ import annotations

import logging
import pkgutil
import sys
from argparse import ArgumentParser, Namespace
from typing import TYPE_CHECKING, Final

from ._errors import LilyenvError
from ._install import Installer
from ._layout import Layout
from ._version import Version

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="lilyenv", description="Manage standalone Python interpreters and virtualenvs.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="increase logging verbosity")
    parser.add_argument(
        "--newest",
        action="store_true",
        help="pick the newest compatible patch release instead of the first one listed upstream",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    activate = sub.add_parser("activate", help="Activate a virtualenv given a Python version and a Project string")
    activate.add_argument("version")
    activate.add_argument("project")

    virtualenv = sub.add_parser("virtualenv", help="Create a virtualenv given a Python version and a Project string")
    virtualenv.add_argument("version")
    virtualenv.add_argument("project")

    download = sub.add_parser(
        "download",
        help="Download a specific Python version or list all Python versions available to download",
    )
    download.add_argument("version", nargs="?")

    sub.add_parser("shell-config", help="Show information to include in a shell config file")
    return parser


def shell_config() -> str:
    data = pkgutil.get_data(__package__ or __name__, "bash_config")
    if data is None:  # pragma: no cover
        msg = "cannot locate the bash_config snippet"
        raise FileNotFoundError(msg)
    return data.decode("utf-8")


def _setup_logging(verbose: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _run(args: Namespace, env: Mapping[str, str] | None) -> int:
    if args.cmd == "shell-config":
        sys.stdout.write(shell_config())
        return 0
    installer = Installer(Layout.from_env(env), newest=args.newest)
    if args.cmd == "download":
        if args.version is None:
            for release in installer.list_available().releases:
                sys.stdout.write(f"{release}\n")
            return 0
        installer.ensure_installed(Version.from_string(args.version))
        return 0
    version = Version.from_string(args.version)
    if args.cmd == "virtualenv":
        installer.ensure_venv(version, args.project)
        return 0
    return installer.activate(version, args.project, env)


def main(argv: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return _run(args, env)
    except LilyenvError as exc:
        _LOGGER.debug("command %s failed", args.cmd, exc_info=True)
        sys.stderr.write(f"{exc}\n")
        return 1


__all__ = [
    "build_parser",
    "main",
    "shell_config",
]
