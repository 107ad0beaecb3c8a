"""Unpack cached archives into installation directories."""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
from enum import Enum
from pathlib import Path
from typing import Final

from ._errors import FilesystemError
from ._version import Interpreter

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
# keep permissions as stored, refuse absolute paths and members escaping the destination
_EXTRACT_KW = {"filter": "tar"} if hasattr(tarfile, "tar_filter") else {}


class ArchiveFormat(Enum):
    GZIP_TAR = "r:gz"
    BZIP2_TAR = "r:bz2"

    @classmethod
    def for_family(cls, family: Interpreter) -> ArchiveFormat:
        return cls.BZIP2_TAR if family is Interpreter.PYPY else cls.GZIP_TAR


def extract(archive: Path, target_dir: Path, fmt: ArchiveFormat) -> None:
    """
    Unpack *archive* into *target_dir*.

    The format is picked by the caller from the interpreter family, the file content is not sniffed. Members are
    unpacked into a temporary sibling of *target_dir* which is renamed into place once complete.
    """
    _LOGGER.info("extract %s into %s", archive, target_dir)
    try:
        target_dir.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(dir=target_dir.parent, prefix=f".{target_dir.name}.", suffix=".part"))
        try:
            with tarfile.open(archive, fmt.value) as tar:
                tar.extractall(staging, **_EXTRACT_KW)
            staging.chmod(0o755)
            staging.replace(target_dir)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)
    except (OSError, tarfile.TarError) as exc:
        raise FilesystemError(f"cannot extract {archive}: {exc}") from exc


__all__ = [
    "ArchiveFormat",
    "extract",
]
