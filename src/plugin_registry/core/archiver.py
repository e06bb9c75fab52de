"""Turn a staged platform directory into a checksummed .tar.gz artifact."""

import hashlib
import logging
import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from plugin_registry.core.errors import ArchiveError

logger = logging.getLogger(__name__)

CHECKSUM_SUFFIX = ".sha256"


@dataclass(frozen=True)
class ArchiveResult:
    archive_path: Path
    checksum_path: Path
    checksum: str
    size: int


class _HashingWriter:
    """Write-through file wrapper that hashes every byte it passes on."""

    def __init__(self, fileobj: BinaryIO) -> None:
        self._fileobj = fileobj
        self._hasher = hashlib.sha256()
        self.bytes_written = 0

    def write(self, data: bytes) -> int:
        self._hasher.update(data)
        self.bytes_written += len(data)
        return self._fileobj.write(data)

    def flush(self) -> None:
        self._fileobj.flush()

    def hexdigest(self) -> str:
        return self._hasher.hexdigest()


def checksum_path_for(archive_path: Path) -> Path:
    return archive_path.with_name(archive_path.name + CHECKSUM_SUFFIX)


def _remove_partial(path: Path) -> None:
    if not path.is_file():
        return
    try:
        path.unlink()
    except OSError:
        logger.warning("could not remove partial file %s", path, exc_info=True)


def create_archive(staging_dir: Path, archive_path: Path) -> ArchiveResult:
    """Compress staging_dir into archive_path, write its checksum, remove staging_dir.

    Every regular file under staging_dir is stored under its path relative to
    staging_dir; directory entries are not stored. The checksum is the hex
    SHA-256 of the compressed bytes, computed while they are written, and is
    stored alone in `<archive>.sha256`.

    If anything fails before cleanup, the partial archive is removed and
    staging_dir is left intact for inspection.

    Raises:
        ArchiveError: If any file cannot be read or written, or cleanup fails
    """
    if not staging_dir.is_dir():
        raise ArchiveError(f"staging directory {staging_dir} does not exist")

    checksum_path = checksum_path_for(archive_path)
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        with archive_path.open("wb") as out_file:
            writer = _HashingWriter(out_file)
            with tarfile.open(fileobj=writer, mode="w:gz") as tar:  # type: ignore[call-overload]
                for path in sorted(staging_dir.rglob("*")):
                    if path.is_dir():
                        continue
                    tar.add(path, arcname=path.relative_to(staging_dir).as_posix(), recursive=False)
        checksum = writer.hexdigest()
        checksum_path.write_text(checksum, encoding="utf-8")
    except (OSError, tarfile.TarError) as e:
        _remove_partial(archive_path)
        _remove_partial(checksum_path)
        raise ArchiveError(f"failed to archive {staging_dir} into {archive_path}: {e}") from e

    logger.debug("archived %s (%d bytes, sha256 %s)", archive_path, writer.bytes_written, checksum)

    try:
        shutil.rmtree(staging_dir)
    except OSError as e:
        raise ArchiveError(f"failed to remove source directory {staging_dir}: {e}") from e

    return ArchiveResult(
        archive_path=archive_path,
        checksum_path=checksum_path,
        checksum=checksum,
        size=writer.bytes_written,
    )
