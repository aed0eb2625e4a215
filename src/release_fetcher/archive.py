"""Streaming extraction of gzip-compressed tar archives."""

import gzip
import logging
import os
import shutil
import tarfile
import zlib
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .errors import CorruptArchiveError, ExtractError, UnsafeArchiveEntryError

logger = logging.getLogger(__name__)

# errors raised by tarfile/gzip/zlib when the stream itself is bad
_CORRUPT_ERRORS = (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile)

DIRECTORY_MODE = 0o755


def _safe_target(root: Path, name: str) -> Path:
    """Join ``name`` under ``root``, refusing paths that resolve outside it."""
    target = Path(os.path.realpath(os.path.join(root, name)))
    if target != root and root not in target.parents:
        raise UnsafeArchiveEntryError(
            f"archive entry '{name}' resolves outside {root}"
        )
    return target


def _write_member(archive: tarfile.TarFile, member: tarfile.TarInfo, target: Path) -> None:
    mode = member.mode & 0o777
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(target, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, mode)
    except OSError as e:
        raise ExtractError(f"failed to create {target}: {e}") from e

    # one handle at a time: closed before the next member is read
    with os.fdopen(fd, "wb") as out:
        payload = archive.extractfile(member)
        if payload is not None:
            try:
                shutil.copyfileobj(payload, out)
            except _CORRUPT_ERRORS as e:
                raise CorruptArchiveError(f"failed to read '{member.name}': {e}") from e
            except OSError as e:
                raise ExtractError(f"failed to write {target}: {e}") from e

    try:
        os.chmod(target, mode)
    except OSError as e:
        raise ExtractError(f"failed to set mode on {target}: {e}") from e


def _read_member(archive: tarfile.TarFile) -> Optional[tarfile.TarInfo]:
    """
    Read the next header from a streaming archive.

    ``TarFile.next`` treats a damaged header past the first member as the end
    of the archive, so headers are parsed here instead.

    Returns:
        The next member, or None at the end-of-archive marker
    """
    try:
        # skip the padded payload of the previous member
        archive.fileobj.seek(archive.offset)
        if archive.fileobj.tell() != archive.offset:
            raise CorruptArchiveError("failed to read archive: unexpected end of data")
        return tarfile.TarInfo.fromtarfile(archive)
    except (tarfile.EOFHeaderError, tarfile.EmptyHeaderError):
        return None
    except tarfile.HeaderError as e:
        raise CorruptArchiveError(f"invalid archive header: {e}") from e
    except _CORRUPT_ERRORS as e:
        raise CorruptArchiveError(f"failed to read archive: {e}") from e


def _extract_members(archive: tarfile.TarFile, root: Path) -> None:
    # the first header was already parsed by tarfile.open
    member = archive.next()
    while member is not None:
        if member.isdir():
            target = _safe_target(root, member.name)
            try:
                target.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
            except OSError as e:
                raise ExtractError(f"failed to create directory {target}: {e}") from e
        elif member.isreg():
            target = _safe_target(root, member.name)
            logger.debug(f"Extracting {member.name} ({member.size} bytes)")
            _write_member(archive, member, target)
        else:
            logger.debug(f"Skipping unsupported archive entry: {member.name}")

        member = _read_member(archive)


def extract(destination: Union[str, Path], source: BinaryIO) -> None:
    """
    Extract a gzip-compressed tar stream into ``destination``.

    Only directories and regular files are materialized; every other entry
    type is skipped. Members are processed in stream order and parent
    directories are created on demand. Nothing is cleaned up on failure.

    Args:
        destination: Directory to extract into
        source: Readable binary stream positioned at the gzip header

    Raises:
        CorruptArchiveError: The stream is not valid gzip or tar data
        UnsafeArchiveEntryError: An entry would land outside ``destination``
        ExtractError: The filesystem refused a write
    """
    root = Path(os.path.realpath(destination))

    with gzip.GzipFile(fileobj=source, mode="rb") as decompressed:
        try:
            archive = tarfile.open(fileobj=decompressed, mode="r|")
        except _CORRUPT_ERRORS as e:
            raise CorruptArchiveError(f"failed to open archive: {e}") from e

        with archive:
            _extract_members(archive, root)
