# =============================================================================
# core/services/archive_service.py - Streaming Zip Archives
# =============================================================================
# Builds a zip of a folder subtree without holding it in memory.
#
# zipfile writes to unseekable sinks using data descriptors, so the archive
# can go straight to a socket. iter_zip() turns that into a generator: each
# chunk is only produced when the consumer pulls it, which gives the HTTP
# response natural backpressure.
#
# Errors before the first byte (missing folder, file instead of folder) are
# raised by resolve_archive_target(). Errors after that are terminal: the
# partial archive is invalid and the connection is dropped.
#
# Entries are deflated at level 9. zipfile only exposes a per-entry level
# from Python 3.13 on; older interpreters fall back to zlib's default (6),
# which yields slightly larger archives.
# =============================================================================

import io
import logging
import os
import sys
import zipfile
from contextlib import closing
from pathlib import Path
from typing import BinaryIO, Iterator

from app.exceptions import InvalidTargetError, NotFoundError
from lib.paths import resolve_within_root, sanitize_rel_path

logger = logging.getLogger(__name__)

# Bytes read from a source file per step
CHUNK_SIZE = 64 * 1024

# Deflate level for archive entries
COMPRESS_LEVEL = 9


class _ChunkSink(io.RawIOBase):
    """Unseekable write target that collects bytes until drained."""

    def __init__(self):
        super().__init__()
        self._chunks: list[bytes] = []

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        self._chunks.append(bytes(data))
        return len(data)

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


def resolve_archive_target(root: Path, relative_path: str) -> Path:
    """
    Resolve and validate the folder to archive.

    Raises:
        NotFoundError: If the path doesn't exist
        InvalidTargetError: If the path is not a folder
    """
    rel = sanitize_rel_path(relative_path)
    target = resolve_within_root(root, rel)

    if not target.exists():
        raise NotFoundError(rel, what="Folder")
    if not target.is_dir():
        raise InvalidTargetError(rel)

    return target


def iter_archive_files(directory: Path) -> Iterator[tuple[Path, str]]:
    """
    Yield (absolute path, archive name) for every file under a folder.

    Hidden entries and symlinks are skipped, like in the tree listing.
    Order is sorted by name at every level.
    """
    def walk(current: Path, prefix: str) -> Iterator[tuple[Path, str]]:
        with os.scandir(current) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            if entry.name.startswith(".") or entry.is_symlink():
                continue
            name = f"{prefix}{entry.name}"
            if entry.is_dir(follow_symlinks=False):
                yield from walk(Path(entry.path), f"{name}/")
            elif entry.is_file(follow_symlinks=False):
                yield Path(entry.path), name

    yield from walk(directory, "")


def _write_entries(
    archive: zipfile.ZipFile,
    directory: Path,
    chunk_size: int,
) -> Iterator[None]:
    """
    Add every file under a folder to an open archive.

    Yields after each chunk so the caller can flush what was produced.
    """
    for path, arcname in iter_archive_files(directory):
        info = zipfile.ZipInfo.from_file(path, arcname)
        info.compress_type = zipfile.ZIP_DEFLATED
        if sys.version_info >= (3, 13):
            info.compress_level = COMPRESS_LEVEL

        with open(path, "rb") as src, archive.open(info, "w") as dest:
            while True:
                chunk = src.read(chunk_size)
                if not chunk:
                    break
                dest.write(chunk)
                yield

        logger.debug(f"Archived {arcname}")
        yield


def stream_zip(root: Path, relative_path: str, sink: BinaryIO, chunk_size: int = CHUNK_SIZE) -> None:
    """
    Write a zip of a folder to a binary sink.

    The sink only needs write(); it may be unseekable.

    Args:
        root: Storage root
        relative_path: Folder to archive ("" for the whole root)
        sink: Writable binary stream
        chunk_size: Bytes read from each source file per step

    Raises:
        NotFoundError: If the folder doesn't exist
        InvalidTargetError: If the path is a file
        OSError: If a file can't be read mid-stream
    """
    directory = resolve_archive_target(root, relative_path)

    with zipfile.ZipFile(
        sink, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL
    ) as archive:
        for _ in _write_entries(archive, directory, chunk_size):
            pass


def iter_zip(root: Path, relative_path: str, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """
    Generate a zip of a folder chunk by chunk.

    Nothing is read ahead: the next file chunk is only compressed when the
    consumer asks for more output.

    Args:
        root: Storage root
        relative_path: Folder to archive ("" for the whole root)
        chunk_size: Bytes read from each source file per step

    Yields:
        Consecutive pieces of the archive
    """
    directory = resolve_archive_target(root, relative_path)
    sink = _ChunkSink()

    try:
        with zipfile.ZipFile(
            sink, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL
        ) as archive:
            # The entry writer must be closed before the archive is, even
            # when the consumer stops pulling halfway through a file
            with closing(_write_entries(archive, directory, chunk_size)) as steps:
                for _ in steps:
                    data = sink.drain()
                    if data:
                        yield data

        # Central directory is written on close
        data = sink.drain()
        if data:
            yield data

    except OSError as e:
        logger.error(f"Zip of '{relative_path or '/'}' aborted mid-stream: {e}")
        raise
