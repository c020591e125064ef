"""Gzip tar extraction for uploaded site archives.

Only regular files and directories are written. Symlinks, hard links, devices
and macOS AppleDouble files (``._*``) are skipped. Member names that are not
valid UTF-8 are read as Latin-1, which is what archives built on Windows
commonly use.
"""

import gzip
import tarfile
import zlib
from collections.abc import Callable
from pathlib import Path, PurePosixPath

from src.sitehost.core.logging import get_logger

logger = get_logger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
MAX_COMPRESSED_SIZE = 500 * 1024 * 1024  # matches the upload limit
MAX_DECOMPRESSED_SIZE = 1024 * 1024 * 1024

APPLEDOUBLE_PREFIX = "._"


def format_bytes(size: int) -> str:
    if size >= 1024**3:
        return f"{size / 1024**3:.1f} GB"
    if size >= 1024**2:
        return f"{size / 1024**2:.1f} MB"
    if size >= 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size} B"


class ArchiveError(Exception):
    """Extraction failure carrying a message safe to show to site owners."""

    message = "Failed to extract archive"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ArchiveReadError(ArchiveError):
    def __init__(self, reason: str):
        super().__init__(f"Failed to read archive file: {reason}")


class ArchiveTooLargeError(ArchiveError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Archive too large: {format_bytes(size)} exceeds {format_bytes(limit)} limit"
        )


class DecompressedTooLargeError(ArchiveError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Decompressed archive too large: {format_bytes(size)} "
            f"exceeds {format_bytes(limit)} limit"
        )


class CorruptArchiveError(ArchiveError):
    message = "Failed to decompress archive: invalid or corrupted gzip file"


class UnsafeArchivePathError(ArchiveError):
    message = "Invalid archive: contains unsafe file paths"

    def __init__(self, path: str):
        self.path = path
        super().__init__()


class ArchiveWriteError(ArchiveError):
    message = "Failed to write extracted files: insufficient disk space or permission denied"


def is_gzip(path: Path) -> bool:
    """Check the gzip magic bytes at the start of ``path``."""
    try:
        with path.open("rb") as f:
            return f.read(2) == GZIP_MAGIC
    except OSError:
        return False


def _fix_member_name(name: str) -> str:
    """Re-decode names whose raw bytes are not UTF-8 as Latin-1."""
    raw = name.encode("utf-8", "surrogateescape")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def _is_appledouble(name: str) -> bool:
    return PurePosixPath(name).name.startswith(APPLEDOUBLE_PREFIX)


def _is_unsafe(name: str, root: Path) -> bool:
    if name.startswith("/") or PurePosixPath(name).is_absolute():
        return True
    target = (root / name).resolve()
    return target != root and not target.is_relative_to(root)


def _select_members(
    tar: tarfile.TarFile, root: Path, max_decompressed: int
) -> list[tarfile.TarInfo]:
    selected: list[tarfile.TarInfo] = []
    total = 0
    for member in tar:
        member.name = _fix_member_name(member.name)
        if _is_appledouble(member.name):
            continue
        if not (member.isreg() or member.isdir()):
            logger.debug("Skipping non-regular archive member", member=member.name)
            continue
        if _is_unsafe(member.name, root):
            raise UnsafeArchivePathError(member.name)
        if member.isreg():
            total += member.size
            if total > max_decompressed:
                raise DecompressedTooLargeError(total, max_decompressed)
        selected.append(member)
    return selected


def extract_archive(
    archive_path: Path,
    dest_dir: Path,
    *,
    max_compressed_size: int = MAX_COMPRESSED_SIZE,
    max_decompressed_size: int = MAX_DECOMPRESSED_SIZE,
    on_member: Callable[[tarfile.TarInfo], None] | None = None,
) -> Path:
    """Extract a ``.tar.gz`` archive into ``dest_dir``.

    Args:
        archive_path: Path to the gzip-compressed tar archive.
        dest_dir: Directory to extract into. Created if missing.
        max_compressed_size: Largest accepted archive file, in bytes.
        max_decompressed_size: Largest accepted total of member sizes, in bytes.
        on_member: Called before each member is written. Anything it raises
            stops the extraction and propagates unchanged.

    Returns:
        The destination directory.

    Raises:
        ArchiveError: Subclass describing what went wrong. Files written before
            the failure are left in place for the caller to clean up.
    """
    try:
        size = archive_path.stat().st_size
    except OSError as e:
        raise ArchiveReadError(e.strerror or str(e)) from e
    if size > max_compressed_size:
        raise ArchiveTooLargeError(size, max_compressed_size)

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        root = dest_dir.resolve()
    except OSError as e:
        raise ArchiveWriteError() from e

    try:
        with tarfile.open(
            archive_path, mode="r:gz", encoding="utf-8", errors="surrogateescape"
        ) as tar:
            members = _select_members(tar, root, max_decompressed_size)
            for member in members:
                if on_member is not None:
                    on_member(member)
                tar.extract(member, root, filter="data")
    except ArchiveError:
        raise
    except tarfile.FilterError as e:
        raise UnsafeArchivePathError(getattr(e.tarinfo, "name", "")) from e
    except (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile) as e:
        raise CorruptArchiveError() from e
    except OSError as e:
        raise ArchiveWriteError() from e

    logger.info("Archive extracted", archive=str(archive_path), members=len(members))
    return dest_dir
