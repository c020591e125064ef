"""Test helper functions."""

import io
import tarfile
from pathlib import Path


def make_archive(
    path: Path,
    files: dict[str, str | bytes],
    *,
    symlinks: dict[str, str] | None = None,
    directories: list[str] | None = None,
) -> Path:
    """Build a .tar.gz at ``path``.

    Member names are written with surrogateescape, so a name like
    ``"c\\udcf3rdoba.html"`` ends up as the raw Latin-1 byte 0xF3 in the archive.
    """
    with tarfile.open(
        path, "w:gz", format=tarfile.GNU_FORMAT, encoding="utf-8", errors="surrogateescape"
    ) as tar:
        for name in directories or []:
            info = tarfile.TarInfo(name)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name, content in files.items():
            data = content.encode() if isinstance(content, str) else content
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
        for name, target in (symlinks or {}).items():
            info = tarfile.TarInfo(name)
            info.type = tarfile.SYMTYPE
            info.linkname = target
            tar.addfile(info)
    return path


def files_under(root: Path) -> set[str]:
    """Relative POSIX paths of every regular file below ``root``."""
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}
