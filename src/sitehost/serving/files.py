"""Request path to on-disk file resolution, plus containment checks."""

import os
from pathlib import Path

INDEX_FILE = "index.html"


def normalize_path(path: str) -> str:
    """Strip the query string and trailing slashes; empty becomes ``/``."""
    path = path.split("?", 1)[0].rstrip("/")
    return path or "/"


def strip_mount_prefix(path: str, subdomain: str) -> str:
    """Remove the ``/sites/{subdomain}`` mount point from a subpath request."""
    prefix = f"/sites/{subdomain}"
    if not path.startswith(prefix):
        return path
    return path.removeprefix(prefix) or "/"


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except (OSError, ValueError):  # ValueError: embedded null byte
        return False


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except (OSError, ValueError):
        return False


def resolve_file(site_dir: Path, normalized_path: str) -> Path | None:
    """Find the file to serve for a normalized request path.

    Lookup order for ``/foo``: the file ``foo``, then ``foo/index.html`` when
    ``foo`` is a directory, then ``foo.html``. The result is not yet checked
    for containment, see :func:`is_contained`.
    """
    if normalized_path == "/":
        index = site_dir / INDEX_FILE
        return index if _is_file(index) else None

    candidate = site_dir / normalized_path.lstrip("/")
    if _is_file(candidate):
        return candidate
    if _is_dir(candidate):
        index = candidate / INDEX_FILE
        return index if _is_file(index) else None

    html = Path(f"{candidate}.html")
    return html if _is_file(html) else None


def is_contained(path: Path, root: Path) -> bool:
    """True when ``path`` canonicalizes to ``root`` or somewhere below it.

    Both sides are resolved, so ``..`` segments and symlinks are followed
    before comparing.
    """
    try:
        resolved = path.resolve()
        resolved_root = root.resolve()
    except (OSError, RuntimeError, ValueError):
        return False

    if resolved == resolved_root:
        return True
    return str(resolved).startswith(str(resolved_root) + os.sep)
