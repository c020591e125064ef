"""Filesystem steps of a site deployment.

These run inside the Temporal worker. Status bookkeeping lives in the
workflow; this module only replaces directories and reports failures with
messages fit for site owners.
"""

import tarfile
from collections.abc import Callable
from pathlib import Path

from src.sitehost.core.logging import get_logger
from src.sitehost.services.archive import ArchiveError, extract_archive
from src.sitehost.services.site_directory import SiteDirectoryStore

logger = get_logger(__name__)

UNKNOWN_ERROR = "Deployment failed: unknown error"


class NoHtmlFilesError(ArchiveError):
    message = "no HTML files found"


def deploy_archive(
    store: SiteDirectoryStore,
    subdomain: str,
    archive_path: Path,
    *,
    on_member: Callable[[tarfile.TarInfo], None] | None = None,
) -> Path:
    """Replace the site directory with the contents of ``archive_path``.

    Any existing directory is removed first. On failure, including an
    exception raised by ``on_member``, the target directory is removed again
    and the error is re-raised.
    """
    site_dir = store.path(subdomain)
    if store.remove(subdomain):
        logger.info("Removed existing site directory", site=subdomain, path=str(site_dir))

    try:
        extract_archive(archive_path, site_dir, on_member=on_member)
        if not store.contains_html(subdomain):
            raise NoHtmlFilesError()
    except Exception:
        store.remove(subdomain)
        raise

    return site_dir


def format_deployment_error(exc: BaseException) -> str:
    if isinstance(exc, ArchiveError):
        return exc.message
    logger.warning("Unexpected deployment error", error=repr(exc))
    return UNKNOWN_ERROR


def discard_archive(archive_path: Path) -> bool:
    """Delete the uploaded archive. Failures are logged, never raised."""
    try:
        archive_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Archive cleanup failed", path=str(archive_path), error=str(e))
        return False
    logger.info("Archive cleaned up", path=str(archive_path))
    return True
