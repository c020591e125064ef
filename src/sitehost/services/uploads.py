"""Intake of uploaded site archives."""

import asyncio
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from src.sitehost.core.exceptions import InvalidUploadError, UploadTooLargeError
from src.sitehost.core.logging import get_logger
from src.sitehost.services.archive import format_bytes, is_gzip

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


class SiteUploader:
    """Stores uploaded archives in the upload directory until a deployment consumes them."""

    def __init__(self, upload_dir: Path, max_size: int):
        self.upload_dir = upload_dir
        self.max_size = max_size

    def archive_path(self, subdomain: str) -> Path:
        return self.upload_dir / f"{subdomain}_{uuid4().hex}.tar.gz"

    async def store(self, subdomain: str, upload: UploadFile) -> Path:
        """Write the upload to disk and check that it is a gzip file.

        File I/O runs in worker threads so large uploads do not stall the
        event loop.

        Raises:
            UploadTooLargeError: Upload exceeds ``max_size``.
            InvalidUploadError: Upload is not gzip-compressed.
        """
        await asyncio.to_thread(self.upload_dir.mkdir, parents=True, exist_ok=True)
        dest = self.archive_path(subdomain)

        written = 0
        try:
            out = await asyncio.to_thread(dest.open, "wb")
            try:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_size:
                        raise UploadTooLargeError(
                            f"Archive exceeds the {format_bytes(self.max_size)} upload limit"
                        )
                    await asyncio.to_thread(out.write, chunk)
            finally:
                await asyncio.to_thread(out.close)

            if not await asyncio.to_thread(is_gzip, dest):
                raise InvalidUploadError(
                    "Invalid file format: expected a gzip-compressed tar archive (.tar.gz)"
                )
        except BaseException:
            # Inline so the partial file also goes on cancellation.
            dest.unlink(missing_ok=True)
            raise

        logger.info("Archive uploaded", site=subdomain, path=str(dest), size=written)
        return dest

    def discard(self, path: Path) -> None:
        path.unlink(missing_ok=True)
