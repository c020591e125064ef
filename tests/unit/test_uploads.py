"""Tests for uploaded archive intake."""

import asyncio
import io
import threading
from pathlib import Path

import pytest
from fastapi import UploadFile

from src.sitehost.core.exceptions import InvalidUploadError, UploadTooLargeError
from src.sitehost.services import uploads
from src.sitehost.services.uploads import SiteUploader
from tests.helpers import make_archive

pytestmark = pytest.mark.unit


def upload_of(data: bytes, filename: str = "site.tar.gz") -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=filename)


@pytest.fixture
def archive_bytes(tmp_path: Path) -> bytes:
    return make_archive(tmp_path / "src.tar.gz", {"index.html": "<h1>hi</h1>"}).read_bytes()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


async def test_store_writes_named_archive(upload_dir: Path, archive_bytes: bytes):
    uploader = SiteUploader(upload_dir, max_size=10 * 1024 * 1024)

    path = await uploader.store("acme", upload_of(archive_bytes))

    assert path.parent == upload_dir
    assert path.name.startswith("acme_")
    assert path.name.endswith(".tar.gz")
    assert path.read_bytes() == archive_bytes


async def test_each_upload_gets_its_own_file(upload_dir: Path, archive_bytes: bytes):
    uploader = SiteUploader(upload_dir, max_size=10 * 1024 * 1024)

    first = await uploader.store("acme", upload_of(archive_bytes))
    second = await uploader.store("acme", upload_of(archive_bytes))

    assert first != second


async def test_rejects_non_gzip(upload_dir: Path):
    uploader = SiteUploader(upload_dir, max_size=1024)

    with pytest.raises(InvalidUploadError):
        await uploader.store("acme", upload_of(b"PK\x03\x04 this is a zip"))

    assert list(upload_dir.iterdir()) == []


async def test_rejects_oversized_upload(upload_dir: Path, archive_bytes: bytes):
    uploader = SiteUploader(upload_dir, max_size=len(archive_bytes) - 1)

    with pytest.raises(UploadTooLargeError):
        await uploader.store("acme", upload_of(archive_bytes))

    assert list(upload_dir.iterdir()) == []


def test_discard(upload_dir: Path):
    uploader = SiteUploader(upload_dir, max_size=1024)
    upload_dir.mkdir()
    path = upload_dir / "acme_x.tar.gz"
    path.write_bytes(b"x")

    uploader.discard(path)
    uploader.discard(path)

    assert not path.exists()


async def test_file_io_runs_off_the_event_loop(
    upload_dir: Path, archive_bytes: bytes, monkeypatch: pytest.MonkeyPatch
):
    loop_thread = threading.get_ident()
    io_threads: dict[str, int] = {}
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        def call():
            io_threads[func.__name__] = threading.get_ident()
            return func(*args, **kwargs)

        return await real_to_thread(call)

    monkeypatch.setattr(uploads.asyncio, "to_thread", recording_to_thread)
    uploader = SiteUploader(upload_dir, max_size=10 * 1024 * 1024)

    path = await uploader.store("acme", upload_of(archive_bytes))

    assert path.read_bytes() == archive_bytes
    assert {"open", "write", "close", "is_gzip"} <= io_threads.keys()
    assert loop_thread not in io_threads.values()
