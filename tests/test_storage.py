import io
from datetime import timedelta

import pytest

from simplecontents.storage import (
    MemoryStorage,
    PresignedURLOptions,
    StorageNotFoundError,
    StorageService,
)


@pytest.fixture
def store():
    return MemoryStorage()


def test_interface_is_abstract():
    with pytest.raises(TypeError):
        StorageService()


def test_upload_bytes_round_trip(store):
    path = store.upload("a/b.txt", b"hello", 5, "text/plain")
    assert path == "a/b.txt"
    with store.download(path) as stream:
        assert stream.read() == b"hello"


def test_upload_stream_round_trip(store):
    path = store.upload("k", io.BytesIO(b"\x00\x01\x02"), 3, "application/octet-stream")
    assert store.download(path).read() == b"\x00\x01\x02"


def test_upload_none_stores_empty(store):
    path = store.upload("empty", None, 0, "text/plain")
    assert store.download(path).read() == b""


def test_upload_overwrites(store):
    store.upload("k", b"first", 5, "text/plain")
    store.upload("k", b"second", 6, "text/plain")
    assert store.download("k").read() == b"second"


def test_download_missing_raises(store):
    with pytest.raises(StorageNotFoundError, match="content not found in storage"):
        store.download("nope")


def test_delete_removes_object(store):
    store.upload("k", b"data", 4, "text/plain")
    store.delete("k")
    with pytest.raises(StorageNotFoundError):
        store.download("k")
    with pytest.raises(StorageNotFoundError):
        store.delete("k")


def test_presigned_url(store):
    store.upload("x/y.pdf", b"pdf", 3, "application/pdf")
    options = PresignedURLOptions(expiry=timedelta(hours=1))
    assert store.get_presigned_download_url("x/y.pdf", options) == "memory://x/y.pdf"
    assert store.get_presigned_download_url("x/y.pdf") == "memory://x/y.pdf"


def test_presigned_url_missing_raises(store):
    with pytest.raises(StorageNotFoundError):
        store.get_presigned_download_url("missing", PresignedURLOptions())