"""Blob storage interface and an in-memory implementation."""

from __future__ import annotations

import io
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import BinaryIO, Union

Payload = Union[bytes, bytearray, memoryview, BinaryIO, None]


class StorageNotFoundError(LookupError):
    """Raised when no object is stored under a path."""

    def __init__(self, message: str = "content not found in storage") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class PresignedURLOptions:
    """Options for generating presigned URLs."""

    expiry: timedelta = timedelta(0)


class StorageService(ABC):
    """File storage operations."""

    @abstractmethod
    def upload(self, key: str, data: Payload, size: int, content_type: str) -> str:
        """Store data under key and return its storage path."""

    @abstractmethod
    def download(self, path: str) -> BinaryIO:
        """Return a readable stream of the object at path."""

    @abstractmethod
    def get_presigned_download_url(
        self, path: str, options: PresignedURLOptions | None = None
    ) -> str:
        """Return a temporary URL for downloading the object at path."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the object at path."""


def _read_all(data: Payload) -> bytes:
    if data is None:
        return b""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    return data.read()


class MemoryStorage(StorageService):
    """Thread-safe storage that keeps objects in a dictionary."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._objects: dict[str, bytes] = {}

    def upload(self, key: str, data: Payload, size: int, content_type: str) -> str:
        payload = _read_all(data)
        with self._lock:
            self._objects[key] = payload
        return key

    def download(self, path: str) -> BinaryIO:
        with self._lock:
            try:
                payload = self._objects[path]
            except KeyError:
                raise StorageNotFoundError() from None
        return io.BytesIO(payload)

    def delete(self, path: str) -> None:
        with self._lock:
            try:
                del self._objects[path]
            except KeyError:
                raise StorageNotFoundError() from None

    def get_presigned_download_url(
        self, path: str, options: PresignedURLOptions | None = None
    ) -> str:
        with self._lock:
            if path not in self._objects:
                raise StorageNotFoundError()
        return "memory://" + path