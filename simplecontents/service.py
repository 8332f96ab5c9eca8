"""Business operations on content items, tying persistence to blob storage."""

from __future__ import annotations

import contextlib
import posixpath
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, BinaryIO

from simplecontents.model import NIL_UUID, Content, ContentFilter
from simplecontents.repository import ContentNotFoundError, ContentRepository
from simplecontents.storage import Payload, PresignedURLOptions, StorageService

__all__ = [
    "AssociateContentInput",
    "ContentNotFoundError",
    "ContentService",
    "CreateContentInput",
    "InvalidInputError",
    "ListContentInput",
    "ListContentResult",
    "UpdateContentInput",
]

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20


class InvalidInputError(ValueError):
    """Raised when a request is missing required values."""

    def __init__(self, message: str = "invalid input parameters") -> None:
        super().__init__(message)


@dataclass
class CreateContentInput:
    """Values for creating a content item."""

    file_name: str = ""
    mime_type: str = ""
    file_size: int = 0
    created_by: str = ""
    entity_type: str = ""
    entity_id: str = ""
    source: str = ""
    metadata: dict[str, Any] | None = None
    data: Payload = None


@dataclass
class UpdateContentInput:
    """Values for updating a content item; empty values leave fields alone."""

    id: uuid.UUID = NIL_UUID
    file_name: str = ""
    metadata: dict[str, Any] | None = None


@dataclass
class ListContentInput:
    """Filter and pagination values for listing content items."""

    mime_type: str = ""
    min_size: int | None = None
    max_size: int | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    metadata: dict[str, Any] | None = None
    page: int = 0
    page_size: int = 0


@dataclass
class ListContentResult:
    """One page of content items with pagination totals."""

    items: list[Content] = field(default_factory=list)
    total_count: int = 0
    page: int = 0
    page_size: int = 0
    total_pages: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of this page."""
        return {
            "Items": [item.to_dict() for item in self.items],
            "TotalCount": self.total_count,
            "Page": self.page,
            "PageSize": self.page_size,
            "TotalPages": self.total_pages,
        }


@dataclass
class AssociateContentInput:
    """Values for linking a content item to an external entity."""

    content_id: str = ""
    entity_type: str = ""
    entity_id: str = ""
    association_metadata: dict[str, Any] | None = None
    associated_by: str = ""


def _storage_key(content_id: uuid.UUID, file_name: str) -> str:
    return posixpath.normpath(f"{content_id}/{file_name}")


class ContentService:
    """Creates, reads, updates, deletes and lists content items."""

    def __init__(self, repo: ContentRepository, storage: StorageService) -> None:
        self._repo = repo
        self._storage = storage

    def create_content(self, request: CreateContentInput) -> Content:
        """Upload the item's data and record it; raise InvalidInputError on bad input."""
        if not request.file_name or not request.mime_type or request.file_size <= 0:
            raise InvalidInputError()

        content_id = uuid.uuid4()
        key = _storage_key(content_id, request.file_name)
        storage_path = self._storage.upload(
            key, request.data, request.file_size, request.mime_type
        )

        content = Content(
            id=content_id,
            file_name=request.file_name,
            mime_type=request.mime_type,
            file_size=request.file_size,
            storage_path=storage_path,
            metadata=request.metadata,
        )
        try:
            self._repo.create_content(content)
        except Exception:
            with contextlib.suppress(Exception):
                self._storage.delete(storage_path)
            raise
        return content

    def get_content(self, content_id: uuid.UUID) -> Content:
        """Return the item or raise ContentNotFoundError."""
        return self._repo.get_content_by_id(content_id)

    def get_content_data(self, content_id: uuid.UUID) -> tuple[BinaryIO, Content]:
        """Return a stream of the item's data together with the item."""
        content = self._repo.get_content_by_id(content_id)
        data = self._storage.download(content.storage_path)
        return data, content

    def update_content(self, request: UpdateContentInput) -> Content:
        """Apply the given name and metadata to an existing item."""
        if request.id == NIL_UUID:
            raise InvalidInputError()
        content = self._repo.get_content_by_id(request.id)
        if request.file_name:
            content.file_name = request.file_name
        if request.metadata is not None:
            content.metadata = request.metadata
        self._repo.update_content(content)
        return content

    def delete_content(self, content_id: uuid.UUID) -> None:
        """Delete the record, then its stored data; storage failures are ignored."""
        content = self._repo.get_content_by_id(content_id)
        self._repo.delete_content(content_id)
        with contextlib.suppress(Exception):
            self._storage.delete(content.storage_path)

    def list_content(self, request: ListContentInput | None = None) -> ListContentResult:
        """Return one page of items matching the request's filter."""
        request = request or ListContentInput()
        page = request.page if request.page > 0 else DEFAULT_PAGE
        page_size = request.page_size if request.page_size > 0 else DEFAULT_PAGE_SIZE
        offset = (page - 1) * page_size

        content_filter = ContentFilter(
            mime_type=request.mime_type,
            min_size=request.min_size,
            max_size=request.max_size,
            created_from=request.created_from,
            created_to=request.created_to,
            metadata=request.metadata,
        )
        items, total_count = self._repo.list_content(content_filter, offset, page_size)
        total_pages = -(-total_count // page_size)

        return ListContentResult(
            items=items,
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )

    def get_content_url(self, content_id: uuid.UUID, expiry: timedelta) -> str:
        """Return a temporary download URL for the item's data."""
        content = self._repo.get_content_by_id(content_id)
        return self._storage.get_presigned_download_url(
            content.storage_path, PresignedURLOptions(expiry=expiry)
        )