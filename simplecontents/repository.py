"""Content persistence interface and an in-memory implementation."""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone

from simplecontents.model import NIL_UUID, Content, ContentFilter


class ContentNotFoundError(LookupError):
    """Raised when a content item does not exist or has been deleted."""

    def __init__(self, message: str = "content not found") -> None:
        super().__init__(message)


@dataclass
class ListOptions:
    """Pagination and sorting options."""

    page: int = 0
    page_size: int = 0
    sort_by: str = ""
    return_total: bool = False


class ContentRepository(ABC):
    """Persistence of content items."""

    @abstractmethod
    def create_content(self, content: Content) -> None:
        """Store a new item, assigning its id and timestamps."""

    @abstractmethod
    def get_content_by_id(self, content_id: uuid.UUID) -> Content:
        """Return a live item or raise ContentNotFoundError."""

    @abstractmethod
    def list_content(
        self, content_filter: ContentFilter, offset: int, limit: int
    ) -> tuple[list[Content], int]:
        """Return one page of matching items and the total match count."""

    @abstractmethod
    def update_content(self, content: Content) -> None:
        """Replace a live item or raise ContentNotFoundError."""

    @abstractmethod
    def delete_content(self, content_id: uuid.UUID) -> None:
        """Mark a live item deleted or raise ContentNotFoundError."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _matches(content: Content, content_filter: ContentFilter) -> bool:
    if content.deleted_at is not None:
        return False
    if content_filter.mime_type and content.mime_type != content_filter.mime_type:
        return False
    if content_filter.min_size is not None and content.file_size < content_filter.min_size:
        return False
    if content_filter.max_size is not None and content.file_size > content_filter.max_size:
        return False
    if content_filter.created_from is not None and content.created_at < content_filter.created_from:
        return False
    if content_filter.created_to is not None and content.created_at > content_filter.created_to:
        return False
    if content_filter.metadata:
        stored = content.metadata or {}
        for key, value in content_filter.metadata.items():
            if key not in stored or stored[key] != value:
                return False
    return True


class MemoryRepository(ContentRepository):
    """Thread-safe repository that keeps items in a dictionary."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._contents: dict[uuid.UUID, Content] = {}

    def _live(self, content_id: uuid.UUID) -> Content:
        content = self._contents.get(content_id)
        if content is None or content.deleted_at is not None:
            raise ContentNotFoundError()
        return content

    def create_content(self, content: Content) -> None:
        with self._lock:
            if content.id == NIL_UUID:
                content.id = uuid.uuid4()
            now = _now()
            content.created_at = now
            content.updated_at = now
            self._contents[content.id] = content

    def get_content_by_id(self, content_id: uuid.UUID) -> Content:
        with self._lock:
            return self._live(content_id).copy()

    def update_content(self, content: Content) -> None:
        with self._lock:
            existing = self._live(content.id)
            content.created_at = existing.created_at
            content.updated_at = _now()
            self._contents[content.id] = content

    def delete_content(self, content_id: uuid.UUID) -> None:
        with self._lock:
            self._live(content_id).deleted_at = _now()

    def list_content(
        self, content_filter: ContentFilter | None, offset: int, limit: int
    ) -> tuple[list[Content], int]:
        if offset < 0 or limit < 0:
            raise ValueError("offset and limit must not be negative")
        content_filter = content_filter or ContentFilter()
        with self._lock:
            matches = [c.copy() for c in self._contents.values() if _matches(c, content_filter)]
        total = len(matches)
        if offset >= total:
            return [], total
        return matches[offset : offset + limit], total