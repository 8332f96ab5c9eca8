"""Content records, filters and entity associations."""

from __future__ import annotations

import dataclasses
import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

NIL_UUID = uuid.UUID(int=0)
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

ENTITY_TYPE_TRANSACTION = "transaction"
ENTITY_TYPE_CREDIT_CARD_APPLICATION = "credit_card_application"
ENTITY_TYPE_USER = "user"
ENTITY_TYPE_PRODUCT = "product"


class ContentStatus(str, enum.Enum):
    """Processing status of a content item."""

    CREATED = "created"
    UPLOADED = "uploaded"
    DONE = "done"
    ERROR = "error"


def _format_time(moment: datetime) -> str:
    """Format a timestamp as RFC 3339 with trailing fraction zeros trimmed."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    total_minutes = int(offset.total_seconds() // 60)
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


@dataclass
class Content:
    """A stored content item and its intrinsic metadata."""

    id: uuid.UUID = NIL_UUID
    status: ContentStatus | None = None
    file_name: str = ""
    mime_type: str = ""
    file_size: int = 0
    storage_path: str = ""
    created_by: str = ""
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME
    deleted_at: datetime | None = None
    source: str = ""
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.status is not None and not isinstance(self.status, ContentStatus):
            self.status = ContentStatus(self.status)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of this item."""
        data: dict[str, Any] = {
            "id": str(self.id),
            "status": self.status.value if self.status is not None else "",
            "file_name": self.file_name,
            "mime_type": self.mime_type,
            "file_size": self.file_size,
            "storage_path": self.storage_path,
            "created_by": self.created_by,
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
        }
        if self.deleted_at is not None:
            data["deleted_at"] = _format_time(self.deleted_at)
        data["source"] = self.source
        if self.metadata:
            data["metadata"] = self.metadata
        return data

    def copy(self) -> Content:
        """Return a shallow copy; the metadata mapping is shared."""
        return dataclasses.replace(self)


@dataclass
class ContentFilter:
    """Criteria for selecting content items."""

    file_name: str = ""
    mime_type: str = ""
    min_size: int | None = None
    max_size: int | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    metadata: dict[str, Any] | None = None


@dataclass
class ContentEntityAssociation:
    """A link between a content item and an external entity."""

    id: str = ""
    content_id: str = ""
    entity_type: str = ""
    entity_id: str = ""
    association_metadata: dict[str, Any] | None = None
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME
    created_by: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of this association."""
        return {
            "id": self.id,
            "content_id": self.content_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "association_metadata": self.association_metadata,
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
            "created_by": self.created_by,
        }