"""Content persistence in a relational database through SQLAlchemy."""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    and_,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.sql.elements import ColumnElement

from simplecontents.model import NIL_UUID, Content, ContentFilter
from simplecontents.repository import ContentNotFoundError, ContentRepository

__all__ = ["CONTENTS", "SCHEMA", "SqlRepository", "build_where_clause"]

SCHEMA = MetaData()

CONTENTS = Table(
    "contents",
    SCHEMA,
    Column("id", String(36), primary_key=True),
    Column("name", String, nullable=False, default=""),
    Column("description", String, nullable=False, default=""),
    Column("mime_type", String, nullable=False, default=""),
    Column("file_size", BigInteger, nullable=False, default=0),
    Column("path", String, nullable=False, default=""),
    Column("metadata", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Column("deleted_at", DateTime(timezone=True), nullable=True),
)

_META = CONTENTS.c["metadata"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_db_time(moment: datetime | None) -> datetime | None:
    if moment is None:
        return None
    return moment.astimezone(timezone.utc)


def _from_db_time(moment: datetime | None) -> datetime | None:
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _to_row(content: Content) -> dict[str, Any]:
    return {
        "id": str(content.id),
        "name": content.file_name,
        "description": "",
        "mime_type": content.mime_type,
        "file_size": content.file_size,
        "path": content.storage_path,
        "metadata": json.dumps(content.metadata) if content.metadata else None,
        "created_at": _to_db_time(content.created_at),
        "updated_at": _to_db_time(content.updated_at),
        "deleted_at": _to_db_time(content.deleted_at),
    }


def _from_row(row: Any) -> Content:
    raw_metadata = row["metadata"]
    metadata = json.loads(raw_metadata) if raw_metadata is not None else {}
    return Content(
        id=uuid.UUID(row["id"]),
        file_name=row["name"],
        mime_type=row["mime_type"],
        file_size=row["file_size"],
        storage_path=row["path"],
        created_at=_from_db_time(row["created_at"]),
        updated_at=_from_db_time(row["updated_at"]),
        deleted_at=_from_db_time(row["deleted_at"]),
        metadata=metadata,
    )


def _metadata_matches(content: Content, wanted: dict[str, Any]) -> bool:
    stored = content.metadata or {}
    return all(key in stored and stored[key] == value for key, value in wanted.items())


def build_where_clause(content_filter: ContentFilter | None) -> ColumnElement:
    """Return the SQL condition selecting live rows that match the filter's columns.

    Metadata criteria are not part of the condition; they are matched on the
    decoded JSON after the query.
    """
    content_filter = content_filter or ContentFilter()
    conditions = [CONTENTS.c.deleted_at.is_(None)]
    if content_filter.mime_type:
        conditions.append(CONTENTS.c.mime_type == content_filter.mime_type)
    if content_filter.min_size is not None:
        conditions.append(CONTENTS.c.file_size >= content_filter.min_size)
    if content_filter.max_size is not None:
        conditions.append(CONTENTS.c.file_size <= content_filter.max_size)
    if content_filter.created_from is not None:
        conditions.append(CONTENTS.c.created_at >= _to_db_time(content_filter.created_from))
    if content_filter.created_to is not None:
        conditions.append(CONTENTS.c.created_at <= _to_db_time(content_filter.created_to))
    return and_(*conditions)


class SqlRepository(ContentRepository):
    """Repository keeping content records in the ``contents`` table."""

    def __init__(self, engine: Engine, *, create_schema: bool = False) -> None:
        self._engine = engine
        if create_schema:
            SCHEMA.create_all(engine)

    def create_content(self, content: Content) -> None:
        if content.id == NIL_UUID:
            content.id = uuid.uuid4()
        now = _now()
        content.created_at = now
        content.updated_at = now
        with self._engine.begin() as conn:
            conn.execute(insert(CONTENTS).values(**_to_row(content)))

    def get_content_by_id(self, content_id: uuid.UUID) -> Content:
        query = select(CONTENTS).where(
            and_(CONTENTS.c.id == str(content_id), CONTENTS.c.deleted_at.is_(None))
        )
        with self._engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        if row is None:
            raise ContentNotFoundError()
        return _from_row(row)

    def update_content(self, content: Content) -> None:
        content.updated_at = _now()
        values = _to_row(content)
        for key in ("id", "created_at", "deleted_at"):
            del values[key]
        statement = (
            update(CONTENTS)
            .where(and_(CONTENTS.c.id == str(content.id), CONTENTS.c.deleted_at.is_(None)))
            .values(**values)
        )
        with self._engine.begin() as conn:
            result = conn.execute(statement)
        if result.rowcount == 0:
            raise ContentNotFoundError()

    def delete_content(self, content_id: uuid.UUID) -> None:
        statement = (
            update(CONTENTS)
            .where(and_(CONTENTS.c.id == str(content_id), CONTENTS.c.deleted_at.is_(None)))
            .values(deleted_at=_now())
        )
        with self._engine.begin() as conn:
            result = conn.execute(statement)
        if result.rowcount == 0:
            raise ContentNotFoundError()

    def list_content(
        self, content_filter: ContentFilter | None, offset: int, limit: int
    ) -> tuple[list[Content], int]:
        if offset < 0 or limit < 0:
            raise ValueError("offset and limit must not be negative")
        content_filter = content_filter or ContentFilter()
        where = build_where_clause(content_filter)
        ordered = select(CONTENTS).where(where).order_by(CONTENTS.c.created_at.desc())

        with self._engine.connect() as conn:
            if content_filter.metadata:
                rows = conn.execute(ordered).mappings().all()
                matches = [
                    content
                    for content in map(_from_row, rows)
                    if _metadata_matches(content, content_filter.metadata)
                ]
                return matches[offset : offset + limit], len(matches)

            total = conn.execute(
                select(func.count()).select_from(CONTENTS).where(where)
            ).scalar_one()
            rows = conn.execute(ordered.limit(limit).offset(offset)).mappings().all()
        return [_from_row(row) for row in rows], total