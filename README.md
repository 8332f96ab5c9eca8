# simplecontents

A small content library. It keeps file records (name, MIME type, size,
storage path and free-form metadata) in a repository, keeps the file
bytes in a storage backend, and ties the two together in a service that
creates, reads, updates, deletes and lists content items.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `simplecontents.model` – `Content`, `ContentStatus`, `ContentFilter`
  and `ContentEntityAssociation`. `Content.to_dict()` gives a JSON-ready
  mapping with RFC 3339 timestamps; `Content.copy()` gives a shallow copy.
- `simplecontents.repository` – the `ContentRepository` interface,
  `ListOptions`, `ContentNotFoundError`, and `MemoryRepository`, a
  thread-safe in-memory repository. Deletion is a soft delete: deleted
  items are no longer found or listed.
- `simplecontents.sql_repository` – `SqlRepository`, which keeps the same
  records in a `contents` table through a SQLAlchemy engine
  (`SqlRepository(engine, create_schema=True)` creates the table), and
  `build_where_clause()`, which builds the column filter condition.
  Metadata criteria are matched on the decoded JSON after the query.
  Listing is ordered by creation time, newest first.
- `simplecontents.storage` – the `StorageService` interface,
  `PresignedURLOptions`, `StorageNotFoundError`, and `MemoryStorage`,
  which keeps bytes in memory and hands out `memory://<path>` URLs.
- `simplecontents.service` – `ContentService` with `create_content`,
  `get_content`, `get_content_data`, `update_content`, `delete_content`,
  `list_content` and `get_content_url`, plus their input and result
  classes and `InvalidInputError`.

## Behaviour

- `create_content` needs a file name, a MIME type and a positive size,
  otherwise it raises `InvalidInputError`. The data is stored under
  `<content id>/<file name>`; if the repository fails, the stored data is
  removed again.
- `update_content` changes the file name only when one is given and the
  metadata only when it is not `None`.
- `delete_content` removes the record first and then the stored data;
  storage errors at that step are ignored.
- `list_content` uses page 1 and a page size of 20 when they are not
  positive, and reports the total count and number of pages.
- Missing items raise `ContentNotFoundError`.

## Example

```python
from datetime import timedelta

from simplecontents.repository import MemoryRepository
from simplecontents.storage import MemoryStorage
from simplecontents.service import ContentService, CreateContentInput, ListContentInput

service = ContentService(MemoryRepository(), MemoryStorage())
content = service.create_content(
    CreateContentInput(
        file_name="report.pdf",
        mime_type="application/pdf",
        file_size=4,
        data=b"%PDF",
    )
)
result = service.list_content(ListContentInput(mime_type="application/pdf"))
print(result.total_count, result.total_pages)
print(service.get_content_url(content.id, timedelta(hours=1)))
```

To keep records in a database instead:

```python
from sqlalchemy import create_engine
from simplecontents.sql_repository import SqlRepository

repo = SqlRepository(create_engine("sqlite://"), create_schema=True)
```

## What it does not do

The package is a library only. It has no HTTP API, no server and no
command to run; to serve content over HTTP, call `ContentService` from a
web application of your own. Storage is in memory only; there is no
backend for cloud object stores.