import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine

from simplecontents.model import NIL_UUID, Content, ContentFilter
from simplecontents.repository import ContentNotFoundError
from simplecontents.sql_repository import SqlRepository, build_where_clause


@pytest.fixture
def repo():
    engine = create_engine("sqlite://")
    yield SqlRepository(engine, create_schema=True)
    engine.dispose()


def _make(repo, name="a.txt", mime="text/plain", size=10, metadata=None):
    content = Content(
        file_name=name,
        mime_type=mime,
        file_size=size,
        storage_path=f"path/{name}",
        metadata=metadata,
    )
    repo.create_content(content)
    return content


def test_create_assigns_id_and_timestamps(repo):
    content = _make(repo)
    assert content.id != NIL_UUID and content.created_at == content.updated_at


def test_create_keeps_given_id(repo):
    given = uuid.uuid4()
    content = Content(id=given, file_name="b.bin", mime_type="application/pdf", file_size=3)
    repo.create_content(content)
    assert repo.get_content_by_id(given).id == given


def test_get_round_trip(repo):
    content = _make(repo, metadata={"k": "v", "n": 2})
    loaded = repo.get_content_by_id(content.id)
    assert loaded.file_name == content.file_name
    assert loaded.mime_type == content.mime_type
    assert loaded.file_size == content.file_size
    assert loaded.storage_path == content.storage_path
    assert loaded.metadata == {"k": "v", "n": 2}
    assert loaded.created_at == content.created_at
    assert loaded.deleted_at is None


def test_missing_metadata_reads_as_empty(repo):
    content = _make(repo, metadata={})
    assert repo.get_content_by_id(content.id).metadata == {}


def test_get_missing_raises(repo):
    with pytest.raises(ContentNotFoundError):
        repo.get_content_by_id(uuid.uuid4())


def test_update_changes_fields(repo):
    content = _make(repo)
    loaded = repo.get_content_by_id(content.id)
    loaded.file_name = "renamed.txt"
    loaded.metadata = {"x": True}
    repo.update_content(loaded)
    again = repo.get_content_by_id(content.id)
    assert again.file_name == "renamed.txt"
    assert again.metadata == {"x": True}
    assert again.updated_at >= again.created_at
    assert again.created_at == content.created_at


def test_update_missing_raises(repo):
    with pytest.raises(ContentNotFoundError):
        repo.update_content(Content(id=uuid.uuid4(), file_name="n"))


def test_delete_hides_item(repo):
    content = _make(repo)
    repo.delete_content(content.id)
    with pytest.raises(ContentNotFoundError):
        repo.get_content_by_id(content.id)
    with pytest.raises(ContentNotFoundError):
        repo.delete_content(content.id)
    with pytest.raises(ContentNotFoundError):
        repo.update_content(content)


def test_list_filters_by_mime_and_size(repo):
    _make(repo, name="a", mime="text/plain", size=5)
    big = _make(repo, name="b", mime="text/plain", size=50)
    _make(repo, name="c", mime="image/png", size=50)
    items, total = repo.list_content(
        ContentFilter(mime_type="text/plain", min_size=10, max_size=100), 0, 10
    )
    assert total == 1
    assert [item.id for item in items] == [big.id]


def test_list_filters_by_metadata(repo):
    wanted = _make(repo, name="a", metadata={"role": "proof", "n": 1})
    _make(repo, name="b", metadata={"role": "other"})
    _make(repo, name="c")
    items, total = repo.list_content(ContentFilter(metadata={"role": "proof"}), 0, 10)
    assert total == 1 and items[0].id == wanted.id


def test_list_excludes_deleted_and_paginates(repo):
    created = [_make(repo, name=f"f{i}") for i in range(5)]
    repo.delete_content(created[0].id)
    first, total = repo.list_content(None, 0, 3)
    second, total_again = repo.list_content(None, 3, 3)
    assert total == total_again == 4
    assert len(first) == 3 and len(second) == 1
    ids = {item.id for item in first + second}
    assert ids == {c.id for c in created[1:]}


def test_list_ordered_newest_first(repo):
    for i in range(4):
        _make(repo, name=f"f{i}")
    items, _ = repo.list_content(ContentFilter(), 0, 10)
    stamps = [item.created_at for item in items]
    assert stamps == sorted(stamps, reverse=True)


def test_list_created_range(repo):
    _make(repo)
    future = datetime.now(timezone.utc) + timedelta(days=1)
    past = datetime.now(timezone.utc) - timedelta(days=1)
    assert repo.list_content(ContentFilter(created_from=future), 0, 10) == ([], 0)
    items, total = repo.list_content(ContentFilter(created_from=past, created_to=future), 0, 10)
    assert total == 1 and len(items) == 1


def test_list_offset_past_end(repo):
    _make(repo)
    assert repo.list_content(ContentFilter(), 5, 10) == ([], 1)


def test_list_negative_offset_rejected(repo):
    with pytest.raises(ValueError):
        repo.list_content(ContentFilter(), -1, 10)


def test_where_clause_always_excludes_deleted():
    text = str(build_where_clause(ContentFilter()))
    assert "deleted_at IS NULL" in text


def test_where_clause_binds_filter_values():
    clause = build_where_clause(ContentFilter(mime_type="image/png", min_size=7))
    params = clause.compile().params
    assert "image/png" in params.values()
    assert 7 in params.values()
    assert "mime_type" in str(clause) and "file_size" in str(clause)