"""
Tests for InMemoryStore: users, ownership-checked updates and listings.
"""

import pytest

from persistence.errors import ConflictError, ForbiddenError, NotFoundError
from persistence.memory_store import InMemoryStore
from persistence.records import SESSION_DRAFT, SESSION_PUBLISHED


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.mark.asyncio
async def test_create_and_find_users(memory_store):
    user = await memory_store.create_user("Ada", "  Ada@Example.com ", "hash")
    assert user.email == "ada@example.com"

    assert (await memory_store.find_user_by_email("ADA@example.com")).id == user.id
    assert (await memory_store.find_user_by_id(user.id)).name == "Ada"
    assert await memory_store.find_user_by_email("nobody@example.com") is None
    assert await memory_store.find_user_by_id("missing") is None

    public = user.to_public()
    assert "password_hash" not in public
    assert public["email"] == "ada@example.com"


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(memory_store):
    await memory_store.create_user("Ada", "ada@example.com", "hash")
    with pytest.raises(ConflictError):
        await memory_store.create_user("Other Ada", "ADA@example.com", "hash")


@pytest.mark.asyncio
async def test_create_session_defaults(memory_store):
    record = await memory_store.create_session("owner-1", {"title": "Evening Calm"})
    assert record.status == SESSION_DRAFT
    assert record.tags == []
    assert record.json_file_url == ""
    assert record.created_at == record.updated_at

    stored = await memory_store.get_session(record.id)
    assert stored.title == "Evening Calm"
    assert await memory_store.get_session("missing") is None


@pytest.mark.asyncio
async def test_update_checks_owner_and_leaves_record_untouched(memory_store):
    record = await memory_store.create_session("owner-1", {"title": "Evening Calm"})

    with pytest.raises(ForbiddenError):
        await memory_store.update_session(record.id, "owner-2", {"title": "Hijacked"})
    with pytest.raises(NotFoundError):
        await memory_store.update_session("missing", "owner-1", {"title": "x"})

    stored = await memory_store.get_session(record.id)
    assert stored.title == "Evening Calm"
    assert stored.updated_at == record.updated_at


@pytest.mark.asyncio
async def test_update_applies_only_mutable_fields(memory_store):
    record = await memory_store.create_session("owner-1", {"title": "Evening Calm"})
    updated = await memory_store.update_session(
        record.id,
        "owner-1",
        {"title": "Night Calm", "tags": ["sleep"], "user_id": "owner-2", "id": "other"},
    )

    assert updated.id == record.id
    assert updated.user_id == "owner-1"
    assert updated.title == "Night Calm"
    assert updated.tags == ["sleep"]
    assert updated.updated_at > record.updated_at


@pytest.mark.asyncio
async def test_returned_records_are_copies(memory_store):
    record = await memory_store.create_session("owner-1", {"title": "Evening Calm", "tags": ["a"]})
    record.tags.append("mutated")
    record.title = "mutated"

    stored = await memory_store.get_session(record.id)
    assert stored.tags == ["a"]
    assert stored.title == "Evening Calm"


@pytest.mark.asyncio
async def test_owner_listing_is_most_recently_updated_first(memory_store):
    first = await memory_store.create_session("owner-1", {"title": "First"})
    second = await memory_store.create_session("owner-1", {"title": "Second"})
    await memory_store.create_session("owner-2", {"title": "Foreign"})
    await memory_store.update_session(first.id, "owner-1", {"tags": ["x"]})

    owned = await memory_store.find_sessions_by_owner("owner-1")
    assert [r.id for r in owned] == [first.id, second.id]


@pytest.mark.asyncio
async def test_published_listing_includes_owner_newest_first(memory_store):
    user = await memory_store.create_user("Ada", "ada@example.com", "hash")
    older = await memory_store.create_session(
        user.id, {"title": "Older", "status": SESSION_PUBLISHED}
    )
    newer = await memory_store.create_session(
        user.id, {"title": "Newer", "status": SESSION_PUBLISHED}
    )
    await memory_store.create_session(user.id, {"title": "Draft"})

    published = await memory_store.find_published_sessions()
    assert [r.id for r in published] == [newer.id, older.id]
    assert published[0].owner == {"id": user.id, "name": "Ada", "email": "ada@example.com"}
    assert published[0].to_dict()["owner"]["name"] == "Ada"


@pytest.mark.asyncio
async def test_ping_and_close(memory_store):
    assert await memory_store.ping() is True
    assert await memory_store.close() is None
