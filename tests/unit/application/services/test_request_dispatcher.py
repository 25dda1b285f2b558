"""Tests for the request dispatcher."""

import pytest

from sheetdb.application.services import RequestDispatcher
from sheetdb.core.exceptions import InvalidQueryError, RequestError


@pytest.fixture
def dispatcher(memory_store) -> RequestDispatcher:
    return RequestDispatcher(memory_store)


@pytest.mark.asyncio
async def test_missing_collection(dispatcher):
    with pytest.raises(RequestError) as exc_info:
        await dispatcher.execute("find")

    assert str(exc_info.value) == "Collection name is required"


@pytest.mark.asyncio
async def test_unknown_action(dispatcher, memory_store):
    with pytest.raises(RequestError) as exc_info:
        await dispatcher.execute("dropCollection", collection="users")

    assert str(exc_info.value) == "Unknown action: dropCollection"
    assert await memory_store.has_table("users") is False


@pytest.mark.asyncio
async def test_collection_check_comes_before_action_check(dispatcher):
    with pytest.raises(RequestError) as exc_info:
        await dispatcher.execute("dropCollection")

    assert str(exc_info.value) == "Collection name is required"


@pytest.mark.asyncio
async def test_get_schema_needs_no_collection(dispatcher):
    await dispatcher.execute("insertOne", collection="users", data={"name": "Ada"})

    schema = await dispatcher.execute("getSchema")

    assert schema == [
        {"collection": "users", "count": 1, "fields": ["_id", "createdAt", "name"]},
    ]


@pytest.mark.asyncio
async def test_first_use_creates_collection(dispatcher, memory_store):
    assert await dispatcher.execute("find", collection="users") == []
    assert await memory_store.read_header("users") == ["_id", "createdAt"]


@pytest.mark.asyncio
async def test_crud_round_trip(dispatcher):
    inserted = await dispatcher.execute("insertOne", collection="users", data={"name": "Ada", "age": 36})
    assert inserted["name"] == "Ada"

    found = await dispatcher.execute("findOne", collection="users", query={"_id": inserted["_id"]})
    assert found["age"] == "36"
    assert "_row" not in found

    updated = await dispatcher.execute(
        "updateOne",
        collection="users",
        query={"_id": inserted["_id"]},
        data={"age": 37},
    )
    assert updated == {"modifiedCount": 1}

    docs = await dispatcher.execute(
        "find",
        collection="users",
        query={"age": {"$gte": 37}},
        options={"sort": {"age": 1}, "limit": 5},
    )
    assert [d["_id"] for d in docs] == [inserted["_id"]]

    deleted = await dispatcher.execute("deleteMany", collection="users", query={"name": "Ada"})
    assert deleted == {"deletedCount": 1}

    assert await dispatcher.execute("findOne", collection="users", query={}) is None


@pytest.mark.asyncio
async def test_query_errors_propagate(dispatcher):
    with pytest.raises(InvalidQueryError):
        await dispatcher.execute("find", collection="users", query={"$where": "age >"})
