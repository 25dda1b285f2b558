"""Tests for the document engine."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from sheetdb.application.services import DocumentEngine, SchemaManager, parse_limit
from sheetdb.core.exceptions import InvalidQueryError, RequestError, StaleRowError
from sheetdb.domain.services import DocumentIdGenerator
from sheetdb.infrastructure.storage import MemoryTableStore


@pytest_asyncio.fixture
async def engine(memory_store) -> DocumentEngine:
    await SchemaManager(memory_store).get_or_create("users")
    return DocumentEngine(memory_store, "users")


async def seed(engine, *documents):
    return [await engine.insert_one(doc) for doc in documents]


class TestParseLimit:
    """Normalization of the limit option."""

    @pytest.mark.parametrize("value, expected", [(None, None), (0, None), (2, 2), (3.0, 3)])
    def test_valid(self, value, expected):
        assert parse_limit(value) == expected

    @pytest.mark.parametrize("value", [-1, 1.5, True, "2", [2]])
    def test_invalid(self, value):
        with pytest.raises(InvalidQueryError):
            parse_limit(value)


class TestInsert:
    """insert_one."""

    @pytest.mark.asyncio
    async def test_insert_then_find_by_id(self, engine):
        inserted = await engine.insert_one({"name": "Ada", "age": 36})

        assert DocumentIdGenerator.is_generated(inserted["_id"])
        assert inserted["createdAt"].endswith("Z")

        found = await engine.find_one({"_id": inserted["_id"]})
        assert found.to_dict() == {
            "_id": inserted["_id"],
            "createdAt": inserted["createdAt"],
            "name": "Ada",
            "age": "36",
        }

    @pytest.mark.asyncio
    async def test_supplied_id_and_created_at_are_kept(self, engine):
        inserted = await engine.insert_one({"_id": "user-1", "createdAt": "yesterday"})

        assert inserted["_id"] == "user-1"
        assert inserted["createdAt"] == "yesterday"

    @pytest.mark.asyncio
    async def test_empty_id_is_replaced(self, engine):
        inserted = await engine.insert_one({"_id": "", "name": "Ada"})

        assert DocumentIdGenerator.is_generated(inserted["_id"])

    @pytest.mark.asyncio
    async def test_new_keys_become_trailing_columns(self, engine, memory_store):
        await engine.insert_one({"name": "Ada"})
        await engine.insert_one({"email": "bob@example.com"})

        assert await memory_store.read_header("users") == ["_id", "createdAt", "name", "email"]
        rows = await memory_store.read_all("users")
        assert rows[1][3:] == []
        assert rows[2][2] == ""
        assert rows[2][3] == "bob@example.com"

    @pytest.mark.asyncio
    async def test_row_key_is_never_stored(self, engine, memory_store):
        await engine.insert_one({"name": "Ada", "_row": 99})

        assert "_row" not in await memory_store.read_header("users")

    @pytest.mark.asyncio
    async def test_payload_must_be_an_object(self, engine):
        with pytest.raises(RequestError):
            await engine.insert_one(["not", "a", "document"])


class TestFind:
    """find and find_one."""

    @pytest.mark.asyncio
    async def test_gt_returns_matches_in_storage_order(self, engine):
        await seed(engine, {"age": "25"}, {"age": "31"}, {"age": "40"})

        docs = await engine.find({"age": {"$gt": 30}})

        assert [d["age"] for d in docs] == ["31", "40"]
        assert [d.row for d in docs] == [3, 4]

    @pytest.mark.asyncio
    async def test_limit_after_sort_is_repeatable(self, engine):
        await seed(engine, *({"n": n} for n in (5, 3, 9, 1, 7)))

        first = await engine.find({}, {"sort": {"n": -1}, "limit": 2})
        second = await engine.find({}, {"sort": {"n": -1}, "limit": 2})

        assert [d["n"] for d in first] == ["9", "7"]
        assert [d.to_dict() for d in first] == [d.to_dict() for d in second]

    @pytest.mark.asyncio
    async def test_limit_zero_means_no_limit(self, engine):
        await seed(engine, {"n": 1}, {"n": 2})

        assert len(await engine.find({}, {"limit": 0})) == 2

    @pytest.mark.asyncio
    async def test_comparator_expression_sort(self, engine):
        await seed(engine, {"name": "carol"}, {"name": "alice"}, {"name": "bob"})

        docs = await engine.find({}, {"sort": "compare(a.name, b.name)"})

        assert [d["name"] for d in docs] == ["alice", "bob", "carol"]

    @pytest.mark.asyncio
    async def test_where_query(self, engine):
        await seed(engine, {"name": "Ada", "age": 36}, {"name": "Bob", "age": 17})

        docs = await engine.find({"$where": "age >= 18"})

        assert [d["name"] for d in docs] == ["Ada"]

    @pytest.mark.asyncio
    async def test_large_integer_equality(self, engine):
        await seed(engine, {"n": 12345678901234567890}, {"n": 12345678901234567891})

        docs = await engine.find({"n": 12345678901234567890})

        assert [d["n"] for d in docs] == ["12345678901234567890"]

    @pytest.mark.asyncio
    async def test_where_reaches_fields_that_are_not_identifiers(self, engine):
        await seed(engine, {"first name": "Ada"}, {"first name": "Bob"})

        docs = await engine.find({"$where": "doc['first name'] == 'Ada'"})

        assert [d["first name"] for d in docs] == ["Ada"]

    @pytest.mark.asyncio
    async def test_where_with_exponent_literal(self, engine):
        await seed(engine, {"n": 999}, {"n": "2e3"})

        docs = await engine.find({"$where": "n > 1e3"})

        assert [d["n"] for d in docs] == ["2e3"]

    @pytest.mark.asyncio
    async def test_malformed_regex_excludes_instead_of_failing(self, engine):
        await seed(engine, {"name": "Ada"})

        assert await engine.find({"name": {"$regex": "("}}) == []

    @pytest.mark.asyncio
    async def test_invalid_options(self, engine):
        with pytest.raises(InvalidQueryError):
            await engine.find({}, ["limit", 1])
        with pytest.raises(InvalidQueryError):
            await engine.find({}, {"limit": -3})
        with pytest.raises(InvalidQueryError):
            await engine.find({}, {"sort": {"name": "sideways"}})

    @pytest.mark.asyncio
    async def test_find_one_without_match(self, engine):
        assert await engine.find_one({"name": "nobody"}) is None

    @pytest.mark.asyncio
    async def test_find_on_empty_collection(self, engine):
        assert await engine.find({}) == []


class TestUpdate:
    """update_one."""

    @pytest.mark.asyncio
    async def test_update_appends_column_and_leaves_others_alone(self, engine, memory_store):
        await seed(
            engine,
            {"_id": "x", "name": "Ada"},
            {"_id": "y", "name": "Bob"},
        )

        result = await engine.update_one({"_id": "x"}, {"status": "done"})

        assert result.to_dict() == {"modifiedCount": 1}
        assert (await memory_store.read_header("users"))[-1] == "status"
        assert (await engine.find_one({"_id": "x"}))["status"] == "done"
        assert "status" not in await engine.find_one({"_id": "y"})

    @pytest.mark.asyncio
    async def test_update_writes_every_match(self, engine):
        await seed(engine, {"team": "a"}, {"team": "a"}, {"team": "b"})

        result = await engine.update_one({"team": "a"}, {"flag": True})

        assert result.modified_count == 2
        assert [d["flag"] for d in await engine.find({"flag": "TRUE"})] == ["TRUE", "TRUE"]

    @pytest.mark.asyncio
    async def test_update_existing_column(self, engine, memory_store):
        await seed(engine, {"_id": "x", "age": 36})

        await engine.update_one({"_id": "x"}, {"age": 37})

        assert (await engine.find_one({"_id": "x"}))["age"] == "37"
        assert await memory_store.read_header("users") == ["_id", "createdAt", "age"]

    @pytest.mark.asyncio
    async def test_update_without_matches_adds_no_columns(self, engine, memory_store):
        await seed(engine, {"_id": "x"})

        result = await engine.update_one({"_id": "nope"}, {"status": "done"})

        assert result.modified_count == 0
        assert "status" not in await memory_store.read_header("users")

    @pytest.mark.asyncio
    async def test_update_cannot_change_id(self, engine):
        await seed(engine, {"_id": "x", "name": "Ada"})

        result = await engine.update_one({"_id": "x"}, {"_id": "other", "name": "Eve"})

        assert result.modified_count == 1
        found = await engine.find_one({"_id": "x"})
        assert found is not None
        assert found["name"] == "Eve"
        assert await engine.find_one({"_id": "other"}) is None

    @pytest.mark.asyncio
    async def test_update_payload_must_be_an_object(self, engine):
        with pytest.raises(RequestError):
            await engine.update_one({}, "status=done")


class TestDelete:
    """delete_many."""

    @pytest.mark.asyncio
    async def test_delete_non_adjacent_rows(self, engine):
        # Rows 2..7; the matches sit on rows 3, 5 and 7
        await seed(engine, *({"n": n, "drop": n % 2 == 1} for n in range(6)))

        result = await engine.delete_many({"drop": "TRUE"})

        assert result.to_dict() == {"deletedCount": 3}
        remaining = await engine.find({})
        assert [d["n"] for d in remaining] == ["0", "2", "4"]
        assert [d.row for d in remaining] == [2, 3, 4]

    @pytest.mark.asyncio
    async def test_delete_deletes_bottom_up(self, memory_store):
        await SchemaManager(memory_store).get_or_create("users")
        engine = DocumentEngine(memory_store, "users")
        await seed(engine, {"n": 1}, {"n": 2}, {"n": 3})

        memory_store.delete_row = AsyncMock(wraps=memory_store.delete_row)
        await engine.delete_many({})

        rows = [call.args[1] for call in memory_store.delete_row.await_args_list]
        assert rows == [4, 3, 2]

    @pytest.mark.asyncio
    async def test_delete_without_matches(self, engine):
        await seed(engine, {"n": 1})

        assert (await engine.delete_many({"n": 2})).deleted_count == 0
        assert len(await engine.find({})) == 1


class TestRowIdentityCheck:
    """Optional re-check of _id before writes."""

    @pytest.mark.asyncio
    async def test_stale_row_is_detected(self):
        store = MemoryTableStore({"users": [["_id", "createdAt"], ["a", "t"], ["b", "t"]]})
        engine = DocumentEngine(store, "users", verify_row_identity=True)
        real_find = engine.find

        async def find_then_shift(query, options=None):
            docs = await real_find(query, options)
            # Another writer removes row 2 between the read and the write
            await store.delete_row("users", 2)
            return docs

        engine.find = find_then_shift

        with pytest.raises(StaleRowError) as exc_info:
            await engine.update_one({"_id": "a"}, {"x": 1})

        assert exc_info.value.expected_id == "a"
        assert exc_info.value.actual_id == "b"

    @pytest.mark.asyncio
    async def test_check_passes_when_rows_are_unchanged(self):
        store = MemoryTableStore({"users": [["_id", "createdAt"], ["a", "t"], ["b", "t"]]})
        engine = DocumentEngine(store, "users", verify_row_identity=True)

        assert (await engine.update_one({"_id": "b"}, {"x": 1})).modified_count == 1
        assert (await engine.delete_many({})).deleted_count == 2
