"""Tests for the document sorter."""

import pytest

from sheetdb.core.exceptions import InvalidQueryError
from sheetdb.domain.entities import Document
from sheetdb.domain.services import DocumentSorter, parse_sort_fields, sort_documents


@pytest.fixture
def people():
    rows = [
        {"name": "carol", "age": "31", "team": "b"},
        {"name": "alice", "age": "9", "team": "a"},
        {"name": "bob", "age": "40", "team": "b"},
        {"name": "dave", "age": "31", "team": "a"},
    ]
    return [Document(fields, row=index + 2) for index, fields in enumerate(rows)]


def names(docs):
    return [d["name"] for d in docs]


class TestParseSortFields:
    """Structured sort specs."""

    def test_mapping(self):
        assert parse_sort_fields({"age": -1, "name": "asc"}) == [("age", -1), ("name", 1)]

    def test_list_of_pairs_and_names(self):
        assert parse_sort_fields([["age", "desc"], "name"]) == [("age", -1), ("name", 1)]

    @pytest.mark.parametrize("direction", [0, 2, "up", True, None, [1]])
    def test_invalid_direction(self, direction):
        with pytest.raises(InvalidQueryError):
            parse_sort_fields({"age": direction})

    def test_invalid_entry(self):
        with pytest.raises(InvalidQueryError):
            parse_sort_fields([["age", 1, "extra"]])


class TestDocumentSorter:
    """Ordering behavior."""

    def test_no_comparator_keeps_storage_order(self, people):
        assert names(DocumentSorter(None).sort(people)) == ["carol", "alice", "bob", "dave"]
        assert names(DocumentSorter("").sort(people)) == ["carol", "alice", "bob", "dave"]

    def test_numeric_ascending(self, people):
        assert names(sort_documents(people, {"age": 1})) == ["alice", "carol", "dave", "bob"]

    def test_descending_is_stable(self, people):
        assert names(sort_documents(people, {"age": -1})) == ["bob", "carol", "dave", "alice"]

    def test_multiple_keys(self, people):
        result = sort_documents(people, [["team", 1], ["age", -1]])
        assert names(result) == ["dave", "alice", "bob", "carol"]

    def test_input_is_not_modified(self, people):
        sort_documents(people, {"age": 1})
        assert names(people) == ["carol", "alice", "bob", "dave"]

    def test_missing_values_sort_first(self, people):
        people.append(Document({"name": "eve"}, row=6))
        assert names(sort_documents(people, {"age": 1}))[0] == "eve"

    def test_comparator_expression(self, people):
        result = sort_documents(people, "compare(b.age, a.age)")
        assert names(result) == ["bob", "carol", "dave", "alice"]

    def test_comparator_expression_by_name(self, people):
        result = sort_documents(people, "compare(a.name, b.name)")
        assert names(result) == ["alice", "bob", "carol", "dave"]

    def test_non_numeric_comparator_result_is_a_tie(self, people):
        result = sort_documents(people, "a.name")
        assert names(result) == ["carol", "alice", "bob", "dave"]

    def test_failing_comparator_is_a_tie(self, people):
        result = sort_documents(people, "-a.name")
        assert names(result) == ["carol", "alice", "bob", "dave"]

    def test_comparator_syntax_error(self):
        with pytest.raises(InvalidQueryError):
            DocumentSorter("compare(a.age,")

    def test_unsupported_comparator_type(self):
        with pytest.raises(InvalidQueryError):
            DocumentSorter(42)
