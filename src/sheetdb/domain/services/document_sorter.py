"""Document sorter.

Orders documents either by a structured field/direction specification or by
a comparator expression over two documents ``a`` and ``b``. Sorting is
always stable; without a comparator the storage (row) order is kept.
"""

from collections.abc import Mapping, Sequence
from functools import cmp_to_key
from typing import Any

from sheetdb.core.coercion import is_number, sort_key
from sheetdb.core.exceptions import InvalidQueryError
from sheetdb.core.expressions import Node, evaluate_expression, parse_expression
from sheetdb.core.logging import get_logger

logger = get_logger(__name__)

DIRECTIONS = {
    1: 1,
    -1: -1,
    "asc": 1,
    "ascending": 1,
    "desc": -1,
    "descending": -1,
}


def _direction(field: str, value: Any) -> int:
    key = value.lower() if isinstance(value, str) else value
    if isinstance(key, bool) or not isinstance(key, (int, float, str)) or key not in DIRECTIONS:
        raise InvalidQueryError(
            f"Invalid sort direction for '{field}': {value!r} (use 1, -1, 'asc' or 'desc')"
        )
    return DIRECTIONS[key]


def parse_sort_fields(spec: Mapping[str, Any] | Sequence[Any]) -> list[tuple[str, int]]:
    """Normalize a structured sort spec to ``[(field, 1 | -1), ...]``.

    Accepts ``{"age": -1, "name": "asc"}`` or ``[["age", -1], ["name", 1]]``.
    Earlier entries take priority.
    """
    if isinstance(spec, Mapping):
        pairs = list(spec.items())
    else:
        pairs = []
        for entry in spec:
            if isinstance(entry, str):
                pairs.append((entry, 1))
            elif isinstance(entry, Sequence) and len(entry) == 2 and isinstance(entry[0], str):
                pairs.append((entry[0], entry[1]))
            else:
                raise InvalidQueryError(f"Invalid sort entry: {entry!r}")

    return [(field, _direction(field, direction)) for field, direction in pairs]


class DocumentSorter:
    """Compiled sort specification.

    Example:
        DocumentSorter({"age": -1}).sort(docs)
        DocumentSorter("compare(b.age, a.age)").sort(docs)
    """

    def __init__(self, comparator: Any = None) -> None:
        """Compile a comparator.

        Args:
            comparator: None for storage order, a structured spec (mapping or
                list of pairs), or an expression string over ``a`` and ``b``.

        Raises:
            InvalidQueryError: If the comparator cannot be interpreted.
        """
        self.fields: list[tuple[str, int]] = []
        self.expression: Node | None = None

        if comparator is None or comparator == "":
            return
        if isinstance(comparator, str):
            self.expression = parse_expression(comparator)
        elif isinstance(comparator, (Mapping, list, tuple)):
            self.fields = parse_sort_fields(comparator)
        else:
            raise InvalidQueryError(
                f"Sort must be an object, a list or an expression, got {type(comparator).__name__}"
            )

    def sort(self, docs: list[Any]) -> list[Any]:
        """Return the documents in sorted order. The input list is not modified."""
        ordered = list(docs)

        if self.expression is not None:
            return sorted(ordered, key=cmp_to_key(self._compare))

        # Stable multi-key sort: apply keys from lowest to highest priority
        for field, direction in reversed(self.fields):
            ordered.sort(key=lambda doc: sort_key(doc.get(field)), reverse=direction < 0)
        return ordered

    def _compare(self, a: Mapping[str, Any], b: Mapping[str, Any]) -> int:
        try:
            result = evaluate_expression(self.expression, {"a": a, "b": b})
        except Exception as e:
            logger.debug("Comparator evaluation failed, treating pair as equal", error=str(e))
            return 0

        if not is_number(result):
            return 0
        return (result > 0) - (result < 0)


def sort_documents(docs: list[Any], comparator: Any = None) -> list[Any]:
    """Convenience wrapper: compile ``comparator`` and sort ``docs``."""
    return DocumentSorter(comparator).sort(docs)
