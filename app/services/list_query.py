"""List-query processing shared by collection endpoints.

Collection endpoints fetch every record from the document gateway and shape
the response in memory, in this order:

1. search  - ``field:token`` case-insensitive substring filter
2. sort    - ``field:order`` stable sort on a whitelisted field
3. page    - ``page_number`` / ``page_size`` slice
4. project - map each record to its public shape

Malformed or unknown search/sort parameters never raise; they leave the
collection untouched. ``page_size == 0`` always yields an empty page and an
unbounded ``total_pages`` (rendered as ``None``).
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Generic, Iterable, Mapping, Sequence, TypeVar

from pyuca import Collator

T = TypeVar("T")

Record = Mapping[str, Any]

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ListQuery:
    """Collection query parameters after boundary parsing."""

    page_number: int = 1
    page_size: int = 0
    search: str | None = None
    sort: str | None = None


@dataclass(frozen=True)
class SortField:
    """A field collections may be sorted by.

    Attributes:
        name: Record field name.
        numeric: Compare by numeric value instead of lower-cased text.
    """

    name: str
    numeric: bool = False


@dataclass(frozen=True)
class SearchTerm:
    """Parsed ``field:token`` search parameter."""

    field: str
    token: str


@dataclass(frozen=True)
class SortTerm:
    """Parsed ``field:order`` sort parameter."""

    field: SortField
    descending: bool


@dataclass
class PageResult(Generic[T]):
    """Paginated response envelope."""

    page_number: int
    page_size: int
    count: int
    total_pages: int | None
    has_previous_page: bool
    has_next_page: bool
    data: list[T] = field(default_factory=list)


def parse_int_or_default(value: str | None, default: int) -> int:
    """Parse the leading integer of a query-string value.

    Trailing garbage is ignored (``"12abc"`` → 12). Missing, unparsable and
    zero values fall back to ``default``.

    Examples:
        >>> parse_int_or_default("3", 1)
        3
        >>> parse_int_or_default("2.9", 1)
        2
        >>> parse_int_or_default("abc", 1)
        1
        >>> parse_int_or_default("0", 1)
        1
    """
    if value is None:
        return default
    match = _LEADING_INT_RE.match(value)
    if not match:
        return default
    try:
        parsed = int(match.group(1))
    except ValueError:
        # Digit run beyond the interpreter's int conversion limit
        return default
    return parsed or default


def parse_search(search: str | None, allowed_fields: Iterable[str]) -> SearchTerm | None:
    """Parse a ``field:token`` search parameter.

    Args:
        search: Raw query value.
        allowed_fields: Fields that may be searched.

    Returns:
        SearchTerm, or None when the search must be ignored (missing value,
        empty half, or field outside ``allowed_fields``).
    """
    if not search:
        return None
    field_name, _, token = search.partition(":")
    if not field_name or not token or field_name not in set(allowed_fields):
        return None
    return SearchTerm(field=field_name, token=token)


def parse_sort(sort: str | None, sort_fields: Sequence[SortField]) -> SortTerm | None:
    """Parse a ``field:order`` sort parameter.

    The first entry of ``sort_fields`` is the default; an empty field name
    selects it. ``order == "desc"`` sorts descending, anything else ascending.

    Returns:
        SortTerm, or None when no sort applies (missing value or unknown field).
    """
    if not sort or not sort_fields:
        return None
    field_name, _, order = sort.partition(":")
    # "name:desc:extra" keeps only the order segment
    order = order.split(":", 1)[0]

    if not field_name:
        selected = sort_fields[0]
    else:
        selected = next((f for f in sort_fields if f.name == field_name), None)
        if selected is None:
            return None
    return SortTerm(field=selected, descending=order == "desc")


def apply_search(records: Sequence[Record], term: SearchTerm | None) -> list[Record]:
    """Keep records whose ``term.field`` contains ``term.token`` (case-insensitive)."""
    if term is None:
        return list(records)

    needle = term.token.lower()
    matched = []
    for record in records:
        value = record.get(term.field)
        if value is None or value == "":
            continue
        if needle in str(value).lower():
            matched.append(record)
    return matched


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loading the collation table takes a moment; do it once per process
    return Collator()


def _text_key(value: Any) -> tuple[int, ...]:
    text = str(value).lower() if value not in (None, "") else ""
    return _collator().sort_key(text)


def _numeric_key(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def apply_sort(records: Sequence[Record], term: SortTerm | None) -> list[Record]:
    """Stable-sort records by ``term.field``.

    Python's sort stays stable with ``reverse=True``, so records with equal
    keys keep their relative order in both directions.
    """
    if term is None:
        return list(records)

    name = term.field.name
    if term.field.numeric:
        key: Callable[[Record], Any] = lambda record: _numeric_key(record.get(name))
    else:
        key = lambda record: _text_key(record.get(name))
    return sorted(records, key=key, reverse=term.descending)


def paginate(
    records: Sequence[Record], page_number: int, page_size: int
) -> tuple[list[Record], int | None, bool]:
    """Slice one page out of ``records``.

    Returns:
        Tuple of (page records, total pages, has next page). ``total_pages``
        is None when ``page_size`` is 0; ``has_next_page`` is then true for
        any non-empty collection.
    """
    total = len(records)
    if page_size == 0:
        return [], None, total > 0

    total_pages = math.ceil(total / page_size)
    start = max(0, (page_number - 1) * page_size)
    end = max(0, page_number * page_size)
    return list(records[start:end]), total_pages, page_number < total_pages


def process(
    records: Sequence[Record],
    query: ListQuery,
    *,
    search_fields: Iterable[str],
    sort_fields: Sequence[SortField],
    projector: Callable[[Record], T],
) -> PageResult[T]:
    """Run search, sort, pagination and projection over ``records``.

    Args:
        records: Full collection as returned by the gateway.
        query: Parsed query parameters.
        search_fields: Fields accepted by ``search``.
        sort_fields: Fields accepted by ``sort``; the first is the default.
        projector: Maps a stored record to its public shape.

    Returns:
        PageResult whose ``count`` is the size of the returned page.
    """
    filtered = apply_search(records, parse_search(query.search, search_fields))
    ordered = apply_sort(filtered, parse_sort(query.sort, sort_fields))
    page, total_pages, has_next_page = paginate(ordered, query.page_number, query.page_size)

    return PageResult(
        page_number=query.page_number,
        page_size=query.page_size,
        count=len(page),
        total_pages=total_pages,
        has_previous_page=query.page_number > 1,
        has_next_page=has_next_page,
        data=[projector(record) for record in page],
    )
