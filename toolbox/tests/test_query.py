"""
Tests for safe query templating.

The filter and sort fragments are executed against an SQLite table so the
tests check what the database actually does with the bound values.
"""

import pytest

from toolbox.core.exceptions import MissingRequiredParameterError
from toolbox.core.query import OptionalEqualsFilter, Placeholder, QueryTemplate, SortCase

SORT = SortCase(
    parameter="sort_by",
    branches={"row_count": "row_count", "rows_fetched": "rows_fetched"},
    default="total_latency_secs",
)

STATS = QueryTemplate.build(
    """
SELECT table_schema, table_name
FROM table_stats
WHERE {schema_filter}
  AND {name_filter}
ORDER BY
  {order_by} DESC
LIMIT {limit}
""",
    schema_filter=OptionalEqualsFilter("table_schema", "table_schema"),
    name_filter=OptionalEqualsFilter("table_name", "table_name"),
    order_by=SORT,
    limit=Placeholder("limit"),
)


def _values(**overrides):
    values = {"table_schema": "", "table_name": "", "sort_by": "", "limit": 10}
    values.update(overrides)
    return values


async def _names(source, **overrides):
    rows = await source.run_sql(STATS.statement, STATS.bind(_values(**overrides)))
    return [(r["table_schema"], r["table_name"]) for r in rows]


class TestFragments:
    """Tests for the rendered SQL of each fragment."""

    def test_filter(self):
        f = OptionalEqualsFilter("t.table_schema", "table_schema")
        assert f.sql() == "(COALESCE(?, '') = '' OR t.table_schema = ?)"
        assert f.bindings() == ("table_schema", "table_schema")

    def test_sort_case(self):
        assert SORT.sql() == (
            "CASE"
            "\n    WHEN ? = 'row_count' THEN row_count"
            "\n    WHEN ? = 'rows_fetched' THEN rows_fetched"
            "\n    ELSE total_latency_secs"
            "\n  END"
        )
        assert SORT.bindings() == ("sort_by", "sort_by")
        assert SORT.keys() == ["row_count", "rows_fetched"]

    def test_effective_column(self):
        assert SORT.effective_column("rows_fetched") == "rows_fetched"
        assert SORT.effective_column("size_MB") == "total_latency_secs"
        assert SORT.effective_column("") == "total_latency_secs"

    @pytest.mark.parametrize("column", ["name; DROP TABLE x", "a b", "1col", "x.y.z"])
    def test_unsafe_columns_rejected(self, column):
        with pytest.raises(ValueError):
            OptionalEqualsFilter(column, "p")
        with pytest.raises(ValueError):
            SortCase("p", {"k": column}, "ok")

    def test_unsafe_sort_key_rejected(self):
        with pytest.raises(ValueError, match="sort key"):
            SortCase("p", {"x' OR '1'='1": "col"}, "col")

    def test_sort_needs_branches(self):
        with pytest.raises(ValueError):
            SortCase("p", {}, "col")


class TestQueryTemplate:
    """Tests for compiling templates and binding values."""

    def test_bindings_in_textual_order(self):
        assert STATS.bindings == (
            "table_schema", "table_schema",
            "table_name", "table_name",
            "sort_by", "sort_by",
            "limit",
        )
        assert STATS.statement.count("?") == 7

    def test_bind(self):
        args = STATS.bind(_values(table_schema="shop", sort_by="row_count", limit=3))
        assert args == ["shop", "shop", "", "", "row_count", "row_count", 3]

    def test_bind_missing_value(self):
        with pytest.raises(MissingRequiredParameterError):
            STATS.bind({"table_schema": ""})

    def test_missing_fragment(self):
        with pytest.raises(ValueError, match="no fragment"):
            QueryTemplate.build("SELECT {x}")

    def test_placeholder_count_checked(self):
        with pytest.raises(ValueError, match="placeholders"):
            QueryTemplate("SELECT ? + ?", ["a"])

    def test_literal_braces(self):
        template = QueryTemplate.build("SELECT '{{}}' WHERE a = {a}", a=Placeholder("a"))
        assert template.statement == "SELECT '{}' WHERE a = ?"


class TestAgainstSQLite:
    """Fragments evaluated by a real database."""

    @pytest.mark.asyncio
    async def test_empty_filters_return_all_rows(self, table_stats_db):
        assert len(await _names(table_stats_db)) == 4

    @pytest.mark.asyncio
    async def test_null_filter_returns_all_rows(self, table_stats_db):
        assert len(await _names(table_stats_db, table_schema=None)) == 4

    @pytest.mark.asyncio
    async def test_filter_exact_match(self, table_stats_db):
        assert sorted(await _names(table_stats_db, table_schema="hr")) == [
            ("hr", "employees"),
            ("hr", "orders"),
        ]
        assert await _names(table_stats_db, table_name="orders", table_schema="shop") == [
            ("shop", "orders"),
        ]
        assert await _names(table_stats_db, table_schema="h") == []

    @pytest.mark.asyncio
    async def test_default_ordering(self, table_stats_db):
        assert await _names(table_stats_db) == [
            ("shop", "customers"),
            ("hr", "employees"),
            ("shop", "orders"),
            ("hr", "orders"),
        ]

    @pytest.mark.asyncio
    async def test_sort_key(self, table_stats_db):
        assert await _names(table_stats_db, sort_by="row_count") == [
            ("hr", "orders"),
            ("shop", "orders"),
            ("shop", "customers"),
            ("hr", "employees"),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["size_MB", "ROW_COUNT", "row_count DESC", "'; DROP TABLE table_stats; --"])
    async def test_unknown_sort_key_falls_back_to_default(self, table_stats_db, key):
        default_order = await _names(table_stats_db)
        assert await _names(table_stats_db, sort_by=key) == default_order

    @pytest.mark.asyncio
    async def test_limit(self, table_stats_db):
        assert len(await _names(table_stats_db, limit=2)) == 2
