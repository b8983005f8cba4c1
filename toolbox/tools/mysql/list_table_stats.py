"""
List Table Stats Tool - size, row count, and I/O statistics for MySQL tables.

Joins ``information_schema.tables`` with ``sys.x$schema_table_statistics`` and
returns one row per user table, optionally narrowed to a schema and/or table
and ordered by a caller-chosen statistic.
"""

import logging
from typing import Any, Optional

from ...core.auth import AccessToken
from ...core.exceptions import ParameterTypeMismatchError
from ...core.query import OptionalEqualsFilter, Placeholder, QueryTemplate, SortCase
from ...core.registry import ToolRegistry
from ...core.sources import MySQLCompatibleSource, SourceProvider, get_compatible_source
from ...models.parameters import IntParameter, Parameters, ParamValues, StringParameter
from ..base import Tool, ToolConfig

logger = logging.getLogger(__name__)

TOOL_TYPE = "mysql-list-table-stats"

DEFAULT_LIMIT = 10

SORT_ORDER = SortCase(
    parameter="sort_by",
    branches={
        "row_count": "row_count",
        "rows_fetched": "rows_fetched",
        "rows_inserted": "rows_inserted",
        "rows_updated": "rows_updated",
        "rows_deleted": "rows_deleted",
    },
    default="total_latency_secs",
)

LIST_TABLE_STATS = QueryTemplate.build(
    """
SELECT
  t.table_schema AS 'table_schema',
  t.table_name AS 'table_name',
  ROUND((t.data_length + t.index_length)/1024/1024,2) AS 'size_MB',
  t.TABLE_ROWS AS 'row_count',
  ROUND(ts.total_latency / 1000000000000, 2) AS 'total_latency_secs',
  ts.rows_fetched AS 'rows_fetched',
  ts.rows_inserted AS 'rows_inserted',
  ts.rows_updated AS 'rows_updated',
  ts.rows_deleted AS 'rows_deleted',
  ts.io_read_requests AS 'io_reads',
  ROUND(ts.io_read_latency / 1000000000000, 2) AS 'io_read_latency',
  ts.io_write_requests AS 'IO Writes',
  ROUND(ts.io_write_latency / 1000000000000, 2) AS 'io_write_latency',
  ts.io_misc_requests AS 'IO Misc',
  ROUND(ts.io_misc_latency / 1000000000000, 2) AS 'io_misc_latency'
FROM
  information_schema.tables AS t
  INNER JOIN
  sys.x$schema_table_statistics AS ts
  ON (t.table_schema = ts.table_schema AND t.table_name = ts.table_name)
WHERE
  t.table_schema NOT IN ('sys', 'information_schema', 'mysql', 'performance_schema')
  AND {schema_filter}
  AND {name_filter}
ORDER BY
  {order_by} DESC
LIMIT {limit};
""",
    schema_filter=OptionalEqualsFilter("t.table_schema", "table_schema"),
    name_filter=OptionalEqualsFilter("t.table_name", "table_name"),
    order_by=SORT_ORDER,
    limit=Placeholder("limit"),
)


class ListTableStatsConfig(ToolConfig):
    """Configuration for ``mysql-list-table-stats`` tools."""

    TOOL_TYPE = TOOL_TYPE

    def initialize(self, sources: Optional[SourceProvider] = None) -> "ListTableStatsTool":
        parameters = Parameters([
            StringParameter(
                name="table_schema",
                default="",
                description=(
                    "(Optional) The database where statistics are to be checked. "
                    "Check all tables visible to the current user if not specified."
                ),
            ),
            StringParameter(
                name="table_name",
                default="",
                description=(
                    "(Optional) Name of the table to be checked. "
                    "Check all tables visible to the current user if not specified."
                ),
            ),
            StringParameter(
                name="sort_by",
                default="",
                description=(
                    "(Optional) The column to sort by: one of "
                    f"{', '.join(SORT_ORDER.keys())}. Defaults to total latency."
                ),
            ),
            IntParameter(
                name="limit",
                default=DEFAULT_LIMIT,
                description=f"(Optional) Max rows to return, default is {DEFAULT_LIMIT}",
            ),
        ])
        return ListTableStatsTool(self, parameters)


class ListTableStatsTool(Tool):
    """
    Reports per-table size and activity statistics.

    Filters and the sort key reach MySQL only as bound arguments; an
    unrecognized ``sort_by`` orders by total latency.
    """

    async def invoke(
        self,
        source_provider: SourceProvider,
        params: ParamValues,
        access_token: Optional[AccessToken] = None,
    ) -> Any:
        values = params.as_map()
        for name in ("table_schema", "table_name", "sort_by"):
            if not isinstance(values.get(name), str):
                raise ParameterTypeMismatchError(name, "string", values.get(name))
        limit = values.get("limit")
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ParameterTypeMismatchError("limit", "integer", limit)

        source = get_compatible_source(
            source_provider, self.source, self.name, self.type, MySQLCompatibleSource
        )

        logger.debug(
            f"executing `{TOOL_TYPE}` tool query: {LIST_TABLE_STATS.statement}",
            extra={
                "tool_name": self.name,
                "source_name": self.source,
                "order_by": SORT_ORDER.effective_column(values["sort_by"]),
            },
        )
        return await source.run_sql(LIST_TABLE_STATS.statement, LIST_TABLE_STATS.bind(values))


def new_config(name: str, raw: Any) -> ListTableStatsConfig:
    return ListTableStatsConfig.decode(name, raw)


def register(registry: ToolRegistry) -> None:
    registry.register_or_raise(TOOL_TYPE, new_config)
