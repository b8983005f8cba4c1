"""
Shared fixtures for toolbox tests.
"""

import asyncio
import os
import sys
from typing import Any, List, Optional, Sequence

import pytest

# Add the repository root to the path for package imports
package_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.dirname(package_dir))

from toolbox.core.registry import build_registry
from toolbox.core.sources import SourceManager, SQLiteSource
from toolbox.tools.mysql.list_table_stats import ListTableStatsConfig


class RecordingMySQLSource:
    """MySQL-compatible source that records statements instead of running them."""

    def __init__(self, rows: Optional[List[dict]] = None, error: Optional[Exception] = None, delay: float = 0):
        self.rows = rows if rows is not None else [{"table_schema": "shop", "table_name": "orders"}]
        self.error = error
        self.delay = delay
        self.calls: List[tuple] = []
        self.cancelled = False

    def source_type(self) -> str:
        return "mysql"

    def mysql_pool(self) -> Any:
        return None

    async def run_sql(self, statement: str, params: Sequence[Any]) -> Any:
        self.calls.append((statement, list(params)))
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.rows


@pytest.fixture
def registry():
    """Registry with the built-in tool types."""
    return build_registry()


@pytest.fixture
def mysql_source():
    return RecordingMySQLSource()


@pytest.fixture
def make_mysql_source():
    """Factory for recording sources with custom rows, errors, or delays."""
    return RecordingMySQLSource


@pytest.fixture
def source_provider(mysql_source):
    return SourceManager({"my-mysql": mysql_source})


@pytest.fixture
def stats_config():
    return ListTableStatsConfig(
        name="list_table_stats",
        type="mysql-list-table-stats",
        source="my-mysql",
        description="Statistics for every user table",
    )


@pytest.fixture
def stats_tool(stats_config):
    return stats_config.initialize()


@pytest.fixture
def secure_stats_tool(stats_config):
    return stats_config.model_copy(update={"auth_required": ("oauth",)}).initialize()


@pytest.fixture
def table_stats_db():
    """SQLite source holding a small table of per-table statistics."""
    source = SQLiteSource("stats-db")
    conn = source.sqlite_connection()
    conn.execute(
        """
        CREATE TABLE table_stats(
            table_schema TEXT,
            table_name TEXT,
            row_count INTEGER,
            rows_fetched INTEGER,
            total_latency_secs REAL
        )
        """
    )
    conn.executemany(
        "INSERT INTO table_stats VALUES (?, ?, ?, ?, ?)",
        [
            ("shop", "orders", 500, 10, 1.5),
            ("shop", "customers", 200, 900, 7.25),
            ("hr", "employees", 50, 300, 3.0),
            ("hr", "orders", 1000, 20, 0.5),
        ],
    )
    conn.commit()
    yield source
    source.close()
