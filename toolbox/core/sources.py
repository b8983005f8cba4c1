"""
Source capability interfaces and resolution.

Tools never own a data source. They name one in their configuration and
resolve it at invocation time through a :class:`SourceProvider`, checking that
the resolved object offers the capability the tool needs. The execution engine
behind a source (connections, pooling, retries) is the source's business.
"""

import asyncio
import logging
import sqlite3
import threading
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Type, TypeVar, runtime_checkable

from .exceptions import SourceResolutionError, ToolExecutionError


logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class Source(Protocol):
    """Anything that can be registered as a named source."""

    def source_type(self) -> str:
        ...


@runtime_checkable
class SQLSource(Protocol):
    """Capability: execute a statement with positional bound arguments."""

    async def run_sql(self, statement: str, params: Sequence[Any]) -> Any:
        ...


@runtime_checkable
class MySQLCompatibleSource(SQLSource, Protocol):
    """Capability required by MySQL catalog tools."""

    def mysql_pool(self) -> Any:
        ...


class SourceProvider(Protocol):
    """Looks up configured sources by name."""

    def get_source(self, name: str) -> Optional[Any]:
        ...


class SourceManager:
    """
    Dictionary-backed source provider.

    Sources are added once at startup; lookups afterwards are read-only and
    safe to share between concurrent invocations.
    """

    def __init__(self, sources: Optional[Mapping[str, Any]] = None):
        self._sources: Dict[str, Any] = dict(sources or {})

    def add_source(self, name: str, source: Any) -> None:
        if name in self._sources:
            raise ValueError(f"source {name!r} already configured")
        self._sources[name] = source
        logger.info("Source added", extra={"source_name": name})

    def get_source(self, name: str) -> Optional[Any]:
        return self._sources.get(name)

    def names(self) -> List[str]:
        return list(self._sources)


def get_compatible_source(
    provider: SourceProvider,
    source_name: str,
    tool_name: str,
    tool_type: str,
    capability: Type[T],
) -> T:
    """
    Resolve ``source_name`` and check it implements ``capability``.

    Raises:
        SourceResolutionError: The source is unknown or lacks the capability
    """
    source = provider.get_source(source_name)
    if source is None:
        raise SourceResolutionError(
            f"unable to retrieve source {source_name!r} for tool {tool_name!r}",
            source_name=source_name,
            tool_name=tool_name,
        )
    if not isinstance(source, capability):
        raise SourceResolutionError(
            f"invalid source for {tool_type!r} tool: source {source_name!r} "
            f"does not provide {capability.__name__}",
            source_name=source_name,
            tool_name=tool_name,
        )
    return source


class _PendingStatement:
    """Per-call state shared between the awaiting task and the worker thread."""

    __slots__ = ("guard", "running", "cancelled")

    def __init__(self):
        self.guard = threading.Lock()
        self.running = False
        self.cancelled = False


class SQLiteSource:
    """
    SQLite-backed source for local development and tests.

    Statements run in a worker thread, one at a time on the shared connection.
    Cancelling the awaiting task interrupts that call's statement if it is
    running, or drops it if it is still waiting for the connection. Other
    calls are never interrupted.
    """

    SOURCE_TYPE = "sqlite"

    def __init__(self, name: str, database: str = ":memory:"):
        self.name = name
        self.database = database
        self._conn = sqlite3.connect(database, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()

    def source_type(self) -> str:
        return self.SOURCE_TYPE

    def sqlite_connection(self) -> sqlite3.Connection:
        return self._conn

    async def run_sql(self, statement: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        pending = _PendingStatement()
        try:
            return await asyncio.to_thread(self._execute, statement, list(params), pending)
        except asyncio.CancelledError:
            with pending.guard:
                pending.cancelled = True
                if pending.running:
                    self._conn.interrupt()
                    logger.warning("Statement interrupted by cancellation", extra={"source_name": self.name})
            raise

    def _execute(self, statement: str, params: List[Any], pending: _PendingStatement) -> List[Dict[str, Any]]:
        with self._lock:
            with pending.guard:
                if pending.cancelled:
                    logger.debug("Skipping statement cancelled while queued", extra={"source_name": self.name})
                    return []
                pending.running = True
            try:
                cursor = self._conn.execute(statement, params)
                return [dict(row) for row in cursor.fetchall()]
            except sqlite3.Error as e:
                raise ToolExecutionError(f"unable to execute query: {e}", source_name=self.name) from e
            finally:
                with pending.guard:
                    pending.running = False

    def close(self) -> None:
        self._conn.close()
