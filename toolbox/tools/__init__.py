"""
Built-in tool types.

Every module listed in ``BUILTIN_TOOL_MODULES`` exposes ``register(registry)``;
``build_registry()`` calls each hook once at startup.
"""

from .base import Tool, ToolConfig
from .mysql import list_table_stats

BUILTIN_TOOL_MODULES = (
    list_table_stats,
)

__all__ = [
    "Tool",
    "ToolConfig",
    "BUILTIN_TOOL_MODULES",
]
