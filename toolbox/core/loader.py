"""
Loading tool configurations from a YAML tools file.

A tools file holds a top-level ``tools`` mapping from tool name to its
configuration document::

    tools:
      table_stats:
        type: mysql-list-table-stats
        source: my-mysql
        description: Statistics for every table
        authRequired: [my-google-auth]

Decoding goes through the registry so each tool type validates its own
document.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigDecodeError, ToolNotFoundError
from .registry import ToolRegistry
from .sources import SourceProvider

logger = logging.getLogger(__name__)


def parse_tools_document(data: Any, registry: ToolRegistry) -> Dict[str, Any]:
    """
    Decode every tool in an already-parsed tools document.

    Returns:
        Tool name -> ToolConfig, in file order

    Raises:
        ConfigDecodeError: If the document or any tool in it is invalid
    """
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigDecodeError("tools file must contain a mapping at root level")

    tools = data.get("tools") or {}
    if not isinstance(tools, Mapping):
        raise ConfigDecodeError("'tools' must be a mapping of tool name to configuration")

    configs: Dict[str, Any] = {}
    for name, raw in tools.items():
        if not isinstance(raw, Mapping):
            raise ConfigDecodeError(f"configuration for tool {name!r} must be a mapping", tool_name=name)
        tool_type = raw.get("type")
        if not tool_type:
            raise ConfigDecodeError(f"tool {name!r} is missing required field 'type'", tool_name=name)
        if not isinstance(tool_type, str):
            raise ConfigDecodeError(
                f"tool {name!r} has an invalid 'type': expected a string, got {type(tool_type).__name__}",
                tool_name=name,
            )
        configs[name] = registry.decode(tool_type, name, raw)

    return configs


def load_tool_configs(path: Union[str, Path], registry: ToolRegistry) -> Dict[str, Any]:
    """
    Read a YAML tools file and decode every tool it declares.

    Raises:
        ConfigDecodeError: Invalid YAML or an invalid tool configuration
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigDecodeError(f"Invalid YAML in tools file {path}: {e}")

    configs = parse_tools_document(data, registry)
    logger.info(
        "Tool configurations loaded",
        extra={"file_path": str(path), "tool_count": len(configs)}
    )
    return configs


def initialize_tools(
    configs: Mapping[str, Any],
    sources: Optional[SourceProvider] = None,
) -> Dict[str, Any]:
    """Initialize every decoded config into its tool."""
    tools = {}
    for name, config in configs.items():
        tools[name] = config.initialize(sources)
        logger.debug("Tool initialized", extra={"tool_name": name, "tool_type": config.type})
    return tools


def get_tool(tools: Mapping[str, Any], name: str) -> Any:
    """Look up an initialized tool, raising ToolNotFoundError when absent."""
    try:
        return tools[name]
    except KeyError:
        raise ToolNotFoundError(name)
