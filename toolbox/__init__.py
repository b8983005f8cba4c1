"""
Toolbox Runtime

A pluggable tool layer for agent servers. Tool types register a config
factory in a registry; configured tools declare typed parameters, publish a
generic and an MCP manifest, gate calls on verified auth services, and run
parameterized queries against a named source.
"""

__version__ = "0.1.0"

from .models import Manifest, McpManifest, Parameters, ParamValues

__all__ = [
    "Manifest",
    "McpManifest",
    "Parameters",
    "ParamValues",
    "__version__",
]
