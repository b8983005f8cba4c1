"""
Models package for the toolbox runtime.
"""

from .manifest import Manifest, McpManifest, build_manifest, build_mcp_manifest
from .parameters import (
    ArrayParameter,
    BooleanParameter,
    FloatParameter,
    IntParameter,
    Parameter,
    ParameterManifest,
    Parameters,
    ParamValue,
    ParamValues,
    StringParameter,
    embed_params,
    new_parameter,
)

__all__ = [
    "Manifest",
    "McpManifest",
    "build_manifest",
    "build_mcp_manifest",
    "ArrayParameter",
    "BooleanParameter",
    "FloatParameter",
    "IntParameter",
    "Parameter",
    "ParameterManifest",
    "Parameters",
    "ParamValue",
    "ParamValues",
    "StringParameter",
    "embed_params",
    "new_parameter",
]
