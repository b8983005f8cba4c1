"""
Core module for the toolbox runtime.

This module contains the foundational components including configuration,
logging, exceptions, the tool registry, source resolution, and the
invocation pipeline.
"""

from .auth import AccessToken, is_authorized
from .config import Settings, get_settings
from .exceptions import (
    ToolboxException,
    RegistrationConflictError,
    ConfigDecodeError,
    ParameterError,
    ParameterTypeMismatchError,
    MissingRequiredParameterError,
    SourceResolutionError,
    EmbeddingModelNotFoundError,
    ToolAuthorizationError,
    ToolNotFoundError,
    ToolExecutionError,
)
from .invoker import invoke_tool
from .logging import setup_logging
from .registry import ToolRegistry, build_registry
from .sources import (
    MySQLCompatibleSource,
    SQLiteSource,
    SQLSource,
    SourceManager,
    get_compatible_source,
)

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Exceptions
    "ToolboxException",
    "RegistrationConflictError",
    "ConfigDecodeError",
    "ParameterError",
    "ParameterTypeMismatchError",
    "MissingRequiredParameterError",
    "SourceResolutionError",
    "EmbeddingModelNotFoundError",
    "ToolAuthorizationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    # Logging
    "setup_logging",
    # Auth
    "AccessToken",
    "is_authorized",
    # Registry and invocation
    "ToolRegistry",
    "build_registry",
    "invoke_tool",
    # Sources
    "MySQLCompatibleSource",
    "SQLiteSource",
    "SQLSource",
    "SourceManager",
    "get_compatible_source",
]
