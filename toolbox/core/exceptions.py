"""
Custom exceptions for the toolbox runtime.

This module defines application-specific exceptions with HTTP-style status codes
and structured details so a hosting transport can turn them into error responses
without knowing which layer raised them.
"""

from typing import Any, Dict, Optional


class ToolboxException(Exception):
    """
    Base exception class for the toolbox runtime.

    All custom exceptions should inherit from this class to ensure
    consistent error handling and logging.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "toolbox_error",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}


class RegistrationConflictError(ToolboxException):
    """Raised at startup when a tool type identifier is registered twice."""

    def __init__(self, tool_type: str, **kwargs):
        super().__init__(
            f"tool type {tool_type!r} already registered",
            error_type="registration_conflict",
            status_code=500,
            **kwargs
        )
        self.details["tool_type"] = tool_type


class ConfigDecodeError(ToolboxException):
    """Raised when a tool configuration document cannot be decoded."""

    def __init__(
        self,
        message: str,
        tool_name: Optional[str] = None,
        validation_errors: Optional[list] = None,
        **kwargs
    ):
        super().__init__(
            message,
            error_type="config_decode_error",
            status_code=422,
            **kwargs
        )
        if tool_name:
            self.details["tool_name"] = tool_name
        if validation_errors:
            self.details["validation_errors"] = validation_errors


class ParameterError(ToolboxException):
    """Base class for errors raised while validating caller parameters."""

    def __init__(self, message: str, parameter: str, error_type: str, **kwargs):
        super().__init__(message, error_type=error_type, status_code=400, **kwargs)
        self.parameter = parameter
        self.details["parameter"] = parameter


class ParameterTypeMismatchError(ParameterError):
    """Raised when a raw value cannot be coerced to its declared kind."""

    def __init__(self, parameter: str, expected: str, value: Any = None, **kwargs):
        super().__init__(
            f"invalid {parameter!r} parameter; expected {_article(expected)} {expected}, "
            f"got {type(value).__name__}",
            parameter=parameter,
            error_type="parameter_type_mismatch",
            **kwargs
        )
        self.expected = expected
        self.details["expected"] = expected


class MissingRequiredParameterError(ParameterError):
    """Raised when a required parameter is absent from the caller input."""

    def __init__(self, parameter: str, **kwargs):
        super().__init__(
            f"parameter {parameter!r} is required",
            parameter=parameter,
            error_type="missing_required_parameter",
            **kwargs
        )


class SourceResolutionError(ToolboxException):
    """Raised when a tool's source is unknown or lacks the required capability."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        tool_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            error_type="source_resolution_error",
            status_code=400,
            **kwargs
        )
        if source_name:
            self.details["source_name"] = source_name
        if tool_name:
            self.details["tool_name"] = tool_name


class EmbeddingModelNotFoundError(ToolboxException):
    """Raised when a parameter references an embedding model that was not supplied."""

    def __init__(self, model_name: str, parameter: Optional[str] = None, **kwargs):
        super().__init__(
            f"embedding model {model_name!r} not found",
            error_type="embedding_model_not_found",
            status_code=400,
            **kwargs
        )
        self.details["model_name"] = model_name
        if parameter:
            self.details["parameter"] = parameter


class ToolAuthorizationError(ToolboxException):
    """Raised when the caller's verified auth services do not satisfy a tool."""

    def __init__(self, tool_name: str, message: str = "tool invocation not authorized", **kwargs):
        super().__init__(
            message,
            error_type="authorization_error",
            status_code=401,
            **kwargs
        )
        self.details["tool_name"] = tool_name


class ToolNotFoundError(ToolboxException):
    """Raised when a tool name is not present in a loaded toolset."""

    def __init__(self, tool_name: str, **kwargs):
        super().__init__(
            f"tool {tool_name!r} not found",
            error_type="tool_not_found",
            status_code=404,
            **kwargs
        )
        self.details["tool_name"] = tool_name


class ToolExecutionError(ToolboxException):
    """Raised by sources when executing a statement fails."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            error_type="tool_execution_error",
            status_code=500,
            **kwargs
        )
        if source_name:
            self.details["source_name"] = source_name


def _article(word: str) -> str:
    return "an" if word[:1] in "aeiou" else "a"
