"""
Pydantic models for tool discovery manifests.

Two projections are derived from the same parameter descriptors: the generic
manifest consumed by the host and the MCP tool manifest. Both are built once
when a tool is initialized and never change afterwards.
"""

from typing import Any, Dict, List, Optional, Sequence

from jsonschema import Draft7Validator, SchemaError
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .parameters import ParameterManifest, Parameters

AUTH_INVOKE_META_KEY = "toolbox/authInvoke"


def _check_json_schema(v: Any) -> Dict[str, Any]:
    """Validate that a value is a usable JSON Schema object."""
    if not isinstance(v, dict):
        raise ValueError("Schema must be a JSON object")

    try:
        Draft7Validator.check_schema(v)
    except SchemaError as e:
        raise ValueError(f"Invalid JSON Schema: {e.message}")

    # Allow $ref schemas (which don't require 'type') or schemas with 'type'
    if 'type' not in v and '$ref' not in v:
        raise ValueError("Schema must have either a 'type' property or a '$ref' property")
    return v


class Manifest(BaseModel):
    """Generic discovery manifest for a tool."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: str = Field(..., description="Human-readable description of what this tool does")
    parameters: List[ParameterManifest] = Field(
        default_factory=list,
        description="Parameters in declaration order"
    )
    auth_required: List[str] = Field(
        default_factory=list,
        alias="authRequired",
        description="Auth services, any one of which authorizes an invocation"
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert manifest to dictionary format."""
        return {
            "description": self.description,
            "parameters": [p.to_dict() for p in self.parameters],
            "authRequired": list(self.auth_required),
        }


class McpManifest(BaseModel):
    """MCP ``tools/list`` entry for a tool."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Tool name as exposed to MCP clients")
    description: str = Field(..., description="Human-readable description of what this tool does")
    input_schema: Dict[str, Any] = Field(..., alias="inputSchema")
    output_schema: Optional[Dict[str, Any]] = Field(default=None, alias="outputSchema")
    meta: Optional[Dict[str, Any]] = Field(default=None, alias="_meta")

    @field_validator('input_schema')
    @classmethod
    def validate_input_schema(cls, v: Any) -> Dict[str, Any]:
        return _check_json_schema(v)

    @field_validator('output_schema')
    @classmethod
    def validate_output_schema(cls, v: Any) -> Optional[Dict[str, Any]]:
        if v is None:
            return v
        return _check_json_schema(v)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format, dropping unset optional members."""
        return self.model_dump(by_alias=True, exclude_none=True)


def build_manifest(
    description: str,
    auth_required: Optional[Sequence[str]],
    parameters: Parameters,
) -> Manifest:
    """Build the generic manifest for a tool."""
    return Manifest(
        description=description,
        parameters=parameters.manifest(),
        auth_required=list(auth_required or []),
    )


def build_mcp_manifest(
    name: str,
    description: str,
    auth_required: Optional[Sequence[str]],
    parameters: Parameters,
    output_schema: Optional[Dict[str, Any]] = None,
) -> McpManifest:
    """
    Build the MCP manifest for a tool.

    Tools that require authorization advertise the accepted auth services
    under ``_meta`` so clients know to attach a token.
    """
    meta = None
    if auth_required:
        meta = {AUTH_INVOKE_META_KEY: list(auth_required)}

    return McpManifest(
        name=name,
        description=description,
        input_schema=parameters.mcp_schema(),
        output_schema=output_schema,
        meta=meta,
    )
