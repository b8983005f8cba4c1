"""
Base classes for configured tools.

Each tool type provides:
1. A ``ToolConfig`` subclass describing one configured instance, decoded
   strictly from a configuration document.
2. A ``Tool`` subclass produced by ``ToolConfig.initialize()`` that binds the
   config to its parameters and manifests and implements ``invoke()``.
3. A module-level ``register(registry)`` hooking the config factory into a
   :class:`~toolbox.core.registry.ToolRegistry`.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..core.auth import AccessToken, is_authorized
from ..core.config import get_settings
from ..core.embeddings import EmbeddingModel
from ..core.exceptions import ConfigDecodeError
from ..core.sources import SourceProvider
from ..models.manifest import Manifest, McpManifest, build_manifest, build_mcp_manifest
from ..models.parameters import Parameters, ParamValues, embed_params

TConfig = TypeVar("TConfig", bound="ToolConfig")


class ToolConfig(BaseModel, ABC):
    """
    Immutable configuration of a single tool instance.

    Unknown keys are rejected rather than ignored.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    TOOL_TYPE: ClassVar[str]

    name: str = Field(..., min_length=1, description="Tool name, unique per server")
    type: str = Field(..., min_length=1, description="Registry key of the tool type")
    source: str = Field(..., min_length=1, description="Name of the pre-configured source")
    description: str = Field(..., min_length=1, description="Description shown to callers")
    auth_required: Tuple[str, ...] = Field(
        default=(),
        alias="authRequired",
        description="Auth services, any one of which authorizes an invocation"
    )

    @field_validator("auth_required", mode="before")
    @classmethod
    def validate_auth_required(cls, v: Any) -> Any:
        # A bare `authRequired:` key decodes to null
        return () if v is None else v

    @model_validator(mode="after")
    def validate_type(self) -> "ToolConfig":
        if self.type != self.TOOL_TYPE:
            raise ValueError(f"type must be {self.TOOL_TYPE!r}, got {self.type!r}")
        return self

    def tool_config_type(self) -> str:
        return self.TOOL_TYPE

    @abstractmethod
    def initialize(self, sources: Optional[SourceProvider] = None) -> "Tool":
        """Build the tool; called once at startup."""

    @classmethod
    def decode(cls: Type[TConfig], name: str, raw: Mapping[str, Any]) -> TConfig:
        """
        Decode a raw configuration document into this config type.

        Raises:
            ConfigDecodeError: If the document is not a mapping or violates the schema
        """
        if not isinstance(raw, Mapping):
            raise ConfigDecodeError(
                f"configuration for tool {name!r} must be a mapping",
                tool_name=name,
            )
        data = dict(raw)
        data.setdefault("name", name)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigDecodeError(
                f"unable to parse tool {name!r} as {cls.TOOL_TYPE!r}: {e}",
                tool_name=name,
                validation_errors=e.errors(include_url=False),
            )


class Tool(ABC):
    """
    A configured, initialized tool.

    Everything a tool holds is fixed at construction; ``invoke()`` keeps no
    state between calls and may run concurrently.
    """

    def __init__(
        self,
        config: ToolConfig,
        parameters: Parameters,
        output_schema: Optional[Dict[str, Any]] = None,
    ):
        self._config = config
        self._parameters = parameters
        self._manifest = build_manifest(config.description, config.auth_required, parameters)
        self._mcp_manifest = build_mcp_manifest(
            config.name,
            config.description,
            config.auth_required,
            parameters,
            output_schema,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, source={self.source!r})"

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def type(self) -> str:
        return self._config.type

    @property
    def source(self) -> str:
        return self._config.source

    @property
    def auth_required(self) -> Tuple[str, ...]:
        return self._config.auth_required

    @abstractmethod
    async def invoke(
        self,
        source_provider: SourceProvider,
        params: ParamValues,
        access_token: Optional[AccessToken] = None,
    ) -> Any:
        """Execute the tool with validated parameters."""

    async def embed_params(
        self,
        params: ParamValues,
        embedding_models: Optional[Mapping[str, EmbeddingModel]] = None,
    ) -> ParamValues:
        return await embed_params(self._parameters, params, embedding_models)

    def manifest(self) -> Manifest:
        return self._manifest

    def mcp_manifest(self) -> McpManifest:
        return self._mcp_manifest

    def authorized(self, verified_auth_services) -> bool:
        return is_authorized(self._config.auth_required, verified_auth_services)

    def requires_client_authorization(self, source_provider: SourceProvider) -> bool:
        return False

    def get_auth_token_header_name(self, source_provider: SourceProvider) -> str:
        return get_settings().AUTH_TOKEN_HEADER

    def to_config(self) -> ToolConfig:
        return self._config

    def get_parameters(self) -> Parameters:
        return self._parameters
