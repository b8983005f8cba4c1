"""
Typed parameter descriptors for tools.

A tool declares its inputs as an ordered :class:`Parameters` set. Raw caller
input (usually decoded JSON) is validated against that set, producing
:class:`ParamValues` whose values are guaranteed to match the declared kinds.
The same descriptors feed both the generic manifest and the MCP input schema,
so declaration order is preserved everywhere.
"""

import copy
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Literal,
    Mapping,
    NamedTuple,
    Optional,
    Union,
)

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.exceptions import (
    EmbeddingModelNotFoundError,
    MissingRequiredParameterError,
    ParameterTypeMismatchError,
)

if TYPE_CHECKING:
    from ..core.embeddings import EmbeddingModel


ParameterKind = Literal["string", "integer", "float", "boolean", "array"]

# Parameter kind -> JSON Schema type
JSON_SCHEMA_TYPES: Dict[str, str] = {
    "string": "string",
    "integer": "integer",
    "float": "number",
    "boolean": "boolean",
    "array": "array",
}


class ParameterManifest(BaseModel):
    """Discovery view of a single parameter."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    required: bool
    description: str
    default: Any = None
    items: Optional["ParameterManifest"] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Parameter(BaseModel):
    """
    Base descriptor shared by every parameter kind.

    A parameter with a ``default`` is optional. A parameter without one is
    required unless ``required=False`` is given, in which case an absent
    value validates to ``None``.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Parameter name, unique within a tool")
    type: str
    description: str = Field(default="", description="Human-readable description for discovery")
    required: Optional[bool] = Field(default=None, description="Override for the default-derived requiredness")
    default: Any = Field(default=None, description="Value used when the caller omits the parameter")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.replace("_", "").isalnum():
            raise ValueError(
                'Parameter name must contain only letters, numbers, and underscores'
            )
        return v

    @model_validator(mode="after")
    def check_default(self) -> "Parameter":
        if self.has_default and self.default is not None:
            try:
                self.parse(self.default)
            except ParameterTypeMismatchError as e:
                raise ValueError(f"default for {self.name!r} does not match its type: {e.message}")
        return self

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    def is_required(self) -> bool:
        if self.required is not None:
            return self.required
        return not self.has_default

    def parse(self, value: Any) -> Any:
        """Coerce a raw value to this parameter's kind or raise a type mismatch."""
        raise NotImplementedError

    def manifest(self) -> ParameterManifest:
        return ParameterManifest(
            name=self.name,
            type=self.type,
            required=self.is_required(),
            description=self.description,
            default=self.default if self.has_default else None,
        )

    def mcp_schema(self) -> Dict[str, Any]:
        """JSON Schema fragment describing this parameter."""
        schema: Dict[str, Any] = {
            "type": JSON_SCHEMA_TYPES[self.type],
            "description": self.description,
        }
        if self.has_default and self.default is not None:
            schema["default"] = self.default
        return schema

    def _mismatch(self, value: Any) -> ParameterTypeMismatchError:
        return ParameterTypeMismatchError(self.name, self.type, value)


class StringParameter(Parameter):
    type: Literal["string"] = "string"
    embedded_by: Optional[str] = Field(
        default=None,
        alias="embeddedBy",
        description="Name of the embedding model that vectorizes this value",
    )

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def parse(self, value: Any) -> str:
        if not isinstance(value, str):
            raise self._mismatch(value)
        return value


class IntParameter(Parameter):
    type: Literal["integer"] = "integer"

    def parse(self, value: Any) -> int:
        if isinstance(value, bool):
            raise self._mismatch(value)
        if isinstance(value, int):
            return value
        # JSON decoders may hand integral numbers over as floats
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise self._mismatch(value)


class FloatParameter(Parameter):
    type: Literal["float"] = "float"

    def parse(self, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._mismatch(value)
        return float(value)


class BooleanParameter(Parameter):
    type: Literal["boolean"] = "boolean"

    def parse(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise self._mismatch(value)
        return value


class ArrayParameter(Parameter):
    type: Literal["array"] = "array"
    items: "AnyParameter" = Field(..., description="Descriptor applied to every element")

    def parse(self, value: Any) -> List[Any]:
        if not isinstance(value, (list, tuple)):
            raise self._mismatch(value)
        parsed = []
        for item in value:
            try:
                parsed.append(self.items.parse(item))
            except ParameterTypeMismatchError:
                raise ParameterTypeMismatchError(self.name, f"array of {self.items.type}", item)
        return parsed

    def manifest(self) -> ParameterManifest:
        m = super().manifest()
        return m.model_copy(update={"items": self.items.manifest()})

    def mcp_schema(self) -> Dict[str, Any]:
        schema = super().mcp_schema()
        schema["items"] = self.items.mcp_schema()
        return schema


AnyParameter = Annotated[
    Union[StringParameter, IntParameter, FloatParameter, BooleanParameter, ArrayParameter],
    Field(discriminator="type"),
]

ArrayParameter.model_rebuild()
ParameterManifest.model_rebuild()


_PARAMETER_CLASSES = {
    "string": StringParameter,
    "integer": IntParameter,
    "float": FloatParameter,
    "boolean": BooleanParameter,
    "array": ArrayParameter,
}

_UNSET: Any = object()


def new_parameter(
    name: str,
    description: str,
    kind: ParameterKind,
    default: Any = _UNSET,
    required: Optional[bool] = None,
    **extra: Any,
) -> Parameter:
    """
    Build a parameter descriptor of the given kind.

    Extra keyword arguments go to the kind-specific class, e.g. ``items`` for
    arrays or ``embedded_by`` for strings.
    """
    try:
        cls = _PARAMETER_CLASSES[kind]
    except KeyError:
        raise ValueError(f"unknown parameter kind {kind!r}")
    kwargs: Dict[str, Any] = {"name": name, "description": description, **extra}
    if default is not _UNSET:
        kwargs["default"] = default
    if required is not None:
        kwargs["required"] = required
    return cls(**kwargs)


class ParamValue(NamedTuple):
    name: str
    value: Any


class ParamValues:
    """Validated parameter values in declaration order."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[ParamValue] = ()):
        self._values = tuple(ParamValue(*v) for v in values)

    def __iter__(self) -> Iterator[ParamValue]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParamValues):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"ParamValues({list(self._values)!r})"

    def as_map(self) -> Dict[str, Any]:
        return {v.name: v.value for v in self._values}

    def as_list(self) -> List[Any]:
        return [v.value for v in self._values]

    def replace(self, name: str, value: Any) -> "ParamValues":
        """Return a copy with ``name`` bound to ``value``."""
        return ParamValues(
            ParamValue(v.name, value) if v.name == name else v for v in self._values
        )


class Parameters:
    """
    Ordered, immutable set of parameter descriptors for one tool.
    """

    __slots__ = ("_params",)

    def __init__(self, params: Iterable[Parameter] = ()):
        params = tuple(params)
        seen = set()
        for p in params:
            if p.name in seen:
                raise ValueError(f"duplicate parameter name {p.name!r}")
            seen.add(p.name)
        self._params = params

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __getitem__(self, index: int) -> Parameter:
        return self._params[index]

    def names(self) -> List[str]:
        return [p.name for p in self._params]

    def validate(self, raw: Optional[Mapping[str, Any]]) -> ParamValues:
        """
        Validate raw caller input against the declared parameters.

        Missing (or null) values take the declared default; required
        parameters without one raise MissingRequiredParameterError. Keys
        that match no parameter are ignored.

        Raises:
            MissingRequiredParameterError: A required parameter is absent
            ParameterTypeMismatchError: A value cannot be coerced to its kind
        """
        raw = raw or {}
        values = []
        for param in self._params:
            value = raw.get(param.name)
            if value is None:
                if param.has_default:
                    value = copy.deepcopy(param.default)
                elif param.is_required():
                    raise MissingRequiredParameterError(param.name)
            else:
                value = param.parse(value)
            values.append(ParamValue(param.name, value))
        return ParamValues(values)

    def manifest(self) -> List[ParameterManifest]:
        return [p.manifest() for p in self._params]

    def mcp_schema(self) -> Dict[str, Any]:
        """MCP ``inputSchema`` object for these parameters."""
        return {
            "type": "object",
            "properties": {p.name: p.mcp_schema() for p in self._params},
            "required": [p.name for p in self._params if p.is_required()],
        }


async def embed_params(
    parameters: Parameters,
    values: ParamValues,
    models: Optional[Mapping[str, "EmbeddingModel"]],
) -> ParamValues:
    """
    Replace embedding-eligible string values with their vectors.

    Only parameters declaring ``embedded_by`` are touched; tools without
    such parameters get ``values`` back unchanged.

    Raises:
        EmbeddingModelNotFoundError: A referenced model is not in ``models``
    """
    embedded = values
    current = values.as_map()
    for param in parameters:
        model_name = getattr(param, "embedded_by", None)
        if not model_name:
            continue
        model = (models or {}).get(model_name)
        if model is None:
            raise EmbeddingModelNotFoundError(model_name, parameter=param.name)
        text = current.get(param.name)
        if text is None:
            continue
        vectors = await model.embed_parameters([text])
        embedded = embedded.replace(param.name, vectors[0])
    return embedded
