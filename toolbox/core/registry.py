"""
Registry of tool types.

The registry maps a tool type identifier (the ``type`` key of a tool's
configuration document) to the factory that decodes such a document into a
typed ``ToolConfig``. It is built once at process start, filled by each tool
module's ``register()`` hook, and then handed to whatever loads tool
configurations. Nothing registers after startup.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional

from .exceptions import ConfigDecodeError, RegistrationConflictError

if TYPE_CHECKING:
    from ..tools.base import ToolConfig


logger = logging.getLogger(__name__)

ConfigFactory = Callable[[str, Mapping[str, Any]], "ToolConfig"]


class ToolRegistry:
    """Mapping from tool type identifier to config factory."""

    def __init__(self):
        self._factories: Dict[str, ConfigFactory] = {}

    def register(self, tool_type: str, factory: ConfigFactory) -> bool:
        """
        Register ``factory`` for ``tool_type``.

        Returns:
            False if the type is already registered; the existing factory stays active
        """
        if tool_type in self._factories:
            logger.error("Tool type already registered", extra={"tool_type": tool_type})
            return False
        self._factories[tool_type] = factory
        logger.debug("Tool type registered", extra={"tool_type": tool_type})
        return True

    def register_or_raise(self, tool_type: str, factory: ConfigFactory) -> None:
        """Startup variant of :meth:`register` that treats a conflict as fatal."""
        if not self.register(tool_type, factory):
            raise RegistrationConflictError(tool_type)

    def get_factory(self, tool_type: str) -> Optional[ConfigFactory]:
        return self._factories.get(tool_type)

    def decode(self, tool_type: str, name: str, raw: Mapping[str, Any]) -> "ToolConfig":
        """
        Decode a tool configuration document using the factory for ``tool_type``.

        Raises:
            ConfigDecodeError: Unknown tool type or invalid document
        """
        factory = self._factories.get(tool_type) if isinstance(tool_type, str) else None
        if factory is None:
            raise ConfigDecodeError(
                f"unknown tool type {tool_type!r} for tool {name!r}",
                tool_name=name,
            )
        return factory(name, raw)

    def types(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, tool_type: object) -> bool:
        return tool_type in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def build_registry(modules: Optional[Iterable[Any]] = None) -> ToolRegistry:
    """
    Build a registry populated by each module's ``register(registry)`` hook.

    Defaults to the built-in tool modules.

    Raises:
        RegistrationConflictError: Two modules claim the same tool type
    """
    if modules is None:
        from ..tools import BUILTIN_TOOL_MODULES
        modules = BUILTIN_TOOL_MODULES

    registry = ToolRegistry()
    for module in modules:
        module.register(registry)

    logger.info(
        "Tool registry initialized",
        extra={"tool_types": registry.types()}
    )
    return registry
