"""
Per-call invocation pipeline.

Every call walks the same states from scratch: authorize, validate the raw
parameters, embed eligible values, then execute. A failure at any step stops
the call before the next one, so nothing reaches a source until the caller is
authorized and every parameter has been validated.
"""

import asyncio
import logging
import time
from typing import Any, Iterable, Mapping, Optional

from .auth import AccessToken
from .config import get_settings
from .embeddings import EmbeddingModel
from .exceptions import ToolAuthorizationError
from .sources import SourceProvider

logger = logging.getLogger(__name__)

_USE_SETTINGS: Any = object()


async def invoke_tool(
    tool: Any,
    source_provider: SourceProvider,
    raw_params: Optional[Mapping[str, Any]],
    verified_auth_services: Iterable[str] = (),
    access_token: Optional[AccessToken] = None,
    embedding_models: Optional[Mapping[str, EmbeddingModel]] = None,
    timeout: Optional[float] = _USE_SETTINGS,
) -> Any:
    """
    Authorize, validate, and execute one tool call.

    Args:
        tool: Initialized tool
        source_provider: Provider the tool resolves its source from
        raw_params: Untyped caller input, usually decoded JSON
        verified_auth_services: Auth services whose tokens were verified for this caller
        access_token: Caller's raw access token, passed through to the tool
        embedding_models: Models available to embedding-eligible parameters
        timeout: Seconds before the call is cancelled; defaults to the configured
            invocation timeout, ``None`` disables it

    Returns:
        Whatever the tool's source returned

    Raises:
        ToolAuthorizationError: The caller is not authorized for this tool
        ParameterError: Parameter validation failed
        asyncio.TimeoutError: The call exceeded ``timeout``
    """
    if timeout is _USE_SETTINGS:
        timeout = get_settings().INVOCATION_TIMEOUT_SECONDS

    log_extra = {"tool_name": tool.name, "source_name": tool.source}

    if not tool.authorized(list(verified_auth_services)):
        logger.warning("Tool invocation rejected: unauthorized", extra=log_extra)
        raise ToolAuthorizationError(
            tool.name,
            message="tool invocation not authorized. Please make sure you specify correct auth headers",
        )

    params = tool.get_parameters().validate(raw_params)
    params = await tool.embed_params(params, embedding_models)

    start_time = time.monotonic()
    try:
        if timeout is None:
            result = await tool.invoke(source_provider, params, access_token)
        else:
            result = await asyncio.wait_for(
                tool.invoke(source_provider, params, access_token), timeout
            )
    except asyncio.TimeoutError:
        logger.error(
            "Tool invocation timed out",
            extra={**log_extra, "timeout_seconds": timeout}
        )
        raise
    except Exception as e:
        logger.error(
            f"Tool '{tool.name}' invocation failed",
            extra={**log_extra, "error": str(e)}
        )
        raise

    execution_time_ms = int((time.monotonic() - start_time) * 1000)
    logger.info(
        f"Tool '{tool.name}' invoked successfully",
        extra={**log_extra, "execution_time_ms": execution_time_ms}
    )
    return result
