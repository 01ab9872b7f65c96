"""Tool invocation with a single reconnect-and-retry on transport loss."""

from __future__ import annotations

import re
from typing import Any, Optional

import structlog

from event_scout.exceptions import ToolInvocationError, ToolNotFoundError, ToolTransportError
from event_scout.tools.client import ToolClient, ToolHandle

logger = structlog.get_logger()

_TRANSPORT_TYPE_NAMES = {"ClosedResourceError", "BrokenResourceError", "EndOfStream"}

_TRANSPORT_MESSAGE_RE = re.compile(
    r"connection closed|not connected|no active transport|transport closed"
    r"|closed resource|handshake|\b400\b|bad request",
    re.IGNORECASE,
)


def is_transport_error(exc: BaseException) -> bool:
    """Return True when ``exc`` means the tool transport must be rebuilt."""
    if isinstance(exc, (ToolTransportError, ConnectionError)):
        return True
    if type(exc).__name__ in _TRANSPORT_TYPE_NAMES:
        return True
    # The server answered; its error text is not about the transport.
    if isinstance(exc, (ToolInvocationError, ToolNotFoundError)):
        return False
    return bool(_TRANSPORT_MESSAGE_RE.search(str(exc)))


class ResilientToolInvoker:
    """Invoke one named tool, recovering once from a dropped transport.

    Attempts run in a bounded loop. A transport failure on any attempt but
    the last triggers reconnect and handle rebinding before the next one;
    anything raised while recovering is terminal.

    Args:
        client: Tool client to (re)connect through.
        tool_name: Name of the tool to invoke.
        max_attempts: Total attempts including the first.
    """

    def __init__(self, client: ToolClient, tool_name: str, max_attempts: int = 2) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.tool_name = tool_name
        self.max_attempts = max_attempts
        self._handle: Optional[ToolHandle] = None

    async def _bind(self) -> ToolHandle:
        if self._handle is None:
            self._handle = await self.client.get_tool(self.tool_name)
        return self._handle

    async def _recover(self, cause: BaseException) -> None:
        self._handle = None
        try:
            await self.client.reconnect()
            await self._bind()
        except Exception as e:
            logger.error("tool_recovery_failed", tool=self.tool_name, error=str(e))
            raise ToolTransportError(
                f"Recovery failed for {self.tool_name} after '{cause}': {e}"
            ) from e

    async def invoke(self, params: dict[str, Any], timeout: Optional[float] = None) -> Any:
        """Invoke the tool, reconnecting once if the transport dropped.

        Raises:
            ToolTransportError: If recovery itself fails.
            Exception: The last invocation error, unchanged.
        """
        handle = await self._bind()
        attempt = 1
        while True:
            try:
                return await handle.invoke(params, timeout=timeout)
            except Exception as e:
                if not is_transport_error(e) or attempt >= self.max_attempts:
                    if attempt > 1:
                        logger.error(
                            "tool_retry_exhausted",
                            tool=self.tool_name,
                            attempts=attempt,
                            error=str(e),
                        )
                    raise

                logger.warning(
                    "tool_transport_retry",
                    tool=self.tool_name,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(e),
                )
                await self._recover(e)
                handle = await self._bind()
                attempt += 1
