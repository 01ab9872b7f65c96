"""Search/scrape tool access over an MCP server.

The client keeps one SSE session open and exposes tools as small handles.
Transport loss is not handled here; see ``ResilientToolInvoker``.
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from datetime import timedelta
from typing import Any, Optional, Protocol

import structlog
from mcp import ClientSession
from mcp.client.sse import sse_client

from event_scout.exceptions import (
    ToolInvocationError,
    ToolNotFoundError,
    ToolTransportError,
)

logger = structlog.get_logger()


class ToolHandle(Protocol):
    """A bound tool that can be invoked with JSON-like parameters."""

    async def invoke(self, params: dict[str, Any], timeout: Optional[float] = None) -> str: ...


class ToolClient(Protocol):
    """A connection to a tool server."""

    async def get_tool(self, name: str) -> ToolHandle: ...

    async def reconnect(self) -> None: ...

    async def close(self) -> None: ...


def _result_text(result: Any) -> str:
    parts = []
    for item in getattr(result, "content", None) or []:
        text = getattr(item, "text", None)
        if text:
            parts.append(text)
    return "\n".join(parts)


class MCPTool:
    """Handle for one tool on an ``MCPToolClient`` session."""

    def __init__(self, client: "MCPToolClient", name: str) -> None:
        self.client = client
        self.name = name

    async def invoke(self, params: dict[str, Any], timeout: Optional[float] = None) -> str:
        """Call the tool and return its joined text content.

        Raises:
            ToolTransportError: If the client has no open session.
            ToolInvocationError: If the server reports an error result.
        """
        session = self.client.session
        if session is None:
            raise ToolTransportError("not connected")

        read_timeout = timedelta(seconds=timeout) if timeout else None
        logger.debug("tool_invoke", tool=self.name, params=params, timeout=timeout)
        result = await session.call_tool(
            self.name, arguments=params, read_timeout_seconds=read_timeout
        )

        text = _result_text(result)
        if getattr(result, "isError", False):
            raise ToolInvocationError(f"{self.name} failed: {text or 'tool reported an error'}")
        return text


class MCPToolClient:
    """Client for an MCP tool server reached over SSE.

    Example:
        >>> client = MCPToolClient(settings.mcp_sse_url)
        >>> tool = await client.get_tool("search_engine")
        >>> text = await tool.invoke({"query": "jazz in Lisbon", "engine": "google"})
    """

    def __init__(self, url: str, connect_timeout: float = 30.0) -> None:
        self.url = url
        self.connect_timeout = connect_timeout
        self.session: Optional[ClientSession] = None
        self._stack: Optional[AsyncExitStack] = None
        self._tool_names: set[str] = set()

    async def connect(self) -> None:
        """Open the SSE transport, initialize the session and list tools."""
        if self.session is not None:
            return

        stack = AsyncExitStack()
        try:
            read, write = await stack.enter_async_context(
                sse_client(self.url, timeout=self.connect_timeout)
            )
            session = await stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
            listed = await session.list_tools()
        except Exception as e:
            await stack.aclose()
            logger.error("tool_server_connect_failed", error=str(e))
            raise ToolTransportError(f"Failed to connect to tool server: {e}") from e

        self._stack = stack
        self.session = session
        self._tool_names = {tool.name for tool in listed.tools}
        logger.info("tool_server_connected", tools=sorted(self._tool_names))

    async def get_tool(self, name: str) -> MCPTool:
        await self.connect()
        if name not in self._tool_names:
            raise ToolNotFoundError(f"Tool not available: {name}")
        return MCPTool(self, name)

    async def reconnect(self) -> None:
        logger.info("tool_server_reconnecting")
        await self.close()
        await self.connect()

    async def close(self) -> None:
        stack, self._stack = self._stack, None
        self.session = None
        self._tool_names = set()
        if stack is not None:
            try:
                await stack.aclose()
            except Exception as e:
                # The transport is usually already gone when we get here.
                logger.debug("tool_server_close_error", error=str(e))
