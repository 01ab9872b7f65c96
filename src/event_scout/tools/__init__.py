"""Search/scrape tool clients."""

from event_scout.tools.client import MCPTool, MCPToolClient, ToolClient, ToolHandle
from event_scout.tools.invoker import ResilientToolInvoker, is_transport_error

__all__ = [
    "MCPTool",
    "MCPToolClient",
    "ResilientToolInvoker",
    "ToolClient",
    "ToolHandle",
    "is_transport_error",
]
