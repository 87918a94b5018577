"""Servers: the exposition boundary and transport adapters.

- ToolServer: list/call over a registry with a flat or grouped strategy
- MCPServer: ToolServer bound to the ``mcp`` SDK (requires toolfold[mcp])
"""

from .attachment import ContextFactory, ToolServer
from .mcp import MCPServer

__all__ = ["ContextFactory", "ToolServer", "MCPServer"]
