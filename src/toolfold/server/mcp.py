"""MCP transport adapter over the official ``mcp`` SDK.

Example:
    >>> server = MCPServer("workspace", registry, exposition="grouped")
    >>> server.run()  # stdio, for Claude Desktop, Cursor, VS Code

Requires: pip install toolfold[mcp]
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from toolfold.foundation.errors import ToolCallError

from .attachment import ToolServer

if TYPE_CHECKING:
    from toolfold.registry import ToolRegistry


class MCPServer(ToolServer):
    """Low-level MCP ``Server`` wired to a `ToolServer`.

    Tools are listed with their raw JSON Schemas. Error responses are raised
    as `ToolCallError`; the SDK turns them into ``isError`` results carrying
    the same text.
    """

    __slots__ = ("_server",)

    def __init__(self, name: str, registry: ToolRegistry, **options: Any) -> None:
        super().__init__(name, registry, **options)
        self._server = self._create_server()

    def _create_server(self) -> Any:
        try:
            from mcp import types
            from mcp.server.lowlevel import Server
        except ImportError as e:
            raise ImportError(
                "MCP integration requires the mcp SDK. "
                "Install with: pip install toolfold[mcp]"
            ) from e

        server: Server = Server(self._name)
        blocks: TypeAdapter[list[types.ContentBlock]] = TypeAdapter(list[types.ContentBlock])

        @server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [
                types.Tool(
                    name=t.name,
                    description=t.description,
                    inputSchema=t.input_schema,
                    annotations=types.ToolAnnotations(**t.annotations) if t.annotations else None,
                )
                for t in self.list_tools()
            ]

        # Arguments are validated by the builders, which format their own errors
        @server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any] | None) -> Any:
            response = await self.call_tool(name, arguments or {})
            if response.is_error:
                raise ToolCallError(response.text)
            content = blocks.validate_python(response.to_wire()["content"])
            if response.structured_content is not None:
                return content, response.structured_content
            return content

        return server

    @property
    def sdk_server(self) -> Any:
        """Access the underlying ``mcp`` Server instance."""
        return self._server

    async def run_stdio(self) -> None:
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await self._server.run(read_stream, write_stream, self._server.create_initialization_options())

    def run(self) -> None:
        """Serve over stdio (blocking)."""
        asyncio.run(self.run_stdio())
