"""toolfold: expose grouped actions as MCP tools.

Declare actions once, then serve them either **grouped** (one tool per
builder, routed by a discriminator field) or **flat** (one tool per action).
Both paths share the same validation, middleware and result shaping.

Quick Start:
    >>> from toolfold import create_tool, ToolRegistry, ToolServer
    >>>
    >>> async def list_projects(ctx, args):
    ...     return [{"id": "p1", "workspace": args["workspace_id"]}]
    >>>
    >>> async def create_project(ctx, args):
    ...     return {"id": "p2", "name": args["name"]}
    >>>
    >>> projects = (
    ...     create_tool("projects")
    ...     .description("Manage workspace projects")
    ...     .common_schema({"workspace_id": str})
    ...     .action("list", list_projects, read_only=True)
    ...     .action("create", create_project, schema={"name": str})
    ... )
    >>>
    >>> registry = ToolRegistry()
    >>> registry.register(projects)
    >>> server = ToolServer("workspace", registry, exposition="flat")
    >>> [t.name for t in server.list_tools()]
    ['projects_list', 'projects_create']
    >>> await server.call_tool("projects_create", {"name": "Apollo"})  # workspace_id (missing)

Validation failures, unknown actions and unknown tools come back as
``isError`` responses the model can correct from. Handler exceptions
propagate to the transport.
"""

from .builder import (
    ActionDefinition,
    ActionGroupBuilder,
    ActionMetadata,
    ExecutionContext,
    GroupedToolBuilder,
    McpTool,
    ToolBuilder,
    compile_tool_definition,
    create_tool,
    define_tool,
)
from .exposition import ExpositionResult, FlatRoute, compile_exposition
from .foundation import (
    BuildError,
    Err,
    ErrorCode,
    Ok,
    Result,
    ToolError,
    ToolfoldSettings,
    configure_logging,
    get_logger,
    get_settings,
)
from .middleware import Context, LoggingMiddleware, Middleware, Next
from .registry import ToolFilter, ToolRegistry
from .response import (
    Presenter,
    PresenterValidationError,
    ResponseBuilder,
    ToolResponse,
    error,
    required,
    response,
    success,
    tool_error,
)
from .schema import ActionSchema, Issue
from .server import MCPServer, ToolServer

__version__ = "0.1.0"

__all__ = [
    # Builders
    "create_tool", "define_tool", "GroupedToolBuilder", "ActionGroupBuilder",
    "ActionDefinition", "ActionMetadata", "ToolBuilder", "McpTool", "ExecutionContext",
    "compile_tool_definition",
    # Schema
    "ActionSchema", "Issue",
    # Exposition & serving
    "compile_exposition", "ExpositionResult", "FlatRoute",
    "ToolRegistry", "ToolFilter", "ToolServer", "MCPServer",
    # Middleware
    "Middleware", "Next", "Context", "LoggingMiddleware",
    # Responses
    "ToolResponse", "success", "error", "required", "tool_error",
    "ResponseBuilder", "response", "Presenter", "PresenterValidationError",
    # Foundation
    "BuildError", "ErrorCode", "ToolError", "Result", "Ok", "Err",
    "ToolfoldSettings", "get_settings", "configure_logging", "get_logger",
]
