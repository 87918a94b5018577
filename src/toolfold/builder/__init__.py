"""Tool builders and the action compiler.

- create_tool/GroupedToolBuilder: Fluent builder for one grouped tool
- define_tool: Same from a declarative dict config
- ActionGroupBuilder: Namespaced ``group.action`` registration
- compile_tool_definition: Action model → McpTool + ExecutionContext
- ToolBuilder: Capability protocol accepted by registries and servers
"""

from .action import ActionDefinition, ActionMetadata, FlatExposable, ToolBuilder
from .compiler import CompilerInput, CompilerOutput, ExecutionContext, McpTool, compile_tool_definition
from .define import define_tool
from .group import ActionGroupBuilder, GroupConfigurator
from .grouped import GroupedToolBuilder, create_tool

__all__ = [
    "ActionDefinition", "ActionMetadata", "FlatExposable", "ToolBuilder",
    "CompilerInput", "CompilerOutput", "ExecutionContext", "McpTool", "compile_tool_definition",
    "ActionGroupBuilder", "GroupConfigurator",
    "GroupedToolBuilder", "create_tool", "define_tool",
]
