"""Tool registry and tag filtering."""

from .filter import ToolFilter, filter_builders, filter_tools
from .registry import ToolRegistry, unknown_tool

__all__ = ["ToolRegistry", "ToolFilter", "filter_builders", "filter_tools", "unknown_tool"]
