"""Exposition: flat (one tool per action) or grouped (one tool per builder)."""

from .compiler import ExpositionResult, FlatRoute, Strategy, compile_exposition, flat_description

__all__ = ["ExpositionResult", "FlatRoute", "Strategy", "compile_exposition", "flat_description"]
