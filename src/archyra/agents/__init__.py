"""Agent-framework adapters for the component tools."""

from .tools import create_component_tools

__all__ = ["create_component_tools"]
