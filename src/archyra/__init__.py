"""
Archyra component registry and MCP tooling.

The package bundles a static catalogue of copy-paste animation components, an
MCP server that lets AI coding assistants browse and fetch those components,
and a CLI that registers the server with supported assistants.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
