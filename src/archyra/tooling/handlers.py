"""
Tool handlers over the component registry.

Each handler is a pure function of its validated arguments, the registry and
the settings, and returns a :class:`ToolResponse`. ``add_component`` only
computes target paths and file contents; writing them is left to the caller,
which may not share a filesystem with this process.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Any, Callable, Mapping, MutableMapping

from pydantic import ValidationError

from .config import ArchyraSettings, load_settings
from .registry import ComponentEntry, ComponentRegistry, VanillaBundle, default_registry
from .responses import ToolResponse
from .tool_schemas import (
    TOOL_SPECS,
    AddComponentInput,
    GetComponentInput,
    GetInstallCommandInput,
    ListComponentsInput,
)

LOGGER = logging.getLogger(__name__)

__all__ = [
    "add_component",
    "dispatch_tool",
    "get_component",
    "get_install_command",
    "install_command_for",
    "list_components",
]

VANILLA_NOTE = (
    'Components with vanilla: true support plain HTML/CSS/JS (no React/npm required). '
    'Use format: "vanilla" in get_component or add_component.'
)


def _not_found(query: str) -> ToolResponse:
    return ToolResponse.error(
        f'Component "{query}" not found. Use list_components to see available components.',
        kind="not_found",
    )


def _vanilla_unavailable(query: str, hint: str) -> ToolResponse:
    return ToolResponse.error(
        f'Vanilla HTML/CSS version not available for "{query}". {hint}',
        kind="format_unavailable",
    )


def install_command_for(entry: ComponentEntry, settings: ArchyraSettings) -> str:
    return " ".join([settings.install_command, *entry.dependencies])


def _join(directory: str, filename: str) -> str:
    return posixpath.normpath(posixpath.join(directory, filename))


# --------------------------------------------------------------------------- handlers


def list_components(args: ListComponentsInput, registry: ComponentRegistry, settings: ArchyraSettings) -> ToolResponse:
    matched = registry.list_components(args.category)
    summary = [
        {
            "name": entry.name,
            "id": entry.id,
            "category": entry.category,
            "description": entry.description,
            "formats": {"react": True, "vanilla": entry.has_vanilla},
        }
        for entry in matched
    ]
    return ToolResponse.ok(
        {
            "total": len(matched),
            "categories": [item.to_dict() for item in registry.get_categories()],
            "components": summary,
            "note": VANILLA_NOTE,
        }
    )


def get_component(args: GetComponentInput, registry: ComponentRegistry, settings: ArchyraSettings) -> ToolResponse:
    entry = registry.get_component(args.name)
    if entry is None:
        LOGGER.info("get_component: no match for %r", args.name)
        return _not_found(args.name)

    if args.format == "vanilla":
        if entry.vanilla is None:
            return _vanilla_unavailable(args.name, 'Use format: "react" for the React version.')
        return ToolResponse.ok(
            {
                "name": entry.name,
                "id": entry.id,
                "description": entry.description,
                "category": entry.category,
                "format": "vanilla",
                "html": entry.vanilla.html,
                "css": entry.vanilla.css,
                "js": entry.vanilla.js,
                "usage": entry.vanilla.usage,
                "note": "No npm dependencies required. Just add the HTML, CSS, and optional JS to your project.",
            }
        )

    return ToolResponse.ok(
        {
            "name": entry.name,
            "id": entry.id,
            "description": entry.description,
            "category": entry.category,
            "format": "react",
            "dependencies": list(entry.dependencies),
            "props": [prop.to_dict() for prop in entry.props],
            "usage": entry.usage,
            "source": entry.source,
            "vanillaAvailable": entry.has_vanilla,
        }
    )


def add_component(args: AddComponentInput, registry: ComponentRegistry, settings: ArchyraSettings) -> ToolResponse:
    entry = registry.get_component(args.name)
    if entry is None:
        LOGGER.info("add_component: no match for %r", args.name)
        return _not_found(args.name)

    directory = args.directory or settings.components_dir

    if args.format == "vanilla":
        if entry.vanilla is None:
            return _vanilla_unavailable(args.name, 'Use format: "react" instead.')
        return ToolResponse.ok(_vanilla_files_payload(entry, entry.vanilla, directory))

    file_path = _join(directory, f"{entry.name}.tsx")
    install_command = install_command_for(entry, settings)
    steps = [
        f"1. Create the file at: {file_path}",
        f"2. Install dependencies: {install_command}",
        "3. Import and use the component as shown in the usage example.",
        "",
        "Note: Make sure you have 'use client' directive if using Next.js App Router.",
    ]
    if entry.has_vanilla:
        steps.extend(["", 'Tip: Vanilla HTML/CSS version also available. Use format: "vanilla" to get it.'])

    return ToolResponse.ok(
        {
            "success": True,
            "component": entry.name,
            "format": "react",
            "filePath": file_path,
            "source": entry.source,
            "dependencies": list(entry.dependencies),
            "installCommand": install_command,
            "usage": entry.usage,
            "vanillaAvailable": entry.has_vanilla,
            "instructions": "\n".join(steps),
        }
    )


def _vanilla_files_payload(entry: ComponentEntry, vanilla: VanillaBundle, directory: str) -> Mapping[str, Any]:
    html_path = _join(directory, f"{entry.id}.html")
    css_path = _join(directory, f"{entry.id}.css")
    js_path = _join(directory, f"{entry.id}.js") if vanilla.js else None

    steps = [f"1. Create the HTML file at: {html_path}", f"2. Create the CSS file at: {css_path}"]
    if js_path:
        steps.append(f"3. Create the JS file at: {js_path}")
    steps.append(f"{len(steps) + 1}. Link the CSS in your HTML <head> and JS before </body>")
    steps.append(f"{len(steps) + 1}. No npm dependencies required!")
    steps.extend(["", "Example HTML setup:", f'<link rel="stylesheet" href="{entry.id}.css">'])
    if js_path:
        steps.append(f'<script src="{entry.id}.js"></script>')

    return {
        "success": True,
        "component": entry.name,
        "format": "vanilla",
        "files": {
            "html": {"path": html_path, "content": vanilla.html},
            "css": {"path": css_path, "content": vanilla.css},
            "js": {"path": js_path, "content": vanilla.js} if js_path else None,
        },
        "usage": vanilla.usage,
        "instructions": "\n".join(steps),
    }


def get_install_command(
    args: GetInstallCommandInput, registry: ComponentRegistry, settings: ArchyraSettings
) -> ToolResponse:
    entry = registry.get_component(args.name)
    if entry is None:
        LOGGER.info("get_install_command: no match for %r", args.name)
        return _not_found(args.name)
    return ToolResponse.ok(install_command_for(entry, settings))


# --------------------------------------------------------------------------- dispatch

Handler = Callable[[Any, ComponentRegistry, ArchyraSettings], ToolResponse]

_HANDLERS: Mapping[str, Handler] = {
    "list_components": list_components,
    "get_component": get_component,
    "add_component": add_component,
    "get_install_command": get_install_command,
}


def _format_validation_error(tool_name: str, exc: ValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        details.append(f"{location}: {error.get('msg', 'invalid value')}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(details)


def dispatch_tool(
    tool_name: str,
    arguments: Mapping[str, Any] | None,
    *,
    registry: ComponentRegistry | None = None,
    settings: ArchyraSettings | None = None,
) -> ToolResponse:
    """
    Validate ``arguments`` and route the call to the matching handler.

    Never raises for bad input: unknown tools and invalid arguments come back
    as error responses so a long-lived server keeps serving.
    """

    LOGGER.debug("Dispatching tool call %s", tool_name)
    handler = _HANDLERS.get(tool_name)
    if handler is None:
        LOGGER.warning("Unknown tool requested: %s", tool_name)
        return ToolResponse.error(f"Unknown tool: {tool_name}", kind="unknown_tool")

    if arguments is not None and not isinstance(arguments, Mapping):
        return ToolResponse.error(f"Invalid arguments for {tool_name}: expected an object.", kind="invalid_arguments")
    payload: MutableMapping[str, Any] = dict(arguments or {})
    try:
        parsed = TOOL_SPECS[tool_name].input_model.model_validate(payload)
    except ValidationError as exc:
        message = _format_validation_error(tool_name, exc)
        LOGGER.warning("%s", message)
        return ToolResponse.error(message, kind="invalid_arguments")

    catalog = registry if registry is not None else default_registry()
    return handler(parsed, catalog, settings or load_settings())
