"""
Read-only component registry.

The registry holds the static catalogue of animation components that the MCP
server and the CLI expose. It is built once from the bundled JSON catalogue (or
a configured override file) and never mutated afterwards, so handlers can share
a single instance without locking.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Sequence

from .config import load_settings

LOGGER = logging.getLogger(__name__)

__all__ = [
    "CATEGORIES",
    "CatalogError",
    "CategorySummary",
    "ComponentCategory",
    "ComponentEntry",
    "ComponentRegistry",
    "PropSpec",
    "VanillaBundle",
    "default_registry",
    "load_registry",
    "parse_component",
    "slugify_name",
]

ComponentCategory = Literal["loading", "processing", "creative", "auth", "chat", "ecommerce"]

CATEGORIES: tuple[str, ...] = ("loading", "processing", "creative", "auth", "chat", "ecommerce")
ALL_CATEGORIES = "all"

_RE_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_RE_WHITESPACE = re.compile(r"\s+")


class CatalogError(ValueError):
    """Raised when the component catalogue cannot be loaded or is inconsistent."""


@dataclass(slots=True, frozen=True)
class PropSpec:
    """Documentation for a single component prop. Not enforced."""

    name: str
    type: str
    description: str
    required: bool = False
    default: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "description": self.description,
        }
        if self.default is not None:
            payload["default"] = self.default
        return payload


@dataclass(slots=True, frozen=True)
class VanillaBundle:
    """Framework-free rendering of a component."""

    html: str
    css: str
    usage: str
    js: str | None = None


@dataclass(slots=True, frozen=True)
class ComponentEntry:
    """Static catalogue record for one component."""

    id: str
    name: str
    category: str
    description: str
    dependencies: tuple[str, ...]
    props: tuple[PropSpec, ...]
    usage: str
    source: str
    vanilla: VanillaBundle | None = None

    @property
    def slug(self) -> str:
        return slugify_name(self.name)

    @property
    def has_vanilla(self) -> bool:
        return self.vanilla is not None


@dataclass(slots=True, frozen=True)
class CategorySummary:
    category: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "count": self.count}


def slugify_name(name: str) -> str:
    """Turn a display name such as ``LoadingDots`` into ``loading-dots``."""
    spaced = _RE_WHITESPACE.sub("-", name.strip())
    return _RE_CAMEL_BOUNDARY.sub("-", spaced).lower()


class ComponentRegistry:
    """
    Immutable catalogue with lookup and filter operations.

    Entries keep their declaration order. Lookups are case-insensitive and try
    the id first, then the display name, then the hyphenated slug of the name.
    """

    def __init__(self, entries: Iterable[ComponentEntry]) -> None:
        ordered = tuple(entries)
        by_id: dict[str, ComponentEntry] = {}
        by_name: dict[str, ComponentEntry] = {}
        by_slug: dict[str, ComponentEntry] = {}
        for entry in ordered:
            if entry.category not in CATEGORIES:
                raise CatalogError(f"Component '{entry.id}' has unknown category '{entry.category}'.")
            key = entry.id.lower()
            if key in by_id:
                raise CatalogError(f"Duplicate component id '{entry.id}'.")
            by_id[key] = entry
            by_name.setdefault(entry.name.lower(), entry)
            by_slug.setdefault(entry.slug, entry)
        self._entries = ordered
        self._by_id: Mapping[str, ComponentEntry] = MappingProxyType(by_id)
        self._by_name: Mapping[str, ComponentEntry] = MappingProxyType(by_name)
        self._by_slug: Mapping[str, ComponentEntry] = MappingProxyType(by_slug)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    @property
    def entries(self) -> tuple[ComponentEntry, ...]:
        return self._entries

    def list_components(self, category: str | None = None) -> tuple[ComponentEntry, ...]:
        """Return entries in ``category``; ``None`` or ``"all"`` returns everything."""

        if not category or category == ALL_CATEGORIES:
            return self._entries
        return tuple(entry for entry in self._entries if entry.category == category)

    def get_component(self, query: str) -> ComponentEntry | None:
        """Resolve ``query`` against id, name, then name slug. ``None`` when nothing matches."""

        key = query.strip().lower()
        if not key:
            return None
        for index in (self._by_id, self._by_name, self._by_slug):
            entry = index.get(key)
            if entry is not None:
                return entry
        return None

    def get_categories(self) -> tuple[CategorySummary, ...]:
        counts = {category: 0 for category in CATEGORIES}
        for entry in self._entries:
            counts[entry.category] += 1
        return tuple(CategorySummary(category=category, count=counts[category]) for category in CATEGORIES)


# --------------------------------------------------------------------------- loading


def _require_str(raw: Mapping[str, Any], key: str, context: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise CatalogError(f"{context}: field '{key}' must be a non-empty string.")
    return value


def _parse_props(entries: Sequence[Mapping[str, Any]] | None, context: str) -> tuple[PropSpec, ...]:
    if not entries:
        return ()
    props: list[PropSpec] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise CatalogError(f"{context}: props must be JSON objects.")
        default = entry.get("default")
        props.append(
            PropSpec(
                name=_require_str(entry, "name", context),
                type=str(entry.get("type") or "unknown"),
                description=str(entry.get("description") or ""),
                required=bool(entry.get("required", False)),
                default=None if default is None else str(default),
            )
        )
    return tuple(props)


def _parse_vanilla(raw: Any, context: str) -> VanillaBundle | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise CatalogError(f"{context}: 'vanilla' must be a JSON object.")
    js = raw.get("js")
    return VanillaBundle(
        html=_require_str(raw, "html", f"{context} vanilla"),
        css=_require_str(raw, "css", f"{context} vanilla"),
        usage=str(raw.get("usage") or ""),
        js=str(js) if js else None,
    )


def parse_component(raw: Mapping[str, Any]) -> ComponentEntry:
    """Convert one JSON catalogue record into a :class:`ComponentEntry`."""

    if not isinstance(raw, Mapping):
        raise CatalogError("Catalogue entries must be JSON objects.")
    component_id = _require_str(raw, "id", "Catalogue entry")
    context = f"Component '{component_id}'"
    dependencies = raw.get("dependencies") or []
    if isinstance(dependencies, str) or not isinstance(dependencies, Sequence):
        raise CatalogError(f"{context}: 'dependencies' must be a list of package names.")
    return ComponentEntry(
        id=component_id,
        name=_require_str(raw, "name", context),
        category=_require_str(raw, "category", context),
        description=str(raw.get("description") or ""),
        dependencies=tuple(str(dep) for dep in dependencies),
        props=_parse_props(raw.get("props"), context),
        usage=str(raw.get("usage") or ""),
        source=str(raw.get("source") or ""),
        vanilla=_parse_vanilla(raw.get("vanilla"), context),
    )


def _read_catalog_text(path: Path | None) -> tuple[str, str]:
    if path is None:
        resource = resources.files("archyra").joinpath("data", "catalog.json")
        return resource.read_text(encoding="utf-8"), "bundled catalog.json"
    try:
        return path.read_text(encoding="utf-8"), str(path)
    except OSError as exc:
        raise CatalogError(f"Unable to read component catalogue at {path}: {exc}") from exc


def load_registry(path: Path | None = None) -> ComponentRegistry:
    """Build a registry from a JSON catalogue file (the bundled one by default)."""

    text, origin = _read_catalog_text(path)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Component catalogue {origin} is not valid JSON: {exc}") from exc
    records = data.get("components") if isinstance(data, Mapping) else data
    if not isinstance(records, list):
        raise CatalogError(f"Component catalogue {origin} must contain a 'components' list.")
    registry = ComponentRegistry(parse_component(record) for record in records)
    LOGGER.debug("Loaded %d components from %s", len(registry), origin)
    return registry


@lru_cache(maxsize=1)
def default_registry() -> ComponentRegistry:
    """Process-wide registry, built once from the configured catalogue."""
    return load_registry(load_settings().catalog_path)
