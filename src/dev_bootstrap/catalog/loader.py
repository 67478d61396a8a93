"""Load the tool catalog from the packaged YAML file."""

from __future__ import annotations

import importlib.resources
import logging
from functools import lru_cache

import yaml

from dev_bootstrap.errors import CatalogError
from dev_bootstrap.models import CatalogEntry, Dependency, PlatformType

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def load_catalog() -> dict[str, CatalogEntry]:
    """Load the built-in catalog, keyed by tool name.

    Raises:
        CatalogError: If the file is missing or malformed.
    """
    try:
        ref = importlib.resources.files("dev_bootstrap") / "catalog" / "catalog.yaml"
        text = ref.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise CatalogError("Built-in catalog.yaml not found.") from None
    return parse_catalog(text, source="builtin:catalog.yaml")


def parse_catalog(text: str, source: str = "<string>") -> dict[str, CatalogEntry]:
    """Parse and validate catalog YAML text."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CatalogError(f"Invalid YAML in {source}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("tools"), list):
        raise CatalogError(f"Catalog {source} must be a mapping with a 'tools' list.")

    entries: dict[str, CatalogEntry] = {}
    for i, raw in enumerate(data["tools"]):
        entry = _parse_entry(raw, f"{source} tools[{i}]")
        if entry.name in entries:
            raise CatalogError(f"Duplicate tool '{entry.name}' in {source}.")
        entries[entry.name] = entry

    for entry in entries.values():
        for dep in entry.depends_on:
            if dep.name not in entries:
                raise CatalogError(
                    f"Tool '{entry.name}' depends on unknown tool '{dep.name}' ({source})."
                )

    logger.debug("Loaded %d catalog entries from %s", len(entries), source)
    return entries


def _parse_entry(raw: object, where: str) -> CatalogEntry:
    if not isinstance(raw, dict):
        raise CatalogError(f"{where}: each tool must be a mapping.")
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise CatalogError(f"{where}: 'name' is required.")

    raw_deps = raw.get("depends_on") or []
    if not isinstance(raw_deps, list):
        raise CatalogError(f"{where}: 'depends_on' must be a list.")

    return CatalogEntry(
        name=name,
        display_name=str(raw.get("display_name") or name),
        description=str(raw.get("description") or ""),
        depends_on=tuple(_parse_dependency(d, f"{where} ({name})") for d in raw_deps),
    )


def _parse_dependency(raw: object, where: str) -> Dependency:
    if isinstance(raw, str):
        return Dependency(name=raw)
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        raise CatalogError(f"{where}: each dependency needs a 'name'.")

    try:
        priority = int(raw.get("priority", 0))
    except (TypeError, ValueError):
        raise CatalogError(f"{where}: priority must be an integer.") from None

    try:
        platforms = tuple(PlatformType(p) for p in raw.get("platforms") or [])
    except ValueError as exc:
        raise CatalogError(f"{where}: {exc}") from exc

    return Dependency(name=raw["name"], priority=priority, platforms=platforms)
