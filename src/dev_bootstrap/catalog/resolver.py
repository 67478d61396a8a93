"""Resolve install plans and platform availability from the catalog."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from dev_bootstrap.catalog.registry import INSTALLERS
from dev_bootstrap.installer import dispatcher
from dev_bootstrap.installer.base import InstallContext, InstallerSpec
from dev_bootstrap.models import CatalogEntry, PlanItem, ToolListing

logger = logging.getLogger(__name__)


async def resolve_dependencies(
    name: str,
    ctx: InstallContext,
    catalog: Mapping[str, CatalogEntry],
    installers: Mapping[str, InstallerSpec] = INSTALLERS,
) -> list[PlanItem]:
    """Build the install plan for ``name``: missing dependencies first, target last.

    Dependencies are visited in ascending priority. A dependency is dropped
    when it does not apply to this platform, cannot be installed here, or is
    already installed. Cycles are broken silently and every tool appears at
    most once.
    """
    visited: set[str] = set()
    plan = await _resolve(name, ctx, catalog, installers, visited, set())

    seen: set[str] = set()
    items: list[PlanItem] = []
    for item in [*plan, PlanItem(name=name, display_name=_display(name, catalog))]:
        if item.name not in seen:
            seen.add(item.name)
            items.append(item)
    return items


async def _resolve(
    name: str,
    ctx: InstallContext,
    catalog: Mapping[str, CatalogEntry],
    installers: Mapping[str, InstallerSpec],
    visited: set[str],
    in_progress: set[str],
) -> list[PlanItem]:
    if name in visited:
        return []

    entry = catalog.get(name)
    if entry is None:
        return []

    in_progress.add(name)
    platform = ctx.platform.type
    result: list[PlanItem] = []

    for dep in sorted(entry.depends_on, key=lambda d: d.priority):
        if dep.name in in_progress:
            logger.debug("Skipping circular dependency: %s -> %s", name, dep.name)
            continue
        if not dep.applies_to(platform):
            logger.debug("Skipping %s: not needed on %s", dep.name, platform)
            continue
        spec = installers.get(dep.name)
        if spec is None or not dispatcher.is_eligible(spec, ctx):
            logger.debug("Skipping ineligible dependency: %s", dep.name)
            continue
        if await dispatcher.is_installed(spec, ctx):
            logger.debug("Dependency already installed: %s", dep.name)
            visited.add(dep.name)
            continue

        result.extend(await _resolve(dep.name, ctx, catalog, installers, visited, in_progress))
        if dep.name not in visited:
            display_name = _display(dep.name, catalog)
            result.append(PlanItem(name=dep.name, display_name=display_name, is_dependency=True))
            visited.add(dep.name)

    in_progress.discard(name)
    return result


def list_tools(
    ctx: InstallContext,
    catalog: Mapping[str, CatalogEntry],
    installers: Mapping[str, InstallerSpec] = INSTALLERS,
) -> list[ToolListing]:
    """Every registered tool with its availability on this host."""
    listings: list[ToolListing] = []
    for name in sorted(installers):
        entry = catalog.get(name)
        listings.append(
            ToolListing(
                name=name,
                display_name=entry.display_name if entry else installers[name].display_name,
                description=entry.description if entry else "",
                available=dispatcher.is_eligible(installers[name], ctx),
                dependencies=[d.name for d in entry.depends_on] if entry else [],
            )
        )
    return listings


def _display(name: str, catalog: Mapping[str, CatalogEntry]) -> str:
    entry = catalog.get(name)
    if entry is not None:
        return entry.display_name
    spec = INSTALLERS.get(name)
    return spec.display_name if spec else name
