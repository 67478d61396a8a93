"""Map tool names to their installer specs."""

from __future__ import annotations

from collections.abc import Mapping

from dev_bootstrap.errors import CatalogError, UnknownToolError
from dev_bootstrap.installer.base import InstallerSpec
from dev_bootstrap.models import CatalogEntry
from dev_bootstrap.tools import (
    beyond_compare,
    chrome_canary,
    dbeaver,
    development_tools,
    nvm,
    tmux,
    tree,
    unzip,
    winpty,
    yarn,
)

INSTALLERS: dict[str, InstallerSpec] = {
    spec.name: spec
    for spec in (
        beyond_compare.SPEC,
        chrome_canary.SPEC,
        dbeaver.SPEC,
        development_tools.SPEC,
        nvm.SPEC,
        tmux.SPEC,
        tree.SPEC,
        unzip.SPEC,
        winpty.SPEC,
        yarn.SPEC,
    )
}


def available_tools() -> list[str]:
    return sorted(INSTALLERS)


def get_installer(name: str) -> InstallerSpec:
    """Look up an installer by tool name.

    Raises:
        UnknownToolError: If no installer is registered under ``name``.
    """
    spec = INSTALLERS.get(name)
    if spec is None:
        raise UnknownToolError(
            f"Unknown tool '{name}'. Run 'dev install --list' to see available tools."
        )
    return spec


def verify_catalog(
    catalog: Mapping[str, CatalogEntry],
    installers: Mapping[str, InstallerSpec] = INSTALLERS,
) -> None:
    """Check that catalog entries and registered installers match one to one."""
    missing_installers = sorted(set(catalog) - set(installers))
    missing_entries = sorted(set(installers) - set(catalog))
    problems: list[str] = []
    if missing_installers:
        problems.append(f"catalog entries without an installer: {', '.join(missing_installers)}")
    if missing_entries:
        problems.append(f"installers without a catalog entry: {', '.join(missing_entries)}")
    if problems:
        raise CatalogError("Catalog mismatch: " + "; ".join(problems))
