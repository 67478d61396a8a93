"""``dev`` command line: ``dev install <tool>``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dev_bootstrap import __version__
from dev_bootstrap.app import app_context
from dev_bootstrap.catalog.loader import load_catalog
from dev_bootstrap.catalog.registry import get_installer, verify_catalog
from dev_bootstrap.catalog.resolver import list_tools, resolve_dependencies
from dev_bootstrap.errors import CatalogError, UnknownToolError
from dev_bootstrap.installer import dispatcher
from dev_bootstrap.installer.base import InstallContext
from dev_bootstrap.models import InstallResult, InstallStatus
from dev_bootstrap.settings import Settings

logger = logging.getLogger(__name__)

_RULE = "─" * 50


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dev", description="Developer environment bootstrap tool."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    install = commands.add_parser(
        "install",
        help="Install a development tool with automatic dependency resolution.",
    )
    install.add_argument("name", nargs="?", help="Name of the tool to install.")
    install.add_argument("--list", action="store_true", help="List all installable tools.")
    install.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the install plan without running anything.",
    )
    install.add_argument("--force", action="store_true", help="Skip confirmation prompts.")
    install.add_argument(
        "--verbose", action="store_true", help="Show detailed output during installation."
    )
    return parser.parse_args(argv)


def _configure_logging(settings: Settings, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def confirm(question: str) -> bool:
    try:
        answer = input(f"{question} (y/n): ")
    except EOFError:
        return False
    return answer.strip().lower().startswith("y")


# ─── Output ─────────────────────────────────────────────────────


def _print_listing(ctx: InstallContext) -> None:
    print("\nAvailable tools:")
    print("─" * 40)
    for tool in list_tools(ctx, load_catalog()):
        mark = "" if tool.available else " (not available on this platform)"
        print(f"  {tool.name}{mark}")
    print("\nUsage: dev install <name>\n")


def _print_result(result: InstallResult, display_name: str) -> None:
    match result.status:
        case InstallStatus.INSTALLED:
            version = f" {result.version}" if result.version else ""
            print(f"{display_name}{version} installed successfully.")
        case InstallStatus.ALREADY_INSTALLED:
            version = f" {result.version}" if result.version else ""
            print(f"{display_name}{version} is already installed, skipping.")
        case InstallStatus.UNSUPPORTED:
            print(result.reason)
        case InstallStatus.FAILED:
            print(f"Failed to install {display_name}: {result.reason}", file=sys.stderr)
    for note in result.notes:
        print(f"Note: {note}")


# ─── Install command ────────────────────────────────────────────


async def _run_install(args: argparse.Namespace, settings: Settings) -> int:
    async with app_context(settings) as ctx:
        if args.list:
            _print_listing(ctx)
            return 0

        if not args.name:
            print("Error: No tool specified. Usage: dev install <name>", file=sys.stderr)
            print("Run 'dev install --list' to see available tools.", file=sys.stderr)
            return 1

        return await install_tool(args.name, ctx, dry_run=args.dry_run, force=args.force)


async def install_tool(
    name: str, ctx: InstallContext, *, dry_run: bool = False, force: bool = False
) -> int:
    """Install ``name`` and its missing dependencies. Returns the process exit code."""
    try:
        spec = get_installer(name)
        catalog = load_catalog()
        verify_catalog(catalog)
    except (UnknownToolError, CatalogError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"\nChecking {spec.display_name}...")
    if await dispatcher.is_installed(spec, ctx):
        print(f"{spec.display_name} is already installed.")
        return 0

    if not dispatcher.is_eligible(spec, ctx):
        # The dispatcher short-circuits here without running any command.
        _print_result(await dispatcher.install(spec, ctx), spec.display_name)
        return 0

    plan = await resolve_dependencies(name, ctx, catalog)
    if len(plan) > 1:
        print("\nThe following will be installed:")
        for item in plan:
            print(f"  - {item.display_name}")
        print()
    else:
        print(f"\nPreparing to install: {spec.display_name}")

    if dry_run:
        print("[Dry run mode - no changes will be made]")
        return 0

    if not force and not confirm("Proceed with installation?"):
        print("Installation cancelled.")
        return 0

    results: list[InstallResult] = []
    for index, item in enumerate(plan):
        print(f"\n{_RULE}\nInstalling {item.display_name}...\n{_RULE}")
        result = await dispatcher.install(get_installer(item.name), ctx)
        results.append(result)
        _print_result(result, item.display_name)

        is_last = index == len(plan) - 1
        if not result.ok and not force and not is_last:
            if not confirm("Continue with remaining installations?"):
                print("Installation cancelled.")
                break

    failed = [r for r in results if not r.ok]
    print(f"\n{_RULE}\nInstallation Summary:")
    print(f"  Successful: {len(results) - len(failed)}")
    if failed:
        print(f"  Failed: {len(failed)}")
    print()
    return 1 if failed else 0


def run_cli(argv: list[str] | None = None) -> int:
    """CLI runner for the ``dev`` command."""
    args = _parse_args(argv)
    settings = Settings.from_env()
    _configure_logging(settings, verbose=args.verbose)
    logger.debug("Settings: %s", settings)
    return asyncio.run(_run_install(args, settings))


def main() -> None:
    """Entry point for the ``dev`` console script."""
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
