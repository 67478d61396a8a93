"""Package-manager protocol -- one implementation per ecosystem."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dev_bootstrap.models import PackageResult


@runtime_checkable
class PackageManagerPort(Protocol):
    """Protocol for querying and driving a native package manager."""

    def is_available(self) -> bool:
        """Check if this package manager is installed on the system."""
        ...

    async def is_installed(self, name: str) -> bool:
        """Read-only check whether a package is registered as installed."""
        ...

    async def install(self, name: str) -> PackageResult:
        """Install a package. Returns a result even on failure (never raises)."""
        ...

    async def get_version(self, name: str) -> str | None:
        """Installed version of a package, or None."""
        ...
