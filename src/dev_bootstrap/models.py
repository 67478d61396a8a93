"""Domain models for dev-bootstrap. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

# ─── Enumerations ─────────────────────────────────────────────


class PlatformType(StrEnum):
    MACOS = "macos"
    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    WSL = "wsl"
    RASPBIAN = "raspbian"
    AMAZON_LINUX = "amazon_linux"
    RHEL = "rhel"
    FEDORA = "fedora"
    WINDOWS = "windows"
    GITBASH = "gitbash"
    LINUX = "linux"
    UNKNOWN = "unknown"


class InstallStatus(StrEnum):
    ALREADY_INSTALLED = "already_installed"
    INSTALLED = "installed"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


class FailureKind(StrEnum):
    PREREQUISITE_MISSING = "prerequisite_missing"
    COMMAND_FAILED = "command_failed"
    VERIFICATION_FAILED = "verification_failed"
    UNEXPECTED = "unexpected"


# Platform groups shared by most installers.
DEBIAN_FAMILY: tuple[PlatformType, ...] = (
    PlatformType.UBUNTU,
    PlatformType.DEBIAN,
    PlatformType.WSL,
    PlatformType.RASPBIAN,
)
RPM_FAMILY: tuple[PlatformType, ...] = (
    PlatformType.AMAZON_LINUX,
    PlatformType.RHEL,
    PlatformType.FEDORA,
)


# ─── Platform & Command Models ────────────────────────────────


@dataclass(frozen=True, slots=True)
class Platform:
    """The host platform, resolved once per process."""

    type: PlatformType
    package_manager: str | None = None  # "dnf" / "yum" on RPM-family hosts
    distro: str | None = None


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one external command."""

    code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.code == 0

    @property
    def output(self) -> str:
        return self.stderr or self.stdout


@dataclass(frozen=True, slots=True)
class PackageResult:
    """Outcome of a package-manager install call."""

    success: bool
    output: str = ""


# ─── Install Result ───────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class InstallResult:
    """Outcome of one install attempt.

    A tagged record: ``status`` selects the variant, the remaining fields are
    filled only where they make sense for it (``version`` for the two success
    variants, ``reason``/``failure_kind``/``command_output`` for failures).
    Build instances with the class constructors rather than directly.
    """

    status: InstallStatus
    tool: str
    platform: PlatformType
    version: str = ""
    reason: str = ""
    failure_kind: FailureKind | None = None
    command_output: str = ""
    notes: tuple[str, ...] = ()

    @classmethod
    def already_installed(
        cls, tool: str, platform: PlatformType, version: str = "", notes: tuple[str, ...] = ()
    ) -> InstallResult:
        return cls(
            status=InstallStatus.ALREADY_INSTALLED,
            tool=tool,
            platform=platform,
            version=version,
            notes=notes,
        )

    @classmethod
    def installed(
        cls, tool: str, platform: PlatformType, version: str = "", notes: tuple[str, ...] = ()
    ) -> InstallResult:
        return cls(
            status=InstallStatus.INSTALLED,
            tool=tool,
            platform=platform,
            version=version,
            notes=notes,
        )

    @classmethod
    def unsupported(cls, tool: str, platform: PlatformType, reason: str = "") -> InstallResult:
        return cls(
            status=InstallStatus.UNSUPPORTED,
            tool=tool,
            platform=platform,
            reason=reason or f"{tool} is not available for {platform.value}.",
        )

    @classmethod
    def failed(
        cls,
        tool: str,
        platform: PlatformType,
        reason: str,
        *,
        kind: FailureKind,
        command_output: str = "",
        notes: tuple[str, ...] = (),
    ) -> InstallResult:
        return cls(
            status=InstallStatus.FAILED,
            tool=tool,
            platform=platform,
            reason=reason,
            failure_kind=kind,
            command_output=command_output,
            notes=notes,
        )

    @property
    def ok(self) -> bool:
        """True for every outcome the CLI maps to exit code 0."""
        return self.status is not InstallStatus.FAILED


# ─── Catalog Models ───────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Dependency:
    """A tool that must be installed before another one."""

    name: str
    priority: int = 0
    platforms: tuple[PlatformType, ...] = ()  # empty = every platform

    def applies_to(self, platform: PlatformType) -> bool:
        return not self.platforms or platform in self.platforms


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Static metadata about one installable tool."""

    name: str
    display_name: str
    description: str = ""
    depends_on: tuple[Dependency, ...] = ()


@dataclass(frozen=True, slots=True)
class PlanItem:
    """One step of a resolved install plan."""

    name: str
    display_name: str
    is_dependency: bool = False


@dataclass(frozen=True, slots=True)
class ToolListing:
    """A row of ``dev install --list`` output."""

    name: str
    display_name: str
    description: str
    available: bool
    dependencies: list[str] = field(default_factory=list)
