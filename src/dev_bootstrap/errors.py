"""Exception hierarchy for dev-bootstrap.

All exceptions inherit from DevBootstrapError (single catch point).
Strategies raise these internally; the installer flow turns them into
InstallResult values so the CLI never sees a traceback for expected failures.
"""

from __future__ import annotations


class DevBootstrapError(Exception):
    """Base exception for all dev-bootstrap errors."""


class CommandFailedError(DevBootstrapError):
    """An external command exited non-zero.

    ``output`` holds the captured stderr (or stdout when stderr was empty)
    exactly as the command produced it.
    """

    def __init__(self, message: str, output: str = "", code: int = 1) -> None:
        super().__init__(message)
        self.output = output
        self.code = code


class DownloadError(CommandFailedError):
    """Fetching a vendor artefact over HTTP failed."""


class PrerequisiteMissingError(DevBootstrapError):
    """A required package manager or helper tool is not installed."""


class VerificationFailedError(DevBootstrapError):
    """Install commands succeeded but the tool is still not detected."""


class UnknownToolError(DevBootstrapError):
    """No installer is registered under the requested name."""


class CatalogError(DevBootstrapError):
    """Error reading or validating the tool catalog."""
