"""Tests for platform dispatch and InstallerSpec validation."""

from __future__ import annotations

import pytest

from dev_bootstrap.installer import dispatcher
from dev_bootstrap.installer.base import InstallerSpec
from dev_bootstrap.models import FailureKind, InstallResult, InstallStatus, PlatformType
from tests.conftest import FakeRunner


def _spec(calls: list[str] | None = None, **overrides) -> InstallerSpec:
    calls = [] if calls is None else calls

    async def ubuntu(ctx):
        calls.append("ubuntu")
        await ctx.runner.exec(["apt-get", "install", "-y", "demo"])
        return InstallResult.installed("demo", ctx.platform.type)

    async def present(ctx):
        return True

    fields = {
        "name": "demo",
        "display_name": "Demo",
        "strategies": {PlatformType.UBUNTU: ubuntu},
        "detectors": {PlatformType.UBUNTU: present},
        "unavailable": {PlatformType.MACOS: "Demo has no macOS build."},
    }
    fields.update(overrides)
    return InstallerSpec(**fields)


# ═══════════════════════════════════════════════════════════════════
# install
# ═══════════════════════════════════════════════════════════════════


class TestInstall:
    async def test_runs_matching_strategy_once(self, make_ctx):
        calls: list[str] = []
        result = await dispatcher.install(_spec(calls), make_ctx(PlatformType.UBUNTU))
        assert result.status is InstallStatus.INSTALLED
        assert calls == ["ubuntu"]

    async def test_unavailable_platform_uses_hint(self, make_ctx):
        runner = FakeRunner()
        result = await dispatcher.install(_spec(), make_ctx(PlatformType.MACOS, runner))
        assert result.status is InstallStatus.UNSUPPORTED
        assert result.reason == "Demo has no macOS build."
        assert runner.executed == 0

    async def test_unregistered_platform(self, make_ctx):
        runner = FakeRunner()
        result = await dispatcher.install(_spec(), make_ctx(PlatformType.WINDOWS, runner))
        assert result.status is InstallStatus.UNSUPPORTED
        assert result.reason == "demo is not available for windows."
        assert runner.executed == 0

    async def test_desktop_required(self, make_ctx):
        runner = FakeRunner()
        calls: list[str] = []
        spec = _spec(calls, requires_desktop=True)
        result = await dispatcher.install(
            spec, make_ctx(PlatformType.UBUNTU, runner, desktop=False)
        )
        assert result.status is InstallStatus.UNSUPPORTED
        assert "desktop environment" in result.reason
        assert calls == []
        assert runner.executed == 0

    async def test_unexpected_exception_becomes_failure(self, make_ctx):
        async def broken(ctx):
            raise KeyError("missing")

        spec = _spec(strategies={PlatformType.UBUNTU: broken})
        result = await dispatcher.install(spec, make_ctx(PlatformType.UBUNTU))
        assert result.status is InstallStatus.FAILED
        assert result.failure_kind is FailureKind.UNEXPECTED
        assert "Unexpected error installing Demo" in result.reason


# ═══════════════════════════════════════════════════════════════════
# is_installed / is_eligible
# ═══════════════════════════════════════════════════════════════════


class TestDetection:
    async def test_uses_platform_detector(self, make_ctx):
        assert await dispatcher.is_installed(_spec(), make_ctx(PlatformType.UBUNTU)) is True

    async def test_no_detector_reports_absent(self, make_ctx):
        assert await dispatcher.is_installed(_spec(), make_ctx(PlatformType.FEDORA)) is False

    def test_is_eligible(self, make_ctx):
        spec = _spec(requires_desktop=True)
        assert dispatcher.is_eligible(spec, make_ctx(PlatformType.UBUNTU)) is True
        assert dispatcher.is_eligible(spec, make_ctx(PlatformType.UBUNTU, desktop=False)) is False
        assert dispatcher.is_eligible(spec, make_ctx(PlatformType.MACOS)) is False


# ═══════════════════════════════════════════════════════════════════
# InstallerSpec
# ═══════════════════════════════════════════════════════════════════


class TestInstallerSpec:
    def test_requires_a_strategy(self):
        with pytest.raises(ValueError, match="at least one strategy"):
            _spec(strategies={})

    def test_strategy_and_unavailable_must_not_overlap(self):
        with pytest.raises(ValueError, match="ubuntu"):
            _spec(unavailable={PlatformType.UBUNTU: "nope"})

    def test_platforms(self):
        spec = _spec()
        assert spec.platforms == frozenset({PlatformType.UBUNTU})
        assert spec.supports(PlatformType.UBUNTU)
        assert not spec.supports(PlatformType.MACOS)
