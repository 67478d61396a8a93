"""Tests for the package-manager adapters."""

from __future__ import annotations

import plistlib
from unittest.mock import AsyncMock, patch

import pytest

from dev_bootstrap.errors import CommandFailedError
from dev_bootstrap.managers import macos_apps
from dev_bootstrap.managers.apt import AptManager
from dev_bootstrap.managers.base import PackageManagerPort
from dev_bootstrap.managers.brew import BrewManager
from dev_bootstrap.managers.choco import ChocoManager
from dev_bootstrap.managers.rpm import RpmManager
from dev_bootstrap.managers.winget import WingetManager
from dev_bootstrap.shell.runner import DefaultCommandRunner
from tests.conftest import FakeRunner

# ═══════════════════════════════════════════════════════════════════
# BrewManager
# ═══════════════════════════════════════════════════════════════════


class TestBrewManager:
    async def test_install_uses_quiet_flag(self):
        runner = FakeRunner(["brew"])
        runner.respond("brew", "install")
        result = await BrewManager(runner).install("tmux")
        assert result.success is True
        assert runner.calls == [["brew", "install", "--quiet", "tmux"]]

    async def test_install_cask(self):
        runner = FakeRunner(["brew"])
        runner.respond("brew", "install")
        await BrewManager(runner).install_cask("google-chrome@canary")
        assert runner.calls == [["brew", "install", "--cask", "--quiet", "google-chrome@canary"]]

    async def test_install_without_brew(self):
        runner = FakeRunner()
        result = await BrewManager(runner).install("tmux")
        assert result.success is False
        assert "Homebrew is not installed" in result.output
        assert runner.calls == []

    async def test_is_installed_reads_exit_code(self):
        runner = FakeRunner(["brew"])
        runner.respond("brew", "list", "--formula", "tree")
        assert await BrewManager(runner).is_installed("tree") is True
        assert await BrewManager(runner).is_installed("tmux") is False

    async def test_get_version(self):
        runner = FakeRunner(["brew"])
        runner.respond("brew", "list", "--versions", "yarn", stdout="yarn 1.22.22\n")
        assert await BrewManager(runner).get_version("yarn") == "1.22.22"

    async def test_prefix_default(self):
        runner = FakeRunner(["brew"])
        runner.respond("brew", "--prefix", code=1)
        assert await BrewManager(runner).prefix() == "/opt/homebrew"


# ═══════════════════════════════════════════════════════════════════
# AptManager
# ═══════════════════════════════════════════════════════════════════


class TestAptManager:
    async def test_install_is_noninteractive_and_root(self):
        runner = FakeRunner(["apt-get"], sudo=True)
        runner.respond("env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "install")
        result = await AptManager(runner).install("tree")
        assert result.success is True
        assert runner.calls == [
            ["sudo", "env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "install", "-y", "tree"]
        ]

    @patch("dev_bootstrap.shell.runner.run_command", new_callable=AsyncMock)
    @patch("dev_bootstrap.shell.runner._needs_sudo", return_value=False)
    async def test_install_as_root_starts_with_executable(self, _mock_sudo, mock_run):
        mock_run.return_value = (0, "", "")
        runner = DefaultCommandRunner()
        with patch.object(runner, "which", return_value=True):
            await AptManager(runner).install("tree")

        argv = mock_run.call_args.args[0]
        assert argv[0] == "env"
        assert "=" not in argv[0]
        assert argv[1:] == ["DEBIAN_FRONTEND=noninteractive", "apt-get", "install", "-y", "tree"]

    async def test_install_failure_carries_stderr(self):
        runner = FakeRunner(["apt-get"])
        runner.respond(
            "env",
            "DEBIAN_FRONTEND=noninteractive",
            "apt-get",
            "install",
            code=100,
            stderr="E: Unable to locate package tmux",
        )
        result = await AptManager(runner).install("tmux")
        assert result.success is False
        assert result.output == "E: Unable to locate package tmux"

    async def test_is_installed_checks_dpkg_status(self):
        runner = FakeRunner()
        runner.respond("dpkg-query", "-W", "-f=${Status}", "tmux", stdout="install ok installed")
        runner.respond(
            "dpkg-query", "-W", "-f=${Status}", "tree", stdout="deinstall ok config-files"
        )
        apt = AptManager(runner)
        assert await apt.is_installed("tmux") is True
        assert await apt.is_installed("tree") is False

    async def test_detection_never_uses_sudo(self):
        runner = FakeRunner(sudo=True)
        await AptManager(runner).is_installed("tmux")
        assert all(cmd[0] != "sudo" for cmd in runner.calls)

    async def test_get_version(self):
        runner = FakeRunner()
        runner.respond("dpkg-query", "-W", "-f=${Status}", stdout="install ok installed")
        runner.respond("dpkg-query", "-W", "-f=${Version}", stdout="23.7.0")
        assert await AptManager(runner).get_version("dbeaver-ce") == "23.7.0"

    async def test_add_signed_repository_runs_steps_in_order(self):
        runner = FakeRunner(["apt-get"], sudo=True)
        runner.respond("env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "update")
        await AptManager(runner).add_signed_repository(
            key_url="https://dl.yarnpkg.com/debian/pubkey.gpg",
            keyring_path="/etc/apt/keyrings/yarn-archive-keyring.gpg",
            repo_line="deb [signed-by=/etc/apt/keyrings/yarn-archive-keyring.gpg] x stable main",
            list_path="/etc/apt/sources.list.d/yarn.list",
        )
        mkdir, key, repo = runner.shell_calls
        assert mkdir == "sudo mkdir -p /etc/apt/keyrings"
        assert "gpg --dearmor" in key
        assert "sudo tee /etc/apt/keyrings/yarn-archive-keyring.gpg" in key
        assert "sudo tee /etc/apt/sources.list.d/yarn.list" in repo
        assert runner.ran("env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "update")

    async def test_add_signed_repository_without_dearmor(self):
        runner = FakeRunner(["apt-get"])
        runner.respond("env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "update")
        await AptManager(runner).add_signed_repository(
            key_url="https://dbeaver.io/debs/dbeaver.gpg.key",
            keyring_path="/usr/share/keyrings/dbeaver.gpg.key",
            repo_line="deb x /",
            list_path="/etc/apt/sources.list.d/dbeaver.list",
            dearmor=False,
        )
        assert "--dearmor" not in runner.shell_calls[1]

    async def test_add_signed_repository_failure(self):
        runner = FakeRunner(["apt-get"])
        runner.respond_shell("curl", code=22, stderr="curl: (22) 404")
        with pytest.raises(CommandFailedError, match="add signing key") as exc_info:
            await AptManager(runner).add_signed_repository(
                key_url="https://example.invalid/key",
                keyring_path="/etc/apt/keyrings/x.gpg",
                repo_line="deb x",
                list_path="/etc/apt/sources.list.d/x.list",
            )
        assert exc_info.value.output == "curl: (22) 404"


# ═══════════════════════════════════════════════════════════════════
# RpmManager
# ═══════════════════════════════════════════════════════════════════


class TestRpmManager:
    def test_hint_wins(self):
        assert RpmManager(FakeRunner(["dnf"]), hint="yum").command == "yum"

    def test_prefers_dnf_on_path(self):
        assert RpmManager(FakeRunner(["dnf", "yum"])).command == "dnf"

    def test_falls_back_to_yum(self):
        assert RpmManager(FakeRunner(["yum"])).command == "yum"

    def test_unavailable(self):
        assert RpmManager(FakeRunner()).is_available() is False

    async def test_install(self):
        runner = FakeRunner(sudo=True)
        runner.respond("dnf", "install")
        result = await RpmManager(runner, hint="dnf").install("tmux")
        assert result.success is True
        assert runner.calls == [["sudo", "dnf", "install", "-y", "tmux"]]

    async def test_group_install(self):
        runner = FakeRunner()
        runner.respond("yum", "groupinstall")
        await RpmManager(runner, hint="yum").group_install("Development Tools")
        assert runner.calls == [["yum", "groupinstall", "-y", "Development Tools"]]

    async def test_is_installed(self):
        runner = FakeRunner()
        runner.respond("rpm", "-q", "tmux", stdout="tmux-3.3a-3.fc39.x86_64")
        assert await RpmManager(runner).is_installed("tmux") is True
        assert await RpmManager(runner).is_installed("tree") is False

    async def test_import_key_failure(self):
        runner = FakeRunner()
        runner.respond("rpm", "--import", code=1, stderr="curl error")
        with pytest.raises(CommandFailedError, match="import GPG key"):
            await RpmManager(runner).import_key("https://dl.yarnpkg.com/rpm/pubkey.gpg")


# ═══════════════════════════════════════════════════════════════════
# ChocoManager / WingetManager
# ═══════════════════════════════════════════════════════════════════


class TestChocoManager:
    async def test_install_passes_extra_args(self):
        runner = FakeRunner(["choco"])
        runner.respond("choco", "install")
        await ChocoManager(runner).install("googlechromecanary", "--pre")
        assert runner.calls == [["choco", "install", "googlechromecanary", "-y", "--pre"]]

    def test_known_path_when_not_on_path(self):
        runner = FakeRunner()
        with patch("dev_bootstrap.managers.choco.os.path.exists", return_value=True):
            manager = ChocoManager(runner)
            assert manager.executable.endswith("choco.exe")

    async def test_missing(self):
        runner = FakeRunner()
        with patch("dev_bootstrap.managers.choco.os.path.exists", return_value=False):
            result = await ChocoManager(runner).install("tree")
        assert result.success is False
        assert runner.calls == []

    async def test_version_from_local_list(self):
        runner = FakeRunner(["choco"])
        runner.respond(
            "choco",
            "list",
            stdout="Chocolatey v2.2.2\ndbeaver 24.0.1\n1 packages installed.\n",
        )
        manager = ChocoManager(runner)
        assert await manager.is_installed("dbeaver") is True
        assert await manager.get_version("dbeaver") == "24.0.1"


class TestWingetManager:
    async def test_install_accepts_agreements(self):
        runner = FakeRunner(["winget"])
        runner.respond("winget", "install")
        await WingetManager(runner).install("CoreyButler.NVMforWindows")
        cmd = runner.calls[0]
        assert "--accept-package-agreements" in cmd
        assert "--accept-source-agreements" in cmd
        assert cmd[cmd.index("--id") + 1] == "CoreyButler.NVMforWindows"

    async def test_version_from_list(self):
        runner = FakeRunner(["winget"])
        runner.respond(
            "winget",
            "list",
            stdout=(
                "Name              Id                         Version  Source\n"
                "NVM for Windows   CoreyButler.NVMforWindows  1.1.12   winget\n"
            ),
        )
        assert await WingetManager(runner).get_version("CoreyButler.NVMforWindows") == "1.1.12"


# ═══════════════════════════════════════════════════════════════════
# macos_apps
# ═══════════════════════════════════════════════════════════════════


class TestMacosApps:
    def test_app_bundle_and_version(self, tmp_path):
        contents = tmp_path / "Beyond Compare.app" / "Contents"
        contents.mkdir(parents=True)
        with (contents / "Info.plist").open("wb") as fh:
            plistlib.dump({"CFBundleShortVersionString": "5.1.7"}, fh)

        with patch.object(macos_apps, "app_directories", return_value=(tmp_path,)):
            assert macos_apps.is_app_installed("Beyond Compare") is True
            assert macos_apps.get_app_version("Beyond Compare") == "5.1.7"

    def test_missing_app(self, tmp_path):
        with patch.object(macos_apps, "app_directories", return_value=(tmp_path,)):
            assert macos_apps.is_app_installed("DBeaver") is False
            assert macos_apps.get_app_version("DBeaver") is None

    def test_unreadable_plist(self, tmp_path):
        contents = tmp_path / "DBeaver.app" / "Contents"
        contents.mkdir(parents=True)
        (contents / "Info.plist").write_bytes(b"not a plist")
        with patch.object(macos_apps, "app_directories", return_value=(tmp_path,)):
            assert macos_apps.get_app_version("DBeaver") is None


@pytest.mark.parametrize(
    "manager_cls", [BrewManager, AptManager, RpmManager, ChocoManager, WingetManager]
)
def test_adapters_satisfy_port(manager_cls):
    assert isinstance(manager_cls(FakeRunner()), PackageManagerPort)
