"""Tests for the ``dev`` command line."""

from __future__ import annotations

import io
import zipfile
from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest

from dev_bootstrap.cli import _parse_args, confirm, install_tool, main, run_cli
from dev_bootstrap.models import PlatformType
from dev_bootstrap.tools import unzip
from tests.conftest import FakeDownloader, FakeRunner

APT_GET = ("env", "DEBIAN_FRONTEND=noninteractive", "apt-get")


def _tree_runner() -> FakeRunner:
    runner = FakeRunner(["apt-get"])
    runner.respond(*APT_GET, "update")
    runner.installs(*APT_GET, "install", "-y", "tree", command="tree")
    return runner


# ═══════════════════════════════════════════════════════════════════
# Argument parsing
# ═══════════════════════════════════════════════════════════════════


class TestParseArgs:
    def test_install_flags(self) -> None:
        args = _parse_args(["install", "tree", "--dry-run", "--force", "--verbose"])
        assert args.command == "install"
        assert args.name == "tree"
        assert args.dry_run and args.force and args.verbose
        assert args.list is False

    def test_list_without_name(self) -> None:
        args = _parse_args(["install", "--list"])
        assert args.list is True
        assert args.name is None

    def test_subcommand_required(self) -> None:
        with pytest.raises(SystemExit):
            _parse_args([])


class TestConfirm:
    def test_yes(self) -> None:
        with patch("builtins.input", return_value="Y"):
            assert confirm("Proceed?") is True

    def test_no(self) -> None:
        with patch("builtins.input", return_value="n"):
            assert confirm("Proceed?") is False

    def test_closed_stdin_means_no(self) -> None:
        with patch("builtins.input", side_effect=EOFError):
            assert confirm("Proceed?") is False


# ═══════════════════════════════════════════════════════════════════
# install_tool
# ═══════════════════════════════════════════════════════════════════


class TestInstallTool:
    async def test_unknown_tool(self, make_ctx, capsys) -> None:
        code = await install_tool("emacs", make_ctx(PlatformType.UBUNTU))
        assert code == 1
        assert "Unknown tool 'emacs'" in capsys.readouterr().err

    async def test_dry_run_runs_nothing(self, make_ctx, capsys) -> None:
        runner = _tree_runner()
        code = await install_tool("tree", make_ctx(PlatformType.UBUNTU, runner), dry_run=True)
        assert code == 0
        assert "[Dry run mode - no changes will be made]" in capsys.readouterr().out
        assert runner.executed == 0

    async def test_force_installs_without_prompt(self, make_ctx, capsys) -> None:
        runner = _tree_runner()
        with patch("dev_bootstrap.cli.confirm") as mock_confirm:
            code = await install_tool("tree", make_ctx(PlatformType.UBUNTU, runner), force=True)
        assert code == 0
        mock_confirm.assert_not_called()
        out = capsys.readouterr().out
        assert "tree installed successfully." in out
        assert "Successful: 1" in out

    async def test_declined_confirmation(self, make_ctx, capsys) -> None:
        runner = _tree_runner()
        with patch("dev_bootstrap.cli.confirm", return_value=False):
            code = await install_tool("tree", make_ctx(PlatformType.UBUNTU, runner))
        assert code == 0
        assert "Installation cancelled." in capsys.readouterr().out
        assert runner.executed == 0

    async def test_already_installed(self, make_ctx, capsys) -> None:
        runner = FakeRunner(["apt-get", "tree"])
        code = await install_tool("tree", make_ctx(PlatformType.UBUNTU, runner))
        assert code == 0
        assert "tree is already installed." in capsys.readouterr().out
        assert runner.executed == 0

    async def test_unsupported_platform_exits_zero(self, make_ctx, capsys) -> None:
        """Unsupported is informational: the hint is shown and nothing runs."""
        runner = FakeRunner()
        code = await install_tool("chrome-canary", make_ctx(PlatformType.FEDORA, runner))
        assert code == 0
        assert "google-chrome-unstable" in capsys.readouterr().out
        assert runner.executed == 0

    async def test_failure_exits_one(self, make_ctx, capsys) -> None:
        runner = FakeRunner(["apt-get"])
        runner.respond(*APT_GET, "update")
        runner.respond(*APT_GET, "install", code=100, stderr="E: dpkg was interrupted")
        code = await install_tool("tmux", make_ctx(PlatformType.UBUNTU, runner), force=True)
        captured = capsys.readouterr()
        assert code == 1
        assert "E: dpkg was interrupted" in captured.err
        assert "Failed: 1" in captured.out

    async def test_git_bash_tree_installs_unzip_first(self, make_ctx, tmp_path, capsys) -> None:
        """The catalog dependency puts unzip ahead of tree in the plan."""
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("bin/unzip.exe", b"MZ")
        downloader = FakeDownloader(tmp_path / "dl", {unzip.GNUWIN32_UNZIP_URL: buf.getvalue()})
        runner = FakeRunner()
        runner.installs("cp", command="unzip")
        runner.respond("mkdir", "-p", "/usr/local/bin")
        runner.installs("unzip", "-o", "-j", command="tree")

        ctx = make_ctx(PlatformType.GITBASH, runner, downloader=downloader)
        code = await install_tool("tree", ctx, force=True)

        out = capsys.readouterr().out
        assert code == 0
        assert "The following will be installed:" in out
        assert out.index("Installing unzip...") < out.index("Installing tree...")
        assert "Successful: 2" in out


# ═══════════════════════════════════════════════════════════════════
# run_cli / main
# ═══════════════════════════════════════════════════════════════════


class TestRunCli:
    def _patched_context(self, ctx):
        @asynccontextmanager
        async def fake_app_context(settings):
            yield ctx

        return patch("dev_bootstrap.cli.app_context", fake_app_context)

    def test_list(self, make_ctx, capsys) -> None:
        ctx = make_ctx(PlatformType.MACOS)
        with self._patched_context(ctx), patch("dev_bootstrap.cli._configure_logging"):
            assert run_cli(["install", "--list"]) == 0
        out = capsys.readouterr().out
        assert "Available tools:" in out
        assert "winpty (not available on this platform)" in out
        assert "  tmux\n" in out

    def test_missing_name(self, make_ctx, capsys) -> None:
        ctx = make_ctx(PlatformType.MACOS)
        with self._patched_context(ctx), patch("dev_bootstrap.cli._configure_logging"):
            assert run_cli(["install"]) == 1
        assert "No tool specified" in capsys.readouterr().err

    def test_main_exits_with_code(self) -> None:
        with patch("dev_bootstrap.cli.run_cli", return_value=3):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 3
