"""
Tests for CLI argument parser.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from crossenv.cli.parser import CLI


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_no_command_shows_help(self, capsys):
        """Running without a command shows help and fails."""
        result = CLI().run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()

    def test_version_flag(self, capsys):
        """--version prints the program name."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "crossenv" in capsys.readouterr().out

    def test_global_options(self):
        """Global options are parsed before the command."""
        args = CLI().parse_args(
            ["-v", "--config", "c.yaml", "--project-root", "/src", "list-targets"]
        )

        assert args.verbose is True
        assert args.config == Path("c.yaml")
        assert args.project_root == Path("/src")
        assert args.command == "list-targets"


class TestCommandParsing:
    """Test per-command arguments."""

    def test_env_defaults(self):
        """env flags default to off."""
        args = CLI().parse_args(["env", "linux-arm64"])

        assert args.target == "linux-arm64"
        assert args.no_ccache is False
        assert args.sccache is False
        assert args.mold is False
        assert args.no_static is False
        assert args.set is None
        assert args.format == "shell"

    def test_env_all_options(self):
        """env accepts repeated --set."""
        args = CLI().parse_args(
            [
                "env",
                "wasi",
                "--no-ccache",
                "--sccache",
                "--mold",
                "--no-static",
                "--set",
                "CC=clang",
                "--set",
                "CFLAGS=-O3",
                "--format",
                "json",
            ]
        )

        assert args.set == ["CC=clang", "CFLAGS=-O3"]
        assert args.format == "json"
        assert args.no_static is True

    def test_build_arguments(self):
        """build takes a path, target, jobs and dry-run."""
        args = CLI().parse_args(
            ["build", "proj", "--target", "linux-arm64", "-j", "4", "--dry-run"]
        )

        assert args.path == Path("proj")
        assert args.target == "linux-arm64"
        assert args.jobs == 4
        assert args.dry_run is True

    def test_build_all_targets(self):
        """build-all takes a list of targets."""
        args = CLI().parse_args(["build-all", "--targets", "wasi", "cosmo"])
        assert args.targets == ["wasi", "cosmo"]
        assert args.build_command is None

    def test_build_all_command_keeps_subcommand(self):
        """--command does not clobber the selected subcommand."""
        args = CLI().parse_args(["build-all", "--command", "make clean all"])

        assert args.command == "build-all"
        assert args.build_command == "make clean all"

    def test_exec_collects_command(self):
        """exec passes everything after TARGET through untouched."""
        args = CLI().parse_args(["exec", "linux-arm64", "make", "-j4", "V=1"])

        assert args.command == "exec"
        assert args.target == "linux-arm64"
        assert args.cmd == ["make", "-j4", "V=1"]
        assert args.dry_run is False

    def test_check_static_requires_binary(self):
        """check-static needs at least one path."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["check-static"])

    def test_invalid_format(self):
        """Unsupported formats are rejected by argparse."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["list-targets", "--format", "xml"])


class TestLogging:
    """Test logging configuration."""

    @pytest.mark.parametrize(
        "flags,level",
        [(["-v"], logging.DEBUG), (["-q"], logging.ERROR), ([], logging.INFO)],
    )
    def test_levels(self, flags, level):
        """verbose/quiet select the root level."""
        cli = CLI()
        cli._configure_logging(cli.parse_args(flags + ["list-targets"]))

        assert logging.getLogger().level == level


class TestErrorHandling:
    """Test exit codes for failures."""

    def test_keyboard_interrupt(self):
        """Ctrl-C exits with 130."""
        cli = CLI()
        with patch.object(cli, "_dispatch_command", side_effect=KeyboardInterrupt):
            assert cli.run(["list-targets"]) == 130

    def test_unexpected_exception(self):
        """Unexpected errors exit with 1."""
        cli = CLI()
        with patch.object(cli, "_dispatch_command", side_effect=RuntimeError("boom")):
            assert cli.run(["list-targets"]) == 1

    def test_crossenv_error_printed(self, capsys, clean_env, tmp_path):
        """Typed errors are printed as ERROR lines."""
        result = CLI().run(["--project-root", str(tmp_path), "info", "bogus-target"])

        assert result == 1
        assert "ERROR: Unknown target: 'bogus-target'" in capsys.readouterr().err
