"""Tests for CLI."""

import argparse
import subprocess
import sys
from pathlib import Path

import pytest

from child_subsidy.reporting.cli import build_parser, main, parse_child


def run_cli(*args):
    """Run CLI and return output."""
    result = subprocess.run(
        [sys.executable, "-m", "child_subsidy.reporting.cli", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        env={"PYTHONPATH": "src", "PYTHONIOENCODING": "utf-8"},
        cwd=Path(__file__).parent.parent,
    )
    return result


class TestCLI:
    """Tests for command-line interface."""

    def test_help(self):
        """--help shows usage."""
        result = run_cli("--help")
        assert result.returncode == 0
        assert "child-subsidy" in result.stdout
        assert "calc" in result.stdout
        assert "sweep" in result.stdout

    def test_version(self):
        """--version shows version."""
        result = run_cli("--version")
        assert result.returncode == 0
        assert "0.1.0" in result.stdout

    def test_no_command_shows_help(self):
        """No command shows help and exits 1."""
        result = run_cli()
        assert result.returncode == 1

    def test_calc(self):
        """calc ranks every jurisdiction."""
        result = run_cli("calc", "--income", "6000000", "--child", "0:first")
        assert result.returncode == 0
        assert "#1 東京都 (tokyo)" in result.stdout
        assert "#4 埼玉県 (saitama)" in result.stdout

    def test_calc_single_jurisdiction(self):
        result = run_cli(
            "calc", "--income", "6000000", "--child", "5", "--jurisdiction", "chiba", "--detail"
        )
        assert result.returncode == 0
        assert "千葉県" in result.stdout
        assert "東京都" not in result.stdout
        assert "chiba_child_allowance" in result.stdout

    def test_calc_unknown_jurisdiction(self):
        """Unknown jurisdiction exits 2 with an error."""
        result = run_cli("calc", "--income", "6000000", "--child", "0", "--jurisdiction", "osaka")
        assert result.returncode == 2
        assert "Unknown jurisdiction" in result.stderr

    def test_calc_invalid_income(self):
        result = run_cli("calc", "--income", "100000000", "--child", "0")
        assert result.returncode == 2
        assert "Invalid income" in result.stderr

    def test_calc_output_dir(self, tmp_path):
        result = run_cli(
            "calc", "--income", "6000000", "--child", "0", "--output-dir", str(tmp_path)
        )
        assert result.returncode == 0
        assert (tmp_path / "summary.csv").exists()
        assert (tmp_path / "policies.csv").exists()

    def test_sweep(self):
        result = run_cli("sweep", "--income", "6000000", "--max-age", "3", "--no-progress")
        assert result.returncode == 0
        assert "Remaining entitlement by age" in result.stdout

    def test_sweep_negative_max_age(self):
        """A negative --max-age exits 2 with an error."""
        result = run_cli("sweep", "--income", "6000000", "--max-age", "-1", "--no-progress")
        assert result.returncode == 2
        assert "Error: max_sweep_age must be non-negative" in result.stderr

    def test_medical(self):
        result = run_cli("medical", "--age", "0", "--jurisdiction", "tokyo")
        assert result.returncode == 0
        assert "521,500円" in result.stdout
        assert "52万円" in result.stdout

    def test_catalog_dir(self, tmp_path):
        """An empty catalog directory yields no jurisdictions."""
        result = run_cli("--catalog-dir", str(tmp_path), "calc", "--income", "6000000")
        assert result.returncode == 0
        assert "#1" not in result.stdout


class TestParseChild:
    def test_age_only(self):
        assert parse_child("5") == (5, "first")

    def test_with_order(self):
        assert parse_child("2:third_or_more") == (2, "third_or_more")

    @pytest.mark.parametrize("value", ["x", "3:fourth", ""])
    def test_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_child(value)


class TestMain:
    """Tests calling main() in-process."""

    def test_calc(self, capsys):
        main(["calc", "--income", "6000000", "--child", "3:third_or_more"])
        out = capsys.readouterr().out
        assert "Child Subsidy Comparison" in out

    def test_negative_age(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["calc", "--income", "6000000", "--child", "-1"])
        assert excinfo.value.code == 2
        assert "age must be non-negative" in capsys.readouterr().err

    def test_no_command(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1

    def test_parser_defaults(self):
        args = build_parser().parse_args(["sweep", "--income", "1"])
        assert args.birth_order == "first"
        assert args.max_age == 19
        assert args.catalog_dir is None
