"""Integration tests for importcat.cli command dispatch."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from importcat import __version__


CLI_MODULE = "importcat.cli.main"
PYTHON = sys.executable
FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _run(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess:
    env = {k: v for k, v in os.environ.items() if not k.startswith("IMPORTCAT_")}
    return subprocess.run(
        [PYTHON, "-m", CLI_MODULE, *args],
        capture_output=True,
        text=True,
        timeout=30,
        cwd=cwd,
        env=env,
    )


class TestCLIEntryPoint:
    """Tests for 'python -m importcat.cli.main' dispatch."""

    def test_help_flag(self) -> None:
        """--help prints usage and exits 0."""
        result = _run("--help")
        assert result.returncode == 0
        assert "importcat" in result.stdout.lower()

    def test_version_flag(self) -> None:
        """--version prints the version string."""
        result = _run("--version")
        assert result.returncode == 0
        assert __version__ in result.stdout

    def test_no_command_prints_help(self) -> None:
        """Without a subcommand the help text is shown."""
        result = _run()
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_unknown_command(self) -> None:
        """Unknown subcommand is an argparse error."""
        result = _run("nonexistent-cmd")
        assert result.returncode != 0
        assert "invalid choice" in result.stderr


class TestCheckCommand:
    """Tests for 'importcat check'."""

    @pytest.fixture()
    def workdir(self, tmp_project: Path) -> Path:
        for name in ("commented.ts", "uncommented.ts", "out_of_order.ts"):
            (tmp_project / name).write_text(
                (FIXTURES_DIR / "ecmascript" / name).read_text(encoding="utf-8"),
                encoding="utf-8",
            )
        return tmp_project

    def test_clean_file_exits_zero(self, workdir: Path) -> None:
        """A labelled file passes."""
        result = _run("check", "commented.ts", cwd=workdir)
        assert result.returncode == 0, result.stderr
        assert "All import groups are in order." in result.stderr

    def test_diagnostics_exit_one(self, workdir: Path) -> None:
        """Missing labels are reported on stderr with exit code 1."""
        result = _run("check", "uncommented.ts", cwd=workdir)
        assert result.returncode == 1
        assert "uncommented.ts:1" in result.stderr
        assert 'Missing or incorrect comment "// Types"' in result.stderr

    def test_fix_rewrites_file(self, workdir: Path) -> None:
        """--fix writes the labels back and exits 0."""
        result = _run("check", "--fix", "uncommented.ts", cwd=workdir)
        assert result.returncode == 0, result.stderr
        fixed = (workdir / "uncommented.ts").read_text(encoding="utf-8")
        assert fixed == (workdir / "commented.ts").read_text(encoding="utf-8")

    def test_fix_leaves_order_problems(self, workdir: Path) -> None:
        """Order diagnostics survive --fix."""
        result = _run("check", "--fix", "out_of_order.ts", cwd=workdir)
        assert result.returncode == 1
        assert "is out of order" in result.stderr

    def test_json_format(self, workdir: Path) -> None:
        """--format json prints a report on stdout."""
        result = _run("check", "--format", "json", "uncommented.ts", "commented.ts", cwd=workdir)
        assert result.returncode == 1
        report = json.loads(result.stdout)
        assert report["status"] == "failed"
        assert [f["status"] for f in report["files"]] == ["failed", "passed"]
        assert report["summary"]["by_kind"]["missing_comment"] == 4

    def test_unknown_extension_skipped(self, workdir: Path) -> None:
        """Files without a host are skipped, not errors."""
        (workdir / "notes.txt").write_text("hello", encoding="utf-8")
        result = _run("check", "notes.txt", cwd=workdir)
        assert result.returncode == 0
        assert "no import scanner" in result.stderr

    def test_parse_error_exits_two(self, workdir: Path) -> None:
        """An unparseable file is an error."""
        (workdir / "broken.py").write_text("import (\n", encoding="utf-8")
        result = _run("check", "broken.py", cwd=workdir)
        assert result.returncode == 2
        assert "Could not parse broken.py" in result.stderr

    def test_missing_file_exits_two(self, workdir: Path) -> None:
        """A file that cannot be read is an error."""
        result = _run("check", "absent.ts", cwd=workdir)
        assert result.returncode == 2

    def test_invalid_config_exits_two(self, tmp_path: Path) -> None:
        """A malformed project config stops the run."""
        (tmp_path / ".importcat.yaml").write_text(
            "categories:\n  - label: '// A'\n    order: first\n", encoding="utf-8"
        )
        (tmp_path / "a.ts").write_text("import a from 'a';\n", encoding="utf-8")
        result = _run("check", "a.ts", cwd=tmp_path)
        assert result.returncode == 2
        assert "'order' must be an integer" in result.stderr

    def test_python_without_config(self, tmp_path: Path) -> None:
        """Without a config, Python files use the python preset."""
        source = (FIXTURES_DIR / "python" / "commented.py").read_text(encoding="utf-8")
        (tmp_path / "sample.py").write_text(source, encoding="utf-8")
        result = _run("check", "sample.py", cwd=tmp_path)
        assert result.returncode == 0, result.stderr


class TestOtherCommands:
    """Tests for init, list-categories and lint-config."""

    def test_init_writes_config(self, tmp_path: Path) -> None:
        """init writes a loadable config naming the preset."""
        result = _run("init", "--preset", "python", cwd=tmp_path)
        assert result.returncode == 0, result.stderr
        text = (tmp_path / ".importcat.yaml").read_text(encoding="utf-8")
        assert "preset: python" in text
        lint = _run("lint-config", "--language", "python", cwd=tmp_path)
        assert lint.returncode == 0, lint.stderr

    def test_init_refuses_overwrite(self, tmp_project: Path) -> None:
        """An existing config is kept unless --force is given."""
        result = _run("init", cwd=tmp_project)
        assert result.returncode == 2
        assert "already exists" in result.stderr
        forced = _run("init", "--force", cwd=tmp_project)
        assert forced.returncode == 0

    def test_init_unknown_preset(self, tmp_path: Path) -> None:
        """An unknown preset is rejected and nothing is written."""
        result = _run("init", "--preset", "nope", cwd=tmp_path)
        assert result.returncode == 2
        assert not (tmp_path / ".importcat.yaml").exists()

    def test_list_categories(self, tmp_project: Path) -> None:
        """list-categories prints the effective categories."""
        result = _run("list-categories", cwd=tmp_project)
        assert result.returncode == 0
        assert "// External Libraries" in result.stdout

    def test_list_categories_python_default(self, tmp_path: Path) -> None:
        """Without a config the language preset is listed."""
        result = _run("list-categories", "--language", "python", cwd=tmp_path)
        assert result.returncode == 0
        assert "# Standard Library" in result.stdout

    def test_lint_config_ok(self, tmp_project: Path) -> None:
        """A valid config lints clean."""
        result = _run("lint-config", cwd=tmp_project)
        assert result.returncode == 0
        assert "configuration OK" in result.stderr

    def test_lint_config_reports_every_problem(self, tmp_path: Path) -> None:
        """All category problems are listed."""
        (tmp_path / ".importcat.yaml").write_text(
            "categories:\n"
            "  - label: '// A'\n"
            "    order: first\n"
            "  - label: '// B'\n"
            "    order: 1\n"
            "    patterns: ['(']\n",
            encoding="utf-8",
        )
        result = _run("lint-config", cwd=tmp_path)
        assert result.returncode == 2
        assert "'order' must be an integer" in result.stderr
        assert "invalid pattern" in result.stderr

    def test_lint_config_missing(self, tmp_path: Path) -> None:
        """No config to lint is an error."""
        result = _run("lint-config", cwd=tmp_path)
        assert result.returncode == 2
        assert "No .importcat.yaml found" in result.stderr
