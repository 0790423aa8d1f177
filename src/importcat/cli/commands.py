"""Command handlers for the importcat CLI.

Each ``cmd_*`` function receives the parsed argparse namespace and returns
the process exit code (``exit_codes`` in defaults.yaml).  Diagnostics and
status messages go to stderr; machine-readable output (``--format json``,
``list-categories``) goes to stdout.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml

from importcat._paths import find_project_config
from importcat.engine import ScanResult, scan_file
from importcat.exceptions import ConfigurationError, ImportcatError
from importcat.lib import config
from importcat.lib.categories import CommentMarkers, RuleOptions, validate_options
from importcat.lib.formatter import (
    format_categories,
    format_diagnostic_stderr,
    format_report_json,
    format_summary_stderr,
)
from importcat.lib.models import ProjectConfig, validate_project_config
from importcat.lib.project import (
    default_project,
    load_preset,
    load_project_config,
    project_from_dict,
    resolve_options,
)
from importcat.lib.theme import colorize
from importcat.lib.yaml_loader import dump_yaml, load_yaml


def _err(message: str, role: str = "failed") -> None:
    print(colorize(message, role), file=sys.stderr)


def _config_path(explicit: Optional[str]) -> Optional[Path]:
    if explicit:
        return Path(explicit)
    return find_project_config()


def _load_project(explicit: Optional[str]) -> Optional[ProjectConfig]:
    """Load the project config, or None when there is none to load.

    Raises:
        FileNotFoundError: If ``--config`` names a missing file.
        ConfigurationError: If the config is malformed.
    """
    path = _config_path(explicit)
    if path is None:
        return None
    return load_project_config(path)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


def cmd_check(args: argparse.Namespace) -> int:
    """Analyze files, optionally fixing them in place."""
    code_ok = config.get_int("exit_codes.ok")
    code_diag = config.get_int("exit_codes.diagnostics")
    code_error = config.get_int("exit_codes.error")
    as_json = args.format == config.get_str("formats.json")

    try:
        project = _load_project(args.config)
    except (ConfigurationError, FileNotFoundError) as exc:
        _err(str(exc))
        return code_error

    options_cache: dict[str, RuleOptions] = {}
    projects: dict[str, ProjectConfig] = {}
    scans: list[ScanResult] = []
    sources: dict[str, str] = {}
    had_error = False

    for filepath in args.files:
        language = config.language_for_path(filepath)
        if language is None:
            _err(config.get_str("messages.unknown_language").format(filepath=filepath), "info")
            scans.append(ScanResult(filepath=filepath, status=config.get_str("statuses.skipped")))
            continue

        try:
            source = Path(filepath).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _err(config.get_str("messages.read_error").format(filepath=filepath, error=exc))
            had_error = True
            continue

        try:
            if language not in projects:
                projects[language] = project or default_project(language)
            file_project = projects[language]
            if language not in options_cache:
                options_cache[language] = resolve_options(file_project, language)
            scan = scan_file(
                source,
                filepath,
                file_project,
                fix=args.fix,
                skip_scope=args.no_scope,
                options=options_cache[language],
            )
        except ConfigurationError as exc:
            _err(str(exc))
            return code_error
        except ImportcatError as exc:
            _err(str(exc))
            had_error = True
            continue

        if scan.fixed_source is not None:
            Path(filepath).write_text(scan.fixed_source, encoding="utf-8")
            if not as_json:
                msg = config.get_str("messages.fixed_file")
                _err(msg.format(filepath=filepath, count=scan.fixes_applied), "fix")
        sources[filepath] = scan.fixed_source if scan.fixed_source is not None else source
        scans.append(scan)

    remaining = sum(len(s.diagnostics) for s in scans)

    if as_json:
        indent = config.get_int("defaults.json_indent")
        print(json.dumps(format_report_json(scans), indent=indent))
    else:
        for scan in scans:
            for diagnostic in scan.diagnostics:
                print(
                    format_diagnostic_stderr(scan.filepath, diagnostic, sources[scan.filepath]),
                    file=sys.stderr,
                )
        checked = sum(1 for s in scans if s.status != config.get_str("statuses.skipped"))
        fixed = sum(s.fixes_applied for s in scans)
        print(format_summary_stderr(checked, remaining, fixed), file=sys.stderr)

    if had_error:
        return code_error
    return code_diag if remaining else code_ok


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


def cmd_init(args: argparse.Namespace) -> int:
    """Write a .importcat.yaml for the current directory."""
    code_error = config.get_int("exit_codes.error")
    path = Path.cwd() / config.get_str("filenames.project_config")

    if path.exists() and not args.force:
        _err(config.get_str("messages.config_exists").format(path=path))
        return code_error

    try:
        load_preset(args.preset)
    except ConfigurationError as exc:
        _err(str(exc))
        return code_error

    data = {
        "preset": args.preset,
        "scope": {"include_paths": [], "exempt_paths": [], "exempt_files": []},
        "logging": {
            "enabled": False,
            "directory": config.get_str("defaults.log_directory"),
        },
    }
    dump_yaml(data, path)
    _err(config.get_str("messages.config_written").format(path=path, preset=args.preset), "passed")
    return config.get_int("exit_codes.ok")


# ---------------------------------------------------------------------------
# list-categories
# ---------------------------------------------------------------------------


def cmd_list_categories(args: argparse.Namespace) -> int:
    """Print the effective categories for one language."""
    language = args.language
    try:
        project = _load_project(args.config) or default_project(language)
        options = resolve_options(project, language)
    except (ConfigurationError, FileNotFoundError) as exc:
        _err(str(exc))
        return config.get_int("exit_codes.error")
    print(format_categories(options, language))
    return config.get_int("exit_codes.ok")


# ---------------------------------------------------------------------------
# lint-config
# ---------------------------------------------------------------------------


def cmd_lint_config(args: argparse.Namespace) -> int:
    """Validate a project config and report every problem found."""
    code_error = config.get_int("exit_codes.error")
    path = _config_path(args.config)
    if path is None or not path.is_file():
        filename = config.get_str("filenames.project_config")
        _err(config.get_str("messages.config_not_found").format(filename=filename))
        return code_error

    problems: list[str] = []
    try:
        data = load_yaml(path)
        problems = validate_project_config(data)
        if not problems:
            project = project_from_dict(data, source=str(path))
            markers = CommentMarkers.for_language(args.language)
            problems = validate_options(project.options, markers)
    except ConfigurationError as exc:
        problems = exc.problems
    except yaml.YAMLError as exc:
        problems = [str(exc)]

    if problems:
        _err(str(ConfigurationError(problems, source=str(path))))
        return code_error
    _err(config.get_str("messages.config_ok").format(path=path), "passed")
    return config.get_int("exit_codes.ok")
