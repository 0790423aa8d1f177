"""importcat CLI entry point: argument parsing and command dispatch.

Provides the ``main()`` entry point that builds the argparse parser tree and
dispatches each subcommand to its handler in :mod:`importcat.cli.commands`.
All configurable strings (program name, description, default values) are
loaded from the central config module so nothing is hardcoded.

Usage::

    importcat check src/app.ts src/util.py [--fix] [--format json]
    importcat init [--preset recommended]
    importcat list-categories [--language python]
    importcat lint-config [--config .importcat.yaml]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from importcat import __version__
from importcat.cli.commands import (
    cmd_check,
    cmd_init,
    cmd_lint_config,
    cmd_list_categories,
)
from importcat.lib import config


def build_parser() -> argparse.ArgumentParser:
    """Build the full argparse tree, one sub-parser per subcommand."""
    prog = config.get_str("cli.prog_name")
    desc = config.get_str("cli.description")
    default_preset = config.get_str("defaults.preset")
    default_language = config.get_str("defaults.language")
    default_format = config.get_str("formats.default")
    formats = [config.get_str("formats.stderr"), config.get_str("formats.json")]
    languages = config.language_names()
    config_file = config.get_str("filenames.project_config")

    parser = argparse.ArgumentParser(prog=prog, description=desc)
    parser.add_argument(
        "--version", action="version", version=f"{prog} {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sub_check = subparsers.add_parser(
        "check", help="Check import categories, labels and ordering"
    )
    sub_check.add_argument("files", nargs="+", help="Source files to check")
    sub_check.add_argument("--config", help=f"Path to {config_file}")
    sub_check.add_argument(
        "--fix", action="store_true", help="Rewrite files with label fixes applied"
    )
    sub_check.add_argument(
        "--format",
        choices=formats,
        default=default_format,
        help=f"Output format (default: {default_format})",
    )
    sub_check.add_argument(
        "--no-scope",
        action="store_true",
        help="Ignore the project's include/exempt paths",
    )

    sub_init = subparsers.add_parser(
        "init", help=f"Write {config_file} in the current directory"
    )
    sub_init.add_argument(
        "--preset",
        default=default_preset,
        help=f"Preset to start from (default: {default_preset})",
    )
    sub_init.add_argument(
        "--force", action="store_true", help=f"Overwrite an existing {config_file}"
    )

    sub_list = subparsers.add_parser(
        "list-categories", help="Show the effective categories"
    )
    sub_list.add_argument("--config", help=f"Path to {config_file}")
    sub_list.add_argument(
        "--language",
        choices=languages,
        default=default_language,
        help=f"Language to compile the categories for (default: {default_language})",
    )

    sub_lint = subparsers.add_parser(
        "lint-config", help=f"Validate {config_file} and its preset"
    )
    sub_lint.add_argument("--config", help=f"Path to {config_file}")
    sub_lint.add_argument(
        "--language",
        choices=languages,
        default=default_language,
        help=f"Language to validate comment settings for (default: {default_language})",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Parse arguments and dispatch to the appropriate command handler.

    Print help text when no subcommand is given.  Exits with the handler's
    return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    dispatch = {
        "check": cmd_check,
        "init": cmd_init,
        "list-categories": cmd_list_categories,
        "lint-config": cmd_lint_config,
    }

    handler = dispatch.get(args.command)
    if handler:
        sys.exit(handler(args))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
