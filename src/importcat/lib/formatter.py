"""formatter: diagnostic output formatting for stderr and JSON.

Provides a human-readable stderr formatter (location, offending source line,
message and fix hint), a structured JSON formatter for whole runs, the
summary footer bar, and the category table printed by
``importcat list-categories``.  All wording comes from ``config/defaults.yaml``
and colours from the shared theme, which stays silent on non-TTY streams.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from importcat.lib import config
from importcat.lib.categories import RuleOptions
from importcat.lib.models import Diagnostic
from importcat.lib.theme import code as _c

if TYPE_CHECKING:
    from importcat.engine import ScanResult


# ---------------------------------------------------------------------------
# Stderr formatting
# ---------------------------------------------------------------------------


def format_diagnostic_stderr(filepath: str, diagnostic: Diagnostic, source: str = "") -> str:
    """Format a single diagnostic for stderr output.

    Args:
        filepath: Path of the file the diagnostic belongs to.
        diagnostic: The finding.
        source: Full text of the file, used to echo the offending line and
            describe removal fixes.

    Returns:
        Formatted multi-line string for stderr.
    """
    location = config.get_str("formatting.location_template").format(
        filepath=filepath, line=diagnostic.line
    )
    fix_prefix = config.get_str("messages.fix_prefix")

    parts: list[str] = [f"  {_c('file_path')}{location}{_c('reset')}"]
    if source:
        lines = source.splitlines()
        if 0 < diagnostic.line <= len(lines):
            parts.append(f"    {lines[diagnostic.line - 1].strip()}")
    parts.append(f"  {_c(diagnostic.kind)}{diagnostic.message}{_c('reset')}")
    if diagnostic.fix is not None:
        parts.append(
            f"  {_c('fix')}{fix_prefix}{diagnostic.fix.describe(source)}{_c('reset')}"
        )
    return "\n".join(parts)


def format_summary_stderr(files_checked: int, remaining: int, fixed: int = 0) -> str:
    """Format the summary footer bar for stderr output.

    Args:
        files_checked: Number of files analyzed (skipped files excluded).
        remaining: Diagnostics left after the run.
        fixed: Fix edits applied during the run.

    Returns:
        Formatted summary string.
    """
    bar_width = config.get_int("formatting.summary_bar_width")
    bar_char = config.get_str("formatting.summary_bar_char")
    lbl_files = config.get_str("labels.files")
    lbl_diagnostics = config.get_str("labels.diagnostics")
    lbl_fixed = config.get_str("labels.fixed")
    lbl_remaining = config.get_str("labels.remaining")
    lbl_clean = config.get_str("labels.clean")

    bar = f"{_c('summary_bar')}{bar_char * bar_width}{_c('reset')}"
    parts: list[str] = [f"\n{bar}"]
    parts.append(f"  {_c('bold')}{lbl_files}{_c('reset')} {_c('info')}{files_checked}{_c('reset')}")
    role = "failed" if remaining else "passed"
    counts = f"{_c(role)}{remaining} {lbl_remaining}{_c('reset')}"
    if fixed:
        counts += f", {_c('fix')}{fixed} {lbl_fixed}{_c('reset')}"
    parts.append(f"  {_c('bold')}{lbl_diagnostics}{_c('reset')} {counts}")
    if not remaining:
        parts.append(f"  {_c('passed')}{lbl_clean}{_c('reset')}")
    parts.append(bar)
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# JSON formatting
# ---------------------------------------------------------------------------


def format_scan_json(scan: ScanResult) -> dict[str, Any]:
    """Format one file's scan result as a JSON-compatible dict."""
    return {
        "file": scan.filepath,
        "language": scan.language,
        "status": scan.status,
        "diagnostics": [d.to_dict() for d in scan.diagnostics],
        "counts": dict(scan.counts),
        "fixes_applied": scan.fixes_applied,
    }


def format_report_json(scans: Sequence[ScanResult]) -> dict[str, Any]:
    """Format a whole run as a JSON-compatible dict.

    Args:
        scans: Results of every file on the command line, in order.

    Returns:
        Dict suitable for json.dumps().
    """
    status_failed = config.get_str("statuses.failed")
    status_passed = config.get_str("statuses.passed")
    status_skipped = config.get_str("statuses.skipped")

    totals = {kind: 0 for kind in config.get_mapping("kinds").values()}
    for scan in scans:
        for kind, count in scan.counts.items():
            totals[kind] = totals.get(kind, 0) + count

    failed = any(scan.status == status_failed for scan in scans)
    return {
        "status": status_failed if failed else status_passed,
        "files": [format_scan_json(scan) for scan in scans],
        "summary": {
            "files_checked": sum(1 for s in scans if s.status != status_skipped),
            "diagnostics": sum(totals.values()),
            "fixes_applied": sum(s.fixes_applied for s in scans),
            "by_kind": totals,
        },
    }


# ---------------------------------------------------------------------------
# Category listing
# ---------------------------------------------------------------------------


def format_categories(options: RuleOptions, language: str) -> str:
    """Format the compiled categories as a table, in display order.

    Args:
        options: Compiled options.
        language: Host language the options were compiled for.

    Returns:
        Multi-line string, one category per line.
    """
    if not options.categories:
        return config.get_str("labels.no_categories")

    lbl_categories = config.get_str("labels.categories")
    lbl_type = config.get_str("labels.type_category")

    ordered = sorted(options.categories, key=lambda c: c.order)
    width = max(len(c.label) for c in ordered)
    parts = [f"{_c('bold')}{lbl_categories} ({language}){_c('reset')}"]
    for category in ordered:
        patterns = ", ".join(p.pattern for p in category.patterns)
        suffix = f" {_c('info')}{lbl_type}{_c('reset')}" if category.is_type_category else ""
        parts.append(
            f"  {category.order:>3}  {_c('label')}{category.label:<{width}}{_c('reset')}"
            f"  {patterns}{suffix}"
        )
    return "\n".join(parts)
