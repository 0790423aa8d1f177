"""importcat engine: import categorization and label-comment enforcement.

``analyze`` is the core: a pure function of (imports, comment lookup,
options) that classifies every import, groups them by category and runs the
order and comment passes.  Everything else in this module is file-level
orchestration around it: choosing a host for the file type, applying fixes
until they converge, scope checks and the optional JSONL run log.

Design notes:
    The engine never parses source itself.  Hosts (``SourceAnalyzer`` for
    Python, ``EsSource`` for JavaScript/TypeScript) turn text into
    ``ImportRecord`` values and a leading-comment lookup; parse failures are
    wrapped in ``ImportcatParseError`` so callers see one exception type.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional, Protocol

from importcat.exceptions import ImportcatParseError
from importcat.lib import config
from importcat.lib.categories import RuleOptions
from importcat.lib.classifier import resolve_imports
from importcat.lib.comments import CommentLookup, check_comments
from importcat.lib.diagnostics import AnalysisResult
from importcat.lib.fixes import apply_fixes
from importcat.lib.grouper import group_imports
from importcat.lib.logger import log_scan
from importcat.lib.models import CommentToken, Diagnostic, ImportRecord, ProjectConfig
from importcat.lib.ordering import check_order
from importcat.lib.project import resolve_options
from importcat.lib.scope import is_file_in_scope


class ImportHost(Protocol):
    """What the engine needs from a parsed source file."""

    imports: list[ImportRecord]

    def comments_before(self, record: ImportRecord) -> Sequence[CommentToken]:
        ...


@dataclass
class FixResult:
    """Outcome of ``fix_source``."""

    source: str
    result: AnalysisResult
    fixes_applied: int = 0
    passes: int = 0


@dataclass
class ScanResult:
    """Result of scanning one file."""

    filepath: str
    status: str
    language: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    fixes_applied: int = 0
    fixed_source: Optional[str] = None
    scan_ms: int = 0


# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------


def analyze(
    imports: Sequence[ImportRecord],
    comments_before: CommentLookup,
    options: RuleOptions,
) -> AnalysisResult:
    """Analyze one file's imports.

    Args:
        imports: Import records in source order, as reported by a host.
        comments_before: Lookup returning the leading comments of a record.
        options: Compiled rule options.

    Returns:
        Diagnostics of the enabled passes, ordered by position.
    """
    result = AnalysisResult()
    if not imports or not options.categories:
        return result

    resolved = resolve_imports(imports, options)
    if options.enforce_order:
        result = result.merge(check_order(resolved))
    if options.enforce_comments:
        result = result.merge(check_comments(group_imports(resolved), comments_before, options))
    return result.sorted()


def parse_source(source: str, filepath: str, language: Optional[str] = None) -> ImportHost:
    """Build the host for a file.

    Args:
        source: File text.
        filepath: Path, used to pick the language when none is given.
        language: ``python`` or ``ecmascript``.

    Raises:
        ValueError: If no host handles the file.
        ImportcatParseError: If the host cannot parse the source.
    """
    language = language or config.language_for_path(filepath)
    if language == "python":
        import libcst

        from importcat.lib.analyzer import SourceAnalyzer

        try:
            return SourceAnalyzer(source, filepath)
        except libcst.ParserSyntaxError as exc:
            raise ImportcatParseError(filepath, exc) from exc
    if language == "ecmascript":
        from importcat.lib.es_source import EsSource

        try:
            return EsSource(source, filepath)
        except ValueError as exc:
            raise ImportcatParseError(filepath, exc) from exc
    raise ValueError(config.get_str("messages.unknown_language").format(filepath=filepath))


def lint_source(
    source: str,
    filepath: str,
    options: RuleOptions,
    language: Optional[str] = None,
) -> AnalysisResult:
    """Parse a source string and analyze its imports."""
    host = parse_source(source, filepath, language)
    return analyze(host.imports, host.comments_before, options)


def fix_source(
    source: str,
    filepath: str,
    options: RuleOptions,
    language: Optional[str] = None,
) -> FixResult:
    """Apply fixes until no fixable diagnostic remains.

    Each pass re-parses the text, so edits skipped for overlapping are
    retried against fresh positions.  Stops after ``fixes.max_passes``.

    Returns:
        The fixed text and the diagnostics still present in it.
    """
    max_passes = config.get_int("fixes.max_passes")
    applied = 0
    passes = 0
    result = lint_source(source, filepath, options, language)
    while result.fixes and passes < max_passes:
        outcome = apply_fixes(source, result.fixes)
        if not outcome.changed:
            break
        passes += 1
        applied += len(outcome.applied)
        source = outcome.text
        result = lint_source(source, filepath, options, language)
    return FixResult(source=source, result=result, fixes_applied=applied, passes=passes)


# ---------------------------------------------------------------------------
# File-level orchestration
# ---------------------------------------------------------------------------


def scan_file(
    source: str,
    filepath: str,
    project: ProjectConfig,
    *,
    fix: bool = False,
    skip_scope: bool = False,
    options: Optional[RuleOptions] = None,
) -> ScanResult:
    """Scan one file against a project configuration.

    Args:
        source: File text.
        filepath: Path of the file (scope checks, language detection).
        project: Loaded project configuration.
        fix: Apply fixes; the fixed text is returned, not written.
        skip_scope: Ignore the project's scope settings.
        options: Pre-compiled options for the file's language.  Compiled
            from ``project`` when omitted.

    Returns:
        ScanResult with the remaining diagnostics.

    Raises:
        ImportcatParseError: If the file cannot be parsed.
        ConfigurationError: If the project's options do not compile.
    """
    status_skipped = config.get_str("statuses.skipped")
    start = time.time()

    language = config.language_for_path(filepath)
    if language is None or (not skip_scope and not is_file_in_scope(filepath, project.scope)):
        return ScanResult(filepath=filepath, status=status_skipped, language=language or "")

    options = options or resolve_options(project, language)

    fixed_source: Optional[str] = None
    fixes_applied = 0
    if fix:
        outcome = fix_source(source, filepath, options, language)
        result = outcome.result
        fixes_applied = outcome.fixes_applied
        if outcome.source != source:
            fixed_source = outcome.source
    else:
        result = lint_source(source, filepath, options, language)

    if result.diagnostics:
        status = config.get_str("statuses.failed")
    elif fixes_applied:
        status = config.get_str("statuses.fixed")
    else:
        status = config.get_str("statuses.passed")

    scan_ms = int((time.time() - start) * 1000)
    counts = result.counts()

    if project.logging.enabled:
        log_scan(
            project.logging.directory,
            filepath,
            language,
            status,
            counts,
            fixes_applied,
            source,
            scan_ms,
        )

    return ScanResult(
        filepath=filepath,
        status=status,
        language=language,
        diagnostics=list(result.diagnostics),
        counts=counts,
        fixes_applied=fixes_applied,
        fixed_source=fixed_source,
        scan_ms=scan_ms,
    )
