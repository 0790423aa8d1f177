"""diagnostics: diagnostic construction and the per-pass result value.

Each engine pass returns an ``AnalysisResult`` instead of appending to a
shared list, so passes stay pure functions and their results are combined
with ``merge``.  Every diagnostic carries at most one fix edit; edits from
different diagnostics are never merged or deduplicated here, overlap is
resolved by whoever applies them (see ``importcat.lib.fixes``).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from importcat.lib import config
from importcat.lib.models import (
    CategoryRule,
    CommentToken,
    Diagnostic,
    FixEdit,
    ImportRecord,
    SourceRange,
)


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable collection of diagnostics for one file."""

    diagnostics: tuple[Diagnostic, ...] = ()

    def add(self, diagnostic: Diagnostic) -> AnalysisResult:
        """Return a new result with ``diagnostic`` appended."""
        return AnalysisResult(self.diagnostics + (diagnostic,))

    def merge(self, other: AnalysisResult) -> AnalysisResult:
        """Return a new result holding both results' diagnostics."""
        return AnalysisResult(self.diagnostics + other.diagnostics)

    def sorted(self) -> AnalysisResult:
        """Return the diagnostics ordered by anchor position (stable)."""
        return AnalysisResult(tuple(sorted(self.diagnostics, key=lambda d: d.range.start)))

    def of_kind(self, kind: str) -> list[Diagnostic]:
        """Return the diagnostics of one kind."""
        return [d for d in self.diagnostics if d.kind == kind]

    def counts(self) -> dict[str, int]:
        """Return a ``{kind: count}`` mapping including zero counts."""
        counts = {kind: 0 for kind in config.get_mapping("kinds").values()}
        for diagnostic in self.diagnostics:
            counts[diagnostic.kind] = counts.get(diagnostic.kind, 0) + 1
        return counts

    @property
    def fixes(self) -> list[FixEdit]:
        """Fix edits of every fixable diagnostic, in diagnostic order."""
        return [d.fix for d in self.diagnostics if d.fix is not None]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def missing_comment(record: ImportRecord, category: CategoryRule, rendered: str) -> Diagnostic:
    """Build a missing-comment diagnostic whose fix inserts the label line.

    The label is inserted at the statement start, followed by a line break and
    the statement's indentation, which leaves the import where it was one
    line lower.  When code precedes the import on its line, the whitespace
    between them is replaced so the label and the import each start a new
    line.

    Args:
        record: First import of the category group.
        category: The category whose label is missing.
        rendered: Label text rendered in the configured comment style.
    """
    line_break = config.get_str("fixes.line_break")
    text = f"{rendered}{line_break}{record.indent}"
    at = SourceRange(record.range.start, record.range.start)
    if record.inline_at is not None:
        text = f"{line_break}{record.indent}{text}"
        at = SourceRange(record.inline_at, record.range.start)
    return Diagnostic(
        kind=config.get_str("kinds.missing_comment"),
        line=record.line,
        range=record.range,
        data={"category": category.label},
        fix=FixEdit(
            kind=config.get_str("fix_kinds.insert"),
            range=at,
            text=text,
        ),
    )


def duplicate_comment(
    record: ImportRecord, category: CategoryRule, comment: CommentToken
) -> Diagnostic:
    """Build a duplicate-comment diagnostic whose fix removes the comment line.

    Args:
        record: The later group member the comment precedes.
        category: The category the comment duplicates.
        comment: The duplicate comment token.
    """
    return Diagnostic(
        kind=config.get_str("kinds.duplicate_comment"),
        line=record.line,
        range=record.range,
        data={"category": category.label},
        fix=FixEdit(
            kind=config.get_str("fix_kinds.remove"),
            range=SourceRange(comment.range.start, comment.range.end + 1),
        ),
    )


def wrong_order(record: ImportRecord, expected_order: int) -> Diagnostic:
    """Build a wrong-order diagnostic. Order violations carry no fix.

    Args:
        record: The resolved import that regressed.
        expected_order: The ratchet value at that point.
    """
    category = record.category
    if category is None:
        raise ValueError(f"wrong_order needs a resolved import: {record.path!r}")
    return Diagnostic(
        kind=config.get_str("kinds.wrong_order"),
        line=record.line,
        range=record.range,
        data={
            "import_path": record.path,
            "category": category.label,
            "expected_order": str(expected_order),
            "actual_order": str(category.order),
        },
    )
