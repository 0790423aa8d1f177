"""fixes: apply fix edits to source text.

Edits are sorted by position and applied in one sweep.  An edit that
overlaps the previously accepted one, or an insertion touching it, is skipped
and reported back; the caller re-analyzes the new text and tries again,
which is how the engine's ``fix_source`` converges.  Adjacent removals do
not conflict.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from importcat.lib.models import FixEdit


@dataclass
class FixOutcome:
    """Result of one ``apply_fixes`` sweep."""

    text: str
    applied: list[FixEdit] = field(default_factory=list)
    skipped: list[FixEdit] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True when at least one edit was applied."""
        return bool(self.applied)


def apply_fixes(text: str, edits: Iterable[FixEdit]) -> FixOutcome:
    """Apply every non-conflicting edit to ``text``.

    Args:
        text: Original source text.
        edits: Fix edits with ranges into ``text``.

    Returns:
        The rewritten text plus the applied and skipped edits.
    """
    ordered = sorted(edits, key=lambda e: (e.range.start, e.range.end))
    accepted: list[FixEdit] = []
    skipped: list[FixEdit] = []
    for edit in ordered:
        if edit.range.end > len(text) or (accepted and _conflicts(accepted[-1], edit)):
            skipped.append(edit)
            continue
        accepted.append(edit)

    parts: list[str] = []
    cursor = 0
    for edit in accepted:
        parts.append(text[cursor:edit.range.start])
        parts.append(edit.text)
        cursor = edit.range.end
    parts.append(text[cursor:])
    return FixOutcome(text="".join(parts), applied=accepted, skipped=skipped)


def _conflicts(previous: FixEdit, edit: FixEdit) -> bool:
    """Overlapping ranges conflict; so does an insertion touching a neighbour."""
    if edit.range.start < previous.range.end:
        return True
    touching = edit.range.start == previous.range.end
    is_insert = edit.range.start == edit.range.end
    was_insert = previous.range.start == previous.range.end
    return touching and (is_insert or was_insert)
