"""grouper: partition resolved imports by category."""

from __future__ import annotations

from collections.abc import Iterable

from importcat.lib.models import ImportRecord


def group_imports(records: Iterable[ImportRecord]) -> dict[str, list[ImportRecord]]:
    """Bucket resolved imports by category label in one forward pass.

    Buckets appear in the order their first member appears in the file and
    keep source order inside.  Unclassified imports are skipped.
    """
    groups: dict[str, list[ImportRecord]] = {}
    for record in records:
        if record.category is None:
            continue
        groups.setdefault(record.category.label, []).append(record)
    return groups
