"""ordering: detect category priority regressions.

A ratchet holds the lowest order the next import may have.  It starts at
``ordering.initial_ratchet`` (0) and only moves up, so categories sharing an
order never conflict.  The first categorized import of a file is out of order
only when its order is negative.
"""

from __future__ import annotations

from collections.abc import Iterable

from importcat.lib import config
from importcat.lib.diagnostics import AnalysisResult, wrong_order
from importcat.lib.models import ImportRecord


def check_order(records: Iterable[ImportRecord]) -> AnalysisResult:
    """Walk resolved imports in source order and report regressions.

    Args:
        records: Resolved imports in source order.  Unclassified ones are
            skipped.

    Returns:
        One ``wrong_order`` diagnostic per import whose category order is
        strictly below the highest order seen before it.
    """
    result = AnalysisResult()
    ratchet = config.get_int("ordering.initial_ratchet")
    for record in records:
        category = record.category
        if category is None:
            continue
        if category.order < ratchet:
            result = result.add(wrong_order(record, ratchet))
        else:
            ratchet = category.order
    return result
