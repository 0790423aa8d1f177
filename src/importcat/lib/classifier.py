"""classifier: assign each import to a category.

Policy: type-only status is decided strictly before any pattern is tested.
A type-only import goes to the type category whenever one is configured,
even if its path also matches a pattern category.  Without a type category,
type-only imports are matched by path like any other import.  Pattern
categories are tried in configuration declaration order and the first match
wins; the numeric ``order`` plays no part in classification.

There is a single type slot.  When it is auto-detected, only the first label
containing the type marker fills it; later labels that also mention types are
ordinary pattern categories.  They match value imports by path, and
type-only imports never reach them while the slot is filled.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from importcat.lib.categories import RuleOptions
from importcat.lib.models import CategoryRule, ImportRecord


def classify(path: str, is_type_only: bool, options: RuleOptions) -> Optional[CategoryRule]:
    """Return the category of one import, or None when nothing matches.

    Args:
        path: Literal module path as written.
        is_type_only: Whether the statement imports types only.
        options: Compiled rule options.
    """
    if is_type_only and options.type_category is not None:
        return options.type_category
    for category in options.pattern_categories:
        if category.matches(path):
            return category
    return None


def resolve_imports(records: Iterable[ImportRecord], options: RuleOptions) -> list[ImportRecord]:
    """Return resolved copies of ``records`` in source order."""
    return [r.resolve(classify(r.path, r.is_type_only, options)) for r in records]
