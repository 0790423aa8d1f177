"""comments: audit the label comment of every category group.

For each category present in a file (visited by numeric ``order``, ties in
first-appearance order) the first import must be preceded by the category
label, and no later import of the same category may repeat it.  Comparison
is on normalized text: comment markers and surrounding whitespace are
stripped from both sides, so ``//External``, ``// External`` and
``/* External */`` all satisfy the label ``// External``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from importcat.lib import config
from importcat.lib.categories import CommentMarkers, RuleOptions
from importcat.lib.diagnostics import AnalysisResult, duplicate_comment, missing_comment
from importcat.lib.models import CommentToken, ImportRecord

CommentLookup = Callable[[ImportRecord], Sequence[CommentToken]]


def strip_markers(text: str, markers: CommentMarkers) -> str:
    """Return comment text without its markers and surrounding whitespace."""
    body = text.strip()
    opener, closer = markers.block_open, markers.block_close
    if (
        markers.has_block
        and body.startswith(opener)
        and body.endswith(closer)
        and len(body) >= len(opener) + len(closer)
    ):
        body = body[len(opener):len(body) - len(closer)]
    elif body.startswith(markers.line):
        body = body[len(markers.line):]
    return body.strip()


def render_label(label: str, style: str, markers: CommentMarkers) -> str:
    """Render a category label as the comment line a fix inserts.

    Line style keeps a label that already starts with the line marker
    verbatim and prefixes the marker otherwise.  Block style wraps the bare
    label text in the block markers.
    """
    bare = strip_markers(label, markers)
    if style == config.get_str("comment_styles.block"):
        return f"{markers.block_open} {bare} {markers.block_close}"
    if label.strip().startswith(markers.line):
        return label
    return f"{markers.line} {bare}"


def display_order(groups: dict[str, list[ImportRecord]]) -> list[str]:
    """Return group labels sorted by category order (stable on ties)."""
    return sorted(groups, key=lambda label: groups[label][0].category.order)


def check_comments(
    groups: dict[str, list[ImportRecord]],
    comments_before: CommentLookup,
    options: RuleOptions,
) -> AnalysisResult:
    """Verify and repair the leading label of every category group.

    Args:
        groups: Output of ``group_imports``.
        comments_before: Host lookup returning the leading comments of an
            import, closest last.
        options: Compiled rule options.

    Returns:
        ``missing_comment`` diagnostics anchored at first members and
        ``duplicate_comment`` diagnostics anchored at later members.
    """
    result = AnalysisResult()
    markers = options.markers
    for label in display_order(groups):
        first, *rest = groups[label]
        category = first.category
        expected = strip_markers(label, markers)

        leading = comments_before(first)
        if not any(strip_markers(c.text, markers) == expected for c in leading):
            rendered = render_label(label, options.comment_style, markers)
            result = result.add(missing_comment(first, category, rendered))

        for record in rest:
            for comment in comments_before(record):
                if strip_markers(comment.text, markers) == expected:
                    result = result.add(duplicate_comment(record, category, comment))
    return result
