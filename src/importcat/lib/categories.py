"""categories: compile raw category definitions into rule options.

Raw definitions come from a preset or ``.importcat.yaml``::

    categories:
      - label: "// External Libraries"
        patterns: ["^[a-z@]"]
        order: 1
    enforce_order: true
    enforce_comments: true
    comment_style: line        # or: block
    type_category: "// Types"  # omitted/null: auto-detect, false: disabled

Compilation happens once per run.  Every problem is collected and raised
together as a ``ConfigurationError`` before any file is analyzed; the
resulting ``RuleOptions`` is frozen and shared read-only by all analyses.

Design notes:
    ``RuleOptions.categories`` keeps configuration declaration order because
    the classifier's tie-break depends on it.  Numeric ``order`` is only used
    later, for display and the order ratchet, so the two orderings never share
    a sorted structure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any, Optional

from importcat.exceptions import ConfigurationError
from importcat.lib import config
from importcat.lib.models import CategoryRule


@dataclass(frozen=True)
class CommentMarkers:
    """Comment syntax of a host language.

    Attributes:
        line: Line-comment marker, e.g. ``//`` or ``#``.
        block_open: Block-comment opener, empty when the language has none.
        block_close: Block-comment closer, empty when the language has none.
    """

    line: str
    block_open: str = ""
    block_close: str = ""

    @property
    def has_block(self) -> bool:
        """True when the language supports block comments."""
        return bool(self.block_open and self.block_close)

    @classmethod
    def for_language(cls, language: str) -> CommentMarkers:
        """Look up the markers of a language declared in defaults.yaml.

        Raises:
            KeyError: If the language is unknown.
        """
        spec = config.get_mapping(f"languages.{language}")
        return cls(
            line=spec["line_marker"],
            block_open=spec.get("block_open", ""),
            block_close=spec.get("block_close", ""),
        )


@dataclass(frozen=True)
class RuleOptions:
    """Compiled, immutable options for one analysis run.

    Attributes:
        categories: Categories in configuration declaration order.
        type_category: The slot receiving type-only imports, or None.
        enforce_order: Run the order pass.
        enforce_comments: Run the comment pass.
        comment_style: ``line`` or ``block``; how missing labels are rendered.
        markers: Comment syntax of the language being analyzed.
    """

    categories: tuple[CategoryRule, ...]
    type_category: Optional[CategoryRule]
    enforce_order: bool
    enforce_comments: bool
    comment_style: str
    markers: CommentMarkers

    @property
    def pattern_categories(self) -> tuple[CategoryRule, ...]:
        """Non-type categories, still in declaration order."""
        return tuple(c for c in self.categories if not c.is_type_category)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def compile_options(
    raw: Any,
    markers: Optional[CommentMarkers] = None,
    *,
    source: str = "",
) -> RuleOptions:
    """Compile raw options, failing fast on any problem.

    Args:
        raw: Mapping with ``categories`` and the optional flags.
        markers: Comment syntax of the target language.  Defaults to the
            language named by ``defaults.language``.
        source: Config file name, used in the error message.

    Returns:
        The compiled options.

    Raises:
        ConfigurationError: Listing every problem found.
    """
    options, problems = _build(raw, markers or _default_markers())
    if problems or options is None:
        raise ConfigurationError(problems, source=source)
    return options


def validate_options(raw: Any, markers: Optional[CommentMarkers] = None) -> list[str]:
    """Return the problems ``compile_options`` would raise, without raising."""
    _, problems = _build(raw, markers or _default_markers())
    return problems


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def _default_markers() -> CommentMarkers:
    return CommentMarkers.for_language(config.get_str("defaults.language"))


def _build(raw: Any, markers: CommentMarkers) -> tuple[Optional[RuleOptions], list[str]]:
    if not isinstance(raw, dict):
        return None, [f"Options must be a mapping, got {type(raw).__name__}"]

    problems: list[str] = []

    raw_categories = raw.get("categories", [])
    if raw_categories is None:
        raw_categories = []
    if not isinstance(raw_categories, list):
        problems.append(
            f"'categories' must be a list, got {type(raw_categories).__name__}"
        )
        raw_categories = []

    rules: list[CategoryRule] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_categories):
        rule = _compile_category(index, entry, problems)
        if rule is None:
            continue
        if rule.label in seen:
            problems.append(f"categories[{index}]: duplicate label {rule.label!r}")
            continue
        seen.add(rule.label)
        rules.append(rule)

    flags: dict[str, bool] = {}
    for flag in ("enforce_order", "enforce_comments"):
        value = raw.get(flag, config.get_bool(f"defaults.{flag}"))
        if not isinstance(value, bool):
            problems.append(f"'{flag}' must be a boolean, got {type(value).__name__}")
            value = True
        flags[flag] = value

    style = raw.get("comment_style", config.get_str("defaults.comment_style"))
    styles = list(config.get_mapping("comment_styles").values())
    if style not in styles:
        problems.append(f"'comment_style' must be one of {styles}, got {style!r}")
    elif style == config.get_str("comment_styles.block") and not markers.has_block:
        problems.append(
            f"'comment_style' {style!r} is not available: this language has "
            f"no block comments"
        )

    type_label = _resolve_type_slot(raw.get("type_category"), rules, problems)

    if problems:
        return None, problems

    rules = [replace(r, is_type_category=True) if r.label == type_label else r for r in rules]
    type_category = next((r for r in rules if r.is_type_category), None)
    return (
        RuleOptions(
            categories=tuple(rules),
            type_category=type_category,
            enforce_order=flags["enforce_order"],
            enforce_comments=flags["enforce_comments"],
            comment_style=style,
            markers=markers,
        ),
        problems,
    )


def _compile_category(index: int, entry: Any, problems: list[str]) -> Optional[CategoryRule]:
    """Compile one category definition, recording problems instead of raising."""
    where = f"categories[{index}]"
    if not isinstance(entry, dict):
        problems.append(f"{where} must be a mapping, got {type(entry).__name__}")
        return None

    before = len(problems)

    # ``comment`` is accepted as an alias of ``label``.
    label = entry.get("label", entry.get("comment"))
    if not isinstance(label, str) or not label.strip():
        problems.append(f"{where}: missing required 'label'")

    order = entry.get("order")
    if order is None:
        problems.append(f"{where}: missing required 'order'")
    elif isinstance(order, bool) or not isinstance(order, int):
        problems.append(f"{where}: 'order' must be an integer, got {type(order).__name__}")

    raw_patterns = entry.get("patterns", [])
    if raw_patterns is None:
        raw_patterns = []
    compiled: list[re.Pattern[str]] = []
    if not isinstance(raw_patterns, list):
        problems.append(
            f"{where}: 'patterns' must be a list, got {type(raw_patterns).__name__}"
        )
    else:
        for pi, pattern in enumerate(raw_patterns):
            if not isinstance(pattern, str):
                problems.append(
                    f"{where}.patterns[{pi}] must be a string, got {type(pattern).__name__}"
                )
                continue
            try:
                compiled.append(re.compile(pattern))
            except (re.error, OverflowError) as exc:
                problems.append(f"{where}.patterns[{pi}]: invalid pattern {pattern!r}: {exc}")

    if len(problems) > before:
        return None
    return CategoryRule(label=label, patterns=tuple(compiled), order=order)


def _resolve_type_slot(
    setting: Any, rules: list[CategoryRule], problems: list[str]
) -> Optional[str]:
    """Pick the label of the type category.

    ``None`` auto-detects the first label containing the type marker,
    ``False`` disables the slot, a string must name a configured category.
    """
    if setting is False:
        return None
    if setting is None:
        marker = config.get_str("defaults.type_marker")
        for rule in rules:
            if marker in rule.label.lower():
                return rule.label
        return None
    if not isinstance(setting, str):
        problems.append(
            f"'type_category' must be a label, null or false, got {type(setting).__name__}"
        )
        return None
    if setting not in {r.label for r in rules}:
        problems.append(f"'type_category' {setting!r} does not name a configured category")
        return None
    return setting
