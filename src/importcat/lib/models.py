"""Data models shared by the importcat hosts, engine passes and fixer.

All analysis models are frozen dataclasses: a host creates ImportRecord and
CommentToken values once per file, the classifier returns resolved copies,
and nothing downstream mutates them.  The project-config models at the bottom
mirror ``.importcat.yaml`` and validate structure at construction time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from importcat.lib import config


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class SourceRange:
    """Half-open character range ``[start, end)`` into the file text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid source range ({self.start}, {self.end})"
            raise ValueError(msg)


# ---------------------------------------------------------------------------
# Categories and imports
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryRule:
    """A compiled import category.

    Attributes:
        label: Canonical comment text expected above the category's first
            import, e.g. ``"// External Libraries"``.
        patterns: Compiled path matchers, tested with ``search``.
        order: Priority; lower values must come first.  Need not be unique.
        is_type_category: True for the single slot that receives type-only
            imports.  Derived by the options compiler.
    """

    label: str
    patterns: tuple[re.Pattern[str], ...]
    order: int
    is_type_category: bool = False

    def matches(self, path: str) -> bool:
        """Return True when any pattern matches the literal import path."""
        return any(pattern.search(path) for pattern in self.patterns)


@dataclass(frozen=True)
class ImportRecord:
    """One import statement as reported by a host.

    Attributes:
        path: Module path exactly as written in the source.
        range: Range of the statement.
        is_type_only: True when the statement imports types only.
        line: 1-based line of the statement start.
        indent: Leading whitespace of the statement's line; repeated after
            an inserted label so indented imports stay indented.
        inline_at: When code precedes the statement on its line, the offset
            just past that code; None when the statement starts its line.
        category: Resolved category, or None when no category matched.
    """

    path: str
    range: SourceRange
    is_type_only: bool = False
    line: int = 0
    indent: str = ""
    inline_at: Optional[int] = None
    category: Optional[CategoryRule] = None

    def resolve(self, category: Optional[CategoryRule]) -> ImportRecord:
        """Return a copy with ``category`` set."""
        return replace(self, category=category)


@dataclass(frozen=True)
class CommentToken:
    """A leading comment adjacent to a statement.

    ``text`` keeps the comment markers.  ``range`` covers the comment's own
    line from column 0, excluding the line break, so removing
    ``(start, end + 1)`` deletes the whole line.
    """

    text: str
    range: SourceRange


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FixEdit:
    """A single text edit proposed by a diagnostic."""

    kind: str
    range: SourceRange
    text: str = ""

    def describe(self, source: str = "") -> str:
        """Render a short human-readable summary of the edit."""
        if self.kind == config.get_str("fix_kinds.insert"):
            return config.get_str("messages.fix_insert").format(text=self.text)
        removed = source[self.range.start:self.range.end] if source else ""
        return config.get_str("messages.fix_remove").format(text=removed)


@dataclass(frozen=True)
class Diagnostic:
    """A single finding.

    Attributes:
        kind: One of the ids under ``kinds`` in defaults.yaml.
        line: 1-based line of the anchor import.
        range: Range of the anchor import.
        data: Message parameters interpolated into the kind's template.
        fix: The single edit that corrects the finding, if any.
    """

    kind: str
    line: int
    range: SourceRange
    data: dict[str, str] = field(default_factory=dict)
    fix: Optional[FixEdit] = None

    @property
    def message(self) -> str:
        """The interpolated human-readable message."""
        return config.get_str(f"messages.{self.kind}").format(**self.data)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation."""
        entry: dict[str, Any] = {
            "kind": self.kind,
            "line": self.line,
            "start": self.range.start,
            "end": self.range.end,
            "message": self.message,
            "data": dict(self.data),
            "fix": None,
        }
        if self.fix is not None:
            entry["fix"] = {
                "kind": self.fix.kind,
                "start": self.fix.range.start,
                "end": self.fix.range.end,
                "text": self.fix.text,
            }
        return entry


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScopeConfig:
    """Which files a project enforces.

    Attributes:
        include_paths: Path prefixes or globs to enforce (empty = all).
        exempt_paths: Path prefixes or globs excluded from enforcement.
        exempt_files: File names excluded from enforcement.
    """

    include_paths: list[str] = field(default_factory=list)
    exempt_paths: list[str] = field(default_factory=list)
    exempt_files: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScopeConfig:
        """Build from the ``scope`` mapping of a project config."""
        return cls(
            include_paths=data.get("include_paths", []),
            exempt_paths=data.get("exempt_paths", []),
            exempt_files=data.get("exempt_files", []),
        )


@dataclass(frozen=True)
class LoggingConfig:
    """JSONL run-log settings."""

    enabled: bool = False
    directory: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoggingConfig:
        """Build from the ``logging`` mapping of a project config."""
        return cls(
            enabled=bool(data.get("enabled", False)),
            directory=data.get("directory", config.get_str("defaults.log_directory")),
        )


# Keys of .importcat.yaml that are rule options rather than project settings.
OPTION_KEYS = (
    "categories",
    "enforce_order",
    "enforce_comments",
    "comment_style",
    "type_category",
)


@dataclass(frozen=True)
class ProjectConfig:
    """Top-level project configuration from .importcat.yaml.

    Attributes:
        preset: Name of the bundled preset the options start from, or None.
        options: Raw rule options, project keys layered over the preset.
        scope: File-level scope.
        logging: JSONL run-log settings.
        path: File the config was loaded from (empty for in-memory configs).
    """

    preset: Optional[str]
    options: dict[str, Any]
    scope: ScopeConfig = field(default_factory=ScopeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: str = ""

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        preset_options: Optional[dict[str, Any]] = None,
        path: str = "",
    ) -> ProjectConfig:
        """Build from a parsed .importcat.yaml mapping.

        Args:
            data: Parsed YAML mapping.
            preset_options: Options of the preset named by ``data['preset']``,
                already loaded by the caller.
            path: Source file, for error messages.

        Returns:
            ProjectConfig with project options layered over the preset's.
        """
        options: dict[str, Any] = dict(preset_options or {})
        for key in OPTION_KEYS:
            if key in data:
                options[key] = data[key]
        return cls(
            preset=data.get("preset"),
            options=options,
            scope=ScopeConfig.from_dict(data.get("scope") or {}),
            logging=LoggingConfig.from_dict(data.get("logging") or {}),
            path=path,
        )


def validate_project_config(data: Any) -> list[str]:
    """Validate the structure of a .importcat.yaml mapping.

    Only the project-level keys are checked here; category definitions are
    validated by ``importcat.lib.categories.validate_options``.

    Args:
        data: The parsed YAML content.

    Returns:
        List of problems. Empty if valid.
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        errors.append(f"Project config must be a mapping, got {type(data).__name__}")
        return errors

    preset = data.get("preset")
    if preset is not None and not isinstance(preset, str):
        errors.append(f"'preset' must be a string, got {type(preset).__name__}")

    if preset is None and "categories" not in data:
        errors.append("Either 'preset' or 'categories' is required")

    for section, list_keys in (
        ("scope", ("include_paths", "exempt_paths", "exempt_files")),
        ("logging", ()),
    ):
        value = data.get(section)
        if value is None:
            continue
        if not isinstance(value, dict):
            errors.append(f"'{section}' must be a mapping, got {type(value).__name__}")
            continue
        for list_key in list_keys:
            item = value.get(list_key)
            if item is not None and not isinstance(item, list):
                errors.append(
                    f"{section}.{list_key} must be a list, got {type(item).__name__}"
                )

    logging_cfg = data.get("logging")
    if isinstance(logging_cfg, dict):
        enabled = logging_cfg.get("enabled")
        if enabled is not None and not isinstance(enabled, bool):
            errors.append(
                f"logging.enabled must be a boolean, got {type(enabled).__name__}"
            )
        directory = logging_cfg.get("directory")
        if directory is not None and not isinstance(directory, str):
            errors.append(
                f"logging.directory must be a string, got {type(directory).__name__}"
            )

    return errors
