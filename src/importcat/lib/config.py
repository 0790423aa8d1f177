"""config: lazy, cached accessor for importcat package defaults.

Reads ``config/defaults.yaml`` the first time any value is requested and keeps
the parsed mapping for the rest of the process.  Values are addressed with
dotted keys (``"messages.wrong_order"``) and the typed helpers fail loudly
when a key is missing or holds the wrong type, so a broken defaults file is
caught at the first call site instead of deep inside an analysis pass.

Design notes:
    The snapshot is module-level and read-only after loading, which is what
    lets compiled rule options and engine passes run on several threads
    without coordination.  ``reset()`` only exists for test isolation.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import yaml

_DEFAULTS: Optional[dict[str, Any]] = None

_CONFIG_FILE = Path(__file__).resolve().parent.parent / "config" / "defaults.yaml"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_defaults() -> dict[str, Any]:
    """Load and cache defaults.yaml.

    Returns:
        The full defaults mapping.

    Raises:
        FileNotFoundError: If defaults.yaml is missing from the package.
        yaml.YAMLError: If defaults.yaml is not valid YAML.
        TypeError: If the document is not a mapping.
    """
    global _DEFAULTS  # noqa: PLW0603
    if _DEFAULTS is None:
        with open(_CONFIG_FILE, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        if not isinstance(data, dict):
            msg = f"defaults.yaml must be a YAML mapping, got {type(data).__name__}"
            raise TypeError(msg)
        _DEFAULTS = data
    return _DEFAULTS


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def get(dotted_key: str) -> Any:
    """Return the value stored under a dotted key.

    Raises:
        KeyError: If any segment of the key is missing.
    """
    node: Any = load_defaults()
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            msg = f"Config key not found: {dotted_key!r} (missing segment: {part!r})"
            raise KeyError(msg)
        node = node[part]
    return node


def _typed(dotted_key: str, expected: type, label: str) -> Any:
    value = get(dotted_key)
    # bool is an int subclass; an int setting must not accept true/false.
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        msg = f"Expected {label} for {dotted_key!r}, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def get_str(dotted_key: str) -> str:
    """Return a string value (TypeError otherwise)."""
    return _typed(dotted_key, str, "str")


def get_int(dotted_key: str) -> int:
    """Return an integer value (TypeError otherwise)."""
    return _typed(dotted_key, int, "int")


def get_bool(dotted_key: str) -> bool:
    """Return a boolean value (TypeError otherwise)."""
    return _typed(dotted_key, bool, "bool")


def get_list(dotted_key: str) -> list[Any]:
    """Return a list value (TypeError otherwise)."""
    return _typed(dotted_key, list, "list")


def get_mapping(dotted_key: str) -> dict[str, Any]:
    """Return a mapping value (TypeError otherwise)."""
    return _typed(dotted_key, dict, "mapping")


# ---------------------------------------------------------------------------
# Language lookups
# ---------------------------------------------------------------------------


def language_names() -> list[str]:
    """Return the names of all languages with a bundled import scanner."""
    return list(get_mapping("languages"))


def language_for_path(filepath: str) -> Optional[str]:
    """Map a file path to a language name by its extension.

    Args:
        filepath: Path of the source file.

    Returns:
        The language name, or None when no scanner handles the extension.
    """
    ext = os.path.splitext(filepath)[1].lower()
    for name, spec in get_mapping("languages").items():
        if ext in spec.get("extensions", []):
            return name
    return None


# ---------------------------------------------------------------------------
# Test utilities
# ---------------------------------------------------------------------------


def reset() -> None:
    """Clear the cached defaults (used by tests)."""
    global _DEFAULTS  # noqa: PLW0603
    _DEFAULTS = None
