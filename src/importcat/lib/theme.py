"""theme: ANSI colouring for importcat's terminal output.

Colour definitions live in ``cli/theme.yaml``: an ``ansi`` table of escape
codes and a ``roles`` table mapping semantic roles (a diagnostic kind,
``fix``, ``file_path``...) to colour names.  The file is read on first use.
Nothing is coloured unless the target stream is a TTY, so piped output and
``--format json`` stay plain.
"""

from __future__ import annotations

import sys
from typing import Any, Optional

from importcat._paths import theme_path
from importcat.lib.yaml_loader import load_yaml

_PASSTHROUGH = ("bold", "dim", "reset")


class Theme:
    """Role-to-escape-code mapping loaded lazily from cli/theme.yaml.

    Attributes:
        resolved: Mapping of role names to ANSI escape codes.
    """

    def __init__(self) -> None:
        self._resolved: Optional[dict[str, str]] = None

    def _load(self) -> dict[str, str]:
        path = theme_path()
        raw = load_yaml(path) if path.is_file() else None
        if not raw:
            return {}
        ansi: dict[str, str] = raw.get("ansi", {})
        resolved = {role: ansi.get(name, "") for role, name in raw.get("roles", {}).items()}
        for name in _PASSTHROUGH:
            resolved[name] = ansi.get(name, "")
        return resolved

    @property
    def resolved(self) -> dict[str, str]:
        """Return the role mapping, loading it on first access."""
        if self._resolved is None:
            self._resolved = self._load()
        return self._resolved

    def code(self, role: str, *, stream: Any = None) -> str:
        """Return the escape code for a role, or "" when not writing to a TTY."""
        target = stream or sys.stderr
        if not hasattr(target, "isatty") or not target.isatty():
            return ""
        return self.resolved.get(role, "")

    def colorize(self, text: str, role: str, *, stream: Any = None) -> str:
        """Wrap text in the role's colour when writing to a TTY."""
        start = self.code(role, stream=stream)
        if not start:
            return text
        return f"{start}{text}{self.resolved.get('reset', '')}"


_theme = Theme()


def colorize(text: str, role: str, *, stream: Any = None) -> str:
    """Colour text with the shared theme (plain text on non-TTY streams)."""
    return _theme.colorize(text, role, stream=stream)


def code(role: str, *, stream: Any = None) -> str:
    """Return a role's escape code from the shared theme."""
    return _theme.code(role, stream=stream)
