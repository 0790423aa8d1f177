"""scope: decide whether a file falls inside a project's enforcement scope.

Entries in ``include_paths`` and ``exempt_paths`` are either path prefixes
(``src/``) or fnmatch globs (``**/*.gen.ts``); ``exempt_files`` match the
bare file name.  Exemptions win over inclusions, and an empty
``include_paths`` means every file is included.
"""

from __future__ import annotations

import fnmatch
import os

from importcat.lib.models import ScopeConfig


def _matches(filepath: str, entry: str) -> bool:
    path = filepath.replace(os.sep, "/")
    if any(ch in entry for ch in "*?["):
        return fnmatch.fnmatch(path, entry) or fnmatch.fnmatch(os.path.basename(path), entry)
    return path.startswith(entry) or f"/{entry}" in path


def is_file_in_scope(filepath: str, scope: ScopeConfig) -> bool:
    """Check if a file should be analyzed.

    Args:
        filepath: Path of the file, as given on the command line.
        scope: Scope settings of the project.

    Returns:
        True if the file should be checked, False if exempt.
    """
    if os.path.basename(filepath) in scope.exempt_files:
        return False
    if any(_matches(filepath, entry) for entry in scope.exempt_paths):
        return False
    if not scope.include_paths:
        return True
    return any(_matches(filepath, entry) for entry in scope.include_paths)
