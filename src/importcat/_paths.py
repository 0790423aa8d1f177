"""Centralized path resolution for the importcat package.

This is the only module that touches ``__file__`` for data lookups.  Every
other module asks here for the location of presets, the CLI theme or the
project config.

Environment variables:
    IMPORTCAT_PRESETS: Extra directory searched for preset YAML files
        before the bundled ``config/presets``.
    IMPORTCAT_CONFIG: Explicit path to the project config, used when no
        ``--config`` is given.
"""

import os
from pathlib import Path
from typing import Optional

_PACKAGE_DIR = Path(__file__).resolve().parent


def _cfg(key: str) -> str:
    """Lazy config accessor to avoid circular imports at module level."""
    from importcat.lib.config import get_str

    return get_str(key)


def config_dir() -> Path:
    """Return the bundled config/ directory path."""
    return _PACKAGE_DIR / "config"


def preset_dirs() -> list[Path]:
    """Return preset directories in lookup order (env override first)."""
    dirs: list[Path] = []
    env = os.environ.get(_cfg("env_vars.presets"))
    if env and Path(env).is_dir():
        dirs.append(Path(env))
    dirs.append(config_dir() / _cfg("directories.presets"))
    return dirs


def cli_dir() -> Path:
    """Return the cli/ directory path."""
    return _PACKAGE_DIR / _cfg("directories.cli")


def theme_path() -> Path:
    """Return the path to cli/theme.yaml."""
    return cli_dir() / _cfg("filenames.theme")


def find_project_config(start: Optional[Path] = None) -> Optional[Path]:
    """Locate the project config.

    ``$IMPORTCAT_CONFIG`` wins when it names an existing file; otherwise
    walk up from ``start`` (default: the working directory) looking for
    ``.importcat.yaml``.

    Returns:
        Path to the config file, or None.
    """
    env = os.environ.get(_cfg("env_vars.config"))
    if env and Path(env).is_file():
        return Path(env)
    filename = _cfg("filenames.project_config")
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None
