"""project: presets, project configuration and option resolution.

A project config (``.importcat.yaml``) names a bundled preset and/or lists
its own categories and flags; project keys replace the preset's keys
wholesale.  Presets may themselves ``extends`` another preset, resolved
recursively so the most specific file has the final say::

    # .importcat.yaml
    preset: recommended
    comment_style: block
    scope:
      exempt_paths: ["generated/"]

All problems surface as ``ConfigurationError`` while loading, never during
analysis.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import yaml

from importcat._paths import preset_dirs
from importcat.exceptions import ConfigurationError
from importcat.lib import config
from importcat.lib.categories import CommentMarkers, RuleOptions, compile_options
from importcat.lib.models import OPTION_KEYS, ProjectConfig, validate_project_config
from importcat.lib.yaml_loader import load_yaml


def available_presets() -> list[str]:
    """Return the names of all presets on the lookup path."""
    ext = config.get_str("filenames.preset_extension")
    names: set[str] = set()
    for directory in preset_dirs():
        names.update(p.name[: -len(ext)] for p in directory.glob(f"*{ext}"))
    return sorted(names)


def load_preset(name: str, _seen: Optional[tuple[str, ...]] = None) -> dict[str, Any]:
    """Load a preset's options, following ``extends`` chains.

    Args:
        name: Preset name (file name without extension).

    Returns:
        Raw option mapping (categories and flags).

    Raises:
        ConfigurationError: If the preset is unknown, malformed or cyclic.
    """
    seen = _seen or ()
    if name in seen:
        raise ConfigurationError([f"preset cycle: {' -> '.join(seen + (name,))}"])

    ext = config.get_str("filenames.preset_extension")
    path = next((d / f"{name}{ext}" for d in preset_dirs() if (d / f"{name}{ext}").is_file()), None)
    if path is None:
        msg = config.get_str("messages.preset_not_found")
        raise ConfigurationError(
            [msg.format(name=name, available=", ".join(available_presets()))]
        )

    data = _read(path)
    options: dict[str, Any] = {}
    parent = data.get("extends")
    if parent:
        options.update(load_preset(parent, seen + (name,)))
    for key in OPTION_KEYS:
        if key in data:
            options[key] = data[key]
    return options


def load_project_config(path: Union[str, Path]) -> ProjectConfig:
    """Load and validate a project config file.

    Args:
        path: Path to ``.importcat.yaml``.

    Returns:
        ProjectConfig with the preset's options merged in.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file or its preset is malformed.
    """
    data = _read(Path(path))
    return project_from_dict(data, source=str(path))


def project_from_dict(data: Any, source: str = "") -> ProjectConfig:
    """Build a ProjectConfig from an in-memory mapping.

    Raises:
        ConfigurationError: If the mapping is malformed.
    """
    problems = validate_project_config(data)
    if problems:
        raise ConfigurationError(problems, source=source)
    preset_name = data.get("preset")
    preset_options = load_preset(preset_name) if preset_name else None
    return ProjectConfig.from_dict(data, preset_options, path=source)


def default_project(language: str) -> ProjectConfig:
    """Build the project used when no .importcat.yaml exists.

    The language's bundled preset (``languages.<name>.preset``) provides the
    categories; scope and logging keep their defaults.
    """
    preset = config.get_str(f"languages.{language}.preset")
    return project_from_dict({"preset": preset}, source=f"<preset {preset}>")


def resolve_options(project: ProjectConfig, language: str) -> RuleOptions:
    """Compile a project's options for one host language.

    Raises:
        ConfigurationError: If the categories or flags are invalid.
    """
    markers = CommentMarkers.for_language(language)
    return compile_options(project.options, markers, source=project.path)


def _read(path: Path) -> dict[str, Any]:
    try:
        data = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigurationError([f"invalid YAML: {exc}"], source=str(path)) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            [f"top level must be a mapping, got {type(data).__name__}"], source=str(path)
        )
    return data
