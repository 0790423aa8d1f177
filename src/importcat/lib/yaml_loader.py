"""yaml_loader: the single place importcat reads YAML.

Project configs, presets, the CLI theme and the package defaults are all
YAML.  Loading goes through PyYAML's ``safe_load`` so that no configuration
file can construct arbitrary Python objects.  ``dump_yaml`` is the writer
used by ``importcat init``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import yaml


def load_yaml(path: Union[str, Path]) -> Optional[Any]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed document, or None if the file is empty.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file contains invalid YAML.
    """
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def dump_yaml(data: dict[str, Any], path: Union[str, Path]) -> None:
    """Write a mapping as block-style YAML, preserving key order.

    Args:
        data: Mapping to serialize.
        path: Destination file.
    """
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False)
