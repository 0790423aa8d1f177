"""Shared fixtures for the importcat test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from importcat.lib.categories import CommentMarkers, RuleOptions, compile_options
from importcat.lib.models import CommentToken, ImportRecord, SourceRange
from importcat.lib.project import load_preset


FIXTURES_DIR = Path(__file__).parent / "fixtures"
ES_DIR = FIXTURES_DIR / "ecmascript"
PY_DIR = FIXTURES_DIR / "python"


@pytest.fixture()
def es_markers() -> CommentMarkers:
    """Return the ECMAScript comment markers."""
    return CommentMarkers.for_language("ecmascript")


@pytest.fixture()
def es_options(es_markers: CommentMarkers) -> RuleOptions:
    """Return the recommended preset compiled for ECMAScript."""
    return compile_options(load_preset("recommended"), es_markers)


@pytest.fixture()
def py_options() -> RuleOptions:
    """Return the python preset compiled for Python."""
    return compile_options(load_preset("python"), CommentMarkers.for_language("python"))


@pytest.fixture()
def make_options(es_markers: CommentMarkers) -> Callable[..., RuleOptions]:
    """Return a factory compiling ``categories`` plus flags for ECMAScript."""

    def _make(categories: list[dict[str, Any]], **flags: Any) -> RuleOptions:
        raw: dict[str, Any] = {"categories": categories}
        raw.update(flags)
        return compile_options(raw, es_markers)

    return _make


@pytest.fixture()
def make_record() -> Callable[..., ImportRecord]:
    """Return a factory for unresolved import records.

    Records are laid out one per 100 characters so ranges never overlap.
    """

    def _make(path: str, index: int = 0, type_only: bool = False, indent: str = "") -> ImportRecord:
        start = index * 100
        return ImportRecord(
            path=path,
            range=SourceRange(start, start + 20),
            is_type_only=type_only,
            line=index + 1,
            indent=indent,
        )

    return _make


@pytest.fixture()
def no_comments() -> Callable[[ImportRecord], list[CommentToken]]:
    """Return a comment lookup that finds nothing."""
    return lambda record: []


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """Create a temporary project directory with a .importcat.yaml."""
    config: dict[str, Any] = {
        "preset": "recommended",
        "logging": {"enabled": False},
    }
    config_file = tmp_path / ".importcat.yaml"
    with open(config_file, "w", encoding="utf-8") as fh:
        yaml.dump(config, fh, default_flow_style=False)
    return tmp_path


@pytest.fixture()
def commented_ts() -> str:
    """Return a TypeScript file whose groups are all labelled."""
    return (ES_DIR / "commented.ts").read_text(encoding="utf-8")


@pytest.fixture()
def uncommented_ts() -> str:
    """Return commented.ts with every label line removed."""
    return (ES_DIR / "uncommented.ts").read_text(encoding="utf-8")


@pytest.fixture()
def duplicates_ts() -> str:
    """Return a TypeScript file repeating a label inside one group."""
    return (ES_DIR / "duplicates.ts").read_text(encoding="utf-8")


@pytest.fixture()
def out_of_order_ts() -> str:
    """Return a TypeScript file importing a relative module first."""
    return (ES_DIR / "out_of_order.ts").read_text(encoding="utf-8")


@pytest.fixture()
def commented_py() -> str:
    """Return a Python module whose groups are all labelled."""
    return (PY_DIR / "commented.py").read_text(encoding="utf-8")


@pytest.fixture()
def uncommented_py() -> str:
    """Return commented.py with every label line removed."""
    return (PY_DIR / "uncommented.py").read_text(encoding="utf-8")
