"""Fuzz tests for importcat robustness and engine laws under random input."""

from __future__ import annotations

from typing import Any

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from importcat.engine import fix_source, lint_source
from importcat.lib import config
from importcat.lib.categories import CommentMarkers, compile_options, validate_options
from importcat.lib.es_source import EsSource
from importcat.lib.models import validate_project_config
from importcat.lib.project import load_preset


RECOMMENDED = compile_options(load_preset("recommended"), CommentMarkers.for_language("ecmascript"))

# Module paths and the order the recommended preset gives them (None: unmatched).
PATH_ORDERS: dict[str, Any] = {
    "react": 1,
    "@scope/pkg": 1,
    "~/api": 2,
    "./local": 3,
    "../parent": 3,
    "Zed": None,
}
LABELS = [
    "// Types",
    "// External Libraries",
    "// Internal Modules",
    "// Relative Imports",
    "// note",
]

IMPORT_LINE = st.tuples(
    st.sampled_from(sorted(PATH_ORDERS)),
    st.booleans(),
    st.one_of(st.none(), st.sampled_from(LABELS)),
)


def _render(lines: list[tuple[str, bool, Any]]) -> tuple[str, list[tuple[int, Any]]]:
    """Build a TypeScript file; also return (line, order) per import."""
    out: list[str] = []
    orders: list[tuple[int, Any]] = []
    for index, (path, type_only, label) in enumerate(lines):
        if label is not None:
            out.append(label)
        if type_only:
            out.append(f"import type {{ T{index} }} from '{path}';")
            orders.append((len(out), 0))
        else:
            out.append(f"import m{index} from '{path}';")
            orders.append((len(out), PATH_ORDERS[path]))
    return "\n".join(out) + "\n", orders


def _import_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.startswith("import")]


SETTINGS = settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])


class TestConfigGetFuzz:
    """Fuzz the config.get() accessor with arbitrary key paths."""

    @given(st.text(min_size=0, max_size=200))
    @SETTINGS
    def test_get_never_crashes(self, key: str) -> None:
        """config.get() raises KeyError for unknown keys, never anything else."""
        try:
            config.get(key)
        except KeyError:
            pass

    @given(st.text(min_size=0, max_size=200))
    @SETTINGS
    def test_get_str_never_crashes(self, key: str) -> None:
        """config.get_str() raises or returns str."""
        try:
            result = config.get_str(key)
            assert isinstance(result, str)
        except (KeyError, TypeError):
            pass


YAML_VALUES = st.recursive(
    st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=30)),
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(max_size=12), children, max_size=4),
    ),
    max_leaves=12,
)


class TestValidateFuzz:
    """Fuzz the validators with arbitrary YAML-like structures."""

    @given(YAML_VALUES)
    @SETTINGS
    def test_validate_project_config_never_crashes(self, data: Any) -> None:
        """validate_project_config returns a list of strings for any input."""
        problems = validate_project_config(data)
        assert isinstance(problems, list)
        assert all(isinstance(p, str) for p in problems)

    @given(
        st.one_of(
            YAML_VALUES,
            st.fixed_dictionaries(
                {"categories": st.lists(st.dictionaries(
                    st.sampled_from(["label", "comment", "patterns", "order", "extra"]),
                    YAML_VALUES,
                    max_size=4,
                ), max_size=4)}
            ),
        )
    )
    @SETTINGS
    def test_validate_options_never_crashes(self, raw: Any) -> None:
        """validate_options reports problems instead of raising."""
        problems = validate_options(raw)
        assert all(isinstance(p, str) for p in problems)


class TestEsSourceFuzz:
    """Fuzz the ECMAScript scanner."""

    @given(st.text(max_size=300))
    @SETTINGS
    def test_arbitrary_text(self, text: str) -> None:
        """Only ValueError escapes the scanner, and ranges stay in bounds."""
        try:
            source = EsSource(text, "fuzz.ts")
        except ValueError:
            return
        for record in source.imports:
            assert 0 <= record.range.start <= record.range.end <= len(text)

    @given(
        st.text(
            alphabet=st.sampled_from(list("import type from {}*;'\"`/\\$()\n ab.")),
            max_size=200,
        )
    )
    @SETTINGS
    def test_import_shaped_text(self, text: str) -> None:
        """Text made of import tokens scans or fails with ValueError."""
        try:
            EsSource(text, "fuzz.ts")
        except ValueError:
            pass


class TestEngineLaws:
    """Properties of analysis and fixing over generated import blocks."""

    @given(st.lists(IMPORT_LINE, max_size=10))
    @SETTINGS
    def test_deterministic(self, lines: list[tuple[str, bool, Any]]) -> None:
        """The same input always yields the same diagnostics."""
        source, _ = _render(lines)
        assert lint_source(source, "f.ts", RECOMMENDED) == lint_source(source, "f.ts", RECOMMENDED)

    @given(st.lists(IMPORT_LINE, max_size=10))
    @SETTINGS
    def test_order_matches_ratchet(self, lines: list[tuple[str, bool, Any]]) -> None:
        """wrong_order fires exactly where the order drops below the ratchet."""
        source, orders = _render(lines)
        expected: list[tuple[int, str]] = []
        ratchet = 0
        for line, order in orders:
            if order is None:
                continue
            if order < ratchet:
                expected.append((line, str(ratchet)))
            else:
                ratchet = order
        result = lint_source(source, "f.ts", RECOMMENDED)
        found = [(d.line, d.data["expected_order"]) for d in result.of_kind("wrong_order")]
        assert found == expected

    @given(st.lists(IMPORT_LINE, max_size=10))
    @SETTINGS
    def test_fix_leaves_no_comment_problems(self, lines: list[tuple[str, bool, Any]]) -> None:
        """After fixing, every group is labelled once."""
        source, _ = _render(lines)
        outcome = fix_source(source, "f.ts", RECOMMENDED)
        assert outcome.result.of_kind("missing_comment") == []
        assert outcome.result.of_kind("duplicate_comment") == []

    @given(st.lists(IMPORT_LINE, max_size=10))
    @SETTINGS
    def test_fix_is_idempotent(self, lines: list[tuple[str, bool, Any]]) -> None:
        """Fixing fixed text changes nothing."""
        source, _ = _render(lines)
        once = fix_source(source, "f.ts", RECOMMENDED)
        twice = fix_source(once.source, "f.ts", RECOMMENDED)
        assert twice.source == once.source
        assert twice.fixes_applied == 0

    @given(st.lists(IMPORT_LINE, max_size=10))
    @SETTINGS
    def test_fix_never_touches_imports(self, lines: list[tuple[str, bool, Any]]) -> None:
        """Fixes only add or remove comment lines."""
        source, _ = _render(lines)
        fixed = fix_source(source, "f.ts", RECOMMENDED).source
        assert _import_lines(fixed) == _import_lines(source)
