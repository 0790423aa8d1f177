"""SourceAnalyzer: LibCST host that reports a Python module's imports.

The module is parsed once into a concrete syntax tree and a single
MetadataWrapper resolves statement positions.  Import statements are taken
from the module body and from a module-level ``if TYPE_CHECKING:`` block;
the latter are reported as type-only.  The host never classifies anything:
it hands ``ImportRecord`` values and a leading-comment lookup to the engine.

Design notes:
    LibCST keeps every comment line above a statement in that statement's
    ``leading_lines`` (for the first statement of a module, in
    ``Module.header``).  Those lines sit directly above the statement, so
    their physical line numbers follow from the statement's start line and
    no comment-level position metadata is needed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional, Union

import libcst as cst
from libcst.helpers import get_full_name_for_node
from libcst.metadata import MetadataWrapper, PositionProvider

from importcat.lib import config
from importcat.lib.models import CommentToken, ImportRecord, SourceRange


class SourceAnalyzer:
    """Single parse of a Python source file.

    Attributes:
        source: Raw source text.
        filepath: Path of the file, for messages.
        source_lines: Source lines with their line breaks.
        module: Parsed LibCST module.
        wrapper: MetadataWrapper used for position lookups.
        imports: Import records in source order.
    """

    def __init__(self, source: str, filepath: str) -> None:
        """Parse source and collect import statements."""
        self.source = source
        self.filepath = filepath
        self.source_lines = source.splitlines(keepends=True)
        self._line_starts = _line_starts(self.source_lines)
        self.module = cst.parse_module(source)
        self.wrapper = MetadataWrapper(self.module)
        self._positions = self.wrapper.resolve(PositionProvider)
        self._type_names = set(config.get_list("python.type_checking_names"))
        self._leading: dict[int, list[CommentToken]] = {}
        self.imports: list[ImportRecord] = self._collect()

    def comments_before(self, record: ImportRecord) -> Sequence[CommentToken]:
        """Return the comment lines directly above an import statement."""
        return self._leading.get(record.range.start, [])

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def _collect(self) -> list[ImportRecord]:
        records: list[ImportRecord] = []
        module = self.wrapper.module
        for index, stmt in enumerate(module.body):
            leading = list(stmt.leading_lines)
            if index == 0:
                leading = list(module.header) + leading
            if isinstance(stmt, cst.SimpleStatementLine):
                records.extend(self._statement_imports(stmt, leading, type_only=False))
            elif self._is_type_checking_block(stmt):
                for inner in stmt.body.body:
                    if isinstance(inner, cst.SimpleStatementLine):
                        records.extend(
                            self._statement_imports(
                                inner, list(inner.leading_lines), type_only=True
                            )
                        )
        return records

    def _statement_imports(
        self,
        stmt: cst.SimpleStatementLine,
        leading: list[cst.EmptyLine],
        type_only: bool,
    ) -> list[ImportRecord]:
        start_line = self._positions[stmt].start.line
        records: list[ImportRecord] = []
        for small in stmt.body:
            if not isinstance(small, (cst.Import, cst.ImportFrom)):
                continue
            path = _module_path(small)
            if path is None:
                continue
            pos = self._positions[small]
            start = self._offset(pos.start.line, pos.start.column)
            end = self._offset(pos.end.line, pos.end.column)
            records.append(ImportRecord(
                path=path,
                range=SourceRange(start, end),
                is_type_only=type_only,
                line=pos.start.line,
                indent=self._indent(pos.start.line, pos.start.column),
                inline_at=self._inline_at(start, pos.start.line, pos.start.column),
            ))
            # Only the first statement on a line owns the comment lines above it.
            if small is stmt.body[0]:
                self._leading[start] = self._comment_tokens(leading, start_line)
        return records

    def _comment_tokens(self, leading: list[cst.EmptyLine], start_line: int) -> list[CommentToken]:
        tokens: list[CommentToken] = []
        first_line = start_line - len(leading)
        for offset, empty in enumerate(leading):
            lineno = first_line + offset
            if empty.comment is None or lineno < 1:
                continue
            line_start = self._line_starts[lineno - 1]
            body = self.source_lines[lineno - 1].rstrip("\n")
            tokens.append(CommentToken(
                text=empty.comment.value,
                range=SourceRange(line_start, line_start + len(body)),
            ))
        return tokens

    def _is_type_checking_block(self, stmt: cst.BaseStatement) -> bool:
        if not isinstance(stmt, cst.If) or not isinstance(stmt.body, cst.IndentedBlock):
            return False
        test = stmt.test
        if isinstance(test, cst.Name):
            return test.value in self._type_names
        if isinstance(test, cst.Attribute):
            return test.attr.value in self._type_names
        return False

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _offset(self, line: int, column: int) -> int:
        if line - 1 >= len(self._line_starts):
            return len(self.source)
        return self._line_starts[line - 1] + column

    def _indent(self, line: int, column: int) -> str:
        if line - 1 >= len(self.source_lines):
            return ""
        prefix = self.source_lines[line - 1][:column]
        return prefix[:len(prefix) - len(prefix.lstrip())]

    def _inline_at(self, start: int, line: int, column: int) -> Optional[int]:
        if line - 1 >= len(self.source_lines):
            return None
        code = self.source_lines[line - 1][:column].rstrip()
        return start - column + len(code) if code else None


def _line_starts(lines: list[str]) -> list[int]:
    starts: list[int] = []
    offset = 0
    for line in lines:
        starts.append(offset)
        offset += len(line)
    return starts


def _module_path(node: Union[cst.Import, cst.ImportFrom]) -> Optional[str]:
    """Return the module path as written: ``a.b`` or ``..a.b``.

    ``import a, b`` is reported by its first module.
    """
    if isinstance(node, cst.Import):
        return get_full_name_for_node(node.names[0].name)
    dots = "." * len(node.relative)
    module = get_full_name_for_node(node.module) if node.module is not None else ""
    return dots + (module or "")
