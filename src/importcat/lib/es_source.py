"""EsSource: import scanner for JavaScript and TypeScript modules.

A single left-to-right pass over the text that understands just enough of
the lexical grammar to stay out of strings, template literals, regular
expression literals and comments while tracking bracket depth.  Every
``import`` keyword at depth 0 that starts an import declaration becomes an
``ImportRecord``; ``import type ...`` declarations are type-only.  Dynamic
``import(...)``, ``import.meta`` and TypeScript ``import x = require(...)``
are not declarations and are ignored.

A comment is *leading* when it starts on a later line than the previous
token; comments trailing another statement on its line are not attached to
the next import.
"""

from __future__ import annotations

import bisect
from collections.abc import Sequence
from typing import Optional

from importcat.lib.models import CommentToken, ImportRecord, SourceRange

_QUOTES = "'\""
_OPENERS = "([{"
_CLOSERS = ")]}"
# After these a ``/`` starts a regular expression rather than a division.
_REGEX_AFTER_PUNCT = set("(,=:[!&|?{};~+-*%<>^")
_REGEX_AFTER_WORD = {
    "return", "typeof", "case", "do", "else", "in", "of", "new", "delete",
    "void", "throw", "instanceof", "yield", "await",
}
_ATTRIBUTE_KEYWORDS = ("with", "assert")


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


class EsSource:
    """Scanned ECMAScript/TypeScript source.

    Attributes:
        source: Raw source text.
        filepath: Path of the file, for messages.
        imports: Import records in source order.

    Raises:
        ValueError: On an unterminated block comment or template literal.
    """

    def __init__(self, source: str, filepath: str = "") -> None:
        self.source = source
        self.filepath = filepath
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(source) if ch == "\n"]
        self._leading: dict[int, list[CommentToken]] = {}
        self.imports: list[ImportRecord] = self._scan()

    def comments_before(self, record: ImportRecord) -> Sequence[CommentToken]:
        """Return the leading comments directly above an import declaration."""
        return self._leading.get(record.range.start, [])

    # ------------------------------------------------------------------
    # Top-level pass
    # ------------------------------------------------------------------

    def _scan(self) -> list[ImportRecord]:
        src = self.source
        n = len(src)
        records: list[ImportRecord] = []
        pending: list[CommentToken] = []
        depth = 0
        prev = ""
        last_line = 0
        i = 0
        while i < n:
            ch = src[i]
            if ch.isspace() or ch == "\ufeff":
                i += 1
                continue

            if src.startswith("//", i) or src.startswith("/*", i):
                end = self._skip_comment(i)
                if self._line(i) > last_line:
                    pending.append(self._comment(i, end))
                i = end
                continue

            start = i
            if ch in _QUOTES:
                i = self._skip_string(i)
                prev = "'"
            elif ch == "`":
                i = self._skip_template(i)
                prev = "`"
            elif ch == "/" and (prev == "" or prev in _REGEX_AFTER_PUNCT or prev in _REGEX_AFTER_WORD):
                i = self._skip_regex(i)
                prev = "/"
            elif _is_ident_start(ch):
                word, j = self._word_at(i)
                record = None
                if word == "import" and depth == 0 and prev != ".":
                    record = self._declaration(i, j)
                if record is not None:
                    self._leading[record.range.start] = pending
                    records.append(record)
                    i = record.range.end
                    prev = ";"
                else:
                    i = j
                    prev = word
            else:
                if ch in _OPENERS:
                    depth += 1
                elif ch in _CLOSERS:
                    depth = max(0, depth - 1)
                i += 1
                prev = ch
            pending = []
            last_line = self._line(max(start, i - 1))
        return records

    # ------------------------------------------------------------------
    # Import declarations
    # ------------------------------------------------------------------

    def _declaration(self, start: int, after_keyword: int) -> Optional[ImportRecord]:
        """Parse an import declaration starting at ``start``, or return None."""
        src = self.source
        k = self._skip_trivia(after_keyword)
        if k >= len(src) or src[k] in "(.":
            return None

        is_type_only = False
        if src[k] in _QUOTES:
            spec = k
        else:
            word, word_end = self._word_at(k)
            if word == "type":
                nk = self._skip_trivia(word_end)
                next_word, _ = self._word_at(nk)
                # ``import type from "x"`` is a default import named ``type``.
                is_type_only = src[nk:nk + 1] in ("{", "*") or next_word not in ("", "from")
            spec = self._find_specifier(k)
            if spec is None:
                return None

        spec_end = self._skip_string(spec)
        path = src[spec + 1:spec_end - 1]
        end = self._skip_attributes(spec_end)
        semi = end
        while semi < len(src) and src[semi] in " \t":
            semi += 1
        if src[semi:semi + 1] == ";":
            end = semi + 1

        line = self._line(start)
        line_start = self._line_starts[line - 1]
        prefix = src[line_start:start].lstrip("\ufeff")
        code = prefix.rstrip()
        return ImportRecord(
            path=path,
            range=SourceRange(start, end),
            is_type_only=is_type_only,
            line=line,
            indent=prefix[:len(prefix) - len(prefix.lstrip())],
            inline_at=start - len(prefix) + len(code) if code else None,
        )

    def _find_specifier(self, k: int) -> Optional[int]:
        """Return the offset of the string after ``from``, or None."""
        src = self.source
        n = len(src)
        nesting = 0
        while k < n:
            k = self._skip_trivia(k)
            if k >= n:
                return None
            ch = src[k]
            if ch in _QUOTES:
                k = self._skip_string(k)
            elif ch in "{(":
                nesting += 1
                k += 1
            elif ch in "})":
                nesting -= 1
                k += 1
            elif nesting == 0 and ch in ";=":
                return None
            elif _is_ident_start(ch):
                word, k = self._word_at(k)
                if word == "from" and nesting == 0:
                    spec = self._skip_trivia(k)
                    if spec < n and src[spec] in _QUOTES:
                        return spec
            else:
                k += 1
        return None

    def _skip_attributes(self, k: int) -> int:
        """Skip ``with { ... }`` / ``assert { ... }`` import attributes."""
        src = self.source
        j = self._skip_trivia(k)
        word, word_end = self._word_at(j)
        if word not in _ATTRIBUTE_KEYWORDS:
            return k
        brace = self._skip_trivia(word_end)
        if src[brace:brace + 1] != "{":
            return k
        close = src.find("}", brace)
        return close + 1 if close >= 0 else k

    # ------------------------------------------------------------------
    # Lexical helpers
    # ------------------------------------------------------------------

    def _line(self, offset: int) -> int:
        return bisect.bisect_right(self._line_starts, offset)

    def _comment(self, start: int, end: int) -> CommentToken:
        line_start = self._line_starts[self._line(start) - 1]
        own_line = self.source[line_start:start].strip() == ""
        return CommentToken(
            text=self.source[start:end],
            range=SourceRange(line_start if own_line else start, end),
        )

    def _word_at(self, k: int) -> tuple[str, int]:
        src = self.source
        if k >= len(src) or not _is_ident_start(src[k]):
            return "", k
        j = k + 1
        while j < len(src) and _is_ident_part(src[j]):
            j += 1
        return src[k:j], j

    def _skip_trivia(self, k: int) -> int:
        src = self.source
        while k < len(src):
            if src[k].isspace():
                k += 1
            elif src.startswith("//", k) or src.startswith("/*", k):
                k = self._skip_comment(k)
            else:
                break
        return k

    def _skip_comment(self, k: int) -> int:
        src = self.source
        if src.startswith("//", k):
            end = src.find("\n", k)
            return len(src) if end < 0 else end
        close = src.find("*/", k + 2)
        if close < 0:
            raise ValueError(f"unterminated comment at line {self._line(k)}")
        return close + 2

    def _skip_string(self, k: int) -> int:
        src = self.source
        quote = src[k]
        j = k + 1
        while j < len(src):
            ch = src[j]
            if ch == "\\":
                j += 2
                continue
            if ch == quote:
                return j + 1
            # A raw line break ends a broken string; JSX text can look like one.
            if ch == "\n":
                return j
            j += 1
        return len(src)

    def _skip_template(self, k: int) -> int:
        src = self.source
        j = k + 1
        while j < len(src):
            ch = src[j]
            if ch == "\\":
                j += 2
            elif ch == "`":
                return j + 1
            elif src.startswith("${", j):
                j = self._skip_braced(j + 2)
            else:
                j += 1
        raise ValueError(f"unterminated template literal at line {self._line(k)}")

    def _skip_braced(self, k: int) -> int:
        """Skip a template substitution body up to its closing brace."""
        src = self.source
        nesting = 1
        j = k
        while j < len(src):
            ch = src[j]
            if src.startswith("//", j) or src.startswith("/*", j):
                j = self._skip_comment(j)
            elif ch in _QUOTES:
                j = self._skip_string(j)
            elif ch == "`":
                j = self._skip_template(j)
            elif ch == "{":
                nesting += 1
                j += 1
            elif ch == "}":
                nesting -= 1
                j += 1
                if nesting == 0:
                    return j
            else:
                j += 1
        raise ValueError(f"unterminated template substitution at line {self._line(k)}")

    def _skip_regex(self, k: int) -> int:
        src = self.source
        j = k + 1
        in_class = False
        while j < len(src):
            ch = src[j]
            if ch == "\\":
                j += 2
                continue
            if ch == "\n":
                return j
            if in_class:
                in_class = ch != "]"
            elif ch == "[":
                in_class = True
            elif ch == "/":
                j += 1
                break
            j += 1
        while j < len(src) and _is_ident_part(src[j]):
            j += 1
        return j
