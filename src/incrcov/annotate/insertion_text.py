"""Markup insertion over one line of source text.

Insertions are recorded against *original* column offsets and only resolved
when the text is read, so recording a marker never shifts the offsets of
markers recorded before it.

Ordering of markers that land on the same offset:

1. closing markup of spans that started earlier, innermost first
2. point insertions made with ``before=True`` and zero-width spans
3. opening markup, outermost first
4. point insertions made with ``before=False``

Spans with identical bounds nest in recording order: a later ``wrap`` encloses
an earlier one. As long as every span either contains or is contained by the
spans it overlaps, the resolved markup is balanced.
"""

from __future__ import annotations

import html
from dataclasses import dataclass

LT = "\u0001"
GT = "\u0002"

_PROTECT = str.maketrans({"<": LT, ">": GT})
_RESTORE = str.maketrans({LT: "<", GT: ">"})

_CLOSE = 0
_POINT_BEFORE = 1
_OPEN = 2
_POINT_AFTER = 3


@dataclass(frozen=True, slots=True)
class _Marker:
    offset: int
    group: int
    key: tuple[int, ...]
    markup: str


def escape_markup_safe(text: str) -> str:
    """HTML-escape ``text`` while letting protected markup brackets through."""
    return html.escape(text, quote=False).translate(_RESTORE)


class InsertionText:
    """One source line plus pending markup insertions.

    Args:
        text: The original line.
        consume_blanks: Snap offsets inside leading whitespace to column 0 and
            offsets past the last non-blank character to the line end, so
            markers swallow surrounding indentation and trailing blanks.
    """

    def __init__(self, text: str, consume_blanks: bool = False):
        self._text = text
        self._consume_blanks = consume_blanks
        self._markers: list[_Marker] = []
        self._seq = 0
        stripped = text.lstrip()
        self._first_non_blank = len(text) - len(stripped) if stripped else len(text)
        self._last_non_blank = len(text.rstrip()) - 1

    @property
    def text(self) -> str:
        return self._text

    @property
    def original_length(self) -> int:
        return len(self._text)

    def _fix_column(self, col: int, consume_blanks: bool | None = None) -> int:
        length = len(self._text)
        if consume_blanks is None:
            consume_blanks = self._consume_blanks
        if consume_blanks:
            if col <= self._first_non_blank:
                col = 0
            if col > self._last_non_blank:
                col = length
        return max(0, min(col, length))

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def insert(
        self, col: int, markup: str, before: bool = True, consume_blanks: bool | None = None
    ) -> InsertionText:
        """Record a zero-width marker at original column ``col``.

        ``consume_blanks`` overrides the instance setting for this marker only.
        """
        seq = self._next_seq()
        offset = self._fix_column(col, consume_blanks)
        group = _POINT_BEFORE if before else _POINT_AFTER
        self._markers.append(_Marker(offset, group, (seq,), markup))
        return self

    def wrap(self, start_col: int, open_markup: str, end_col: int, close_markup: str) -> InsertionText:
        """Surround original columns ``[start_col, end_col)`` with a markup pair."""
        seq = self._next_seq()
        start = self._fix_column(start_col)
        end = max(self._fix_column(end_col), start)
        if start == end:
            self._markers.append(_Marker(start, _POINT_BEFORE, (seq,), open_markup + close_markup))
            return self
        self._markers.append(_Marker(start, _OPEN, (-end, -seq), open_markup))
        self._markers.append(_Marker(end, _CLOSE, (-start, seq), close_markup))
        return self

    def wrap_line(self, open_markup: str, close_markup: str) -> InsertionText:
        """Surround the whole line."""
        return self.wrap(0, open_markup, len(self._text), close_markup)

    def _render(self, protect: bool) -> str:
        markers = sorted(self._markers, key=lambda m: (m.offset, m.group, m.key))
        parts: list[str] = []
        pos = 0
        for marker in markers:
            if marker.offset > pos:
                parts.append(self._text[pos : marker.offset])
                pos = marker.offset
            parts.append(marker.markup.translate(_PROTECT) if protect else marker.markup)
        parts.append(self._text[pos:])
        return "".join(parts)

    def to_html(self) -> str:
        """Resolve to HTML: original characters escaped, markup left intact."""
        return escape_markup_safe(self._render(protect=True))

    def __str__(self) -> str:
        return self._render(protect=False)

    def __repr__(self) -> str:
        return f"InsertionText({self._text!r}, markers={len(self._markers)})"
