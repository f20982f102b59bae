"""Multi-line text buffer accessor.

Each line is a node: the selection anchor is the caret's line index and
every offset handed to or returned from the accessor methods is relative to
that line. This mirrors how rich editable regions report a caret inside the
text node that holds it.
"""

from __future__ import annotations

import re
from typing import Any, Callable

from pi.mention.accessor import html_to_text, word_before_caret

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


class TextBuffer:
    """Lines of text with a (line, column) caret."""

    def __init__(self, text: str = "") -> None:
        self._lines: list[str] = text.split("\n") if text else [""]
        self._cursor_line = len(self._lines) - 1
        self._cursor_col = len(self._lines[-1])
        self.on_input: Callable[[str], None] | None = None

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def cursor(self) -> tuple[int, int]:
        return (self._cursor_line, self._cursor_col)

    def move_to(self, line: int, col: int) -> None:
        self._cursor_line = max(0, min(line, len(self._lines) - 1))
        self._cursor_col = max(0, min(col, len(self._lines[self._cursor_line])))

    # TextAccessor

    def get_caret_offset(self, frame: Any = None) -> int:
        return self._cursor_col

    def set_caret_offset(self, node: Any, offset: int, frame: Any = None) -> None:
        line = self._cursor_line if node is None else node
        self.move_to(line, offset)

    def get_value(self) -> str:
        return self._lines[self._cursor_line]

    def replace_range(
        self,
        start: int,
        end: int,
        text: str,
        *,
        as_html: bool = False,
        frame: Any = None,
    ) -> None:
        if as_html:
            text = html_to_text(_BR_RE.sub("\n", text))

        current = self._lines[self._cursor_line]
        start = max(0, min(start, len(current)))
        end = max(start, min(end, len(current)))
        before, after = current[:start], current[end:]

        inserted = text.split("\n")
        new_lines = [before + inserted[0]] + inserted[1:]
        cursor_col = len(new_lines[-1])
        new_lines[-1] += after

        line = self._cursor_line
        self._lines[line : line + 1] = new_lines
        self._cursor_line = line + len(new_lines) - 1
        self._cursor_col = cursor_col

    def get_word_at_caret(self) -> str:
        return word_before_caret(self.get_value(), self._cursor_col)

    def get_selection_anchor(self, frame: Any = None) -> Any:
        return self._cursor_line

    def node_length(self, node: Any) -> int:
        if isinstance(node, int) and 0 <= node < len(self._lines):
            return len(self._lines[node])
        return 0

    def notify_input(self) -> None:
        if self.on_input:
            self.on_input(self.text)

    # Default editing

    def insert(self, text: str) -> None:
        self.replace_range(self._cursor_col, self._cursor_col, text)

    def delete_backward(self) -> None:
        if self._cursor_col > 0:
            self.replace_range(self._cursor_col - 1, self._cursor_col, "")
        elif self._cursor_line > 0:
            prev = self._lines[self._cursor_line - 1]
            self._lines[self._cursor_line - 1] = prev + self._lines.pop(self._cursor_line)
            self._cursor_line -= 1
            self._cursor_col = len(prev)
