"""Caret and text access for editable surfaces.

The controller reads the caret and the text through :class:`TextAccessor`
and writes the committed mention back through it. Offsets are in the
surface's own coordinates: a character index for a single value string, or
an offset inside the node holding the caret for structured surfaces.

:class:`TextInput` is the in-memory implementation for a single value
string; :class:`pi.mention.buffer.TextBuffer` covers multi-line text.
"""

from __future__ import annotations

import html
import re
from typing import Any, Callable, Protocol

from pi.mention.utils import is_whitespace_char

_TAG_RE = re.compile(r"<[^>]*>")


class TextAccessor(Protocol):
    """Protocol for editable surfaces."""

    def get_caret_offset(self, frame: Any = None) -> int: ...

    def set_caret_offset(self, node: Any, offset: int, frame: Any = None) -> None: ...

    def get_value(self) -> str:
        """Text of the node holding the caret."""
        ...

    def replace_range(
        self,
        start: int,
        end: int,
        text: str,
        *,
        as_html: bool = False,
        frame: Any = None,
    ) -> None:
        """Replace ``[start, end)`` and leave the caret after *text*."""
        ...

    def get_word_at_caret(self) -> str: ...

    def get_selection_anchor(self, frame: Any = None) -> Any:
        """Identity of the node holding the caret."""
        ...

    def node_length(self, node: Any) -> int: ...

    def notify_input(self) -> None:
        """Tell host bindings the content changed."""
        ...


def word_before_caret(text: str, caret: int) -> str:
    """Run of non-whitespace characters ending at *caret*."""
    caret = max(0, min(caret, len(text)))
    start = caret
    while start > 0 and not is_whitespace_char(text[start - 1]):
        start -= 1
    return text[start:caret]


def html_to_text(markup: str) -> str:
    """Flatten markup for surfaces that only hold plain text."""
    return html.unescape(_TAG_RE.sub("", markup))


class TextInput:
    """A single value string with a caret; the plain input surface."""

    def __init__(self, value: str = "", caret: int | None = None) -> None:
        self._value = value
        self._caret = len(value) if caret is None else max(0, min(caret, len(value)))
        self.on_input: Callable[[str], None] | None = None

    @property
    def value(self) -> str:
        return self._value

    @property
    def caret(self) -> int:
        return self._caret

    def set_value(self, value: str, caret: int | None = None) -> None:
        self._value = value
        self._caret = len(value) if caret is None else max(0, min(caret, len(value)))

    # TextAccessor

    def get_caret_offset(self, frame: Any = None) -> int:
        return self._caret

    def set_caret_offset(self, node: Any, offset: int, frame: Any = None) -> None:
        self._caret = max(0, min(offset, len(self._value)))

    def get_value(self) -> str:
        return self._value

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
            text = html_to_text(text)
        start = max(0, min(start, len(self._value)))
        end = max(start, min(end, len(self._value)))
        self._value = self._value[:start] + text + self._value[end:]
        self._caret = start + len(text)

    def get_word_at_caret(self) -> str:
        return word_before_caret(self._value, self._caret)

    def get_selection_anchor(self, frame: Any = None) -> Any:
        return None

    def node_length(self, node: Any) -> int:
        return len(self._value)

    def notify_input(self) -> None:
        if self.on_input:
            self.on_input(self._value)

    # Default editing, applied by hosts after the controller lets a key through

    def insert(self, text: str) -> None:
        self.replace_range(self._caret, self._caret, text)

    def delete_backward(self, count: int = 1) -> None:
        if self._caret > 0:
            self.replace_range(max(0, self._caret - count), self._caret, "")
