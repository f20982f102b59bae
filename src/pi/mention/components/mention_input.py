"""MentionInput component - single-line text input with inline mentions."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Callable

from pi.mention.accessor import TextInput
from pi.mention.candidates import Candidate
from pi.mention.components.mention_list import MentionList, MentionListTheme
from pi.mention.config import MentionConfig
from pi.mention.controller import MentionController
from pi.mention.keys import KeyCode, KeyEvent, is_printable, key_event_from_terminal
from pi.mention.platform import PlatformKind
from pi.mention.presenter import ListOptions
from pi.mention.utils import (
    first_grapheme_length,
    graphemes,
    last_grapheme_length,
    visible_width,
)

CURSOR_MARKER = "\x1b_pi:c\x07"


class MentionInput:
    """Single-line input whose keystrokes pass through a mention controller.

    Raw terminal input is translated into key events and offered to the
    controller first, as a keydown would be; the edit is applied only when
    the controller did not prevent it.
    """

    def __init__(
        self,
        items: Iterable[Candidate] | None = None,
        config: MentionConfig | None = None,
        *,
        theme: MentionListTheme | None = None,
        platform: Callable[[], PlatformKind] | None = None,
        item_template: Callable[[Candidate], str] | None = None,
    ) -> None:
        self._text = TextInput()
        self._theme = theme
        self._item_template = item_template

        def make_list(options: ListOptions) -> MentionList:
            return MentionList(options, theme=self._theme, item_template=self._item_template)

        self.controller = MentionController(
            self._text,
            config,
            items,
            platform=platform,
            list_factory=make_list,
        )

        self.on_submit: Callable[[str], None] | None = None
        self.on_escape: Callable[[], None] | None = None
        self.on_change: Callable[[str], None] | None = None
        self._text.on_input = self._notify_change

        # Focusable interface
        self.focused: bool = False

    def get_value(self) -> str:
        return self._text.value

    def set_value(self, value: str) -> None:
        self._text.set_value(value, min(self._text.caret, len(value)))

    @property
    def cursor(self) -> int:
        return self._text.caret

    def blur(self) -> None:
        self.focused = False
        self.controller.handle_blur()

    def handle_input(self, data: str) -> None:
        event = key_event_from_terminal(data)
        if event is None:
            # Pasted or otherwise multi-character input goes straight in
            clean = data.replace("\r\n", "").replace("\r", "").replace("\n", "")
            if clean and clean.isprintable():
                self._insert(clean)
            return

        if self.controller.handle_key(event):
            return
        self._apply_default(event)

    def _apply_default(self, event: KeyEvent) -> None:
        code = event.key_code
        value, caret = self._text.value, self._text.caret

        if code == KeyCode.ENTER:
            if self.on_submit:
                self.on_submit(value)
        elif code == KeyCode.ESCAPE:
            if self.on_escape:
                self.on_escape()
        elif code == KeyCode.BACKSPACE:
            if caret > 0:
                self._text.delete_backward(last_grapheme_length(value[:caret]))
                self._notify_change(self._text.value)
        elif code == KeyCode.DELETE:
            if caret < len(value):
                step = first_grapheme_length(value[caret:])
                self._text.replace_range(caret, caret + step, "")
                self._notify_change(self._text.value)
        elif code == KeyCode.LEFT:
            self._text.set_caret_offset(None, caret - last_grapheme_length(value[:caret]))
        elif code == KeyCode.RIGHT:
            self._text.set_caret_offset(None, caret + first_grapheme_length(value[caret:]))
        elif code == KeyCode.HOME:
            self._text.set_caret_offset(None, 0)
        elif code == KeyCode.END:
            self._text.set_caret_offset(None, len(value))
        elif not event.ctrl and not event.meta and event.key and is_printable(event.key):
            self._insert(event.key)

    def _insert(self, text: str) -> None:
        self._text.insert(text)
        self._notify_change(self._text.value)

    def _notify_change(self, value: str) -> None:
        if self.on_change:
            self.on_change(value)

    def invalidate(self) -> None:
        pass

    def render(self, width: int) -> list[str]:
        prompt = "> "
        available_width = width - len(prompt)
        if available_width <= 0:
            return [prompt]

        value, caret = self._text.value, self._text.caret
        start = 0
        if len(value) >= available_width:
            # Keep the cursor in view, scrolling horizontally
            start = max(0, min(caret - available_width // 2, len(value) - available_width + 1))
        visible_text = value[start : start + available_width]
        cursor_display = caret - start

        after = visible_text[cursor_display:]
        parts = graphemes(after) if after else []
        at_cursor = parts[0] if parts else " "
        marker = CURSOR_MARKER if self.focused else ""
        text_with_cursor = (
            visible_text[:cursor_display]
            + marker
            + f"\x1b[7m{at_cursor}\x1b[27m"
            + visible_text[cursor_display + len(at_cursor) :]
        )
        padding = " " * max(0, available_width - visible_width(text_with_cursor))
        lines = [prompt + text_with_cursor + padding]

        presenter = self.controller.presenter
        if isinstance(presenter, MentionList):
            lines.extend(presenter.render(width))
        return lines
