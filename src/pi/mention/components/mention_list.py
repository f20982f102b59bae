"""MentionList component: the candidate dropdown rendered as terminal lines."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable, Protocol

from pi.mention.candidates import field_text
from pi.mention.presenter import ListOptions, PositionHint
from pi.mention.utils import truncate_to_width


class MentionListTheme(Protocol):
    selected_text: Callable[[str], str]
    header: Callable[[str], str]
    scroll_info: Callable[[str], str]


class PlainTheme:
    """Theme that leaves text unstyled."""

    @staticmethod
    def selected_text(text: str) -> str:
        return text

    @staticmethod
    def header(text: str) -> str:
        return text

    @staticmethod
    def scroll_info(text: str) -> str:
        return text


class MentionList:
    """Candidate list with an active cursor, scrolling and click selection."""

    def __init__(
        self,
        options: ListOptions | None = None,
        theme: MentionListTheme | None = None,
        item_template: Callable[[Any], str] | None = None,
    ) -> None:
        self._options = options or ListOptions()
        self._theme = theme or PlainTheme()
        self._item_template = item_template
        self._candidates: list[Any] = []
        self._search_string: str | None = None
        self._active_index = 0
        self._scroll_top = 0
        self._hidden = True
        self._hint: PositionHint | None = None

        self.on_item_click: Callable[[Any], None] | None = None

    # ListPresenter

    @property
    def hidden(self) -> bool:
        return self._hidden

    @property
    def active_candidate(self) -> Any | None:
        if 0 <= self._active_index < len(self._candidates):
            return self._candidates[self._active_index]
        return None

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def candidates(self) -> list[Any]:
        return list(self._candidates)

    @property
    def search_string(self) -> str | None:
        return self._search_string

    @property
    def position(self) -> PositionHint | None:
        return self._hint

    def show(self, hint: PositionHint) -> None:
        self._hint = hint
        self._active_index = 0
        self._hidden = False

    def hide(self) -> None:
        self._hidden = True

    def reposition(self, hint: PositionHint) -> None:
        self._hint = hint

    def set_candidates(self, candidates: Sequence[Any], search_string: str | None) -> None:
        self._candidates = list(candidates)
        self._active_index = 0
        self._hidden = not self._candidates
        if search_string is not None:
            self._search_string = search_string.lower()

    def activate_next(self) -> None:
        if not self._candidates:
            return
        self._active_index = (self._active_index + 1) % len(self._candidates)

    def activate_previous(self) -> None:
        if not self._candidates:
            return
        self._active_index = (self._active_index - 1) % len(self._candidates)

    def reset_scroll(self) -> None:
        self._scroll_top = 0

    # Interaction

    def click(self, index: int) -> None:
        """Select the candidate at *index* as a pointer click would."""
        if not 0 <= index < len(self._candidates):
            return
        self._active_index = index
        if self.on_item_click:
            self.on_item_click(self._candidates[index])

    # Rendering

    def invalidate(self) -> None:
        pass

    def _label(self, candidate: Any) -> str:
        if self._item_template is not None:
            return self._item_template(candidate)
        return field_text(candidate, self._options.label_key) or ""

    def _visible_range(self) -> tuple[int, int]:
        count = len(self._candidates)
        max_visible = self._options.max_visible
        start = self._scroll_top
        if self._active_index < start:
            start = self._active_index
        elif self._active_index >= start + max_visible:
            start = self._active_index - max_visible + 1
        start = max(0, min(start, count - max_visible))
        self._scroll_top = start
        return start, min(start + max_visible, count)

    def render(self, width: int) -> list[str]:
        if self._hidden or not self._candidates:
            return []

        lines: list[str] = []
        if self._options.show_list_header:
            trigger = self._options.trigger_char
            prefix = trigger if isinstance(trigger, str) else ""
            title = f"  Matching {prefix}{self._search_string or ''}"
            lines.append(self._theme.header(truncate_to_width(title, width - 2, "")))

        start, end = self._visible_range()
        for i in range(start, end):
            label = truncate_to_width(self._label(self._candidates[i]), width - 4, "")
            if i == self._active_index:
                lines.append(self._theme.selected_text(f"→ {label}"))
            else:
                lines.append(f"  {label}")

        if start > 0 or end < len(self._candidates):
            scroll_text = f"  ({self._active_index + 1}/{len(self._candidates)})"
            lines.append(
                self._theme.scroll_info(truncate_to_width(scroll_text, width - 2, ""))
            )

        return lines
