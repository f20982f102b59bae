"""The contract between the mention controller and a candidate list.

The controller never positions or paints anything itself. It hands the list
a :class:`PositionHint` and the visible candidates, moves the active cursor,
and reads back the active candidate on commit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, Literal, Protocol

PositionType = Literal["above", "below", "cursor", "detect"]
POSITION_TYPES: tuple[PositionType, ...] = ("above", "below", "cursor", "detect")


@dataclass(frozen=True)
class ListOptions:
    """Presentation settings fixed when the list is created."""

    trigger_char: str | int = "@"
    label_key: str = "label"
    show_list_header: bool = False
    max_height: int = 300
    min_width: int = 250
    max_width: int = 500
    list_item_height: int = 26
    position_type: PositionType = "cursor"
    x_pos: int = 0
    y_pos: int = 0

    @property
    def max_visible(self) -> int:
        """Rows that fit in ``max_height`` at ``list_item_height`` each."""
        if self.list_item_height <= 0:
            return 1
        return max(1, self.max_height // self.list_item_height)


@dataclass(frozen=True)
class PositionHint:
    """Where the list should appear; the presenter does the geometry."""

    caret: int
    position_type: PositionType = "cursor"
    item_count: int = 0
    x_pos: int = 0
    y_pos: int = 0
    frame: Any = None


class ListPresenter(Protocol):
    """Protocol for candidate list implementations."""

    on_item_click: Callable[[Any], None] | None

    @property
    def hidden(self) -> bool: ...

    @property
    def active_candidate(self) -> Any | None: ...

    def show(self, hint: PositionHint) -> None:
        """Make the list visible at *hint*, resetting the active item."""
        ...

    def hide(self) -> None: ...

    def reposition(self, hint: PositionHint) -> None: ...

    def set_candidates(self, candidates: Sequence[Any], search_string: str | None) -> None:
        """Replace the visible candidates; an empty set hides the list."""
        ...

    def activate_next(self) -> None: ...

    def activate_previous(self) -> None: ...

    def reset_scroll(self) -> None: ...
