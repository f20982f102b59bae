"""Mention session state machine.

A session starts when the trigger character is typed and tracks the edit
span from the trigger to the caret. Every keystroke is folded into the
current state by :func:`transition`, a pure function returning the next
state plus the effects the controller must carry out. Nothing here touches
a text surface or a list.

States:

* :class:`Closed` - no session. Keystrokes still look at the word before
  the caret: if it starts with the trigger, the same extend/commit/abort
  rules run against that word without opening a tracked session.
* :class:`Open` - a session is tracked from ``trigger_start``. It closes as
  soon as the caret leaves the word that began at the trigger: another
  node, whitespace inside the span, or the trigger itself edited away.
* :class:`Suspended` - the caret fell to or before the trigger. The list is
  hidden and only a new trigger or Escape is acted on.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union

from pi.mention.config import MentionConfig
from pi.mention.keys import KeyCode, KeyEvent, is_printable, is_trigger
from pi.mention.platform import PlatformKind
from pi.mention.utils import is_whitespace_char

# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class Open:
    trigger_start: int
    anchor: Any = None
    search_string: str | None = None


@dataclass(frozen=True)
class Suspended:
    trigger_start: int
    anchor: Any = None
    search_string: str | None = None


SessionState = Union[Closed, Open, Suspended]

CLOSED = Closed()

# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShowList:
    """Show (creating if needed) and reposition the list at ``caret``."""

    caret: int


@dataclass(frozen=True)
class HideList:
    pass


@dataclass(frozen=True)
class Search:
    """Recompute the visible candidates for ``search_string``.

    ``notify`` is false only when a fresh trigger clears the search string.
    """

    search_string: str | None
    notify: bool = True


@dataclass(frozen=True)
class Navigate:
    step: int


@dataclass(frozen=True)
class Commit:
    """Replace ``[start, end)`` with the formatted ``candidate``."""

    start: int
    end: int
    candidate: Any


Effect = Union[ShowList, HideList, Search, Navigate, Commit]

# ---------------------------------------------------------------------------
# Inputs and result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListView:
    """What the list looked like when the keystroke arrived."""

    visible: bool = False
    active: Any = None


@dataclass(frozen=True)
class Keystroke:
    """One keydown, with the surface read just before it is applied.

    ``caret`` is the logical caret: already corrected for the platform.
    ``word`` is the run of non-whitespace text ending at the caret.
    """

    event: KeyEvent
    char: str
    caret: int
    value: str = ""
    anchor: Any = None
    word: str = ""
    platform: PlatformKind = PlatformKind.DESKTOP
    list_view: ListView = field(default_factory=ListView)


@dataclass(frozen=True)
class Transition:
    state: SessionState
    effects: tuple[Effect, ...] = ()
    prevent_default: bool = False


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------


def transition(
    state: SessionState, stroke: Keystroke, config: MentionConfig
) -> Transition:
    """Fold one keystroke into the session state."""
    trigger = config.trigger_char

    if (
        stroke.platform is PlatformKind.ANDROID
        and isinstance(trigger, str)
        and stroke.value.strip()
        and trigger not in stroke.value
    ):
        return Transition(state)

    if is_trigger(stroke.event, stroke.char, trigger):
        return Transition(
            Open(trigger_start=stroke.caret, anchor=stroke.anchor),
            (ShowList(stroke.caret), Search(None, notify=False)),
        )

    if isinstance(state, Open):
        return _advance(state, stroke, trigger)

    if isinstance(state, Suspended):
        if stroke.event.key_code == KeyCode.ESCAPE:
            return Transition(CLOSED, (HideList(),))
        return Transition(state)

    return _advance_word(stroke, trigger)


def close(state: SessionState) -> Transition:
    """Abort from any state; idempotent."""
    effects: tuple[Effect, ...] = () if isinstance(state, Closed) else (HideList(),)
    return Transition(CLOSED, effects)


def _suspend(state: Open) -> Transition:
    return Transition(
        Suspended(state.trigger_start, state.anchor, state.search_string),
        (HideList(),),
    )


def _is_space(stroke: Keystroke) -> bool:
    return stroke.event.key_code == KeyCode.SPACE or stroke.char == " "


def _is_modifier_stroke(event: KeyEvent) -> bool:
    # Shift pressed alone, or any command modifier held
    return event.key_code == KeyCode.SHIFT or event.has_command_modifier


def _list_keys(stroke: Keystroke, state: SessionState, start: int) -> Transition | None:
    """Commit and navigation keys, only meaningful while the list shows."""
    view = stroke.list_view
    if not view.visible:
        return None

    code = stroke.event.key_code
    if code in (KeyCode.TAB, KeyCode.ENTER):
        if view.active is None:
            return None
        return Transition(
            CLOSED,
            (HideList(), Commit(start, stroke.caret, view.active)),
            prevent_default=True,
        )
    if code == KeyCode.DOWN:
        return Transition(state, (Navigate(1),), prevent_default=True)
    if code == KeyCode.UP:
        return Transition(state, (Navigate(-1),), prevent_default=True)
    return None


def _span_is_intact(state: Open, stroke: Keystroke, trigger: str | int) -> bool:
    """Check the caret is still inside the word that began at the trigger."""
    if state.anchor is not None and stroke.anchor != state.anchor:
        return False
    span = stroke.value[state.trigger_start : stroke.caret]
    if isinstance(trigger, str):
        if not span.startswith(trigger):
            return False
        typed = span[len(trigger) :]
    else:
        # The key-code trigger typed a single character of unknown form
        typed = span[1:]
    return not any(is_whitespace_char(ch) for ch in typed)


def _advance(state: Open, stroke: Keystroke, trigger: str | int) -> Transition:
    event = stroke.event
    start = state.trigger_start

    if event.key_code == KeyCode.ESCAPE:
        return Transition(CLOSED, (HideList(),), prevent_default=stroke.list_view.visible)

    same_node = state.anchor is None or stroke.anchor == state.anchor
    if stroke.caret <= start and same_node:
        return _suspend(state)

    if not _span_is_intact(state, stroke, trigger):
        return Transition(CLOSED, (HideList(),))

    if _is_modifier_stroke(event):
        return Transition(state)

    if _is_space(stroke):
        return Transition(CLOSED, (HideList(),))

    if event.key_code == KeyCode.BACKSPACE:
        caret = stroke.caret - 1
        if caret <= start:
            return _suspend(state)
        search = stroke.value[start + 1 : caret]
        return Transition(replace(state, search_string=search), (Search(search),))

    handled = _list_keys(stroke, state, start)
    if handled is not None:
        return handled

    # Horizontal caret moves would desynchronize the tracked span
    if event.key_code in (KeyCode.LEFT, KeyCode.RIGHT):
        return Transition(state, prevent_default=True)

    if not is_printable(stroke.char):
        return Transition(state)

    search = stroke.value[start + 1 : stroke.caret] + stroke.char
    return Transition(replace(state, search_string=search), (Search(search),))


def _advance_word(stroke: Keystroke, trigger: str | int) -> Transition:
    if not isinstance(trigger, str) or not stroke.word.startswith(trigger):
        return Transition(CLOSED)

    event = stroke.event
    typed = stroke.word[len(trigger) :]
    start = stroke.caret - len(typed) - len(trigger)

    if _is_modifier_stroke(event):
        return Transition(CLOSED)

    if event.key_code == KeyCode.ESCAPE:
        return Transition(CLOSED, (HideList(),), prevent_default=stroke.list_view.visible)

    if _is_space(stroke):
        return Transition(CLOSED, (HideList(),))

    if event.key_code == KeyCode.BACKSPACE:
        if not typed or stroke.caret <= 1:
            return Transition(CLOSED, (HideList(),))
        return Transition(CLOSED, (Search(typed[:-1]),))

    handled = _list_keys(stroke, CLOSED, start)
    if handled is not None:
        return handled

    if not is_printable(stroke.char):
        return Transition(CLOSED)

    return Transition(CLOSED, (Search(typed + stroke.char),))
