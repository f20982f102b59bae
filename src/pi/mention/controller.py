"""Mention controller: wires the session machine to a surface and a list.

The controller owns the only mutable session state. Each keydown is turned
into a :class:`~pi.mention.session.Keystroke` by reading the surface, folded
through :func:`~pi.mention.session.transition`, and the resulting effects
are applied to the list presenter and the text accessor in order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from pi.mention.accessor import TextAccessor
from pi.mention.candidates import Candidate, CandidateIndex
from pi.mention.components.mention_list import MentionList
from pi.mention.config import MentionConfig, config_from_dict
from pi.mention.keys import KeyEvent, resolve_char
from pi.mention.platform import PlatformKind
from pi.mention.presenter import ListOptions, ListPresenter, PositionHint
from pi.mention.search import filter_candidates
from pi.mention.session import (
    CLOSED,
    Closed,
    Commit,
    Effect,
    HideList,
    Keystroke,
    ListView,
    Navigate,
    Open,
    Search,
    SessionState,
    ShowList,
    Suspended,
    Transition,
    close,
    transition,
)

logger = logging.getLogger(__name__)


def _default_call_soon(callback: Callable[[], None]) -> None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running event loop -- run synchronously
        callback()
        return
    loop.call_soon(callback)


class MentionController:
    """Detects mentions on one editable surface and commits selections."""

    def __init__(
        self,
        accessor: TextAccessor,
        config: MentionConfig | None = None,
        items: Iterable[Candidate] | None = None,
        *,
        platform: Callable[[], PlatformKind] | None = None,
        list_factory: Callable[[ListOptions], ListPresenter] | None = None,
        call_soon: Callable[[Callable[[], None]], Any] | None = None,
    ) -> None:
        self._accessor = accessor
        self._config = config or MentionConfig()
        self._index = CandidateIndex(items, self._config.label_key)
        self._platform = platform or (lambda: PlatformKind.DESKTOP)
        self._list_factory = list_factory or (lambda options: MentionList(options))
        self._call_soon = call_soon or _default_call_soon
        self._state: SessionState = CLOSED
        self._search_string: str | None = None
        self._list: ListPresenter | None = None
        self._frame: Any = None

        self.on_search_term: Callable[[str | None], None] | None = None
        self.on_list_visibility: Callable[[bool], None] | None = None

    # ------------------------------------------------------------------
    # Host surface
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def search_string(self) -> str | None:
        return self._search_string

    @property
    def config(self) -> MentionConfig:
        return self._config

    @property
    def items(self) -> list[Candidate]:
        return self._index.items

    @property
    def presenter(self) -> ListPresenter | None:
        return self._list

    @property
    def visible_candidates(self) -> list[Candidate]:
        """The candidates the list would show for the current search."""
        return filter_candidates(
            self._search_string,
            self._index.items,
            self._config.effective_filter_keys,
            self._index.getter,
            disable_search=self._config.disable_search,
            max_items=self._config.max_items,
        )

    def set_items(self, items: Iterable[Candidate] | None) -> None:
        """Replace the candidate collection, refreshing a visible list."""
        self._index.replace(items)
        logger.debug("Candidate index replaced: %d item(s)", len(self._index))
        if self._list is not None and not self._list.hidden:
            self._refresh_list()

    def configure(self, data: Mapping[str, Any] | MentionConfig) -> None:
        if isinstance(data, MentionConfig):
            config = data
        else:
            config = config_from_dict(data, self._config)
        if config.label_key != self._index.label_key:
            self._index.relabel(config.label_key)
        self._config = config

    def set_frame(self, frame: Any) -> None:
        self._frame = frame

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        """Process a keydown; return ``True`` to prevent its default action."""
        platform = self._platform()
        stroke = self._read_keystroke(event, platform)
        result = transition(self._state, stroke, self._config)
        logger.debug(
            "key %r (%r) at %d: %s -> %s",
            event.key,
            stroke.char,
            stroke.caret,
            type(self._state).__name__,
            type(result.state).__name__,
        )
        self._apply(result)
        return result.prevent_default

    def handle_blur(self) -> bool:
        """Abort on focus loss; returns whether the blur was consumed."""
        if not self._platform().closes_on_blur:
            return False
        self.abort()
        return True

    def abort(self) -> None:
        """Close the session and hide the list without touching the text."""
        result = close(self._state)
        if self._list is not None and not self._list.hidden:
            result = Transition(CLOSED, (HideList(),))
        self._apply(result)

    def commit(self, candidate: Candidate) -> bool:
        """Replace the current edit span with *candidate*.

        Shared by keyboard confirmation and list clicks. Returns ``False``
        when no mention span can be located at the caret.
        """
        compensation = self._platform().caret_compensation
        caret = self._caret(compensation)
        state = self._state

        if isinstance(state, (Open, Suspended)):
            start = state.trigger_start
            if caret < start and state.anchor is not None:
                # A click moved the caret; put it back at the end of the anchor node
                node_end = self._accessor.node_length(state.anchor)
                self._accessor.set_caret_offset(state.anchor, node_end, self._frame)
                caret = self._caret(compensation)
            if caret < start:
                logger.debug("Commit skipped: caret %d before trigger %d", caret, start)
                return False
        else:
            trigger = self._config.trigger_char
            word = self._accessor.get_word_at_caret()
            if not isinstance(trigger, str) or not word.startswith(trigger):
                return False
            start = caret - len(word)

        self._apply(Transition(CLOSED, (HideList(), Commit(start, caret, candidate))))
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _caret(self, compensation: int) -> int:
        reported = self._accessor.get_caret_offset(self._frame)
        return max(0, reported - compensation)

    def _read_keystroke(self, event: KeyEvent, platform: PlatformKind) -> Keystroke:
        value = self._accessor.get_value() or ""
        reported = max(0, min(self._accessor.get_caret_offset(self._frame), len(value)))
        caret = max(0, reported - platform.caret_compensation)
        view = ListView()
        if self._list is not None:
            view = ListView(visible=not self._list.hidden, active=self._list.active_candidate)
        return Keystroke(
            event=event,
            char=resolve_char(event, value, reported),
            caret=caret,
            value=value,
            anchor=self._accessor.get_selection_anchor(self._frame),
            word=self._accessor.get_word_at_caret(),
            platform=platform,
            list_view=view,
        )

    def _apply(self, result: Transition) -> None:
        was_visible = self._list is not None and not self._list.hidden
        self._state = result.state
        for effect in result.effects:
            self._apply_effect(effect)
        is_visible = self._list is not None and not self._list.hidden
        if isinstance(result.state, Closed) and not is_visible:
            # A visible list while Closed belongs to the word at the caret
            self._search_string = None
        if was_visible != is_visible and self.on_list_visibility:
            self.on_list_visibility(is_visible)

    def _apply_effect(self, effect: Effect) -> None:
        if isinstance(effect, ShowList):
            self._show_list(effect.caret)
        elif isinstance(effect, HideList):
            if self._list is not None:
                self._list.hide()
        elif isinstance(effect, Search):
            self._search_string = effect.search_string
            if effect.notify and self.on_search_term:
                self.on_search_term(effect.search_string)
            self._refresh_list()
        elif isinstance(effect, Navigate):
            if self._list is not None:
                if effect.step > 0:
                    self._list.activate_next()
                else:
                    self._list.activate_previous()
        elif isinstance(effect, Commit):
            self._commit_range(effect)

    def _hint(self, caret: int, item_count: int) -> PositionHint:
        config = self._config
        return PositionHint(
            caret=caret,
            position_type=config.position_type,
            item_count=item_count,
            x_pos=config.x_pos,
            y_pos=config.y_pos,
            frame=self._frame,
        )

    def _show_list(self, caret: int) -> None:
        if self._list is None:
            self._list = self._list_factory(self._config.list_options())
            self._list.on_item_click = self._on_item_click
            self._list.show(self._hint(caret, 0))
            return
        self._list.show(self._hint(caret, 0))
        presenter = self._list
        self._call_soon(presenter.reset_scroll)

    def _refresh_list(self) -> None:
        if self._list is None:
            return
        matches = self.visible_candidates
        self._list.set_candidates(matches, self._search_string)
        caret = self._caret(self._platform().caret_compensation)
        self._list.reposition(self._hint(caret, len(matches)))

    def _commit_range(self, effect: Commit) -> None:
        config = self._config
        text = config.format_item(effect.candidate, self._index.getter)
        logger.debug("Committing %r over [%d, %d)", text, effect.start, effect.end)
        self._accessor.replace_range(
            effect.start,
            effect.end,
            text,
            as_html=config.insert_html,
            frame=self._frame,
        )
        self._accessor.notify_input()

    def _on_item_click(self, candidate: Candidate) -> None:
        self.commit(candidate)
