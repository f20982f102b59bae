"""Tests for the MentionList component."""

from __future__ import annotations

from typing import Any

from pi.mention.components.mention_list import MentionList
from pi.mention.presenter import ListOptions, PositionHint


class _IdentityTheme:
    """Theme that returns text unmodified, satisfying the MentionListTheme protocol."""

    @staticmethod
    def selected_text(text: str) -> str:
        return text

    @staticmethod
    def header(text: str) -> str:
        return text

    @staticmethod
    def scroll_info(text: str) -> str:
        return text


def _items(*labels: str) -> list[dict[str, str]]:
    return [{"label": label} for label in labels]


def _make_list(max_visible: int = 5, **options: Any) -> MentionList:
    opts = ListOptions(max_height=26 * max_visible, list_item_height=26, **options)
    return MentionList(opts, theme=_IdentityTheme())


def _shown(mention_list: MentionList, *labels: str, search: str | None = None) -> MentionList:
    mention_list.show(PositionHint(caret=0))
    mention_list.set_candidates(_items(*labels), search)
    return mention_list


class TestMentionListVisibility:
    def test_starts_hidden(self) -> None:
        mention_list = _make_list()
        assert mention_list.hidden
        assert mention_list.active_candidate is None
        assert mention_list.render(40) == []

    def test_show_and_hide(self) -> None:
        mention_list = _shown(_make_list(), "alpha")
        assert not mention_list.hidden
        mention_list.hide()
        assert mention_list.hidden
        assert mention_list.render(40) == []

    def test_empty_candidates_hide(self) -> None:
        mention_list = _shown(_make_list(), "alpha")
        mention_list.set_candidates([], "zz")
        assert mention_list.hidden

    def test_new_candidates_unhide(self) -> None:
        mention_list = _shown(_make_list())
        assert mention_list.hidden
        mention_list.set_candidates(_items("beta"), "b")
        assert not mention_list.hidden

    def test_position_hint_kept(self) -> None:
        mention_list = _make_list()
        mention_list.show(PositionHint(caret=3, position_type="above"))
        mention_list.reposition(PositionHint(caret=5, item_count=2))
        assert mention_list.position == PositionHint(caret=5, item_count=2)


class TestMentionListNavigation:
    def test_first_candidate_active(self) -> None:
        mention_list = _shown(_make_list(), "alpha", "beta")
        assert mention_list.active_candidate == {"label": "alpha"}

    def test_next_and_previous_wrap(self) -> None:
        mention_list = _shown(_make_list(), "alpha", "beta", "gamma")
        mention_list.activate_previous()
        assert mention_list.active_index == 2
        mention_list.activate_next()
        assert mention_list.active_index == 0
        mention_list.activate_next()
        assert mention_list.active_candidate == {"label": "beta"}

    def test_new_candidates_reset_active(self) -> None:
        mention_list = _shown(_make_list(), "alpha", "beta")
        mention_list.activate_next()
        mention_list.set_candidates(_items("beta", "gamma"), "a")
        assert mention_list.active_index == 0

    def test_navigation_on_empty_list_is_noop(self) -> None:
        mention_list = _make_list()
        mention_list.activate_next()
        mention_list.activate_previous()
        assert mention_list.active_index == 0

    def test_click_reports_candidate(self) -> None:
        clicked: list[Any] = []
        mention_list = _shown(_make_list(), "alpha", "beta")
        mention_list.on_item_click = clicked.append
        mention_list.click(1)
        mention_list.click(7)
        assert clicked == [{"label": "beta"}]
        assert mention_list.active_index == 1


class TestMentionListRender:
    def test_active_row_marked(self) -> None:
        lines = _shown(_make_list(), "alpha", "beta").render(40)
        assert lines == ["→ alpha", "  beta"]

    def test_scrolls_to_active_row(self) -> None:
        mention_list = _shown(_make_list(max_visible=2), "a", "b", "c", "d")
        assert mention_list.render(40) == ["→ a", "  b", "  (1/4)"]
        mention_list.activate_next()
        mention_list.activate_next()
        assert mention_list.render(40) == ["  b", "→ c", "  (3/4)"]

    def test_reset_scroll(self) -> None:
        mention_list = _shown(_make_list(max_visible=2), "a", "b", "c", "d")
        mention_list.activate_previous()
        mention_list.render(40)
        mention_list.activate_next()
        mention_list.activate_next()
        mention_list.reset_scroll()
        assert mention_list.render(40) == ["  a", "→ b", "  (2/4)"]

    def test_header_shows_search(self) -> None:
        mention_list = _shown(_make_list(show_list_header=True), "Alice", search="AL")
        assert mention_list.search_string == "al"
        assert mention_list.render(40)[0] == "  Matching @al"

    def test_long_labels_truncated(self) -> None:
        lines = _shown(_make_list(), "x" * 50).render(20)
        assert lines == ["→ " + "x" * 16]

    def test_item_template(self) -> None:
        mention_list = MentionList(
            ListOptions(), theme=_IdentityTheme(), item_template=lambda c: c["label"].upper()
        )
        _shown(mention_list, "bob")
        assert mention_list.render(40) == ["→ BOB"]

    def test_custom_label_key(self) -> None:
        mention_list = MentionList(ListOptions(label_key="name"), theme=_IdentityTheme())
        mention_list.show(PositionHint(caret=0))
        mention_list.set_candidates([{"name": "zoe"}], None)
        assert mention_list.render(40) == ["→ zoe"]
