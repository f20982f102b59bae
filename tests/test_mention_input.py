"""Tests for the MentionInput component."""

from __future__ import annotations

from pi.mention.components.mention_input import CURSOR_MARKER, MentionInput
from pi.mention.config import MentionConfig
from pi.mention.platform import PlatformKind
from pi.mention.session import CLOSED, Open

KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_LEFT = "\x1b[D"
KEY_ENTER = "\r"
KEY_TAB = "\t"
KEY_ESCAPE = "\x1b"
KEY_BACKSPACE = "\x7f"


def _feed(inp: MentionInput, *chunks: str) -> None:
    for chunk in chunks:
        for data in [chunk] if chunk.startswith("\x1b") or len(chunk) == 1 else chunk:
            inp.handle_input(data)


class TestMentionInputEditing:
    def test_typing(self) -> None:
        inp = MentionInput()
        _feed(inp, "hello")
        assert inp.get_value() == "hello"
        assert inp.cursor == 5

    def test_paste_inserted_whole(self) -> None:
        inp = MentionInput()
        inp.handle_input("pasted text\n")
        assert inp.get_value() == "pasted text"

    def test_backspace_removes_grapheme(self) -> None:
        inp = MentionInput()
        inp.set_value("ae\u0301")
        _feed(inp, KEY_BACKSPACE)
        assert inp.get_value() == "a"

    def test_cursor_movement(self) -> None:
        inp = MentionInput()
        _feed(inp, "abc", KEY_LEFT, KEY_LEFT, "x")
        assert inp.get_value() == "axbc"

    def test_on_change(self) -> None:
        inp = MentionInput()
        seen: list[str] = []
        inp.on_change = seen.append
        _feed(inp, "ab")
        assert seen == ["a", "ab"]


class TestMentionInputMentions:
    def test_enter_commits_then_submits(self) -> None:
        inp = MentionInput(["Alice", "bob"])
        submitted: list[str] = []
        inp.on_submit = submitted.append
        _feed(inp, "hi @b", KEY_ENTER)
        assert inp.get_value() == "hi @bob"
        assert submitted == []
        _feed(inp, KEY_ENTER)
        assert submitted == ["hi @bob"]

    def test_arrow_then_tab_selects(self) -> None:
        inp = MentionInput(["Alice", "bob"])
        _feed(inp, "@", KEY_DOWN, KEY_TAB)
        assert inp.get_value() == "@bob"

    def test_commit_reports_change(self) -> None:
        inp = MentionInput(["bob"])
        seen: list[str] = []
        inp.on_change = seen.append
        _feed(inp, "@b", KEY_ENTER)
        assert seen[-1] == "@bob"

    def test_escape_closes_list_before_reaching_host(self) -> None:
        inp = MentionInput(["bob"])
        escaped: list[bool] = []
        inp.on_escape = lambda: escaped.append(True)
        _feed(inp, "@", KEY_ESCAPE)
        assert inp.controller.state == CLOSED
        assert escaped == []
        _feed(inp, KEY_ESCAPE)
        assert escaped == [True]

    def test_left_is_swallowed_while_open(self) -> None:
        inp = MentionInput(["bob"])
        _feed(inp, "@b", KEY_LEFT)
        assert inp.cursor == 2
        assert isinstance(inp.controller.state, Open)

    def test_custom_trigger(self) -> None:
        inp = MentionInput(["python"], MentionConfig(trigger_char="#"))
        _feed(inp, "#py", KEY_ENTER)
        assert inp.get_value() == "#python"

    def test_blur_closes_list(self) -> None:
        inp = MentionInput(["bob"])
        inp.focused = True
        _feed(inp, "@")
        inp.blur()
        assert not inp.focused
        assert inp.controller.state == CLOSED

    def test_blur_kept_on_touch(self) -> None:
        inp = MentionInput(["bob"], platform=lambda: PlatformKind.TOUCH)
        _feed(inp, "@")
        inp.blur()
        assert isinstance(inp.controller.state, Open)


class TestMentionInputRender:
    def test_renders_prompt_and_list(self) -> None:
        inp = MentionInput(["Alice", "bob"])
        _feed(inp, "@")
        lines = inp.render(30)
        assert lines[0].startswith("> @")
        assert lines[1:] == ["→ Alice", "  bob"]

    def test_no_list_lines_when_closed(self) -> None:
        inp = MentionInput(["bob"])
        _feed(inp, "hi")
        assert len(inp.render(30)) == 1

    def test_cursor_marker_only_when_focused(self) -> None:
        inp = MentionInput()
        _feed(inp, "a")
        assert CURSOR_MARKER not in inp.render(20)[0]
        inp.focused = True
        assert CURSOR_MARKER in inp.render(20)[0]

    def test_narrow_width(self) -> None:
        assert MentionInput().render(2) == ["> "]

    def test_item_template_styles_rows(self) -> None:
        inp = MentionInput(["bob"], item_template=lambda c: f"{c['label']} (user)")
        _feed(inp, "@")
        assert inp.render(30)[1:] == ["→ bob (user)"]
