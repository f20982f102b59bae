"""Keyboard events for the mention state machine.

Events follow browser keydown semantics: they are seen *before* the surface
applies the keystroke, carry a numeric key code plus an optional resolved
``key`` string, and report modifier flags. Raw terminal input is translated
into the same shape by :func:`key_event_from_terminal`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Key codes
# ---------------------------------------------------------------------------


class KeyCode(enum.IntEnum):
    BACKSPACE = 8
    TAB = 9
    ENTER = 13
    SHIFT = 16
    ESCAPE = 27
    SPACE = 32
    PAGE_UP = 33
    PAGE_DOWN = 34
    END = 35
    HOME = 36
    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40
    DELETE = 46
    KEY_2 = 50
    IME = 229


# Named keys as reported in ``KeyEvent.key``
KEY_NAMES: dict[int, str] = {
    KeyCode.BACKSPACE: "Backspace",
    KeyCode.TAB: "Tab",
    KeyCode.ENTER: "Enter",
    KeyCode.SHIFT: "Shift",
    KeyCode.ESCAPE: "Escape",
    KeyCode.SPACE: " ",
    KeyCode.PAGE_UP: "PageUp",
    KeyCode.PAGE_DOWN: "PageDown",
    KeyCode.END: "End",
    KeyCode.HOME: "Home",
    KeyCode.LEFT: "ArrowLeft",
    KeyCode.UP: "ArrowUp",
    KeyCode.RIGHT: "ArrowRight",
    KeyCode.DOWN: "ArrowDown",
    KeyCode.DELETE: "Delete",
}

UNIDENTIFIED = "Unidentified"


@dataclass(frozen=True)
class KeyEvent:
    key_code: int = 0
    key: str | None = None
    which: int = 0
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def has_command_modifier(self) -> bool:
        """Ctrl, Alt or Meta held (Shift alone does not count)."""
        return self.ctrl or self.alt or self.meta

    @classmethod
    def for_char(cls, char: str, *, shift: bool | None = None) -> KeyEvent:
        """Build the event a plain keypress producing *char* would carry."""
        if shift is None:
            shift = char.isupper() or char in _SHIFTED_SYMBOLS
        return cls(key_code=char_key_code(char), key=char, shift=shift)

    @classmethod
    def named(cls, code: KeyCode, **modifiers: bool) -> KeyEvent:
        return cls(key_code=int(code), key=KEY_NAMES.get(code), **modifiers)


# ---------------------------------------------------------------------------
# Character resolution
# ---------------------------------------------------------------------------

SHIFTED_KEY_MAP: dict[str, str] = {
    "`": "~",
    "1": "!",
    "2": "@",
    "3": "#",
    "4": "$",
    "5": "%",
    "6": "^",
    "7": "&",
    "8": "*",
    "9": "(",
    "0": ")",
    "-": "_",
    "=": "+",
    "[": "{",
    "]": "}",
    "\\": "|",
    ";": ":",
    "'": '"',
    ",": "<",
    ".": ">",
    "/": "?",
}

UNSHIFTED_KEY_MAP: dict[str, str] = {v: k for k, v in SHIFTED_KEY_MAP.items()}
_SHIFTED_SYMBOLS = frozenset(UNSHIFTED_KEY_MAP)


def char_key_code(char: str) -> int:
    """Browser key code of the physical key that produces *char*."""
    if len(char) != 1:
        return 0
    if char == " ":
        return int(KeyCode.SPACE)
    base = UNSHIFTED_KEY_MAP.get(char, char)
    if base.isascii() and base.isalpha():
        return ord(base.upper())
    if base.isascii() and base.isdigit():
        return ord(base)
    return 0


def resolve_char(event: KeyEvent, value: str, caret: int) -> str:
    """Resolve the character a keystroke is about to type.

    IME composition reports ``Unidentified`` with the 229 sentinel; the
    character has already landed in the surface, so it is read back from
    just before the caret.
    """
    char = event.key
    if not char:
        code = event.which or event.key_code
        if not event.shift and 65 <= code <= 90:
            return chr(code + 32)
        if event.shift and code == KeyCode.KEY_2:
            return "@"
        return chr(code) if code > 0 else ""
    if char == UNIDENTIFIED and event.key_code == KeyCode.IME:
        return value[caret - 1] if 0 < caret <= len(value) else ""
    return char


def is_trigger(event: KeyEvent, char: str, trigger: str | int) -> bool:
    """Check a keystroke against a character or numeric key-code trigger."""
    if isinstance(trigger, int):
        return event.key_code == trigger
    return char == trigger


def is_printable(char: str) -> bool:
    """A resolved key that types exactly one character."""
    return len(char) == 1 and char.isprintable()


# ---------------------------------------------------------------------------
# Terminal input translation
# ---------------------------------------------------------------------------

LEGACY_KEY_SEQUENCES: dict[str, KeyCode] = {
    "\x1b[A": KeyCode.UP,
    "\x1b[B": KeyCode.DOWN,
    "\x1b[C": KeyCode.RIGHT,
    "\x1b[D": KeyCode.LEFT,
    "\x1b[H": KeyCode.HOME,
    "\x1b[F": KeyCode.END,
    "\x1bOA": KeyCode.UP,
    "\x1bOB": KeyCode.DOWN,
    "\x1bOC": KeyCode.RIGHT,
    "\x1bOD": KeyCode.LEFT,
    "\x1bOH": KeyCode.HOME,
    "\x1bOF": KeyCode.END,
    "\x1b[1~": KeyCode.HOME,
    "\x1b[4~": KeyCode.END,
    "\x1b[3~": KeyCode.DELETE,
    "\x1b[5~": KeyCode.PAGE_UP,
    "\x1b[6~": KeyCode.PAGE_DOWN,
}

# xterm modifier parameter (1 + bitmask) -> (shift, alt, ctrl)
_MODIFIER_PARAMS: dict[str, tuple[bool, bool, bool]] = {
    "2": (True, False, False),
    "3": (False, True, False),
    "4": (True, True, False),
    "5": (False, False, True),
    "6": (True, False, True),
    "7": (False, True, True),
    "8": (True, True, True),
}

_MODIFIED_FINALS: dict[str, KeyCode] = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
}

_SINGLE_BYTE_KEYS: dict[str, KeyCode] = {
    "\x1b": KeyCode.ESCAPE,
    "\r": KeyCode.ENTER,
    "\n": KeyCode.ENTER,
    "\t": KeyCode.TAB,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
}


def _modified_sequence(data: str) -> KeyEvent | None:
    # \x1b[1;<mod><final> and \x1b[<n>;<mod>~
    if not data.startswith("\x1b[") or ";" not in data:
        return None
    body = data[2:]
    params, final = body[:-1], body[-1]
    head, _, mod = params.partition(";")
    flags = _MODIFIER_PARAMS.get(mod)
    if flags is None:
        return None
    shift, alt, ctrl = flags
    if final == "~":
        code = LEGACY_KEY_SEQUENCES.get(f"\x1b[{head}~")
    elif head == "1":
        code = _MODIFIED_FINALS.get(final)
    else:
        code = None
    if code is None:
        return None
    return KeyEvent.named(code, shift=shift, alt=alt, ctrl=ctrl)


def key_event_from_terminal(data: str) -> KeyEvent | None:
    """Translate one raw terminal input chunk into a :class:`KeyEvent`.

    Returns ``None`` for input that does not correspond to a single key.
    """
    if not data:
        return None

    code = LEGACY_KEY_SEQUENCES.get(data)
    if code is not None:
        return KeyEvent.named(code)

    if data == "\x1b[Z":
        return KeyEvent.named(KeyCode.TAB, shift=True)

    modified = _modified_sequence(data)
    if modified is not None:
        return modified

    code = _SINGLE_BYTE_KEYS.get(data)
    if code is not None:
        return KeyEvent.named(code)

    # Ctrl + letter (0x01 - 0x1a)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        letter = chr(ord(data) + ord("a") - 1)
        return KeyEvent(key_code=ord(letter.upper()), key=letter, ctrl=True)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b":
        inner = key_event_from_terminal(data[1])
        if inner is None:
            return None
        return KeyEvent(
            key_code=inner.key_code,
            key=inner.key,
            shift=inner.shift,
            ctrl=inner.ctrl,
            alt=True,
        )

    if len(data) == 1 and data.isprintable():
        return KeyEvent.for_char(data)

    return None
