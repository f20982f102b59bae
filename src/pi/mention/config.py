"""Mention configuration snapshot and host-mapping merge."""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from pi.mention.candidates import Candidate, FieldGetter, field_text, get_field
from pi.mention.presenter import POSITION_TYPES, ListOptions, PositionType

logger = logging.getLogger(__name__)

# Host keys (camelCase, as hosts already write them) -> field names
CONFIG_KEYS: dict[str, str] = {
    "triggerChar": "trigger_char",
    "labelKey": "label_key",
    "filterKeys": "filter_keys",
    "disableSearch": "disable_search",
    "maxItems": "max_items",
    "insertHTML": "insert_html",
    "mentionSelect": "mention_select",
    "showListHeader": "show_list_header",
    "maxHeight": "max_height",
    "minWidth": "min_width",
    "maxWidth": "max_width",
    "positionType": "position_type",
    "xPos": "x_pos",
    "yPos": "y_pos",
    "listItemHeight": "list_item_height",
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class MentionConfig:
    """Immutable configuration read by every keystroke."""

    trigger_char: str | int = "@"
    label_key: str = "label"
    filter_keys: tuple[str, ...] = ()
    disable_search: bool = False
    max_items: int = -1
    insert_html: bool = False
    mention_select: Callable[[Candidate], str] | None = None
    show_list_header: bool = False
    max_height: int = 300
    min_width: int = 250
    max_width: int = 500
    position_type: PositionType = "cursor"
    x_pos: int = 0
    y_pos: int = 0
    list_item_height: int = 26

    def __post_init__(self) -> None:
        trigger = self.trigger_char
        if isinstance(trigger, bool) or not isinstance(trigger, (str, int)):
            raise TypeError(f"trigger_char must be a str or int, got {trigger!r}")
        if isinstance(trigger, str) and not trigger:
            raise ValueError("trigger_char must not be empty")
        if self.mention_select is not None and not callable(self.mention_select):
            raise TypeError("mention_select must be callable")
        if isinstance(self.filter_keys, str):
            object.__setattr__(self, "filter_keys", (self.filter_keys,))
        elif not isinstance(self.filter_keys, tuple):
            object.__setattr__(self, "filter_keys", tuple(self.filter_keys))

    @property
    def key_code_specified(self) -> bool:
        return isinstance(self.trigger_char, int)

    @property
    def effective_filter_keys(self) -> tuple[str, ...]:
        return self.filter_keys or (self.label_key,)

    def format_item(self, candidate: Candidate, getter: FieldGetter = get_field) -> str:
        """Text inserted for *candidate* on commit.

        Key-code triggers have no printable form, so the default formatter
        inserts the bare label for them.
        """
        if self.mention_select is not None:
            return self.mention_select(candidate)
        label = field_text(candidate, self.label_key, getter) or ""
        if self.key_code_specified:
            return label
        return f"{self.trigger_char}{label}"

    def list_options(self) -> ListOptions:
        return ListOptions(
            trigger_char=self.trigger_char,
            label_key=self.label_key,
            show_list_header=self.show_list_header,
            max_height=self.max_height,
            min_width=self.min_width,
            max_width=self.max_width,
            list_item_height=self.list_item_height,
            position_type=self.position_type,
            x_pos=self.x_pos,
            y_pos=self.y_pos,
        )


def _parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def config_from_dict(
    data: Mapping[str, Any],
    base: MentionConfig | None = None,
) -> MentionConfig:
    """Merge a host configuration mapping onto *base*.

    Falsy values keep the base value. Both camelCase host keys and the
    snake_case field names are accepted.
    """
    base = base or MentionConfig()
    field_names = {f.name for f in dataclasses.fields(MentionConfig)}
    changes: dict[str, Any] = {}

    for key, value in data.items():
        name = CONFIG_KEYS.get(key, key)
        if name not in field_names:
            logger.debug("Ignoring unknown mention config key %r", key)
            continue
        if not value:
            continue

        if name in ("x_pos", "y_pos"):
            parsed = _parse_int(value)
            if not parsed:
                continue
            value = parsed
        elif name == "position_type" and value not in POSITION_TYPES:
            logger.warning(
                "Unknown positionType %r, keeping %r", value, base.position_type
            )
            continue
        elif name == "filter_keys":
            value = (value,) if isinstance(value, str) else tuple(value)

        changes[name] = value

    return dataclasses.replace(base, **changes) if changes else base
