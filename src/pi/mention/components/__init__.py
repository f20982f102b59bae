"""Terminal components for mention entry."""

from pi.mention.components.mention_input import MentionInput
from pi.mention.components.mention_list import MentionList, MentionListTheme, PlainTheme

__all__ = [
    "MentionInput",
    "MentionList",
    "MentionListTheme",
    "PlainTheme",
]
